"""
Shipping — ship-class counting and carrier package planning.

    from oddwheels import shipping as SH

    counts = SH.ship_counts_from_lines(lines)
    match SH.recommend_package(SH.Carrier.JNT, counts):
        case Ok(spec):
            SH.fee(SH.Carrier.JNT, spec.name, SH.Region.METRO_MANILA)
        case Error(infeasible):
            notify(infeasible.reason)
"""

from __future__ import annotations

from oddwheels.shipping._types import (
    ShipClass,
    Carrier,
    Region,
    REGION_LABEL,
    JntPouch,
    LbcPackage,
    PackageName,
    ShipCounts,
    empty_ship_counts,
    PackageSpec,
    ShippingQuote,
)
from oddwheels.shipping._rates import (
    JNT_PACKAGES,
    LBC_PACKAGES,
    CATALOG,
    FEES,
    suggested_insurance_fee,
)
from oddwheels.shipping._planner import (
    ShipLine,
    bucket_for,
    ship_counts_from_lines,
    packages_for,
    package_spec,
    fitting_packages,
    recommend_package,
    fee,
    quote_shipping,
)

__all__ = (
    "ShipClass",
    "Carrier",
    "Region",
    "REGION_LABEL",
    "JntPouch",
    "LbcPackage",
    "PackageName",
    "ShipCounts",
    "empty_ship_counts",
    "PackageSpec",
    "ShippingQuote",
    "JNT_PACKAGES",
    "LBC_PACKAGES",
    "CATALOG",
    "FEES",
    "suggested_insurance_fee",
    "ShipLine",
    "bucket_for",
    "ship_counts_from_lines",
    "packages_for",
    "package_spec",
    "fitting_packages",
    "recommend_package",
    "fee",
    "quote_shipping",
)
