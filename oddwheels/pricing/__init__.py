"""
Pricing — effective unit prices and per-unit add-ons.

    from oddwheels import pricing as P

    P.resolve_effective_price(1000, discount_percent=20)  # SaleResolution(800, True)
    P.protector_unit_fee("HOT_WHEELS_PREMIUM", selected=True)  # 40
"""

from __future__ import annotations

from oddwheels.pricing._resolve import (
    SaleResolution,
    PriceRange,
    Priced,
    round_half_up,
    resolve_effective_price,
    option_pricing,
    effective_range,
)
from oddwheels.pricing._addons import (
    PROTECTOR_ADDON_FEE,
    ProtectorKind,
    protector_kind,
    is_protector_eligible,
    protector_unit_fee,
)

__all__ = (
    "SaleResolution",
    "PriceRange",
    "Priced",
    "round_half_up",
    "resolve_effective_price",
    "option_pricing",
    "effective_range",
    "PROTECTOR_ADDON_FEE",
    "ProtectorKind",
    "protector_kind",
    "is_protector_eligible",
    "protector_unit_fee",
)
