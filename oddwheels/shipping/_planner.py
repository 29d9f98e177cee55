"""
Capacity planner — cart lines to ship-class counts to carrier package.

Box size, not price, is the binding constraint: the smallest package that
fits always wins.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol

from kungfu import Result, Ok, Error

from oddwheels._errors import InfeasiblePackage
from oddwheels.shipping._types import (
    Carrier,
    Region,
    ShipClass,
    ShipCounts,
    PackageName,
    PackageSpec,
    ShippingQuote,
    empty_ship_counts,
)
from oddwheels.shipping._rates import CATALOG


class ShipLine(Protocol):
    @property
    def ship_class(self) -> str | None: ...
    @property
    def qty(self) -> int: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Classification
# ═══════════════════════════════════════════════════════════════════════════════


def bucket_for(ship_class: str | None) -> ShipClass:
    """Counting bucket for a variant's class. Dioramas only travel by Lalamove."""
    if not ship_class:
        return ShipClass.MINI_GT
    try:
        cls = ShipClass(ship_class.strip().upper())
    except ValueError:
        return ShipClass.UNRECOGNIZED
    return ShipClass.LALAMOVE if cls == ShipClass.DIORAMA else cls


def ship_counts_from_lines(lines: Iterable[ShipLine]) -> ShipCounts:
    counts = empty_ship_counts()
    for line in lines:
        counts[bucket_for(line.ship_class)] += max(0, line.qty)
    return counts


# ═══════════════════════════════════════════════════════════════════════════════
# Package selection
# ═══════════════════════════════════════════════════════════════════════════════


def packages_for(carrier: Carrier) -> tuple[PackageSpec, ...]:
    try:
        return CATALOG[carrier]
    except KeyError:
        raise ValueError(f"{carrier} has no package catalog") from None


def package_spec(carrier: Carrier, package: PackageName | str) -> PackageSpec:
    for spec in packages_for(carrier):
        if spec.name == package:
            return spec
    raise ValueError(f"{carrier} has no package {package}")


def fitting_packages(
    carrier: Carrier, counts: Mapping[ShipClass, int]
) -> tuple[PackageSpec, ...]:
    return tuple(spec for spec in packages_for(carrier) if spec.fits(counts))


def _infeasible(carrier: Carrier) -> InfeasiblePackage:
    if carrier == Carrier.LBC:
        return InfeasiblePackage(
            carrier=carrier,
            reason="Cart requires LBC Medium Box (subject to admin approval).",
            needs_approval=True,
        )
    return InfeasiblePackage(
        carrier=carrier,
        reason="Cart exceeds J&T medium pouch capacity.",
    )


def recommend_package(
    carrier: Carrier, counts: Mapping[ShipClass, int]
) -> Result[PackageSpec, InfeasiblePackage]:
    """
    Smallest package of the carrier that holds every class count.

    Example:
        match recommend_package(Carrier.JNT, {ShipClass.MINI_GT: 2}):
            case Ok(spec):
                print(spec.name)         # SMALL
            case Error(infeasible):
                print(infeasible.reason)
    """
    for spec in packages_for(carrier):
        if spec.fits(counts):
            return Ok(spec)
    return Error(_infeasible(carrier))


def fee(carrier: Carrier, package: PackageName | str, region: Region) -> int:
    return package_spec(carrier, package).rates[region]


# ═══════════════════════════════════════════════════════════════════════════════
# Quote
# ═══════════════════════════════════════════════════════════════════════════════


def quote_shipping(
    carrier: Carrier,
    counts: Mapping[ShipClass, int],
    region: Region,
    package_choice: PackageName | str | None = None,
) -> Result[ShippingQuote, InfeasiblePackage]:
    """
    Shipping line for the checkout summary.

    LBC honours a fitting shopper-chosen package. An LBC cart too big for
    any automatic box is quoted at zero with an approval warning instead of
    failing, since the shop can still ship it in a Medium Box.
    """
    match carrier:
        case Carrier.PICKUP:
            return Ok(ShippingQuote(carrier, None, "Store pickup", 0))
        case Carrier.LALAMOVE:
            return Ok(ShippingQuote(carrier, None, "Lalamove", 0))
        case Carrier.LBC if package_choice is not None:
            chosen = package_spec(carrier, package_choice)
            if chosen.fits(counts):
                return Ok(_quote(chosen, region))

    match recommend_package(carrier, counts):
        case Ok(spec):
            return Ok(_quote(spec, region))
        case Error(infeasible):
            if infeasible.needs_approval:
                return Ok(ShippingQuote(
                    carrier=carrier,
                    package=None,
                    label="LBC Medium Box (subject to approval)",
                    fee=0,
                    needs_approval=True,
                    warning=infeasible.reason,
                ))
            return Error(infeasible)


def _quote(spec: PackageSpec, region: Region) -> ShippingQuote:
    return ShippingQuote(
        carrier=spec.carrier,
        package=spec.name,
        label=spec.label,
        fee=spec.rates[region],
    )


__all__ = (
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
