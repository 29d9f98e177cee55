"""
Shipping types — classes, carriers, regions and package specs.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum


class ShipClass(StrEnum):
    """Packing-capacity category of a variant. Unrelated to price."""

    MINI_GT = "MINI_GT"
    KAIDO = "KAIDO"
    POPRACE = "POPRACE"
    ACRYLIC_TRUE_SCALE = "ACRYLIC_TRUE_SCALE"
    BLISTER = "BLISTER"
    TOMICA = "TOMICA"
    HOT_WHEELS_MAINLINE = "HOT_WHEELS_MAINLINE"
    HOT_WHEELS_PREMIUM = "HOT_WHEELS_PREMIUM"
    LOOSE_NO_BOX = "LOOSE_NO_BOX"
    LALAMOVE = "LALAMOVE"
    DIORAMA = "DIORAMA"
    # catalog data outside this list; no package carries it
    UNRECOGNIZED = "UNRECOGNIZED"


class Carrier(StrEnum):
    JNT = "JNT"
    LBC = "LBC"
    LALAMOVE = "LALAMOVE"
    PICKUP = "PICKUP"


class Region(StrEnum):
    METRO_MANILA = "METRO_MANILA"
    LUZON = "LUZON"
    VISAYAS = "VISAYAS"
    MINDANAO = "MINDANAO"


REGION_LABEL: Mapping[Region, str] = {
    Region.METRO_MANILA: "Metro Manila",
    Region.LUZON: "Luzon",
    Region.VISAYAS: "Visayas",
    Region.MINDANAO: "Mindanao",
}


class JntPouch(StrEnum):
    SMALL = "SMALL"
    MEDIUM = "MEDIUM"


class LbcPackage(StrEnum):
    N_SAKTO = "N_SAKTO"
    MINIBOX = "MINIBOX"
    SMALL_BOX = "SMALL_BOX"


type PackageName = JntPouch | LbcPackage
type ShipCounts = dict[ShipClass, int]


def empty_ship_counts() -> ShipCounts:
    return {cls: 0 for cls in ShipClass}


@dataclass(frozen=True, slots=True, eq=False)
class PackageSpec:
    """
    One box or pouch size of a carrier.

    capacity: maximum pieces per ship class. A class missing from the
    table cannot go in this package at all.
    """

    carrier: Carrier
    name: PackageName
    capacity: Mapping[ShipClass, int]
    rates: Mapping[Region, int]

    def capacity_for(self, ship_class: ShipClass) -> int:
        return self.capacity.get(ship_class, 0)

    def fits(self, counts: Mapping[ShipClass, int]) -> bool:
        return all(n <= self.capacity_for(cls) for cls, n in counts.items() if n > 0)

    @property
    def label(self) -> str:
        if self.carrier == Carrier.JNT:
            return f"J&T {self.name} pouch"
        return f"{self.carrier} {self.name.replace('_', ' ')}"


@dataclass(frozen=True, slots=True)
class ShippingQuote:
    """What the checkout shows for the chosen carrier."""

    carrier: Carrier
    package: PackageName | None
    label: str
    fee: int
    needs_approval: bool = False
    warning: str | None = None


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
)
