"""
Rate and capacity tables.

Packages are listed in ascending physical size. Capacity never decreases
from one package to the next within a carrier.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Final

from oddwheels.shipping._types import (
    Carrier,
    Region,
    ShipClass,
    JntPouch,
    LbcPackage,
    PackageSpec,
)

_M = Region.METRO_MANILA
_L = Region.LUZON
_V = Region.VISAYAS
_D = Region.MINDANAO


def _capacity(mini_gt: int, kaido: int, acrylic: int) -> dict[ShipClass, int]:
    return {
        ShipClass.MINI_GT: mini_gt,
        ShipClass.KAIDO: kaido,
        ShipClass.ACRYLIC_TRUE_SCALE: acrylic,
    }


JNT_PACKAGES: Final[tuple[PackageSpec, ...]] = (
    PackageSpec(
        Carrier.JNT,
        JntPouch.SMALL,
        capacity=_capacity(2, 2, 1),
        rates={_M: 65, _L: 75, _V: 95, _D: 100},
    ),
    # x4 of small; large pouch is not offered
    PackageSpec(
        Carrier.JNT,
        JntPouch.MEDIUM,
        capacity=_capacity(8, 8, 4),
        rates={_M: 85, _L: 125, _V: 155, _D: 165},
    ),
)

# Medium box needs admin approval, so it is never auto-quoted.
LBC_PACKAGES: Final[tuple[PackageSpec, ...]] = (
    PackageSpec(
        Carrier.LBC,
        LbcPackage.N_SAKTO,
        capacity=_capacity(2, 1, 1),
        rates={_M: 60, _L: 70, _V: 90, _D: 90},
    ),
    PackageSpec(
        Carrier.LBC,
        LbcPackage.MINIBOX,
        capacity=_capacity(9, 4, 4),
        rates={_M: 110, _L: 125, _V: 125, _D: 125},
    ),
    PackageSpec(
        Carrier.LBC,
        LbcPackage.SMALL_BOX,
        capacity=_capacity(math.floor(9 * 3.5), math.floor(4 * 3.5), math.floor(4 * 3.5)),
        rates={_M: 140, _L: 140, _V: 140, _D: 140},
    ),
)

CATALOG: Final[Mapping[Carrier, tuple[PackageSpec, ...]]] = {
    Carrier.JNT: JNT_PACKAGES,
    Carrier.LBC: LBC_PACKAGES,
}


class FEES:
    """Flat checkout add-on fees."""

    LBC_COP_CONVENIENCE: Final = 20
    LALAMOVE_CONVENIENCE: Final = 50
    PRIORITY_SHIPPING: Final = 50


def suggested_insurance_fee(item_subtotal: int) -> int:
    """5 pesos per 500 pesos of declared value."""
    declared = max(0, item_subtotal)
    return math.ceil(declared / 500) * 5


__all__ = (
    "JNT_PACKAGES",
    "LBC_PACKAGES",
    "CATALOG",
    "FEES",
    "suggested_insurance_fee",
)
