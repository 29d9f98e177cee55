"""
Protector add-on — optional per-unit protective case for Hot Wheels cards.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Final

PROTECTOR_ADDON_FEE: Final = 40


class ProtectorKind(StrEnum):
    MAINLINE = "MAINLINE"
    PREMIUM = "PREMIUM"


def protector_kind(ship_class: str | None) -> ProtectorKind | None:
    normalized = str(ship_class or "").upper()
    if normalized == "HOT_WHEELS_PREMIUM":
        return ProtectorKind.PREMIUM
    if normalized == "HOT_WHEELS_MAINLINE":
        return ProtectorKind.MAINLINE
    return None


def is_protector_eligible(ship_class: str | None) -> bool:
    return protector_kind(ship_class) is not None


def protector_unit_fee(ship_class: str | None, selected: bool) -> int:
    if not selected:
        return 0
    return PROTECTOR_ADDON_FEE if is_protector_eligible(ship_class) else 0


__all__ = (
    "PROTECTOR_ADDON_FEE",
    "ProtectorKind",
    "protector_kind",
    "is_protector_eligible",
    "protector_unit_fee",
)
