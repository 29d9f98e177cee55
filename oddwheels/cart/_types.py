"""
Cart types — stored lines, joined lines and operation outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto

from oddwheels._errors import PersistenceFailure
from oddwheels.inventory import Variant
from oddwheels.pricing import protector_unit_fee


# ═══════════════════════════════════════════════════════════════════════════════
# Session State
# ═══════════════════════════════════════════════════════════════════════════════


class CartState(Enum):
    """
    Lifecycle:
        GUEST → MERGING (once, on sign-in) → AUTHENTICATED
              ← (sign-out) ─────────────────┘
    """

    GUEST = auto()
    MERGING = auto()
    AUTHENTICATED = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# Stored Lines
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class StoredLine:
    """A cart row as a backend holds it, before joining live stock."""

    id: str
    variant_id: str
    qty: int
    added_at: datetime
    protector_selected: bool = False


@dataclass(frozen=True, slots=True)
class GuestCartEntry:
    """
    One entry of the client-local guest cart.

    Note: A guest cart never holds two entries for one variant_id.
    """

    variant_id: str
    qty: int
    added_at: datetime
    protector_selected: bool = False

    def to_line(self) -> StoredLine:
        # guest lines are addressed by variant
        return StoredLine(
            id=self.variant_id,
            variant_id=self.variant_id,
            qty=self.qty,
            added_at=self.added_at,
            protector_selected=self.protector_selected,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Cart Line
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartLine:
    id: str
    owner: str
    variant: Variant
    qty: int
    protector_selected: bool = False

    @property
    def variant_id(self) -> str:
        return self.variant.id

    @property
    def ship_class(self) -> str | None:
        return self.variant.ship_class

    @property
    def unit_price(self) -> int:
        """Effective price plus the per-unit protector add-on."""
        return self.variant.effective_price + protector_unit_fee(
            self.ship_class, self.protector_selected
        )

    @property
    def line_total(self) -> int:
        return self.unit_price * self.qty


# ═══════════════════════════════════════════════════════════════════════════════
# Outcomes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class AddResult:
    """
    Outcome of add().

    capped: the requested quantity exceeded stock and was reduced.
    The caller shows "maximum available added" when set.
    """

    available: int
    desired_qty: int
    next_qty: int
    prev_qty: int
    capped: bool


@dataclass(frozen=True, slots=True)
class MergedLine:
    variant_id: str
    guest_qty: int
    prev_qty: int
    next_qty: int

    @property
    def capped(self) -> bool:
        return self.prev_qty + self.guest_qty > self.next_qty


@dataclass(frozen=True, slots=True)
class MergeReport:
    """
    Outcome of a guest-to-user merge.

    failed entries stay in the guest store so the merge can be retried
    without re-adding what already went through.
    """

    merged: tuple[MergedLine, ...] = ()
    skipped: tuple[str, ...] = ()
    failed: tuple[tuple[str, PersistenceFailure], ...] = field(default=())

    @property
    def upserts(self) -> int:
        return len(self.merged)

    @property
    def complete(self) -> bool:
        return not self.failed


__all__ = (
    "CartState",
    "StoredLine",
    "GuestCartEntry",
    "CartLine",
    "AddResult",
    "MergedLine",
    "MergeReport",
)
