"""
Inventory types — live variant snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from kungfu import Result

from oddwheels._errors import PersistenceFailure
from oddwheels.pricing import SaleResolution, option_pricing


@dataclass(frozen=True, slots=True)
class Variant:
    """
    Snapshot of one sellable variant as read from inventory.

    available is advisory: other shoppers, admins and the POS change it
    at any time, so callers re-read rather than cache it.
    """

    id: str
    product_id: str
    title: str
    condition: str
    price: int
    available: int
    sale_price: int | None = None
    discount_percent: float | None = None
    ship_class: str | None = None
    issue_notes: str | None = None

    @property
    def pricing(self) -> SaleResolution:
        return option_pricing(self)

    @property
    def effective_price(self) -> int:
        return self.pricing.effective_price


@dataclass(frozen=True, slots=True)
class StockChanged:
    variant_id: str
    available: int


class Inventory(Protocol):
    """
    Inventory read boundary.

    Returns Ok(None) / omits ids for variants that no longer exist.
    """

    async def get_variant(
        self, variant_id: str
    ) -> Result[Variant | None, PersistenceFailure]: ...

    async def get_variants(
        self, variant_ids: list[str]
    ) -> Result[dict[str, Variant], PersistenceFailure]: ...


__all__ = ("Variant", "StockChanged", "Inventory")
