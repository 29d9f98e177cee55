"""
SQLAlchemy inventory — reads product_variants joined to products.
"""

from __future__ import annotations

from kungfu import Result, Ok, Error
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from oddwheels._errors import PersistenceFailure
from oddwheels._types import VariantId
from oddwheels.db import VariantTable
from oddwheels.inventory._types import Variant, StockChanged
from oddwheels.inventory._feed import StockFeed


def _to_variant(row: VariantTable) -> Variant:
    return Variant(
        id=row.id,
        product_id=row.product_id,
        title=row.product.title,
        condition=row.condition,
        price=row.price,
        available=row.qty,
        sale_price=row.sale_price,
        discount_percent=row.discount_percent,
        ship_class=row.ship_class,
        issue_notes=row.issue_notes,
    )


class SQLAlchemyInventory:
    """
    Inventory backed by the product_variants table.

    set_stock stands in for the admin editor / POS: it writes the new
    quantity and publishes it on the feed so open carts can re-clamp.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        feed: StockFeed | None = None,
    ) -> None:
        self._session_factory = session_factory
        self.feed = feed if feed is not None else StockFeed()

    async def get_variant(
        self, variant_id: VariantId
    ) -> Result[Variant | None, PersistenceFailure]:
        match await self.get_variants([variant_id]):
            case Ok(found):
                return Ok(found.get(variant_id))
            case Error(err):
                return Error(err)

    async def get_variants(
        self, variant_ids: list[str]
    ) -> Result[dict[str, Variant], PersistenceFailure]:
        if not variant_ids:
            return Ok({})
        try:
            async with self._session_factory() as session:
                stmt = (
                    select(VariantTable)
                    .options(selectinload(VariantTable.product))
                    .where(VariantTable.id.in_(set(variant_ids)))
                )
                rows = (await session.execute(stmt)).scalars().all()
                return Ok({row.id: _to_variant(row) for row in rows})

        except Exception as e:
            return Error(PersistenceFailure(f"Failed to read variants: {e}", e))

    async def set_stock(
        self, variant_id: VariantId, qty: int
    ) -> Result[bool, PersistenceFailure]:
        """Overwrite live stock. Returns Ok(False) if the variant is unknown."""
        try:
            async with self._session_factory() as session:
                stmt = (
                    update(VariantTable)
                    .where(VariantTable.id == variant_id)
                    .values(qty=max(0, qty))
                )
                result = await session.execute(stmt)
                await session.commit()
                changed = result.rowcount > 0

        except Exception as e:
            return Error(PersistenceFailure(f"Failed to set stock: {e}", e))

        if changed:
            self.feed.publish(StockChanged(variant_id, max(0, qty)))
        return Ok(changed)


__all__ = ("SQLAlchemyInventory",)
