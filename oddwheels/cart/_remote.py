"""
Server cart — cart_items rows keyed by (user_id, variant_id).
"""

from __future__ import annotations

import uuid
from datetime import datetime

from kungfu import Result, Ok, Error
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from oddwheels._errors import PersistenceFailure
from oddwheels._types import LineId, OwnerRef, VariantId
from oddwheels.cart._types import StoredLine
from oddwheels.db import CartItemTable


def _to_line(row: CartItemTable) -> StoredLine:
    return StoredLine(
        id=row.id,
        variant_id=row.variant_id,
        qty=row.qty,
        added_at=row.created_at or datetime.now(),
        protector_selected=row.protector_selected,
    )


class RemoteBackend:
    """
    CartBackend for an authenticated owner.

    Every query is scoped to the owner, so a line id belonging to another
    shopper behaves as if it did not exist.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        owner: OwnerRef,
    ) -> None:
        self._session_factory = session_factory
        self._owner = owner

    @property
    def owner(self) -> OwnerRef:
        return self._owner

    async def load(self) -> Result[list[StoredLine], PersistenceFailure]:
        try:
            async with self._session_factory() as session:
                stmt = (
                    select(CartItemTable)
                    .where(CartItemTable.user_id == self._owner)
                    .order_by(CartItemTable.created_at, CartItemTable.id)
                )
                rows = (await session.execute(stmt)).scalars().all()
                return Ok([_to_line(row) for row in rows])

        except Exception as e:
            return Error(PersistenceFailure(f"Failed to load cart: {e}", e))

    async def get(self, line_id: LineId) -> Result[StoredLine | None, PersistenceFailure]:
        return await self._one(CartItemTable.id == line_id)

    async def find(self, variant_id: VariantId) -> Result[StoredLine | None, PersistenceFailure]:
        return await self._one(CartItemTable.variant_id == variant_id)

    async def _one(self, clause: object) -> Result[StoredLine | None, PersistenceFailure]:
        try:
            async with self._session_factory() as session:
                stmt = select(CartItemTable).where(
                    CartItemTable.user_id == self._owner,
                    clause,  # type: ignore[arg-type]
                )
                row = (await session.execute(stmt)).scalar_one_or_none()
                return Ok(_to_line(row) if row is not None else None)

        except Exception as e:
            return Error(PersistenceFailure(f"Failed to read cart line: {e}", e))

    async def insert(
        self,
        variant_id: VariantId,
        qty: int,
        protector_selected: bool = False,
    ) -> Result[StoredLine, PersistenceFailure]:
        try:
            async with self._session_factory() as session:
                row = CartItemTable(
                    id=uuid.uuid4().hex,
                    user_id=self._owner,
                    variant_id=variant_id,
                    qty=qty,
                    protector_selected=protector_selected,
                )
                session.add(row)
                await session.commit()
                await session.refresh(row)
                return Ok(_to_line(row))

        except Exception as e:
            return Error(PersistenceFailure(f"Failed to add cart line: {e}", e))

    async def set_qty(self, line_id: LineId, qty: int) -> Result[None, PersistenceFailure]:
        return await self._update(line_id, "update quantity", qty=qty)

    async def set_protector(
        self, line_id: LineId, selected: bool
    ) -> Result[None, PersistenceFailure]:
        return await self._update(line_id, "update protector", protector_selected=selected)

    async def _update(
        self, line_id: LineId, what: str, **values: object
    ) -> Result[None, PersistenceFailure]:
        try:
            async with self._session_factory() as session:
                stmt = (
                    update(CartItemTable)
                    .where(
                        CartItemTable.user_id == self._owner,
                        CartItemTable.id == line_id,
                    )
                    .values(**values, updated_at=datetime.now())
                )
                await session.execute(stmt)
                await session.commit()
                return Ok(None)

        except Exception as e:
            return Error(PersistenceFailure(f"Failed to {what}: {e}", e))

    async def remove(self, line_ids: list[LineId]) -> Result[int, PersistenceFailure]:
        if not line_ids:
            return Ok(0)
        try:
            async with self._session_factory() as session:
                stmt = delete(CartItemTable).where(
                    CartItemTable.user_id == self._owner,
                    CartItemTable.id.in_(line_ids),
                )
                result = await session.execute(stmt)
                await session.commit()
                return Ok(result.rowcount)

        except Exception as e:
            return Error(PersistenceFailure(f"Failed to remove cart lines: {e}", e))

    async def clear(self) -> Result[None, PersistenceFailure]:
        try:
            async with self._session_factory() as session:
                await session.execute(
                    delete(CartItemTable).where(CartItemTable.user_id == self._owner)
                )
                await session.commit()
                return Ok(None)

        except Exception as e:
            return Error(PersistenceFailure(f"Failed to clear cart: {e}", e))


__all__ = ("RemoteBackend",)
