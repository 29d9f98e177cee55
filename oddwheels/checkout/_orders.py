"""
Order repository — SQLAlchemy persistence for orders, their items and the
cart lines checkout consumes.

Plain methods raise; the reconciler lifts them into Results. Item insertion
is the exception: it reports which shape succeeded, or why all failed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from kungfu import Result, Ok, Error
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from oddwheels._errors import PersistenceFailure, SchemaFallbackExhausted
from oddwheels._types import LineId, OrderId, OwnerRef
from oddwheels.checkout._details import carrier_from_method
from oddwheels.checkout._shapes import ITEM_SHAPES, ItemShape
from oddwheels.checkout._types import Order, OrderLine, OrderStatus, PaymentStatus
from oddwheels.db import CartItemTable, OrderTable

logger = logging.getLogger(__name__)


def _header_row(order: Order) -> OrderTable:
    return OrderTable(
        id=order.id,
        user_id=order.owner,
        customer_name=order.customer_name,
        contact=order.contact,
        address=order.address,
        shipping_method=order.shipping_method.value,
        shipping_region=order.shipping_region,
        shipping_details=order.shipping_details,
        carrier=carrier_from_method(order.shipping_method),
        channel="WEB",
        payment_method=order.payment_method,
        payment_status=order.payment_status.value,
        status=order.status.value,
        subtotal=order.totals.subtotal,
        shipping_fee=order.fees.shipping,
        cop_fee=order.fees.cop,
        lalamove_fee=order.fees.lalamove,
        priority_fee=order.fees.priority,
        insurance_fee=order.fees.insurance,
        insurance_selected=order.insurance_selected,
        shipping_discount=order.totals.shipping_discount,
        discount_total=order.totals.discount_total,
        total=order.totals.total,
        voucher_id=order.voucher_id,
        created_at=order.created_at,
    )


class OrderRepository:
    """
    Example:
        repo = OrderRepository(session_factory)
        await repo.insert_header(order)
        match await repo.insert_items(order.id, order.lines):
            case Ok(shape):
                print(f"items stored as {shape.name}")
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        shapes: Sequence[ItemShape] = ITEM_SHAPES,
    ) -> None:
        self._session_factory = session_factory
        self._shapes = tuple(shapes)

    # ═══════════════════════════════════════════════════════════════════════════
    # Header
    # ═══════════════════════════════════════════════════════════════════════════

    async def insert_header(self, order: Order) -> Order:
        async with self._session_factory() as session:
            session.add(_header_row(order))
            await session.commit()
        return order

    async def delete_header(self, order_id: OrderId) -> None:
        async with self._session_factory() as session:
            await session.execute(delete(OrderTable).where(OrderTable.id == order_id))
            await session.commit()

    async def get_header(self, order_id: OrderId) -> OrderTable | None:
        async with self._session_factory() as session:
            return await session.get(OrderTable, order_id)

    async def set_status(self, order_id: OrderId, status: OrderStatus) -> None:
        async with self._session_factory() as session:
            await session.execute(
                update(OrderTable)
                .where(OrderTable.id == order_id)
                .values(status=status.value)
            )
            await session.commit()

    async def paid_spend(self, owner: OwnerRef) -> int:
        """Sum of totals over the owner's paid orders."""
        async with self._session_factory() as session:
            stmt = select(func.coalesce(func.sum(OrderTable.total), 0)).where(
                OrderTable.user_id == owner,
                OrderTable.payment_status == PaymentStatus.PAID.value,
            )
            return int((await session.execute(stmt)).scalar_one())

    # ═══════════════════════════════════════════════════════════════════════════
    # Items
    # ═══════════════════════════════════════════════════════════════════════════

    async def insert_items(
        self,
        order_id: OrderId,
        lines: Sequence[OrderLine],
    ) -> Result[ItemShape, SchemaFallbackExhausted]:
        """
        Insert every line in one shape, trying shapes newest first.

        Each attempt runs in its own session so a rejected shape leaves
        nothing behind.
        """
        failures: list[tuple[str, PersistenceFailure]] = []

        for shape in self._shapes:
            try:
                async with self._session_factory() as session:
                    await session.execute(shape.table.insert(), shape.rows(order_id, lines))
                    await session.commit()
            except Exception as e:
                logger.warning(
                    "Order %s items rejected as %s shape: %s", order_id, shape.name, e
                )
                failures.append((
                    shape.name,
                    PersistenceFailure(f"Failed to save {shape.name} order items: {e}", e),
                ))
                continue

            if failures:
                logger.info("Order %s items stored as %s shape", order_id, shape.name)
            return Ok(shape)

        return Error(SchemaFallbackExhausted(order_id, tuple(failures)))

    async def delete_items(self, order_id: OrderId, shape: ItemShape) -> None:
        async with self._session_factory() as session:
            await session.execute(
                delete(shape.table).where(shape.table.c.order_id == order_id)
            )
            await session.commit()

    # ═══════════════════════════════════════════════════════════════════════════
    # Cart
    # ═══════════════════════════════════════════════════════════════════════════

    async def delete_cart_lines(self, owner: OwnerRef, line_ids: Sequence[LineId]) -> int:
        """Delete exactly these lines, and only if they belong to owner."""
        if not line_ids:
            return 0
        async with self._session_factory() as session:
            result = await session.execute(
                delete(CartItemTable).where(
                    CartItemTable.user_id == owner,
                    CartItemTable.id.in_(list(line_ids)),
                )
            )
            await session.commit()
            return result.rowcount


__all__ = ("OrderRepository",)
