"""
Order reconciler — turns priced cart lines into a persisted order.

Header, items and cart-line consumption run as compensated steps: if a
later step fails the earlier ones are undone, so a failed checkout leaves
no order behind and the cart untouched.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

from kungfu import Result, Ok, Error, LazyCoroResult

from oddwheels._errors import CheckoutError, PersistenceFailure, SchemaFallbackExhausted
from oddwheels._types import OrderId, is_guest
from oddwheels.cart import CartEvents, CartLine
from oddwheels.checkout import _details as D
from oddwheels.checkout import _steps as S
from oddwheels.checkout._approval import ApprovalHook
from oddwheels.checkout._orders import OrderRepository
from oddwheels.checkout._shapes import ItemShape
from oddwheels.checkout._totals import compute_totals, order_line
from oddwheels.checkout._types import Order, OrderInput
from oddwheels.lift import persisting

logger = logging.getLogger(__name__)

CHECKOUT_ORIGIN = "checkout"


def _new_order_id() -> OrderId:
    return uuid.uuid4().hex


class OrderReconciler:
    """
    Example:
        reconciler = OrderReconciler(OrderRepository(sf), events=events)

        match await reconciler.create_order(order_input, store.lines):
            case Ok(order):
                redirect(f"/orders/{order.id}")
            case Error(SchemaFallbackExhausted() as err):
                notify(err.message)
    """

    def __init__(
        self,
        orders: OrderRepository,
        *,
        approval: ApprovalHook | None = None,
        events: CartEvents | None = None,
    ) -> None:
        self._orders = orders
        self._approval = approval
        self._events = events

    def build_order(self, input: OrderInput, cart_lines: Sequence[CartLine]) -> Order:
        """Price the lines and normalize details. Touches no storage."""
        lines = tuple(order_line(line) for line in cart_lines)
        details = dict(input.shipping_details)
        return Order(
            id=_new_order_id(),
            owner=input.owner_id,
            payment_method=input.payment_method,
            shipping_method=input.shipping_method,
            shipping_region=input.shipping_region,
            shipping_details=details,
            customer_name=D.customer_name(details),
            contact=D.contact(details),
            address=D.address(details),
            fees=input.fees,
            totals=compute_totals(
                lines, input.fees, input.shipping_discount, input.discount_total
            ),
            lines=lines,
            created_at=datetime.now(),
            voucher_id=input.voucher_id,
            insurance_selected=input.insurance_selected,
        )

    async def create_order(
        self,
        input: OrderInput,
        cart_lines: Sequence[CartLine],
    ) -> Result[Order, CheckoutError]:
        if is_guest(input.owner_id):
            raise ValueError("checkout needs a signed-in owner")
        if not cart_lines:
            raise ValueError("checkout needs at least one cart line")

        order = self.build_order(input, cart_lines)
        line_ids = [line.id for line in cart_lines]
        orders = self._orders

        def save_items(saved: Order) -> S.Step[ItemShape, SchemaFallbackExhausted]:
            return S.step(
                LazyCoroResult(lambda: orders.insert_items(saved.id, saved.lines)),
                compensate=lambda shape: orders.delete_items(saved.id, shape),
                name="items",
            )

        def consume_cart(shape: ItemShape) -> S.Step[Order, PersistenceFailure]:
            async def consume() -> Order:
                await orders.delete_cart_lines(order.owner, line_ids)
                return replace(order, item_shape=shape.name)

            return S.step(
                persisting("clear checked-out cart lines", consume),
                name="cart",
            )

        flow = (
            S.step(
                persisting("save order", lambda: orders.insert_header(order)),
                compensate=lambda saved: orders.delete_header(saved.id),
                name="header",
            )
            .then(save_items)
            .then(consume_cart)
        )

        match await S.run(flow):
            case Error(failed):
                logger.error(
                    "Checkout for %s failed at %s: %s (rollback %s)",
                    order.owner,
                    failed.step_failed,
                    failed.error.message,
                    "complete" if failed.rollback_complete else "incomplete",
                )
                return Error(failed.error)
            case Ok(done):
                placed = done.value

        logger.info(
            "Order %s placed for %s: %d line(s), total %d",
            placed.id, placed.owner, len(placed.lines), placed.total,
        )

        placed = await self._approve(placed)
        if self._events is not None:
            self._events.changed(CHECKOUT_ORIGIN, placed.owner)
        return Ok(placed)

    async def _approve(self, order: Order) -> Order:
        if self._approval is None:
            return order
        try:
            status = await self._approval.evaluate(order)
        except Exception:
            logger.exception("Approval hook failed for order %s", order.id)
            return order
        return replace(order, status=status) if status is not None else order


__all__ = ("OrderReconciler", "CHECKOUT_ORIGIN")
