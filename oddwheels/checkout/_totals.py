"""
Order totals.
"""

from __future__ import annotations

from collections.abc import Iterable

from oddwheels.cart import CartLine
from oddwheels.checkout._types import Fees, OrderLine, Totals


def order_line(line: CartLine) -> OrderLine:
    """Freeze a cart line at its current effective price plus protector fee."""
    variant = line.variant
    unit = line.unit_price
    return OrderLine(
        variant_id=variant.id,
        product_id=variant.product_id,
        product_title=variant.title,
        unit_price=unit,
        qty=line.qty,
        line_total=unit * line.qty,
        condition=variant.condition,
        issue_notes=variant.issue_notes,
    )


def compute_totals(
    lines: Iterable[OrderLine],
    fees: Fees,
    shipping_discount: int = 0,
    discount_total: int | None = None,
) -> Totals:
    """
    total = subtotal + every fee - shipping discount.

    discount_total defaults to the shipping discount, the only discount
    checkout currently offers.
    """
    subtotal = sum(line.line_total for line in lines)
    shipping_off = max(0, shipping_discount)
    discounts = max(0, discount_total if discount_total is not None else shipping_off)
    return Totals(
        subtotal=subtotal,
        shipping_discount=shipping_off,
        discount_total=discounts,
        total=subtotal + fees.total - shipping_off,
    )


__all__ = ("order_line", "compute_totals")
