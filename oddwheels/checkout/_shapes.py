"""
Order-item shapes.

Each shape knows how one historical order_items layout spells a line.
The repository tries them newest first and keeps the first the database
accepts.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy import Table

from oddwheels._types import OrderId
from oddwheels.checkout._types import OrderLine
from oddwheels.db import CURRENT_ITEMS, LEGACY_ITEMS, V1_ITEMS

type Row = dict[str, Any]


@dataclass(frozen=True, slots=True)
class ItemShape:
    name: str
    table: Table
    row: Callable[[str, OrderLine], Row]

    def rows(self, order_id: OrderId, lines: Sequence[OrderLine]) -> list[Row]:
        return [self.row(order_id, line) for line in lines]


def _current(order_id: OrderId, line: OrderLine) -> Row:
    return {
        "order_id": order_id,
        "item_id": line.variant_id,
        "item_name": line.product_title,
        "variant_id": line.variant_id,
        "price_each": line.unit_price,
        "qty": line.qty,
        "line_total": line.line_total,
        "condition": line.condition,
        "issue_notes": line.issue_notes,
    }


def _v1(order_id: OrderId, line: OrderLine) -> Row:
    return {
        "order_id": order_id,
        "variant_id": line.variant_id,
        "unit_price": line.unit_price,
        "qty": line.qty,
        "line_total": line.line_total,
        "condition": line.condition,
        "issue_notes": line.issue_notes,
    }


def _legacy(order_id: OrderId, line: OrderLine) -> Row:
    return {
        "order_id": order_id,
        "product_id": line.product_id,
        "product_title": line.product_title,
        "variant_id": line.variant_id,
        "unit_price": line.unit_price,
        "qty": line.qty,
        "line_total": line.line_total,
        "condition": line.condition,
        "issue_notes": line.issue_notes,
    }


CURRENT_SHAPE = ItemShape("current", CURRENT_ITEMS, _current)
V1_SHAPE = ItemShape("v1", V1_ITEMS, _v1)
LEGACY_SHAPE = ItemShape("legacy", LEGACY_ITEMS, _legacy)

ITEM_SHAPES: tuple[ItemShape, ...] = (CURRENT_SHAPE, V1_SHAPE, LEGACY_SHAPE)


__all__ = (
    "Row",
    "ItemShape",
    "CURRENT_SHAPE",
    "V1_SHAPE",
    "LEGACY_SHAPE",
    "ITEM_SHAPES",
)
