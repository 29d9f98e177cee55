"""
Order-item table layouts, newest first.

Deployed databases may still carry an older order_items layout. Each layout
lives on its own MetaData so exactly one of them is created per database.
"""

from __future__ import annotations

from enum import StrEnum

from sqlalchemy import (
    Column,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)


class ItemLayout(StrEnum):
    CURRENT = "current"
    V1 = "v1"
    LEGACY = "legacy"


def _id() -> Column[int]:
    return Column("id", Integer, primary_key=True, autoincrement=True)


CURRENT_ITEMS = Table(
    "order_items",
    MetaData(),
    _id(),
    Column("order_id", String(50), nullable=False, index=True),
    Column("item_id", String(50), nullable=False),
    Column("item_name", String(255), nullable=True),
    Column("variant_id", String(50), nullable=True),
    Column("price_each", Integer, nullable=False),
    Column("qty", Integer, nullable=False),
    Column("line_total", Integer, nullable=False),
    Column("condition", String(30), nullable=True),
    Column("issue_notes", Text, nullable=True),
)

V1_ITEMS = Table(
    "order_items",
    MetaData(),
    _id(),
    Column("order_id", String(50), nullable=False, index=True),
    Column("variant_id", String(50), nullable=False),
    Column("unit_price", Integer, nullable=False),
    Column("qty", Integer, nullable=False),
    Column("line_total", Integer, nullable=False),
    Column("condition", String(30), nullable=True),
    Column("issue_notes", Text, nullable=True),
)

LEGACY_ITEMS = Table(
    "order_items",
    MetaData(),
    _id(),
    Column("order_id", String(50), nullable=False, index=True),
    Column("product_id", String(50), nullable=False),
    Column("product_title", String(255), nullable=False),
    Column("variant_id", String(50), nullable=True),
    Column("unit_price", Integer, nullable=False),
    Column("qty", Integer, nullable=False),
    Column("line_total", Integer, nullable=False),
    Column("condition", String(30), nullable=True),
    Column("issue_notes", Text, nullable=True),
)

LAYOUT_TABLES: dict[ItemLayout, Table] = {
    ItemLayout.CURRENT: CURRENT_ITEMS,
    ItemLayout.V1: V1_ITEMS,
    ItemLayout.LEGACY: LEGACY_ITEMS,
}


__all__ = (
    "ItemLayout",
    "CURRENT_ITEMS",
    "V1_ITEMS",
    "LEGACY_ITEMS",
    "LAYOUT_TABLES",
)
