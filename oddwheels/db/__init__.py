"""
Persistence — SQLAlchemy tables and database bootstrap.

    from oddwheels import db

    session_factory, engine = await db.create_database("sqlite+aiosqlite:///shop.db")
"""

from oddwheels.db._tables import (
    Base,
    ProductTable,
    VariantTable,
    CartItemTable,
    OrderTable,
)
from oddwheels.db._layouts import (
    ItemLayout,
    CURRENT_ITEMS,
    V1_ITEMS,
    LEGACY_ITEMS,
    LAYOUT_TABLES,
)
from oddwheels.db._engine import create_database

__all__ = (
    "Base",
    "ProductTable",
    "VariantTable",
    "CartItemTable",
    "OrderTable",
    "ItemLayout",
    "CURRENT_ITEMS",
    "V1_ITEMS",
    "LEGACY_ITEMS",
    "LAYOUT_TABLES",
    "create_database",
)
