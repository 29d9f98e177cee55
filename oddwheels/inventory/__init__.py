"""
Inventory — live variant reads and stock-change notifications.

    from oddwheels import inventory as INV

    inv = INV.SQLAlchemyInventory(session_factory)
    match await inv.get_variant("v-1"):
        case Ok(variant) if variant is not None:
            print(variant.available)
"""

from oddwheels.inventory._types import Variant, StockChanged, Inventory
from oddwheels.inventory._feed import StockFeed, StockListener
from oddwheels.inventory._sqlalchemy import SQLAlchemyInventory

__all__ = (
    "Variant",
    "StockChanged",
    "Inventory",
    "StockFeed",
    "StockListener",
    "SQLAlchemyInventory",
)
