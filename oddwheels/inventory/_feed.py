"""
Stock feed — stock changes made by other actors.
"""

from __future__ import annotations

from oddwheels._broadcast import Broadcast, Listener
from oddwheels.inventory._types import StockChanged

type StockListener = Listener[StockChanged]


class StockFeed(Broadcast[StockChanged]):
    """Published to by whatever edits stock (admin editor, POS, checkout approval)."""


__all__ = ("StockFeed", "StockListener")
