"""
Cart change bus — keeps every open cart view of one shopper in sync.
"""

from __future__ import annotations

from dataclasses import dataclass

from oddwheels._broadcast import Broadcast
from oddwheels._types import OwnerRef


@dataclass(frozen=True, slots=True)
class CartChanged:
    """
    origin: instance id of the store (or "checkout") that mutated the cart.
    """

    origin: str
    owner: OwnerRef


class CartEvents(Broadcast[CartChanged]):
    """
    Stores subscribe under their instance id. A change is delivered to
    every other store; the originator already holds the fresh lines.
    """

    def changed(self, origin: str, owner: OwnerRef) -> int:
        return self.publish(CartChanged(origin, owner), skip=origin)


__all__ = ("CartChanged", "CartEvents")
