"""
oddwheels — storefront core for collectible diecast.

    from oddwheels import pricing as P     # Effective prices, add-ons
    from oddwheels import shipping as SH   # Ship classes, carrier packages
    from oddwheels import cart as C        # Guest / signed-in carts
    from oddwheels import checkout as CO   # Orders, vouchers, approval
"""

from oddwheels import pricing
from oddwheels import shipping
from oddwheels import inventory
from oddwheels import cart
from oddwheels import checkout
from oddwheels import db
from oddwheels import lift
from oddwheels._config import Settings, configure_logging
from oddwheels._errors import (
    OutOfStock,
    LineNotFound,
    MergeTimeout,
    InfeasiblePackage,
    PersistenceFailure,
    SchemaFallbackExhausted,
    CartError,
    CheckoutError,
)
from oddwheels._storefront import Storefront
from oddwheels._types import GUEST, is_guest

__version__ = "0.1.0"

__all__ = (
    "pricing",
    "shipping",
    "inventory",
    "cart",
    "checkout",
    "db",
    "lift",
    "Settings",
    "configure_logging",
    "OutOfStock",
    "LineNotFound",
    "MergeTimeout",
    "InfeasiblePackage",
    "PersistenceFailure",
    "SchemaFallbackExhausted",
    "CartError",
    "CheckoutError",
    "Storefront",
    "GUEST",
    "is_guest",
)
