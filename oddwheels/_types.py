"""
Core types for oddwheels.

Re-exports from kungfu + shared identifiers.
"""

from __future__ import annotations

from typing import Final

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Identifiers
# ═══════════════════════════════════════════════════════════════════════════════

type VariantId = str
type LineId = str
type OwnerRef = str
type OrderId = str

GUEST: Final = "guest"
"""Owner reference for carts that live in client-local storage."""


def is_guest(owner: OwnerRef) -> bool:
    return owner == GUEST


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Identifiers
    "VariantId",
    "LineId",
    "OwnerRef",
    "OrderId",
    "GUEST",
    "is_guest",
)
