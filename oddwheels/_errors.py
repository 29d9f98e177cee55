"""
Error taxonomy.

Every recoverable or fatal outcome is a frozen dataclass carried inside a
kungfu ``Result``. Nothing here is raised across the public API.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class OutOfStock:
    """Add attempted while the variant has no stock."""

    variant_id: str
    available: int = 0

    @property
    def message(self) -> str:
        return "Item sold out"


@dataclass(frozen=True, slots=True)
class LineNotFound:
    line_id: str

    @property
    def message(self) -> str:
        return f"Cart line {self.line_id} not found"


@dataclass(frozen=True, slots=True)
class MergeTimeout:
    """Guest-to-user merge did not settle in time. Guest entries are kept."""

    seconds: float

    @property
    def message(self) -> str:
        return f"Cart merge timed out after {self.seconds:g}s"


@dataclass(frozen=True, slots=True)
class InfeasiblePackage:
    """
    No automatic package of the carrier fits the cart.

    needs_approval marks the LBC case: the order can still ship in a
    Medium Box once an admin approves it.
    """

    carrier: str
    reason: str
    needs_approval: bool = False

    @property
    def message(self) -> str:
        return self.reason


@dataclass(frozen=True, slots=True)
class PersistenceFailure:
    """Storage operation error."""

    message: str
    cause: Exception | None = None


@dataclass(frozen=True, slots=True)
class SchemaFallbackExhausted:
    """Every order-item shape was rejected by the database."""

    order_id: str
    failures: tuple[tuple[str, PersistenceFailure], ...] = field(default=())

    @property
    def message(self) -> str:
        tried = ", ".join(name for name, _ in self.failures)
        return f"Failed to save order items for {self.order_id} (tried: {tried})"


type CartError = OutOfStock | LineNotFound | MergeTimeout | PersistenceFailure
type CheckoutError = PersistenceFailure | SchemaFallbackExhausted


__all__ = (
    "OutOfStock",
    "LineNotFound",
    "MergeTimeout",
    "InfeasiblePackage",
    "PersistenceFailure",
    "SchemaFallbackExhausted",
    "CartError",
    "CheckoutError",
)
