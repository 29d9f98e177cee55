"""
Checkout types — order input, persisted order and its lines.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from oddwheels.shipping import Carrier


class OrderStatus(StrEnum):
    PENDING_APPROVAL = "PENDING_APPROVAL"
    APPROVED = "APPROVED"


class PaymentStatus(StrEnum):
    UNPAID = "UNPAID"
    PAID = "PAID"


# ═══════════════════════════════════════════════════════════════════════════════
# Input
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Fees:
    """Caller-computed fee bag. The reconciler sums these and nothing more."""

    shipping: int = 0
    cop: int = 0
    lalamove: int = 0
    priority: int = 0
    insurance: int = 0

    @property
    def total(self) -> int:
        return self.shipping + self.cop + self.lalamove + self.priority + self.insurance


@dataclass(frozen=True, slots=True)
class OrderInput:
    """
    Everything checkout collected besides the cart lines.

    shipping_details is free-form: whichever of receiver_name, phone,
    full_address and the rest the form filled in.
    """

    owner_id: str
    payment_method: str
    shipping_method: Carrier
    shipping_region: str | None = None
    shipping_details: dict[str, Any] = field(default_factory=dict)
    fees: Fees = field(default_factory=Fees)
    shipping_discount: int = 0
    discount_total: int | None = None
    voucher_id: str | None = None
    insurance_selected: bool = False


# ═══════════════════════════════════════════════════════════════════════════════
# Persisted Order
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderLine:
    """Snapshot of one cart line at checkout. Prices never re-derive later."""

    variant_id: str
    product_id: str
    product_title: str
    unit_price: int
    qty: int
    line_total: int
    condition: str | None = None
    issue_notes: str | None = None


@dataclass(frozen=True, slots=True)
class Totals:
    subtotal: int
    shipping_discount: int
    discount_total: int
    total: int


@dataclass(frozen=True, slots=True)
class Order:
    id: str
    owner: str
    payment_method: str
    shipping_method: Carrier
    shipping_region: str | None
    shipping_details: dict[str, Any]
    customer_name: str
    contact: str | None
    address: str | None
    fees: Fees
    totals: Totals
    lines: tuple[OrderLine, ...]
    created_at: datetime
    voucher_id: str | None = None
    insurance_selected: bool = False
    status: OrderStatus = OrderStatus.PENDING_APPROVAL
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    item_shape: str | None = None

    @property
    def subtotal(self) -> int:
        return self.totals.subtotal

    @property
    def total(self) -> int:
        return self.totals.total


__all__ = (
    "OrderStatus",
    "PaymentStatus",
    "Fees",
    "OrderInput",
    "OrderLine",
    "Totals",
    "Order",
)
