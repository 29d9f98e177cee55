"""
Free-shipping vouchers.

A voucher takes up to shipping_cap off the shipping fee once the item
subtotal reaches min_subtotal.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum


class VoucherKind(StrEnum):
    FREE_SHIPPING = "FREE_SHIPPING"


@dataclass(frozen=True, slots=True)
class Voucher:
    id: str
    min_subtotal: int
    shipping_cap: int
    kind: VoucherKind = VoucherKind.FREE_SHIPPING
    code: str | None = None
    title: str | None = None
    starts_at: datetime | None = None
    expires_at: datetime | None = None
    is_active: bool = True


@dataclass(frozen=True, slots=True)
class VoucherEligibility:
    eligible: bool
    discount: int = 0
    reason: str | None = None


def calculate_shipping_discount(subtotal: int, shipping_fee: int, voucher: Voucher) -> int:
    fee = max(0, shipping_fee)
    if fee <= 0:
        return 0
    if subtotal < max(0, voucher.min_subtotal):
        return 0
    return min(fee, max(0, voucher.shipping_cap))


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def voucher_eligibility(
    voucher: Voucher,
    subtotal: int,
    shipping_fee: int,
    wallet_expires_at: datetime | None = None,
    now: datetime | None = None,
) -> VoucherEligibility:
    """Check in order: fee, active flag, start, expiry, min spend."""
    moment = _aware(now or _now())

    def rejected(reason: str) -> VoucherEligibility:
        return VoucherEligibility(eligible=False, reason=reason)

    if max(0, shipping_fee) <= 0:
        return rejected("Shipping fee is zero.")
    if not voucher.is_active:
        return rejected("Voucher is inactive.")
    if voucher.starts_at is not None and _aware(voucher.starts_at) > moment:
        return rejected("Not active yet.")
    expiries = (voucher.expires_at, wallet_expires_at)
    if any(e is not None and _aware(e) < moment for e in expiries):
        return rejected("Voucher expired.")
    if subtotal < voucher.min_subtotal:
        return rejected("Min spend not met.")

    discount = calculate_shipping_discount(subtotal, shipping_fee, voucher)
    if discount <= 0:
        return rejected("Not eligible.")
    return VoucherEligibility(eligible=True, discount=discount)


__all__ = (
    "VoucherKind",
    "Voucher",
    "VoucherEligibility",
    "calculate_shipping_discount",
    "voucher_eligibility",
)
