"""
Checkout quote — the fee bag the storefront shows before placing an order.

    quote = checkout_quote(
        Carrier.LBC, Region.LUZON, counts, subtotal=1800,
        lbc_cop=True, insurance_selected=True,
    )
    order_input = OrderInput(..., fees=quote.fees, shipping_discount=quote.shipping_discount)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from kungfu import Result, Ok, Error

from oddwheels._errors import InfeasiblePackage
from oddwheels.checkout._types import Fees
from oddwheels.checkout._vouchers import Voucher, VoucherEligibility, voucher_eligibility
from oddwheels.shipping import (
    FEES,
    Carrier,
    PackageName,
    Region,
    ShipCounts,
    ShippingQuote,
    quote_shipping,
    suggested_insurance_fee,
)


@dataclass(frozen=True, slots=True)
class CheckoutQuote:
    shipping: ShippingQuote
    fees: Fees
    subtotal: int
    shipping_discount: int = 0
    voucher: VoucherEligibility | None = None

    @property
    def total(self) -> int:
        return self.subtotal + self.fees.total - self.shipping_discount


def checkout_quote(
    carrier: Carrier,
    region: Region,
    counts: ShipCounts,
    subtotal: int,
    *,
    package_choice: PackageName | None = None,
    lbc_cop: bool = False,
    priority: bool = False,
    insurance_selected: bool = False,
    insurance_fee: int | None = None,
    voucher: Voucher | None = None,
    voucher_expires_at: datetime | None = None,
    now: datetime | None = None,
) -> Result[CheckoutQuote, InfeasiblePackage]:
    """
    Build the fee bag.

    LBC cash-on-pickup pays shipping at the branch, so its shipping fee
    is 0 and a convenience fee is charged instead. Lalamove never carries
    insurance.
    """
    match quote_shipping(carrier, counts, region, package_choice):
        case Error(infeasible):
            return Error(infeasible)
        case Ok(shipping):
            pass

    cop = carrier is Carrier.LBC and lbc_cop
    if carrier in (Carrier.LALAMOVE, Carrier.PICKUP) or cop:
        shipping_fee = 0
    else:
        shipping_fee = shipping.fee

    insured = carrier is not Carrier.LALAMOVE and insurance_selected
    declared = suggested_insurance_fee(subtotal) if insurance_fee is None else insurance_fee

    fees = Fees(
        shipping=shipping_fee,
        cop=FEES.LBC_COP_CONVENIENCE if cop else 0,
        lalamove=FEES.LALAMOVE_CONVENIENCE if carrier is Carrier.LALAMOVE else 0,
        priority=FEES.PRIORITY_SHIPPING if priority else 0,
        insurance=max(0, declared) if insured else 0,
    )

    eligibility = None
    if voucher is not None:
        eligibility = voucher_eligibility(
            voucher, subtotal, shipping_fee, voucher_expires_at, now
        )

    return Ok(CheckoutQuote(
        shipping=shipping,
        fees=fees,
        subtotal=subtotal,
        shipping_discount=eligibility.discount if eligibility and eligibility.eligible else 0,
        voucher=eligibility,
    ))


__all__ = ("CheckoutQuote", "checkout_quote")
