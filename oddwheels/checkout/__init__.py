"""
Checkout — fee quotes, order persistence and post-checkout approval.

    from oddwheels import checkout as CO

    quote = CO.checkout_quote(Carrier.JNT, Region.LUZON, counts, subtotal)
    reconciler = CO.OrderReconciler(
        CO.OrderRepository(session_factory),
        approval=CO.TierAutoApproval(CO.OrderRepository(session_factory)),
        events=events,
    )
    match await reconciler.create_order(order_input, store.lines):
        case Ok(order):
            ...
"""

from oddwheels.checkout._types import (
    OrderStatus,
    PaymentStatus,
    Fees,
    OrderInput,
    OrderLine,
    Totals,
    Order,
)
from oddwheels.checkout._totals import order_line, compute_totals
from oddwheels.checkout._details import (
    WEB_CUSTOMER,
    pick_str,
    customer_name,
    contact,
    address,
    carrier_from_method,
)
from oddwheels.checkout._vouchers import (
    VoucherKind,
    Voucher,
    VoucherEligibility,
    calculate_shipping_discount,
    voucher_eligibility,
)
from oddwheels.checkout._quote import CheckoutQuote, checkout_quote
from oddwheels.checkout._shapes import (
    ItemShape,
    CURRENT_SHAPE,
    V1_SHAPE,
    LEGACY_SHAPE,
    ITEM_SHAPES,
)
from oddwheels.checkout._orders import OrderRepository
from oddwheels.checkout._approval import (
    Tier,
    TierPerks,
    TIER_PERKS,
    tier_from_spend,
    TierProgress,
    tier_progress,
    is_auto_approve_tier,
    ApprovalHook,
    TierAutoApproval,
)
from oddwheels.checkout._reconcile import OrderReconciler, CHECKOUT_ORIGIN
from oddwheels.checkout import _steps as steps

__all__ = (
    "OrderStatus",
    "PaymentStatus",
    "Fees",
    "OrderInput",
    "OrderLine",
    "Totals",
    "Order",
    "order_line",
    "compute_totals",
    "WEB_CUSTOMER",
    "pick_str",
    "customer_name",
    "contact",
    "address",
    "carrier_from_method",
    "VoucherKind",
    "Voucher",
    "VoucherEligibility",
    "calculate_shipping_discount",
    "voucher_eligibility",
    "CheckoutQuote",
    "checkout_quote",
    "ItemShape",
    "CURRENT_SHAPE",
    "V1_SHAPE",
    "LEGACY_SHAPE",
    "ITEM_SHAPES",
    "OrderRepository",
    "Tier",
    "TierPerks",
    "TIER_PERKS",
    "tier_from_spend",
    "TierProgress",
    "tier_progress",
    "is_auto_approve_tier",
    "ApprovalHook",
    "TierAutoApproval",
    "OrderReconciler",
    "CHECKOUT_ORIGIN",
    "steps",
)
