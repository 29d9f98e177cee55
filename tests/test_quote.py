from datetime import datetime, timedelta, timezone

import pytest
from kungfu import Error

from conftest import unwrap

from oddwheels import checkout as CO
from oddwheels.shipping import Carrier, Region, ShipClass, empty_ship_counts

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def counts(**by_class: int):
    out = empty_ship_counts()
    for name, n in by_class.items():
        out[ShipClass(name.upper())] = n
    return out


FS100 = CO.Voucher(id="fs100", min_subtotal=1500, shipping_cap=100)


# ═══════════════════════════════════════════════════════════════════════════════
# Vouchers
# ═══════════════════════════════════════════════════════════════════════════════


def test_shipping_discount_is_capped_by_fee() -> None:
    assert CO.calculate_shipping_discount(2000, 75, FS100) == 75
    assert CO.calculate_shipping_discount(2000, 140, FS100) == 100
    assert CO.calculate_shipping_discount(1000, 140, FS100) == 0
    assert CO.calculate_shipping_discount(2000, 0, FS100) == 0


@pytest.mark.parametrize(
    ("voucher", "subtotal", "fee", "wallet_expiry", "reason"),
    [
        (FS100, 2000, 0, None, "Shipping fee is zero."),
        (CO.Voucher("x", 0, 100, is_active=False), 2000, 75, None, "Voucher is inactive."),
        (CO.Voucher("x", 0, 100, starts_at=NOW + timedelta(days=1)), 2000, 75, None, "Not active yet."),
        (CO.Voucher("x", 0, 100, expires_at=NOW - timedelta(days=1)), 2000, 75, None, "Voucher expired."),
        (FS100, 2000, 75, NOW - timedelta(seconds=1), "Voucher expired."),
        (FS100, 1499, 75, None, "Min spend not met."),
        (CO.Voucher("x", 0, 0), 2000, 75, None, "Not eligible."),
    ],
)
def test_voucher_rejections(voucher, subtotal, fee, wallet_expiry, reason) -> None:
    eligibility = CO.voucher_eligibility(voucher, subtotal, fee, wallet_expiry, now=NOW)
    assert eligibility == CO.VoucherEligibility(eligible=False, discount=0, reason=reason)


def test_voucher_accepted() -> None:
    eligibility = CO.voucher_eligibility(FS100, 1500, 140, now=NOW)
    assert eligibility == CO.VoucherEligibility(eligible=True, discount=100)


# ═══════════════════════════════════════════════════════════════════════════════
# Checkout quote
# ═══════════════════════════════════════════════════════════════════════════════


def test_jnt_quote_with_priority_and_insurance() -> None:
    quote = unwrap(CO.checkout_quote(
        Carrier.JNT, Region.LUZON, counts(mini_gt=2), 1800,
        priority=True, insurance_selected=True,
    ))
    assert quote.fees == CO.Fees(shipping=75, priority=50, insurance=20)
    assert quote.total == 1800 + 75 + 50 + 20


def test_lbc_cash_on_pickup_pays_shipping_at_branch() -> None:
    quote = unwrap(CO.checkout_quote(
        Carrier.LBC, Region.VISAYAS, counts(kaido=1), 1200, lbc_cop=True,
    ))
    assert quote.shipping.fee == 90
    assert quote.fees == CO.Fees(shipping=0, cop=20)


def test_lalamove_never_insured() -> None:
    quote = unwrap(CO.checkout_quote(
        Carrier.LALAMOVE, Region.METRO_MANILA, counts(diorama=1), 5000,
        insurance_selected=True, insurance_fee=80,
    ))
    assert quote.fees == CO.Fees(lalamove=50)


def test_pickup_is_free() -> None:
    quote = unwrap(CO.checkout_quote(Carrier.PICKUP, Region.LUZON, counts(mini_gt=40), 900))
    assert quote.fees == CO.Fees()


def test_voucher_applies_to_shipping_fee() -> None:
    quote = unwrap(CO.checkout_quote(
        Carrier.JNT, Region.MINDANAO, counts(mini_gt=4), 2000, voucher=FS100, now=NOW,
    ))
    assert quote.fees.shipping == 165
    assert quote.shipping_discount == 100
    assert quote.voucher is not None and quote.voucher.eligible


def test_voucher_rejected_when_fee_waived() -> None:
    quote = unwrap(CO.checkout_quote(
        Carrier.LBC, Region.LUZON, counts(kaido=1), 2000,
        lbc_cop=True, voucher=FS100, now=NOW,
    ))
    assert quote.shipping_discount == 0
    assert quote.voucher is not None
    assert quote.voucher.reason == "Shipping fee is zero."


def test_infeasible_jnt_cart() -> None:
    assert isinstance(CO.checkout_quote(Carrier.JNT, Region.LUZON, counts(kaido=9), 100), Error)


# ═══════════════════════════════════════════════════════════════════════════════
# Tiers
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    ("spend", "tier"),
    [
        (-50, CO.Tier.CLASSIC),
        (float("nan"), CO.Tier.CLASSIC),
        (1999, CO.Tier.CLASSIC),
        (2000, CO.Tier.SILVER),
        (4999.5, CO.Tier.SILVER),
        (5000, CO.Tier.GOLD),
        (10000, CO.Tier.PLATINUM),
    ],
)
def test_tier_from_spend(spend: float, tier: CO.Tier) -> None:
    assert CO.tier_from_spend(spend) is tier


def test_auto_approve_tiers() -> None:
    assert [t for t in CO.Tier if CO.is_auto_approve_tier(t)] == [CO.Tier.GOLD, CO.Tier.PLATINUM]
    assert not CO.is_auto_approve_tier(None)


def test_tier_progress() -> None:
    progress = CO.tier_progress(3500)
    assert progress.tier is CO.Tier.SILVER
    assert progress.next_tier is CO.Tier.GOLD
    assert progress.progress == pytest.approx(0.5)
    assert progress.remaining == 1500

    top = CO.tier_progress(25000)
    assert (top.next_tier, top.progress, top.remaining) == (None, 1.0, 0.0)


# ═══════════════════════════════════════════════════════════════════════════════
# Shipping details
# ═══════════════════════════════════════════════════════════════════════════════


def test_customer_name_priority() -> None:
    assert CO.customer_name({"receiver_name": " Ana ", "first_name": "B"}) == "Ana"
    assert CO.customer_name({"recipient_name": "Cy"}) == "Cy"
    assert CO.customer_name({"first_name": "Dee", "last_name": ""}) == "Dee"
    assert CO.customer_name({"receiver_name": "  "}) == CO.WEB_CUSTOMER


def test_contact_priority() -> None:
    assert CO.contact({"phone": "1", "receiver_phone": "2"}) == "2"
    assert CO.contact({"contact_number": "3", "customer_phone": "4"}) == "3"
    assert CO.contact({}) is None


def test_address_priority() -> None:
    assert CO.address({"full_address": "A", "address_line": "B"}) == "A"
    assert CO.address({"address_line": "B", "brgy": "C"}) == "B, Brgy C"
    assert CO.address({"address_line": "B"}) == "B"
    assert CO.address({"dropoff_address": "D", "pickup_location": "E"}) == "D"
    assert CO.address({"pickup_location": "E"}) == "E"
    assert CO.address({"note": "leave at gate"}) == '{"note": "leave at gate"}'


def test_carrier_from_method() -> None:
    assert CO.carrier_from_method(Carrier.LBC) == "LBC"
    assert CO.carrier_from_method("pickup") == "PICKUP"
    assert CO.carrier_from_method("NINJAVAN") == "OTHER"
