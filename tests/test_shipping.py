import itertools
from dataclasses import dataclass

import pytest
from kungfu import Ok, Error

from conftest import unwrap

from oddwheels import shipping as SH
from oddwheels.shipping import Carrier, Region, ShipClass


@dataclass
class Line:
    ship_class: str | None
    qty: int


def counts(**by_class: int) -> SH.ShipCounts:
    out = SH.empty_ship_counts()
    for name, n in by_class.items():
        out[ShipClass(name.upper())] = n
    return out


def test_jnt_two_mini_gt_metro_manila() -> None:
    match SH.recommend_package(Carrier.JNT, counts(mini_gt=2)):
        case Ok(spec):
            assert spec.name == SH.JntPouch.SMALL
            assert SH.fee(Carrier.JNT, spec.name, Region.METRO_MANILA) == 65
        case Error(e):
            pytest.fail(e.reason)


def test_jnt_ten_mini_gt_is_infeasible() -> None:
    match SH.recommend_package(Carrier.JNT, counts(mini_gt=10)):
        case Error(infeasible):
            assert "J&T medium pouch" in infeasible.reason
            assert not infeasible.needs_approval
        case Ok(spec):
            pytest.fail(f"unexpected package {spec.name}")


def test_smallest_fitting_package_wins() -> None:
    assert unwrap(SH.recommend_package(Carrier.JNT, counts(mini_gt=3))).name == SH.JntPouch.MEDIUM
    assert unwrap(SH.recommend_package(Carrier.LBC, counts(kaido=1))).name == SH.LbcPackage.N_SAKTO
    assert unwrap(SH.recommend_package(Carrier.LBC, counts(kaido=2))).name == SH.LbcPackage.MINIBOX
    assert unwrap(SH.recommend_package(Carrier.LBC, counts(mini_gt=31))).name == SH.LbcPackage.SMALL_BOX


def test_every_count_must_fit() -> None:
    # SMALL holds 2 MINI_GT and 2 KAIDO, but only 1 acrylic
    mixed = counts(mini_gt=1, acrylic_true_scale=2)
    assert unwrap(SH.recommend_package(Carrier.JNT, mixed)).name == SH.JntPouch.MEDIUM


def test_unlisted_class_has_no_capacity() -> None:
    assert isinstance(SH.recommend_package(Carrier.JNT, counts(tomica=1)), Error)


def test_unknown_class_string_is_counted_not_raised() -> None:
    result = SH.ship_counts_from_lines([Line("TRUE_SCALE", 1), Line("mini_gt", 1)])

    assert result[ShipClass.UNRECOGNIZED] == 1
    assert result[ShipClass.MINI_GT] == 1
    assert isinstance(SH.recommend_package(Carrier.JNT, result), Error)
    match SH.recommend_package(Carrier.LBC, result):
        case Error(infeasible):
            assert infeasible.needs_approval
        case Ok(spec):
            pytest.fail(f"unexpected package {spec.name}")


def test_lbc_infeasible_needs_approval() -> None:
    match SH.recommend_package(Carrier.LBC, counts(mini_gt=40)):
        case Error(infeasible):
            assert infeasible.needs_approval
            assert "Medium Box" in infeasible.reason
        case Ok(_):
            pytest.fail("expected infeasible")


@pytest.mark.parametrize("carrier", [Carrier.JNT, Carrier.LBC])
def test_fit_is_monotonic(carrier: Carrier) -> None:
    grid = range(0, 12, 3)
    for mini_gt, kaido, acrylic in itertools.product(grid, grid, range(0, 6)):
        base = counts(mini_gt=mini_gt, kaido=kaido, acrylic_true_scale=acrylic)
        smaller = counts(
            mini_gt=max(0, mini_gt - 1),
            kaido=max(0, kaido - 1),
            acrylic_true_scale=max(0, acrylic - 1),
        )
        if isinstance(SH.recommend_package(carrier, base), Ok):
            assert isinstance(SH.recommend_package(carrier, smaller), Ok)

    for specs in (SH.JNT_PACKAGES, SH.LBC_PACKAGES):
        for small, large in itertools.pairwise(specs):
            for cls in ShipClass:
                assert small.capacity_for(cls) <= large.capacity_for(cls)


def test_packages_for_carrier_without_catalog() -> None:
    with pytest.raises(ValueError):
        SH.recommend_package(Carrier.PICKUP, counts(mini_gt=1))


def test_ship_counts_from_lines() -> None:
    lines = [
        Line(None, 2),
        Line("mini_gt", 1),
        Line("DIORAMA", 1),
        Line("LALAMOVE", 2),
        Line("KAIDO", -4),
    ]
    result = SH.ship_counts_from_lines(lines)
    assert result[ShipClass.MINI_GT] == 3
    assert result[ShipClass.LALAMOVE] == 3
    assert result[ShipClass.DIORAMA] == 0
    assert result[ShipClass.KAIDO] == 0


def test_fee_tables() -> None:
    assert SH.fee(Carrier.JNT, SH.JntPouch.MEDIUM, Region.MINDANAO) == 165
    assert SH.fee(Carrier.LBC, SH.LbcPackage.N_SAKTO, Region.VISAYAS) == 90
    assert SH.fee(Carrier.LBC, SH.LbcPackage.SMALL_BOX, Region.METRO_MANILA) == 140


def test_suggested_insurance_fee() -> None:
    assert SH.suggested_insurance_fee(0) == 0
    assert SH.suggested_insurance_fee(1) == 5
    assert SH.suggested_insurance_fee(500) == 5
    assert SH.suggested_insurance_fee(501) == 10
    assert SH.suggested_insurance_fee(-100) == 0


class TestQuoteShipping:
    def test_pickup_and_lalamove_are_free(self) -> None:
        for carrier in (Carrier.PICKUP, Carrier.LALAMOVE):
            quote = unwrap(SH.quote_shipping(carrier, counts(diorama=1), Region.LUZON))
            assert quote.fee == 0
            assert quote.package is None

    def test_jnt_quote(self) -> None:
        quote = unwrap(SH.quote_shipping(Carrier.JNT, counts(mini_gt=2), Region.LUZON))
        assert quote.label == "J&T SMALL pouch"
        assert quote.fee == 75

    def test_jnt_infeasible_is_error(self) -> None:
        assert isinstance(SH.quote_shipping(Carrier.JNT, counts(mini_gt=9), Region.LUZON), Error)

    def test_lbc_honours_fitting_choice(self) -> None:
        quote = unwrap(SH.quote_shipping(
            Carrier.LBC, counts(mini_gt=1), Region.LUZON, SH.LbcPackage.SMALL_BOX
        ))
        assert quote.package == SH.LbcPackage.SMALL_BOX
        assert quote.fee == 140

    def test_lbc_ignores_choice_that_does_not_fit(self) -> None:
        quote = unwrap(SH.quote_shipping(
            Carrier.LBC, counts(mini_gt=5), Region.LUZON, SH.LbcPackage.N_SAKTO
        ))
        assert quote.package == SH.LbcPackage.MINIBOX

    def test_lbc_oversize_quotes_zero_with_warning(self) -> None:
        quote = unwrap(SH.quote_shipping(Carrier.LBC, counts(kaido=20), Region.LUZON))
        assert quote.needs_approval
        assert quote.fee == 0
        assert quote.warning is not None
        assert quote.label == "LBC Medium Box (subject to approval)"

    def test_fitting_packages(self) -> None:
        names = [p.name for p in SH.fitting_packages(Carrier.LBC, counts(mini_gt=5))]
        assert names == [SH.LbcPackage.MINIBOX, SH.LbcPackage.SMALL_BOX]
