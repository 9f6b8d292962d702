from decimal import Decimal

from tests.factories import item

from app.core.attribution import SOURCE_COUPON, SOURCE_LINK, SOURCE_PROFILE, CommissionPolicy
from app.core.commission import commission_basis, compute_commission, to_money


PERCENT_10 = CommissionPolicy(commission_type="percentage", commission_value=Decimal("10"))
FLAT_50 = CommissionPolicy(commission_type="flat", commission_value=Decimal("50"))


def _with_totals(items):
    return [{**i, "total_price": Decimal(i["unit_price"]) * i["quantity"]} for i in items]


def test_product_scoped_link_only_counts_referred_product():
    items = _with_totals([item("prod-a", "500.00"), item("prod-b", "300.00")])
    basis = commission_basis(
        source=SOURCE_LINK,
        items=items,
        subtotal=Decimal("800.00"),
        coupon_discount=Decimal("0"),
        product_id="prod-a",
    )
    assert basis == Decimal("500.00")


def test_product_scoped_link_sums_every_line_of_that_product():
    items = _with_totals([item("prod-a", "250.00", quantity=2), item("prod-a", "99.50"), item("prod-c", "10.00")])
    basis = commission_basis(
        source=SOURCE_LINK,
        items=items,
        subtotal=Decimal("609.50"),
        coupon_discount=Decimal("0"),
        product_id="prod-a",
    )
    assert basis == Decimal("599.50")


def test_scoped_product_missing_from_cart_gives_zero_basis():
    items = _with_totals([item("prod-b", "300.00")])
    basis = commission_basis(
        source=SOURCE_LINK,
        items=items,
        subtotal=Decimal("300.00"),
        coupon_discount=Decimal("0"),
        product_id="prod-a",
    )
    assert basis == Decimal("0.00")
    assert compute_commission(FLAT_50, basis) == Decimal("0.00")


def test_coupon_and_profile_basis_is_subtotal_less_coupon():
    items = _with_totals([item("prod-a", "1000.00")])
    for source in (SOURCE_COUPON, SOURCE_PROFILE):
        basis = commission_basis(
            source=source,
            items=items,
            subtotal=Decimal("1000"),
            coupon_discount=Decimal("100"),
            product_id="prod-a",
        )
        assert basis == Decimal("900.00")


def test_unscoped_link_uses_order_basis():
    basis = commission_basis(
        source=SOURCE_LINK,
        items=[],
        subtotal=Decimal("750"),
        coupon_discount=Decimal("50"),
    )
    assert basis == Decimal("700.00")


def test_coupon_larger_than_subtotal_clamps_basis_to_zero():
    basis = commission_basis(
        source=SOURCE_COUPON,
        items=[],
        subtotal=Decimal("80"),
        coupon_discount=Decimal("100"),
    )
    assert basis == Decimal("0.00")


def test_percentage_rounds_to_two_places():
    assert compute_commission(PERCENT_10, Decimal("999.99")) == Decimal("100.00")
    assert compute_commission(PERCENT_10, Decimal("999.94")) == Decimal("99.99")


def test_percentage_half_cent_rounds_up():
    # 999.95 * 10% = 99.995 -> 100.00 (half away from zero, not banker's rounding)
    assert compute_commission(PERCENT_10, Decimal("999.95")) == Decimal("100.00")
    assert compute_commission(
        CommissionPolicy(commission_type="percentage", commission_value=Decimal("5")),
        Decimal("0.10"),
    ) == Decimal("0.01")


def test_flat_fee_is_not_scaled_by_basis():
    assert compute_commission(FLAT_50, Decimal("1.00")) == Decimal("50.00")
    assert compute_commission(FLAT_50, Decimal("250000.00")) == Decimal("50.00")


def test_zero_basis_earns_nothing():
    assert compute_commission(FLAT_50, Decimal("0")) == Decimal("0.00")
    assert compute_commission(PERCENT_10, Decimal("0")) == Decimal("0.00")


def test_scenario_coupon_five_percent():
    basis = commission_basis(
        source=SOURCE_COUPON,
        items=[],
        subtotal=Decimal("1000"),
        coupon_discount=Decimal("100"),
    )
    policy = CommissionPolicy(commission_type="percentage", commission_value=Decimal("5"))
    assert compute_commission(policy, basis) == Decimal("45.00")


def test_to_money_accepts_floats_and_strings():
    assert to_money(0.1 + 0.2) == Decimal("0.30")
    assert to_money("12.345") == Decimal("12.35")
    assert to_money(None) == Decimal("0.00")
