from decimal import Decimal

from tests.factories import make_affiliate, make_coupon, make_shopper, setup_db

from app.core.attribution import (
    SOURCE_COUPON,
    SOURCE_LINK,
    SOURCE_PROFILE,
    AttributionInput,
    resolve_attribution,
)


def test_no_sources_means_no_attribution(tmp_path):
    SessionLocal = setup_db(tmp_path)
    with SessionLocal() as db:
        shopper = make_shopper(db)
        result = resolve_attribution(db, AttributionInput(shopper_id=shopper.id))
        assert result is None


def test_coupon_wins_over_profile_and_link(tmp_path):
    SessionLocal = setup_db(tmp_path)
    with SessionLocal() as db:
        coupon_affiliate = make_affiliate(db, code="COUPONAFF")
        profile_affiliate = make_affiliate(db, code="PROFILEAFF")
        link_affiliate = make_affiliate(db, code="LINKAFF")
        make_coupon(db, affiliate=coupon_affiliate, code="FEST100")
        shopper = make_shopper(db, affiliate=profile_affiliate)

        result = resolve_attribution(
            db,
            AttributionInput(
                coupon_code="FEST100",
                shopper_id=shopper.id,
                referral_code=link_affiliate.referral_code,
            ),
        )
        assert result is not None
        assert result.source == SOURCE_COUPON
        assert result.affiliate_id == coupon_affiliate.id
        assert result.product_id is None


def test_coupon_lookup_ignores_case_and_whitespace(tmp_path):
    SessionLocal = setup_db(tmp_path)
    with SessionLocal() as db:
        affiliate = make_affiliate(db)
        make_coupon(db, affiliate=affiliate, code="FEST100")
        result = resolve_attribution(db, AttributionInput(coupon_code="  fest100 "))
        assert result is not None
        assert result.source == SOURCE_COUPON


def test_inactive_coupon_affiliate_falls_through_to_profile(tmp_path):
    SessionLocal = setup_db(tmp_path)
    with SessionLocal() as db:
        inactive = make_affiliate(db, status="inactive")
        profile_affiliate = make_affiliate(db)
        make_coupon(db, affiliate=inactive, code="OLDPARTNER")
        shopper = make_shopper(db, affiliate=profile_affiliate)

        result = resolve_attribution(db, AttributionInput(coupon_code="OLDPARTNER", shopper_id=shopper.id))
        assert result is not None
        assert result.source == SOURCE_PROFILE
        assert result.affiliate_id == profile_affiliate.id


def test_disabled_coupon_binding_is_ignored(tmp_path):
    SessionLocal = setup_db(tmp_path)
    with SessionLocal() as db:
        affiliate = make_affiliate(db)
        make_coupon(db, affiliate=affiliate, code="PAUSED", is_active=False)
        assert resolve_attribution(db, AttributionInput(coupon_code="PAUSED")) is None


def test_profile_wins_over_link(tmp_path):
    SessionLocal = setup_db(tmp_path)
    with SessionLocal() as db:
        profile_affiliate = make_affiliate(db)
        link_affiliate = make_affiliate(db)
        shopper = make_shopper(db, affiliate=profile_affiliate)
        result = resolve_attribution(
            db,
            AttributionInput(shopper_id=shopper.id, referral_code=link_affiliate.referral_code),
        )
        assert result.source == SOURCE_PROFILE
        assert result.affiliate_id == profile_affiliate.id


def test_link_attribution_carries_product_scope(tmp_path):
    SessionLocal = setup_db(tmp_path)
    with SessionLocal() as db:
        affiliate = make_affiliate(db, code="LINK10", commission_type="flat", commission_value="50")
        result = resolve_attribution(
            db,
            AttributionInput(referral_code="LINK10", referral_product_id="prod-a"),
        )
        assert result.source == SOURCE_LINK
        assert result.affiliate_id == affiliate.id
        assert result.product_id == "prod-a"
        assert result.policy.commission_type == "flat"
        assert result.policy.commission_value == Decimal("50")


def test_unknown_or_inactive_referral_code_is_not_an_error(tmp_path):
    SessionLocal = setup_db(tmp_path)
    with SessionLocal() as db:
        make_affiliate(db, code="SLEEPY", status="inactive")
        assert resolve_attribution(db, AttributionInput(referral_code="NOPE")) is None
        assert resolve_attribution(db, AttributionInput(referral_code="SLEEPY")) is None


def test_resolvers_short_circuit_on_first_match(tmp_path):
    SessionLocal = setup_db(tmp_path)
    calls = []

    def first(_db, _inputs):
        calls.append("first")
        return "hit"

    def second(_db, _inputs):
        calls.append("second")
        return "other"

    with SessionLocal() as db:
        assert resolve_attribution(db, AttributionInput(), resolvers=(first, second)) == "hit"
    assert calls == ["first"]
