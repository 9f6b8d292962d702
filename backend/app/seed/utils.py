from decimal import Decimal

from sqlalchemy.orm import Session

from app.crud.affiliates import (
    create_affiliate,
    create_coupon_binding,
    get_affiliate_by_code,
    normalize_coupon_code,
)
from app.crud.loyalty import create_wallet, get_wallet
from app.crud.shoppers import create_shopper, get_shopper_by_email
from app.models.affiliates import Affiliate, AffiliateCoupon
from app.models.loyalty import LoyaltyWallet
from app.models.shoppers import ShopperProfile


def get_or_create_affiliate(
    db: Session,
    referral_code: str,
    name: str,
    *,
    commission_type: str = "percentage",
    commission_value: Decimal = Decimal("5"),
) -> Affiliate:
    affiliate = get_affiliate_by_code(db, code=referral_code)
    if affiliate:
        return affiliate
    return create_affiliate(
        db,
        name=name,
        referral_code=referral_code,
        commission_type=commission_type,
        commission_value=commission_value,
    )


def get_or_create_coupon_binding(db: Session, affiliate: Affiliate, coupon_code: str) -> AffiliateCoupon:
    binding = (
        db.query(AffiliateCoupon)
        .filter(AffiliateCoupon.coupon_code == normalize_coupon_code(coupon_code))
        .first()
    )
    if binding:
        return binding
    return create_coupon_binding(db, affiliate_id=affiliate.id, coupon_code=coupon_code)


def get_or_create_shopper(
    db: Session,
    email: str,
    full_name: str,
    *,
    affiliate: Affiliate | None = None,
) -> ShopperProfile:
    shopper = get_shopper_by_email(db, email=email)
    if shopper:
        return shopper
    return create_shopper(
        db,
        email=email,
        full_name=full_name,
        affiliate_id=affiliate.id if affiliate else None,
    )


def get_or_create_wallet(db: Session, shopper: ShopperProfile, coins: int) -> LoyaltyWallet:
    wallet = get_wallet(db, user_id=shopper.id)
    if wallet:
        return wallet
    return create_wallet(db, user_id=shopper.id, available_balance=coins, total_earned=coins)
