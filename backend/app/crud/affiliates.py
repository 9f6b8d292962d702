from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Session

from app.models.affiliates import Affiliate, AffiliateCommission, AffiliateCoupon, AffiliateOrder


def normalize_coupon_code(code: str | None) -> str | None:
    if not code:
        return None
    return code.strip().upper() or None


def create_affiliate(
    db: Session,
    *,
    name: str,
    referral_code: str,
    commission_type: str,
    commission_value: Decimal | float,
    status: str = "active",
    email: str | None = None,
) -> Affiliate:
    affiliate = Affiliate(
        name=name,
        email=email,
        referral_code=referral_code,
        commission_type=commission_type,
        commission_value=commission_value,
        status=status,
    )
    db.add(affiliate)
    db.commit()
    db.refresh(affiliate)
    return affiliate


def get_affiliate(db: Session, *, affiliate_id: int) -> Affiliate | None:
    return db.query(Affiliate).filter(Affiliate.id == affiliate_id).first()


def get_affiliate_by_code(db: Session, *, code: str) -> Affiliate | None:
    return db.query(Affiliate).filter(Affiliate.referral_code == code).first()


def create_coupon_binding(
    db: Session,
    *,
    affiliate_id: int,
    coupon_code: str,
    is_active: bool = True,
) -> AffiliateCoupon:
    binding = AffiliateCoupon(
        affiliate_id=affiliate_id,
        coupon_code=normalize_coupon_code(coupon_code),
        is_active=is_active,
    )
    db.add(binding)
    db.commit()
    db.refresh(binding)
    return binding


def get_active_coupon_binding(db: Session, *, coupon_code: str | None) -> AffiliateCoupon | None:
    code = normalize_coupon_code(coupon_code)
    if not code:
        return None
    return (
        db.query(AffiliateCoupon)
        .filter(AffiliateCoupon.coupon_code == code, AffiliateCoupon.is_active.is_(True))
        .first()
    )


def create_commission_entry(
    db: Session,
    *,
    affiliate_id: int,
    order_id: int,
    commission_type: str,
    commission_rate: Decimal,
    order_amount: Decimal,
    commission_amount: Decimal,
    status: str = "pending",
) -> AffiliateCommission:
    entry = AffiliateCommission(
        affiliate_id=affiliate_id,
        order_id=order_id,
        commission_type=commission_type,
        commission_rate=commission_rate,
        order_amount=order_amount,
        commission_amount=commission_amount,
        status=status,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry


def create_affiliate_order(
    db: Session,
    *,
    affiliate_id: int,
    order_id: int,
    user_id: int | None,
    product_id: str | None,
    attribution_source: str,
    order_total: Decimal,
    commission_amount: Decimal,
    commission_status: str = "pending",
) -> AffiliateOrder:
    record = AffiliateOrder(
        affiliate_id=affiliate_id,
        order_id=order_id,
        user_id=user_id,
        product_id=product_id,
        attribution_source=attribution_source,
        order_total=order_total,
        commission_amount=commission_amount,
        commission_status=commission_status,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def increment_affiliate_totals(
    db: Session,
    *,
    affiliate_id: int,
    commission: Decimal,
    order_total: Decimal,
) -> Affiliate | None:
    # Single UPDATE so concurrent orders for one affiliate cannot lose increments.
    updated = (
        db.query(Affiliate)
        .filter(Affiliate.id == affiliate_id)
        .update(
            {
                Affiliate.wallet_balance: Affiliate.wallet_balance + commission,
                Affiliate.total_orders: Affiliate.total_orders + 1,
                Affiliate.total_sales: Affiliate.total_sales + order_total,
                Affiliate.total_commission: Affiliate.total_commission + commission,
            },
            synchronize_session=False,
        )
    )
    db.commit()
    if not updated:
        return None
    return get_affiliate(db, affiliate_id=affiliate_id)


def list_commissions_for_order(db: Session, *, order_id: int) -> list[AffiliateCommission]:
    return (
        db.query(AffiliateCommission)
        .filter(AffiliateCommission.order_id == order_id)
        .order_by(AffiliateCommission.created_at.desc())
        .all()
    )


def list_affiliate_orders_for_order(db: Session, *, order_id: int) -> list[AffiliateOrder]:
    return (
        db.query(AffiliateOrder)
        .filter(AffiliateOrder.order_id == order_id)
        .order_by(AffiliateOrder.created_at.desc())
        .all()
    )
