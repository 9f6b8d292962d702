from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)

from app.core.db import Base
from app.models.mixins import TimestampMixin


class Affiliate(TimestampMixin, Base):
    __tablename__ = "affiliates"
    __table_args__ = (
        UniqueConstraint("referral_code", name="uq_affiliates_referral_code"),
        Index("ix_affiliates_status", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    referral_code = Column(String, nullable=False)
    commission_type = Column(String, nullable=False, default="percentage")
    commission_value = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String, nullable=False, default="active")
    # Running aggregates, only ever incremented by checkout settlement.
    wallet_balance = Column(Numeric(12, 2), nullable=False, default=0)
    total_orders = Column(Integer, nullable=False, default=0)
    total_sales = Column(Numeric(12, 2), nullable=False, default=0)
    total_commission = Column(Numeric(12, 2), nullable=False, default=0)


class AffiliateCoupon(TimestampMixin, Base):
    __tablename__ = "affiliate_coupons"
    __table_args__ = (
        UniqueConstraint("coupon_code", name="uq_affiliate_coupons_code"),
        Index("ix_affiliate_coupons_affiliate", "affiliate_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    affiliate_id = Column(Integer, ForeignKey("affiliates.id", ondelete="CASCADE"), nullable=False)
    coupon_code = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)


class AffiliateCommission(TimestampMixin, Base):
    __tablename__ = "affiliate_commissions"
    __table_args__ = (
        UniqueConstraint("order_id", name="uq_affiliate_commissions_order"),
        Index("ix_affiliate_commissions_affiliate", "affiliate_id"),
        Index("ix_affiliate_commissions_status", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    affiliate_id = Column(Integer, ForeignKey("affiliates.id", ondelete="RESTRICT"), nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    commission_type = Column(String, nullable=False)
    commission_rate = Column(Numeric(10, 2), nullable=False)
    order_amount = Column(Numeric(12, 2), nullable=False)
    commission_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String, nullable=False, default="pending")


class AffiliateOrder(TimestampMixin, Base):
    __tablename__ = "affiliate_orders"
    __table_args__ = (
        Index("ix_affiliate_orders_affiliate", "affiliate_id"),
        Index("ix_affiliate_orders_order", "order_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    affiliate_id = Column(Integer, ForeignKey("affiliates.id", ondelete="RESTRICT"), nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("shopper_profiles.id", ondelete="SET NULL"), nullable=True)
    product_id = Column(String, nullable=True)
    attribution_source = Column(String, nullable=False)
    order_total = Column(Numeric(12, 2), nullable=False)
    commission_amount = Column(Numeric(12, 2), nullable=False)
    commission_status = Column(String, nullable=False, default="pending")
