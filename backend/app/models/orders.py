from sqlalchemy import (
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.core.db import Base
from app.models.mixins import TimestampMixin


class Order(TimestampMixin, Base):
    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("order_number", name="uq_orders_order_number"),
        Index("ix_orders_user_status", "user_id", "status"),
        Index("ix_orders_affiliate", "affiliate_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_number = Column(String, nullable=False)
    # Null for guest checkout.
    user_id = Column(Integer, ForeignKey("shopper_profiles.id", ondelete="SET NULL"), nullable=True)

    customer_name = Column(String, nullable=False)
    customer_email = Column(String, nullable=True)
    customer_phone = Column(String, nullable=False)
    shipping_address_line1 = Column(String, nullable=False)
    shipping_address_line2 = Column(String, nullable=True)
    shipping_city = Column(String, nullable=False)
    shipping_state = Column(String, nullable=False)
    shipping_zip = Column(String, nullable=False)
    shipping_country = Column(String, nullable=False, default="India")

    subtotal = Column(Numeric(12, 2), nullable=False)
    shipping_cost = Column(Numeric(12, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(12, 2), nullable=False, default=0)
    coupon_discount = Column(Numeric(12, 2), nullable=False, default=0)
    wallet_amount_used = Column(Numeric(12, 2), nullable=False, default=0)
    loyalty_coins_used = Column(Integer, nullable=False, default=0)
    loyalty_coins_value = Column(Numeric(12, 2), nullable=False, default=0)
    coins_to_earn = Column(Integer, nullable=False, default=0)
    total_amount = Column(Numeric(12, 2), nullable=False)

    payment_method = Column(String, nullable=False, default="cod")
    payment_status = Column(String, nullable=False, default="pending")
    status = Column(String, nullable=False, default="pending")
    coupon_code = Column(String, nullable=True)

    affiliate_id = Column(Integer, ForeignKey("affiliates.id", ondelete="SET NULL"), nullable=True)
    attribution_source = Column(String, nullable=True)
    commission_amount = Column(Numeric(12, 2), nullable=True)
    commission_status = Column(String, nullable=True)

    items = relationship("OrderItem", back_populates="order", lazy="selectin")


class OrderItem(TimestampMixin, Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String, nullable=False, index=True)
    product_name = Column(String, nullable=False)
    product_image = Column(String, nullable=True)
    sku = Column(String, nullable=True)
    size = Column(String, nullable=True)
    color = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)

    order = relationship("Order", back_populates="items")


class Shipment(TimestampMixin, Base):
    __tablename__ = "shipments"
    __table_args__ = (
        UniqueConstraint("order_id", name="uq_shipments_order"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    status = Column(String, nullable=False, default="pending")
    carrier = Column(String, nullable=True)
    tracking_number = Column(String, nullable=True)
