from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)

from app.core.db import Base
from app.models.mixins import TimestampMixin


class LoyaltyWallet(TimestampMixin, Base):
    __tablename__ = "loyalty_wallets"
    __table_args__ = (
        UniqueConstraint("user_id", name="uq_loyalty_wallets_user"),
        CheckConstraint("available_balance >= 0", name="ck_loyalty_wallets_available_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("shopper_profiles.id", ondelete="CASCADE"), nullable=False)
    available_balance = Column(Integer, nullable=False, default=0)
    total_earned = Column(Integer, nullable=False, default=0)
    total_redeemed = Column(Integer, nullable=False, default=0)


class LoyaltyTransaction(TimestampMixin, Base):
    __tablename__ = "loyalty_transactions"
    __table_args__ = (
        Index("ix_loyalty_transactions_user_created", "user_id", "created_at"),
        Index("ix_loyalty_transactions_order", "order_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("shopper_profiles.id", ondelete="CASCADE"), nullable=False)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="SET NULL"), nullable=True)
    type = Column(String, nullable=False, default="redeem")
    coins = Column(Integer, nullable=False)
    coins_value = Column(Numeric(12, 2), nullable=False, default=0)
    balance_before = Column(Integer, nullable=False)
    balance_after = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
