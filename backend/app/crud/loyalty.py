from __future__ import annotations

from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.orm import Session

from app.models.loyalty import LoyaltyTransaction, LoyaltyWallet


def create_wallet(
    db: Session,
    *,
    user_id: int,
    available_balance: int = 0,
    total_earned: int = 0,
    total_redeemed: int = 0,
) -> LoyaltyWallet:
    wallet = LoyaltyWallet(
        user_id=user_id,
        available_balance=available_balance,
        total_earned=total_earned,
        total_redeemed=total_redeemed,
    )
    db.add(wallet)
    db.commit()
    db.refresh(wallet)
    return wallet


def get_wallet(db: Session, *, user_id: int) -> LoyaltyWallet | None:
    return db.query(LoyaltyWallet).filter(LoyaltyWallet.user_id == user_id).first()


def deduct_wallet_atomic(db: Session, *, user_id: int, coins: int) -> int | None:
    """Deduct in one conditional UPDATE and return the resulting balance.

    None when the balance does not cover it. The balance comes from the
    statement's RETURNING clause, not a follow-up read.
    """
    stmt = (
        update(LoyaltyWallet)
        .where(
            LoyaltyWallet.user_id == user_id,
            LoyaltyWallet.available_balance >= coins,
        )
        .values(
            available_balance=LoyaltyWallet.available_balance - coins,
            total_redeemed=LoyaltyWallet.total_redeemed + coins,
        )
        .returning(LoyaltyWallet.available_balance)
        .execution_options(synchronize_session=False)
    )
    balance = db.execute(stmt).scalar_one_or_none()
    db.commit()
    return balance


def compare_and_set_wallet(
    db: Session,
    *,
    wallet_id: int,
    expected_available: int,
    expected_redeemed: int,
    new_available: int,
    new_redeemed: int,
) -> bool:
    """Write the new balances only if nobody changed the row since we read it."""
    updated = (
        db.query(LoyaltyWallet)
        .filter(
            LoyaltyWallet.id == wallet_id,
            LoyaltyWallet.available_balance == expected_available,
            LoyaltyWallet.total_redeemed == expected_redeemed,
        )
        .update(
            {
                LoyaltyWallet.available_balance: new_available,
                LoyaltyWallet.total_redeemed: new_redeemed,
            },
            synchronize_session=False,
        )
    )
    db.commit()
    return bool(updated)


def create_loyalty_transaction(
    db: Session,
    *,
    user_id: int,
    order_id: int | None,
    coins: int,
    coins_value: Decimal,
    balance_before: int,
    balance_after: int,
    type: str = "redeem",
    description: str | None = None,
) -> LoyaltyTransaction:
    txn = LoyaltyTransaction(
        user_id=user_id,
        order_id=order_id,
        type=type,
        coins=coins,
        coins_value=coins_value,
        balance_before=balance_before,
        balance_after=balance_after,
        description=description,
    )
    db.add(txn)
    db.commit()
    db.refresh(txn)
    return txn


def list_transactions_for_user(db: Session, *, user_id: int) -> list[LoyaltyTransaction]:
    return (
        db.query(LoyaltyTransaction)
        .filter(LoyaltyTransaction.user_id == user_id)
        .order_by(LoyaltyTransaction.created_at.desc())
        .all()
    )
