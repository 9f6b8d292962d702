"""
Loyalty coin redemption for a placed order.

The wallet is debited with a single conditional UPDATE. When that does
not apply (disabled, or the balance no longer covers the redemption) we
fall back to read + compare-and-swap, clamping the balance at zero. A
ledger row is appended after whichever path succeeded.

Any failure here is reported back as a shopper-facing warning; the
order has already been placed.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.commission import to_money
from app.core.config import settings
from app.core.errors import AtomicDeductionUnavailable, LoyaltyDeductionError
from app.core.logging import get_structured_logger
from app.core.metrics import record_step_failure
from app.crud.loyalty import (
    compare_and_set_wallet,
    create_loyalty_transaction,
    deduct_wallet_atomic,
    get_wallet,
)
from app.models.loyalty import LoyaltyTransaction


logger = get_structured_logger("checkout")

LOYALTY_WARNING = (
    "Your order was placed, but your loyalty coin balance may not reflect "
    "this redemption yet."
)


@dataclass
class WalletDeduction:
    balance_before: int
    balance_after: int
    path: str
    # Coins requested but not covered by the wallet (fallback clamp).
    shortfall: int = 0


@dataclass
class LoyaltyResult:
    deduction: WalletDeduction | None = None
    transaction: LoyaltyTransaction | None = None
    warning: str | None = None


def _deduct_atomic(db: Session, *, user_id: int, coins: int) -> WalletDeduction:
    if not settings.LOYALTY_ATOMIC_DEDUCT_ENABLED:
        raise AtomicDeductionUnavailable("atomic deduction disabled")
    try:
        balance = deduct_wallet_atomic(db, user_id=user_id, coins=coins)
    except SQLAlchemyError as exc:
        db.rollback()
        raise AtomicDeductionUnavailable(str(exc)) from exc
    if balance is None:
        raise AtomicDeductionUnavailable("balance does not cover redemption")
    # Balance as of our own UPDATE; later redemptions do not leak in.
    after = int(balance)
    return WalletDeduction(balance_before=after + coins, balance_after=after, path="atomic")


def _deduct_fallback(db: Session, *, user_id: int, coins: int) -> WalletDeduction:
    attempts = settings.LOYALTY_CAS_MAX_ATTEMPTS
    for _ in range(attempts):
        wallet = get_wallet(db, user_id=user_id)
        if wallet is None:
            raise LoyaltyDeductionError(f"no loyalty wallet for user {user_id}")
        available = int(wallet.available_balance or 0)
        redeemed = int(wallet.total_redeemed or 0)
        new_balance = max(0, available - coins)
        if compare_and_set_wallet(
            db,
            wallet_id=wallet.id,
            expected_available=available,
            expected_redeemed=redeemed,
            new_available=new_balance,
            new_redeemed=redeemed + coins,
        ):
            return WalletDeduction(
                balance_before=available,
                balance_after=new_balance,
                path="fallback",
                shortfall=max(0, coins - available),
            )
        logger.info("loyalty.cas_conflict", extra={"user_id": user_id, "wallet_id": wallet.id})
    raise LoyaltyDeductionError(f"wallet for user {user_id} kept changing after {attempts} attempts")


def deduct_coins(db: Session, *, user_id: int, coins: int) -> WalletDeduction:
    try:
        return _deduct_atomic(db, user_id=user_id, coins=coins)
    except AtomicDeductionUnavailable as exc:
        logger.info(
            "loyalty.atomic_unavailable",
            extra={"user_id": user_id, "coins": coins, "reason": str(exc)},
        )
    try:
        return _deduct_fallback(db, user_id=user_id, coins=coins)
    except SQLAlchemyError as exc:
        db.rollback()
        raise LoyaltyDeductionError(str(exc)) from exc


def redeem_for_order(
    db: Session,
    *,
    user_id: int | None,
    order_id: int,
    order_number: str,
    coins: int,
    coins_value: Decimal | None = None,
) -> LoyaltyResult | None:
    if user_id is None or coins <= 0:
        return None

    if coins_value is None:
        coins_value = settings.LOYALTY_COIN_VALUE * coins
    coins_value = to_money(coins_value)

    result = LoyaltyResult()
    try:
        deduction = deduct_coins(db, user_id=user_id, coins=coins)
    except LoyaltyDeductionError:
        logger.warning(
            "loyalty.deduction_failed",
            exc_info=True,
            extra={"user_id": user_id, "order_id": order_id, "coins": coins, "step": "loyalty"},
        )
        record_step_failure("loyalty")
        result.warning = LOYALTY_WARNING
        return result

    result.deduction = deduction
    if deduction.shortfall:
        logger.warning(
            "loyalty.balance_clamped",
            extra={"user_id": user_id, "order_id": order_id, "coins": coins, "shortfall": deduction.shortfall},
        )

    description = f"Redeemed on order {order_number}"
    if deduction.shortfall:
        description += f" ({deduction.shortfall} coins not covered by balance)"
    try:
        result.transaction = create_loyalty_transaction(
            db,
            user_id=user_id,
            order_id=order_id,
            coins=coins,
            coins_value=coins_value,
            balance_before=deduction.balance_before,
            balance_after=deduction.balance_after,
            type="redeem",
            description=description,
        )
    except SQLAlchemyError:
        db.rollback()
        logger.warning(
            "loyalty.transaction_failed",
            exc_info=True,
            extra={"user_id": user_id, "order_id": order_id, "coins": coins, "step": "loyalty"},
        )
        record_step_failure("loyalty")
        result.warning = LOYALTY_WARNING
        return result

    logger.info(
        "loyalty.redeemed",
        extra={
            "user_id": user_id,
            "order_id": order_id,
            "coins": coins,
            "path": deduction.path,
            "balance_after": deduction.balance_after,
        },
    )
    return result
