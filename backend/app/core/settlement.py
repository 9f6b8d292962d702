"""
Commission settlement for an attributed order.

Three independent writes, each allowed to fail on its own:

1. commission ledger row (status ``pending``)
2. affiliate-order audit row
3. additive update of the affiliate's running totals

A failed step is logged and counted; it never rolls back the order or
the other steps. Gaps are reconciled operationally.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.attribution import Attribution
from app.core.commission import to_money
from app.core.logging import get_structured_logger
from app.core.metrics import record_commission, record_step_failure
from app.crud.affiliates import create_affiliate_order, create_commission_entry, increment_affiliate_totals
from app.models.affiliates import AffiliateCommission, AffiliateOrder
from app.models.orders import Order


logger = get_structured_logger("checkout")


@dataclass
class SettlementResult:
    commission: AffiliateCommission | None = None
    affiliate_order: AffiliateOrder | None = None
    totals_updated: bool = False
    failed_steps: list[str] = field(default_factory=list)


def _step_failed(db: Session, result: SettlementResult, step: str, *, order_id: int, affiliate_id: int) -> None:
    db.rollback()
    result.failed_steps.append(step)
    record_step_failure(step)
    logger.warning(
        f"settlement.{step}_failed",
        exc_info=True,
        extra={"order_id": order_id, "affiliate_id": affiliate_id, "step": step},
    )


def settle_commission(
    db: Session,
    *,
    attribution: Attribution,
    order: Order,
    commission_amount: Decimal,
    commission_basis: Decimal,
) -> SettlementResult | None:
    commission_amount = to_money(commission_amount)
    if commission_amount <= 0:
        return None

    result = SettlementResult()
    # Capture plain values up front; a rollback below expires ORM state.
    affiliate_id = attribution.affiliate_id
    order_id = order.id
    order_total = to_money(order.total_amount)
    user_id = order.user_id
    policy = attribution.policy

    try:
        result.commission = create_commission_entry(
            db,
            affiliate_id=affiliate_id,
            order_id=order_id,
            commission_type=policy.commission_type,
            commission_rate=policy.commission_value,
            order_amount=to_money(commission_basis),
            commission_amount=commission_amount,
            status="pending",
        )
    except SQLAlchemyError:
        _step_failed(db, result, "commission", order_id=order_id, affiliate_id=affiliate_id)

    try:
        result.affiliate_order = create_affiliate_order(
            db,
            affiliate_id=affiliate_id,
            order_id=order_id,
            user_id=user_id,
            product_id=attribution.product_id,
            attribution_source=attribution.source,
            order_total=order_total,
            commission_amount=commission_amount,
            commission_status="pending",
        )
    except SQLAlchemyError:
        _step_failed(db, result, "affiliate_order", order_id=order_id, affiliate_id=affiliate_id)

    try:
        affiliate = increment_affiliate_totals(
            db,
            affiliate_id=affiliate_id,
            commission=commission_amount,
            order_total=order_total,
        )
        result.totals_updated = affiliate is not None
        if affiliate is None:
            # Row vanished between attribution and settlement.
            result.failed_steps.append("affiliate_totals")
            record_step_failure("affiliate_totals")
            logger.warning(
                "settlement.affiliate_totals_failed",
                extra={"order_id": order_id, "affiliate_id": affiliate_id, "step": "affiliate_totals"},
            )
    except SQLAlchemyError:
        _step_failed(db, result, "affiliate_totals", order_id=order_id, affiliate_id=affiliate_id)

    # Only count commissions that left a trace somewhere.
    if result.commission or result.affiliate_order or result.totals_updated:
        record_commission(attribution.source)
    logger.info(
        "settlement.completed",
        extra={
            "order_id": order_id,
            "affiliate_id": affiliate_id,
            "source": attribution.source,
            "commission_amount": str(commission_amount),
            "failed_steps": result.failed_steps or None,
        },
    )
    return result
