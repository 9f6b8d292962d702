"""
Order writer: header, then line items, then a pending shipment stub.

The three writes are independent statements. Only the header write can
abort a checkout; a missing set of line items is raised as an integrity
failure for an operator, and a missing shipment is logged and left for
the shipping workflow to create later.
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import OrderItemsWriteError, OrderPlacementError
from app.core.logging import get_structured_logger
from app.core.metrics import record_checkout_outcome, record_step_failure
from app.core.time import utcnow
from app.crud.orders import create_order, create_order_items, create_shipment
from app.models.orders import Order, Shipment


logger = get_structured_logger("checkout")


@dataclass
class WrittenOrder:
    order: Order
    shipment: Shipment | None


def generate_order_number(now: datetime | None = None) -> str:
    now = now or utcnow()
    return f"{settings.ORDER_NUMBER_PREFIX}-{now:%Y%m%d}-{secrets.token_hex(3).upper()}"


def _is_order_number_collision(exc: IntegrityError) -> bool:
    # SQLite names the column, Postgres names the constraint; both contain it.
    return "order_number" in str(exc.orig)


def _insert_header(db: Session, header: dict) -> Order:
    try:
        return create_order(db, payload=header)
    except IntegrityError as exc:
        db.rollback()
        if not _is_order_number_collision(exc):
            raise
        retry_number = generate_order_number()
        logger.warning(
            "checkout.order_number_collision",
            extra={"order_number": header.get("order_number"), "retry_order_number": retry_number},
        )
        header = {**header, "order_number": retry_number}
    return create_order(db, payload=header)


def write_order(db: Session, *, header: dict, items: list[dict]) -> WrittenOrder:
    try:
        order = _insert_header(db, header)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "checkout.order_failed",
            extra={"order_number": header.get("order_number"), "user_id": header.get("user_id")},
        )
        record_checkout_outcome("rejected")
        raise OrderPlacementError()

    try:
        create_order_items(db, order_id=order.id, items=items)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(
            "checkout.order_items_failed",
            extra={
                "order_id": order.id,
                "order_number": order.order_number,
                "item_count": len(items),
                "needs_reconciliation": True,
            },
        )
        record_checkout_outcome("items_failed")
        raise OrderItemsWriteError(order_id=order.id, order_number=order.order_number)

    shipment = None
    try:
        shipment = create_shipment(db, order_id=order.id, status="pending")
    except SQLAlchemyError:
        db.rollback()
        logger.warning(
            "checkout.shipment_failed",
            exc_info=True,
            extra={"order_id": order.id, "order_number": order.order_number, "step": "shipment"},
        )
        record_step_failure("shipment")

    logger.info(
        "checkout.order_created",
        extra={
            "order_id": order.id,
            "order_number": order.order_number,
            "item_count": len(items),
            "affiliate_id": order.affiliate_id,
        },
    )
    return WrittenOrder(order=order, shipment=shipment)
