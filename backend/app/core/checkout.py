"""
Checkout: attribution -> commission -> order write -> settlement ->
loyalty -> referral clear.

This is a saga of independent writes, not a transaction. Only two
failures escape:

* ``OrderPlacementError``  - the header was not written, nothing happened
* ``OrderItemsWriteError`` - the header exists without items

Shipment, commission settlement and loyalty failures are logged and the
order still counts as placed. Loyalty failures also add a warning for
the shopper.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.attribution import Attribution, AttributionInput, resolve_attribution
from app.core.commission import ZERO, commission_basis, compute_commission, to_money
from app.core.config import settings
from app.core.errors import OrderItemsWriteError
from app.core.logging import get_structured_logger
from app.core.loyalty import redeem_for_order
from app.core.metrics import record_checkout_outcome, record_step_failure
from app.core.orders import generate_order_number, write_order
from app.core.referral_state import ReferralStateStore
from app.core.settlement import settle_commission
from app.schemas.checkout import CheckoutItem, CheckoutRequest


logger = get_structured_logger("checkout")


@dataclass
class CheckoutResult:
    order_id: int
    order_number: str
    attribution_source: str | None = None
    affiliate_id: int | None = None
    commission_amount: Decimal = ZERO
    warnings: list[str] = field(default_factory=list)


def _item_row(item: CheckoutItem) -> dict:
    return {
        "product_id": item.product_id,
        "product_name": item.product_name,
        "product_image": item.product_image,
        "sku": item.sku,
        "size": item.size,
        "color": item.color,
        "quantity": item.quantity,
        "unit_price": to_money(item.unit_price),
        "total_price": to_money(item.total_price),
    }


def build_order_header(
    payload: CheckoutRequest,
    *,
    shopper_id: int | None,
    attribution: Attribution | None,
    commission: Decimal,
    order_number: str | None = None,
) -> dict:
    return {
        "order_number": order_number or generate_order_number(),
        "user_id": shopper_id,
        "customer_name": payload.customer_name,
        "customer_email": payload.customer_email,
        "customer_phone": payload.customer_phone,
        "shipping_address_line1": payload.shipping_address_line1,
        "shipping_address_line2": payload.shipping_address_line2,
        "shipping_city": payload.shipping_city,
        "shipping_state": payload.shipping_state,
        "shipping_zip": payload.shipping_zip,
        "shipping_country": payload.shipping_country or settings.DEFAULT_SHIPPING_COUNTRY,
        "subtotal": to_money(payload.subtotal),
        "shipping_cost": to_money(payload.shipping_cost),
        "discount_amount": to_money(payload.discount_amount),
        "coupon_discount": to_money(payload.coupon_discount),
        "wallet_amount_used": to_money(payload.wallet_amount_used),
        "loyalty_coins_used": payload.loyalty_coins_used,
        "loyalty_coins_value": to_money(payload.loyalty_coins_value),
        "coins_to_earn": payload.coins_to_earn,
        "total_amount": to_money(payload.total_amount),
        "coupon_code": payload.coupon_code,
        "payment_method": payload.payment_method,
        "payment_status": "pending",
        "status": "pending",
        "affiliate_id": attribution.affiliate_id if attribution else None,
        "attribution_source": attribution.source if attribution else None,
        "commission_amount": commission if attribution else None,
        "commission_status": "pending" if commission > 0 else None,
    }


def _clear_referral(store: ReferralStateStore | None, *, order_id: int) -> None:
    if store is None:
        return
    try:
        store.clear()
    except SQLAlchemyError:
        store.db.rollback()
        record_step_failure("referral_clear")
        logger.error(
            "checkout.referral_clear_failed",
            exc_info=True,
            extra={"order_id": order_id, "device_id": store.device_id, "step": "referral_clear"},
        )


def place_order(
    db: Session,
    *,
    payload: CheckoutRequest,
    shopper_id: int | None = None,
    referral_store: ReferralStateStore | None = None,
) -> CheckoutResult:
    cached = referral_store.get() if referral_store else None
    attribution = resolve_attribution(
        db,
        AttributionInput(
            coupon_code=payload.coupon_code,
            shopper_id=shopper_id,
            referral_code=cached.code if cached else None,
            referral_product_id=cached.product_id if cached else None,
        ),
    )

    basis = ZERO
    commission = ZERO
    if attribution:
        basis = commission_basis(
            source=attribution.source,
            items=payload.items,
            subtotal=payload.subtotal,
            coupon_discount=payload.coupon_discount,
            product_id=attribution.product_id,
        )
        commission = compute_commission(attribution.policy, basis)

    header = build_order_header(payload, shopper_id=shopper_id, attribution=attribution, commission=commission)
    items = [_item_row(item) for item in payload.items]

    # A rejected header leaves the referral in place; nothing was ordered.
    try:
        written = write_order(db, header=header, items=items)
    except OrderItemsWriteError as exc:
        _clear_referral(referral_store, order_id=exc.order_id)
        raise

    order = written.order
    order_id = order.id
    order_number = order.order_number
    result = CheckoutResult(
        order_id=order_id,
        order_number=order_number,
        attribution_source=attribution.source if attribution else None,
        affiliate_id=attribution.affiliate_id if attribution else None,
        commission_amount=commission,
    )

    try:
        if attribution and commission > 0:
            settle_commission(
                db,
                attribution=attribution,
                order=order,
                commission_amount=commission,
                commission_basis=basis,
            )

        loyalty = redeem_for_order(
            db,
            user_id=shopper_id,
            order_id=order_id,
            order_number=order_number,
            coins=payload.loyalty_coins_used,
            coins_value=payload.loyalty_coins_value or None,
        )
        if loyalty and loyalty.warning:
            result.warnings.append(loyalty.warning)
    finally:
        _clear_referral(referral_store, order_id=order_id)

    record_checkout_outcome("placed")
    logger.info(
        "checkout.completed",
        extra={
            "order_id": order_id,
            "order_number": order_number,
            "shopper_id": shopper_id,
            "attribution_source": result.attribution_source,
            "affiliate_id": result.affiliate_id,
            "commission_amount": str(commission),
            "warnings": len(result.warnings),
        },
    )
    return result
