from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.dependencies import get_referral_store, get_shopper_id
from app.core.checkout import place_order
from app.core.config import settings
from app.core.db import get_db
from app.core.referral_state import ReferralStateStore
from app.schemas.checkout import CheckoutErrorResponse, CheckoutRequest, CheckoutResponse


router = APIRouter(prefix="/checkout", tags=["checkout"])


@router.post(
    "",
    response_model=CheckoutResponse,
    status_code=status.HTTP_201_CREATED,
    responses={500: {"model": CheckoutErrorResponse}},
)
def checkout(
    payload: CheckoutRequest,
    db: Session = Depends(get_db),
    shopper_id: int | None = Depends(get_shopper_id),
    referral_store: ReferralStateStore | None = Depends(get_referral_store),
):
    # OrderPlacementError / OrderItemsWriteError are rendered by the app-level handler.
    result = place_order(db, payload=payload, shopper_id=shopper_id, referral_store=referral_store)
    return CheckoutResponse(
        order_id=result.order_id,
        order_number=result.order_number,
        currency=settings.CURRENCY,
        attribution_source=result.attribution_source,
        affiliate_id=result.affiliate_id,
        commission_amount=result.commission_amount,
        warnings=result.warnings,
    )
