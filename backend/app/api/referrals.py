from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.api.dependencies import require_device_id
from app.core.db import get_db
from app.core.referral_state import CachedReferral, ReferralStateStore
from app.schemas.referrals import ReferralCapture, ReferralStateRead


router = APIRouter(prefix="/referrals", tags=["referrals"])


def _serialize(referral: CachedReferral) -> ReferralStateRead:
    return ReferralStateRead(
        code=referral.code,
        captured_at=referral.captured_at,
        product_id=referral.product_id,
    )


@router.post("/capture", response_model=ReferralStateRead)
def capture_referral(
    payload: ReferralCapture,
    db: Session = Depends(get_db),
    device_id: str = Depends(require_device_id),
):
    referral = ReferralStateStore(db, device_id).capture(payload.code, product_id=payload.product_id)
    if not referral:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Invalid referral code")
    return _serialize(referral)


@router.get("/current", response_model=ReferralStateRead)
def get_current_referral(
    db: Session = Depends(get_db),
    device_id: str = Depends(require_device_id),
):
    referral = ReferralStateStore(db, device_id).get()
    if not referral:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No referral captured")
    return _serialize(referral)


@router.delete("/current", status_code=status.HTTP_204_NO_CONTENT)
def clear_current_referral(
    db: Session = Depends(get_db),
    device_id: str = Depends(require_device_id),
):
    ReferralStateStore(db, device_id).clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
