from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import get_db
from app.core.referral_state import ReferralStateStore
from app.crud.shoppers import get_shopper


def get_device_id(request: Request) -> str | None:
    value = request.headers.get(settings.DEVICE_HEADER_NAME)
    if value is None:
        return None
    return value.strip() or None


def require_device_id(device_id: str | None = Depends(get_device_id)) -> str:
    if not device_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{settings.DEVICE_HEADER_NAME} header is required",
        )
    return device_id


def get_shopper_id(request: Request, db: Session = Depends(get_db)) -> int | None:
    raw = request.headers.get(settings.SHOPPER_HEADER_NAME)
    if raw is None or not raw.strip():
        return None
    try:
        shopper_id = int(raw)
    except (TypeError, ValueError):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid shopper id")
    if not get_shopper(db, shopper_id=shopper_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shopper not found")
    return shopper_id


def get_referral_store(
    db: Session = Depends(get_db),
    device_id: str | None = Depends(get_device_id),
) -> ReferralStateStore | None:
    if not device_id:
        return None
    return ReferralStateStore(db, device_id)
