from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Session

from app.models.referrals import ReferralState


def get_referral_state(db: Session, *, device_id: str) -> ReferralState | None:
    return db.query(ReferralState).filter(ReferralState.device_id == device_id).first()


def create_referral_state(
    db: Session,
    *,
    device_id: str,
    referral_code: str,
    captured_at: datetime,
    product_id: str | None,
) -> ReferralState:
    state = ReferralState(
        device_id=device_id,
        referral_code=referral_code,
        captured_at=captured_at,
        product_id=product_id,
    )
    db.add(state)
    db.commit()
    db.refresh(state)
    return state


def delete_referral_state(db: Session, *, device_id: str) -> int:
    deleted = (
        db.query(ReferralState)
        .filter(ReferralState.device_id == device_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return int(deleted or 0)
