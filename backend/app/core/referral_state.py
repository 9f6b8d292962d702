"""
Per-device referral cache.

A referral link click stores ``(code, captured_at, product_id)`` for the
device. The first unexpired referral wins; later clicks do not replace
it. Checkout reads it once and clears it so one click can attribute at
most one order.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.logging import get_structured_logger
from app.core.time import utcnow
from app.crud.referrals import create_referral_state, delete_referral_state, get_referral_state


logger = get_structured_logger("checkout")


@dataclass(frozen=True)
class CachedReferral:
    code: str
    captured_at: datetime
    product_id: str | None = None


class ReferralStateStore:
    def __init__(self, db: Session, device_id: str, *, expiry_days: int | None = None):
        self.db = db
        self.device_id = device_id
        self.expiry = timedelta(days=expiry_days or settings.REFERRAL_EXPIRY_DAYS)

    def _is_expired(self, captured_at: datetime, now: datetime) -> bool:
        return now - captured_at >= self.expiry

    def get(self, *, now: datetime | None = None) -> CachedReferral | None:
        state = get_referral_state(self.db, device_id=self.device_id)
        if not state:
            return None
        now = now or utcnow()
        if self._is_expired(state.captured_at, now):
            logger.info(
                "referral.expired",
                extra={"device_id": self.device_id, "referral_code": state.referral_code},
            )
            self.clear()
            return None
        return CachedReferral(
            code=state.referral_code,
            captured_at=state.captured_at,
            product_id=state.product_id,
        )

    def capture(
        self,
        code: str | None,
        *,
        product_id: str | None = None,
        now: datetime | None = None,
    ) -> CachedReferral | None:
        code = (code or "").strip()
        existing = self.get(now=now)
        if existing or not code:
            return existing
        try:
            state = create_referral_state(
                self.db,
                device_id=self.device_id,
                referral_code=code,
                captured_at=now or utcnow(),
                product_id=(product_id or "").strip() or None,
            )
        except IntegrityError:
            # Another request captured first; that one wins.
            self.db.rollback()
            return self.get(now=now)
        logger.info(
            "referral.captured",
            extra={"device_id": self.device_id, "referral_code": code, "product_id": state.product_id},
        )
        return CachedReferral(code=state.referral_code, captured_at=state.captured_at, product_id=state.product_id)

    def clear(self) -> None:
        delete_referral_state(self.db, device_id=self.device_id)
