from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint

from app.core.db import Base
from app.core.time import utcnow
from app.models.mixins import TimestampMixin


class ReferralState(TimestampMixin, Base):
    """Referral captured on a device, waiting to attribute one order."""

    __tablename__ = "referral_states"
    __table_args__ = (
        UniqueConstraint("device_id", name="uq_referral_states_device"),
    )

    id = Column(Integer, primary_key=True, index=True)
    device_id = Column(String, nullable=False)
    referral_code = Column(String, nullable=False)
    captured_at = Column(DateTime, nullable=False, default=utcnow)
    product_id = Column(String, nullable=True)
