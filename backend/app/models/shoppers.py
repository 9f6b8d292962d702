from sqlalchemy import Column, ForeignKey, Integer, String

from app.core.db import Base
from app.models.mixins import TimestampMixin


class ShopperProfile(TimestampMixin, Base):
    __tablename__ = "shopper_profiles"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, nullable=True, index=True)
    full_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    # Persistent attribution set when the shopper signed up through a partner.
    affiliate_id = Column(Integer, ForeignKey("affiliates.id", ondelete="SET NULL"), nullable=True)
