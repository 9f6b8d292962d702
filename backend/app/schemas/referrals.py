from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ReferralCapture(BaseModel):
    code: str = Field(min_length=1, max_length=64)
    product_id: Optional[str] = None


class ReferralStateRead(BaseModel):
    code: str
    captured_at: datetime
    product_id: Optional[str] = None
