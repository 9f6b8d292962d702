from __future__ import annotations

from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class CheckoutItem(BaseModel):
    product_id: str = Field(min_length=1)
    product_name: str
    product_image: Optional[str] = None
    sku: Optional[str] = None
    size: Optional[str] = None
    color: Optional[str] = None
    quantity: int = Field(ge=1)
    unit_price: Decimal = Field(ge=0)
    total_price: Optional[Decimal] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _default_total(self):
        if self.total_price is None:
            self.total_price = self.unit_price * self.quantity
        return self


class CheckoutRequest(BaseModel):
    customer_name: str = Field(min_length=1)
    customer_email: Optional[str] = None
    customer_phone: str = Field(min_length=1)
    shipping_address_line1: str = Field(min_length=1)
    shipping_address_line2: Optional[str] = None
    shipping_city: str
    shipping_state: str
    shipping_zip: str
    shipping_country: Optional[str] = None

    subtotal: Decimal = Field(ge=0)
    shipping_cost: Decimal = Field(default=Decimal("0"), ge=0)
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)
    coupon_discount: Decimal = Field(default=Decimal("0"), ge=0)
    wallet_amount_used: Decimal = Field(default=Decimal("0"), ge=0)
    loyalty_coins_used: int = Field(default=0, ge=0)
    loyalty_coins_value: Decimal = Field(default=Decimal("0"), ge=0)
    coins_to_earn: int = Field(default=0, ge=0)
    total_amount: Decimal = Field(ge=0)

    coupon_code: Optional[str] = None
    # Cash on delivery is the only payment method the storefront supports.
    payment_method: Literal["cod"] = "cod"
    items: list[CheckoutItem] = Field(min_length=1)

    @field_validator("coupon_code", mode="before")
    @classmethod
    def _blank_coupon_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CheckoutResponse(BaseModel):
    order_id: int
    order_number: str
    currency: str
    attribution_source: Optional[str] = None
    affiliate_id: Optional[int] = None
    commission_amount: Decimal = Decimal("0.00")
    warnings: list[str] = Field(default_factory=list)


class CheckoutErrorResponse(BaseModel):
    code: str
    message: str
    order_number: Optional[str] = None
