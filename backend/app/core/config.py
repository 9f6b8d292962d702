# Central place for all configurable settings. We use Pydantic's
# BaseSettings so values can be read from env vars or a .env file.
# This keeps deployment flexible without hardcoding secrets.

import json
from decimal import Decimal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def safe_json_loads(value):
    try:
        return json.loads(value)
    except Exception:
        return value


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_json_loads=safe_json_loads,
    )

    # Core DB connection string, like sqlite:///./shop.db or Postgres URL.
    # Needed by SQLAlchemy to connect to the persistence layer.
    DATABASE_URL: str

    # Toggle SQLAlchemy echo logs. Useful for debugging queries locally.
    DB_ECHO: bool = False

    # Level for the structured JSON loggers (api_logger, checkout).
    LOG_LEVEL: str = "INFO"

    # Versioned mount point for the storefront routers. Routers are also
    # served unprefixed for older storefront builds.
    API_V1_PREFIX: str = "/api/v1"

    # Storefront money settings. Orders are priced in rupees and the
    # order number prefix shows up on invoices and confirmation pages.
    CURRENCY: str = "INR"
    ORDER_NUMBER_PREFIX: str = "ORD"
    DEFAULT_SHIPPING_COUNTRY: str = "India"

    # Referral links captured on a device stay valid for this many days.
    # After that the cached code is dropped and cannot attribute an order.
    REFERRAL_EXPIRY_DAYS: int = Field(default=7, gt=0)

    # Loyalty coin redemption. The atomic deduction can be switched off
    # (e.g. during a wallet migration), which routes every redemption
    # through the compare-and-swap fallback.
    LOYALTY_ATOMIC_DEDUCT_ENABLED: bool = True
    LOYALTY_COIN_VALUE: Decimal = Decimal("1.00")
    LOYALTY_CAS_MAX_ATTEMPTS: int = Field(default=3, gt=0)

    # Headers the storefront client sends to identify the device cache
    # and (when signed in) the shopper profile.
    DEVICE_HEADER_NAME: str = "X-Device-ID"
    SHOPPER_HEADER_NAME: str = "X-Shopper-ID"

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _normalize_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper() or "INFO"
        return value

    @field_validator("ORDER_NUMBER_PREFIX", mode="before")
    @classmethod
    def _normalize_prefix(cls, value):
        if isinstance(value, str):
            return value.strip().upper() or "ORD"
        return value


# Instantiate a single settings object for app-wide import.
# Any module can just `from app.core.config import settings`.
settings = Settings()
