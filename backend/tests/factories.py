import os
from decimal import Decimal
from uuid import uuid4

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SKIP_MIGRATIONS", "1")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.exc import OperationalError  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from app import models  # noqa: E402,F401
from app.core.db import Base  # noqa: E402
from app.crud.affiliates import create_affiliate, create_coupon_binding  # noqa: E402
from app.crud.loyalty import create_wallet  # noqa: E402
from app.crud.shoppers import create_shopper  # noqa: E402
from app.schemas.checkout import CheckoutRequest  # noqa: E402


def setup_db(tmp_path):
    db_url = f"sqlite:///{tmp_path / f'checkout_{uuid4().hex}.db'}"
    engine = create_engine(
        db_url,
        connect_args={"check_same_thread": False},
        future=True,
    )
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    return SessionLocal


def db_failure(*_args, **_kwargs):
    raise OperationalError("INSERT ...", {}, Exception("simulated database outage"))


def make_affiliate(
    db,
    *,
    code: str | None = None,
    commission_type: str = "percentage",
    commission_value="5",
    status: str = "active",
):
    return create_affiliate(
        db,
        name=f"Affiliate {uuid4().hex[:6]}",
        referral_code=code or f"REF{uuid4().hex[:6].upper()}",
        commission_type=commission_type,
        commission_value=Decimal(str(commission_value)),
        status=status,
    )


def make_coupon(db, *, affiliate, code: str | None = None, is_active: bool = True):
    return create_coupon_binding(
        db,
        affiliate_id=affiliate.id,
        coupon_code=code or f"SAVE{uuid4().hex[:4].upper()}",
        is_active=is_active,
    )


def make_shopper(db, *, affiliate=None, email: str | None = None):
    return create_shopper(
        db,
        email=email or f"shopper_{uuid4().hex[:8]}@example.com",
        full_name="Test Shopper",
        affiliate_id=affiliate.id if affiliate else None,
    )


def make_wallet(db, *, shopper, coins: int):
    return create_wallet(db, user_id=shopper.id, available_balance=coins, total_earned=coins)


def item(product_id: str = "prod-a", price="1000.00", quantity: int = 1, name: str = "Cotton Kurta") -> dict:
    return {
        "product_id": product_id,
        "product_name": name,
        "quantity": quantity,
        "unit_price": str(price),
    }


def checkout_payload(
    *,
    items: list[dict] | None = None,
    coupon_code: str | None = None,
    coupon_discount="0",
    coins: int = 0,
    coins_value="0",
    **overrides,
) -> CheckoutRequest:
    items = items if items is not None else [item()]
    subtotal = sum(Decimal(str(i["unit_price"])) * i.get("quantity", 1) for i in items)
    total = max(Decimal("0"), subtotal - Decimal(str(coupon_discount)) - Decimal(str(coins_value)))
    data = {
        "customer_name": "Asha Rao",
        "customer_email": "asha@example.com",
        "customer_phone": "+919800000000",
        "shipping_address_line1": "12 MG Road",
        "shipping_city": "Bengaluru",
        "shipping_state": "Karnataka",
        "shipping_zip": "560001",
        "subtotal": str(subtotal),
        "coupon_code": coupon_code,
        "coupon_discount": str(coupon_discount),
        "loyalty_coins_used": coins,
        "loyalty_coins_value": str(coins_value),
        "total_amount": str(total),
        "payment_method": "cod",
        "items": items,
    }
    data.update(overrides)
    return CheckoutRequest(**data)
