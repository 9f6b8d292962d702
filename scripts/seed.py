"""
Deterministic seed script for dev/demo environments.
"""

from __future__ import annotations

import os
import sys
from decimal import Decimal

from app import models  # noqa: F401
from app.core.db import SessionLocal, Base, engine
from app.seed.utils import (
    get_or_create_affiliate,
    get_or_create_coupon_binding,
    get_or_create_shopper,
    get_or_create_wallet,
)


def ensure_not_production():
    env = os.getenv("ENV", "").lower()
    allow_prod = os.getenv("ALLOW_SEED_PROD", "0").lower() in {"1", "true", "yes"}
    if env == "production" and not allow_prod:
        print("Refusing to seed in production. Set ALLOW_SEED_PROD=1 to override.", file=sys.stderr)
        sys.exit(1)


def seed():
    ensure_not_production()
    Base.metadata.create_all(bind=engine)

    with SessionLocal() as db:
        # Affiliates: one percentage partner, one flat-fee partner
        priya = get_or_create_affiliate(
            db,
            "PRIYA10",
            "Priya Styles",
            commission_type="percentage",
            commission_value=Decimal("5"),
        )
        rahul = get_or_create_affiliate(
            db,
            "RAHULFIT",
            "Rahul Fitness",
            commission_type="flat",
            commission_value=Decimal("50"),
        )

        # Coupon bound to an affiliate (coupon attribution)
        get_or_create_coupon_binding(db, priya, "PRIYA100")

        # Shoppers: one who signed up through Rahul (profile attribution)
        asha = get_or_create_shopper(db, "asha@example.com", "Asha Rao", affiliate=rahul)
        vikram = get_or_create_shopper(db, "vikram@example.com", "Vikram Singh")

        get_or_create_wallet(db, asha, 200)
        get_or_create_wallet(db, vikram, 30)

    print("Seed complete: affiliates PRIYA10, RAHULFIT; coupon PRIYA100; shoppers asha, vikram.")


if __name__ == "__main__":
    seed()
