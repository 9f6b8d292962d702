from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.shoppers import ShopperProfile


def create_shopper(
    db: Session,
    *,
    email: str | None,
    full_name: str | None = None,
    phone: str | None = None,
    affiliate_id: int | None = None,
) -> ShopperProfile:
    shopper = ShopperProfile(email=email, full_name=full_name, phone=phone, affiliate_id=affiliate_id)
    db.add(shopper)
    db.commit()
    db.refresh(shopper)
    return shopper


def get_shopper(db: Session, *, shopper_id: int) -> ShopperProfile | None:
    return db.query(ShopperProfile).filter(ShopperProfile.id == shopper_id).first()


def get_shopper_by_email(db: Session, *, email: str) -> ShopperProfile | None:
    return db.query(ShopperProfile).filter(ShopperProfile.email == email).first()
