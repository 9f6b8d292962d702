"""
Decide which affiliate, if any, gets credit for a checkout.

Sources are tried in a fixed priority order and the first one that
resolves to an active affiliate wins; they are never combined:

1. ``coupon``  - the order's coupon code is bound to an affiliate
2. ``profile`` - the shopper signed up through an affiliate
3. ``link``    - the device captured a referral link before checkout

A source that points at a missing or inactive affiliate simply falls
through to the next one. Database errors are not caught here.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional

from sqlalchemy.orm import Session

from app.crud.affiliates import get_active_coupon_binding, get_affiliate, get_affiliate_by_code
from app.crud.shoppers import get_shopper
from app.models.affiliates import Affiliate


SOURCE_COUPON = "coupon"
SOURCE_PROFILE = "profile"
SOURCE_LINK = "link"

COMMISSION_PERCENTAGE = "percentage"
COMMISSION_FLAT = "flat"
ALLOWED_COMMISSION_TYPES = {COMMISSION_PERCENTAGE, COMMISSION_FLAT}


@dataclass(frozen=True)
class CommissionPolicy:
    commission_type: str
    commission_value: Decimal


@dataclass(frozen=True)
class AttributionInput:
    coupon_code: str | None = None
    shopper_id: int | None = None
    referral_code: str | None = None
    referral_product_id: str | None = None


@dataclass(frozen=True)
class Attribution:
    affiliate: Affiliate
    policy: CommissionPolicy
    source: str
    # Only set for link attribution captured on a product page.
    product_id: str | None = None

    @property
    def affiliate_id(self) -> int:
        return self.affiliate.id


def _active(affiliate: Affiliate | None) -> Affiliate | None:
    if affiliate is None or affiliate.status != "active":
        return None
    if affiliate.commission_type not in ALLOWED_COMMISSION_TYPES:
        return None
    return affiliate


def _policy_for(affiliate: Affiliate) -> CommissionPolicy:
    return CommissionPolicy(
        commission_type=affiliate.commission_type,
        commission_value=Decimal(str(affiliate.commission_value or 0)),
    )


def resolve_coupon(db: Session, inputs: AttributionInput) -> Optional[Attribution]:
    binding = get_active_coupon_binding(db, coupon_code=inputs.coupon_code)
    if not binding:
        return None
    affiliate = _active(get_affiliate(db, affiliate_id=binding.affiliate_id))
    if not affiliate:
        return None
    return Attribution(affiliate=affiliate, policy=_policy_for(affiliate), source=SOURCE_COUPON)


def resolve_profile(db: Session, inputs: AttributionInput) -> Optional[Attribution]:
    if inputs.shopper_id is None:
        return None
    shopper = get_shopper(db, shopper_id=inputs.shopper_id)
    if not shopper or not shopper.affiliate_id:
        return None
    affiliate = _active(get_affiliate(db, affiliate_id=shopper.affiliate_id))
    if not affiliate:
        return None
    return Attribution(affiliate=affiliate, policy=_policy_for(affiliate), source=SOURCE_PROFILE)


def resolve_link(db: Session, inputs: AttributionInput) -> Optional[Attribution]:
    code = (inputs.referral_code or "").strip()
    if not code:
        return None
    affiliate = _active(get_affiliate_by_code(db, code=code))
    if not affiliate:
        return None
    return Attribution(
        affiliate=affiliate,
        policy=_policy_for(affiliate),
        source=SOURCE_LINK,
        product_id=inputs.referral_product_id or None,
    )


Resolver = Callable[[Session, AttributionInput], Optional[Attribution]]

RESOLVERS: tuple[Resolver, ...] = (resolve_coupon, resolve_profile, resolve_link)


def resolve_attribution(
    db: Session,
    inputs: AttributionInput,
    *,
    resolvers: tuple[Resolver, ...] = RESOLVERS,
) -> Attribution | None:
    for resolver in resolvers:
        attribution = resolver(db, inputs)
        if attribution is not None:
            return attribution
    return None
