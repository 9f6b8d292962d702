from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Mapping

from app.core.attribution import COMMISSION_FLAT, COMMISSION_PERCENTAGE, SOURCE_LINK, CommissionPolicy


ZERO = Decimal("0.00")
CENT = Decimal("0.01")


def to_money(value) -> Decimal:
    """Quantize to paise, rounding halves away from zero (999.95 * 10% -> 100.00)."""
    if value is None:
        return ZERO
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _item_value(item, key: str):
    if isinstance(item, Mapping):
        return item.get(key)
    return getattr(item, key, None)


def commission_basis(
    *,
    source: str,
    items: Iterable,
    subtotal,
    coupon_discount,
    product_id: str | None = None,
) -> Decimal:
    # Product-scoped link referrals only earn on the referred product.
    if source == SOURCE_LINK and product_id:
        total = sum(
            (to_money(_item_value(item, "total_price")) for item in items if _item_value(item, "product_id") == product_id),
            ZERO,
        )
        return max(ZERO, to_money(total))
    return max(ZERO, to_money(subtotal) - to_money(coupon_discount))


def compute_commission(policy: CommissionPolicy, basis) -> Decimal:
    basis = to_money(basis)
    if basis <= 0:
        return ZERO
    value = to_money(policy.commission_value)
    if value <= 0:
        return ZERO
    if policy.commission_type == COMMISSION_PERCENTAGE:
        return to_money(basis * value / Decimal(100))
    if policy.commission_type == COMMISSION_FLAT:
        # Flat fee is not scaled by basis.
        return value
    return ZERO
