"""
Exceptions raised by the checkout workflow.

Only the two fatal classes escape ``place_order``; every other step
failure is logged and absorbed where it happens.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class CheckoutError(Exception):
    code: str
    message: str
    status_code: int = 500

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message}


@dataclass
class OrderPlacementError(CheckoutError):
    """The order header could not be written; nothing was placed."""

    code: str = "order_not_placed"
    message: str = "Order could not be placed. Please try again."


@dataclass
class OrderItemsWriteError(CheckoutError):
    """The header exists but its line items do not. Needs an operator."""

    code: str = "order_items_failed"
    message: str = (
        "Your order was created but its items could not be saved. "
        "Our team has been notified and will contact you."
    )
    order_id: int | None = None
    order_number: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["order_number"] = self.order_number
        return payload


class LoyaltyDeductionError(Exception):
    """Neither the atomic deduction nor the fallback could update the wallet."""


class AtomicDeductionUnavailable(Exception):
    """The single-statement wallet deduction did not apply."""
