"""Shared helpers for cart totals, fees, tax and promo resolution.

All functions are pure. No rounding happens here; callers round for display
only (see ``format_money``).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from foodcart.core.constants import (
    DELIVERY_FEE,
    PROMO_CODES,
    SERVICE_FEE_MAX,
    SERVICE_FEE_MIN,
    SERVICE_FEE_RATE,
    TAX_RATE,
)
from foodcart.domain.cart import CartLine, Promo, is_number


@dataclass(frozen=True, slots=True)
class PricingBreakdown:
    subtotal: float = 0.0
    promo_discount: float = 0.0
    service_fee: float = 0.0
    delivery_fee: float = 0.0
    tax: float = 0.0
    total: float = 0.0
    promo_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "subtotal": self.subtotal,
            "promoCode": self.promo_code,
            "promoDiscount": self.promo_discount,
            "serviceFee": self.service_fee,
            "deliveryFee": self.delivery_fee,
            "tax": self.tax,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: Any) -> PricingBreakdown:
        if not isinstance(data, dict):
            return cls()

        def num(key: str) -> float:
            value = data.get(key)
            return max(0.0, float(value)) if is_number(value) else 0.0

        promo_code = data.get("promoCode")
        return cls(
            subtotal=num("subtotal"),
            promo_discount=num("promoDiscount"),
            service_fee=num("serviceFee"),
            delivery_fee=num("deliveryFee"),
            tax=num("tax"),
            total=num("total"),
            promo_code=promo_code if isinstance(promo_code, str) and promo_code else None,
        )


def normalize_promo_code(raw_code: str | None) -> str:
    return (raw_code or "").strip().upper()


def resolve_promo(raw_code: str | None) -> Promo:
    """Static promo lookup; unknown codes keep the code with a zero rate."""
    code = normalize_promo_code(raw_code)
    return Promo(code=code, discount_rate=PROMO_CODES.get(code, 0.0))


def calc_items_count(items: Iterable[CartLine]) -> int:
    return sum(item.quantity for item in items)


def calc_subtotal(items: Iterable[CartLine]) -> float:
    return sum((item.quantity * item.unit_price for item in items), 0.0)


def calc_promo_discount(subtotal: float, promo: Promo) -> float:
    return subtotal * promo.discount_rate


def calc_service_fee(subtotal: float) -> float:
    if subtotal <= 0:
        return 0.0
    return min(SERVICE_FEE_MAX, max(SERVICE_FEE_MIN, subtotal * SERVICE_FEE_RATE))


def calc_delivery_fee(subtotal: float) -> float:
    return DELIVERY_FEE if subtotal > 0 else 0.0


def calc_tax(subtotal: float, promo_discount: float) -> float:
    """Tax on the discounted amount, never on the discount itself."""
    taxable = max(0.0, subtotal - promo_discount)
    return taxable * TAX_RATE if taxable > 0 else 0.0


def calc_pricing(items: Iterable[CartLine], promo: Promo) -> PricingBreakdown:
    subtotal = calc_subtotal(items)
    promo_discount = calc_promo_discount(subtotal, promo)
    service_fee = calc_service_fee(subtotal)
    delivery_fee = calc_delivery_fee(subtotal)
    tax = calc_tax(subtotal, promo_discount)
    return PricingBreakdown(
        subtotal=subtotal,
        promo_discount=promo_discount,
        service_fee=service_fee,
        delivery_fee=delivery_fee,
        tax=tax,
        total=subtotal - promo_discount + service_fee + delivery_fee + tax,
        promo_code=promo.code or None,
    )


def format_money(amount: float, currency_symbol: str = "$") -> str:
    """Display helper; the rounded value must not be stored."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency_symbol}{abs(amount):,.2f}"


__all__ = [
    "PricingBreakdown",
    "calc_delivery_fee",
    "calc_items_count",
    "calc_pricing",
    "calc_promo_discount",
    "calc_service_fee",
    "calc_subtotal",
    "calc_tax",
    "format_money",
    "normalize_promo_code",
    "resolve_promo",
]
