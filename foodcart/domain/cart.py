"""Cart line and promo value types."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from foodcart.core.constants import MAX_PROMO_DISCOUNT_RATE


def is_number(value: Any) -> bool:
    """JSON number check: bools are not numbers, NaN/inf are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def clamp_discount_rate(value: Any) -> float:
    if not is_number(value):
        return 0.0
    return max(0.0, min(MAX_PROMO_DISCOUNT_RATE, float(value)))


@dataclass
class CartLine:
    """Single distinct item in the cart."""

    item_id: str
    name: str
    unit_price: float
    quantity: int = 1
    notes: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "itemId": self.item_id,
            "name": self.name,
            "unitPrice": self.unit_price,
            "quantity": int(self.quantity),
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CartLine | None:
        """Build a line from stored JSON, defaulting wrongly typed fields.

        Returns ``None`` when the entry has no string ``itemId`` or a quantity
        below one, so no partial line is ever surfaced.
        """
        if not isinstance(data, dict) or not isinstance(data.get("itemId"), str):
            return None

        name = data.get("name")
        notes = data.get("notes")
        unit_price = data.get("unitPrice")
        quantity = data.get("quantity")

        qty = int(quantity) if is_number(quantity) else 1
        if qty < 1:
            return None

        return cls(
            item_id=data["itemId"],
            name=name if isinstance(name, str) else "",
            unit_price=max(0.0, float(unit_price)) if is_number(unit_price) else 0.0,
            quantity=qty,
            notes=notes if isinstance(notes, str) else "",
        )


@dataclass(frozen=True, slots=True)
class Promo:
    """Promo code and its resolved discount rate (clamped to [0, 0.5])."""

    code: str = ""
    discount_rate: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "discount_rate", clamp_discount_rate(self.discount_rate))
        if not isinstance(self.code, str):
            object.__setattr__(self, "code", "")

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "discountRate": self.discount_rate}

    @classmethod
    def from_dict(cls, data: Any) -> Promo:
        if not isinstance(data, dict):
            return cls()
        code = data.get("code")
        return cls(
            code=code if isinstance(code, str) else "",
            discount_rate=clamp_discount_rate(data.get("discountRate")),
        )


NO_PROMO = Promo()

__all__ = ["CartLine", "NO_PROMO", "Promo", "clamp_discount_rate", "is_number"]
