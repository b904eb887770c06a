"""In-memory cart store backed by the versioned persistence adapter."""
from __future__ import annotations

from dataclasses import replace
from typing import Any

from foodcart.core.order_math import (
    PricingBreakdown,
    calc_items_count,
    calc_pricing,
    resolve_promo,
)
from foodcart.domain.cart import NO_PROMO, CartLine, Promo, is_number
from foodcart.integrations.cart_persistence import CartPersistenceAdapter, PersistResult
from foodcart.logging_config import logger


def _candidate_field(candidate: Any, name: str) -> Any:
    if isinstance(candidate, dict):
        return candidate.get(name)
    return getattr(candidate, name, None)


class CartStore:
    """Authoritative cart lines and promo selection.

    Derived values (count, subtotal, fees, total) are recomputed on every
    read. Each effective mutation is persisted through the adapter.
    """

    def __init__(self, persistence: CartPersistenceAdapter) -> None:
        self._persistence = persistence
        state = persistence.load()
        self._items: list[CartLine] = list(state.items)
        self._promo: Promo = state.promo
        self._last_persist_result: PersistResult | None = None

    # ---------- state ----------

    @property
    def items(self) -> list[CartLine]:
        return [replace(item) for item in self._items]

    @property
    def promo(self) -> Promo:
        return self._promo

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def last_persist_result(self) -> PersistResult | None:
        return self._last_persist_result

    def get_item(self, item_id: str) -> CartLine | None:
        line = self._find(item_id)
        return replace(line) if line else None

    # ---------- derived ----------

    @property
    def items_count(self) -> int:
        return calc_items_count(self._items)

    @property
    def pricing(self) -> PricingBreakdown:
        return calc_pricing(self._items, self._promo)

    @property
    def subtotal(self) -> float:
        return self.pricing.subtotal

    @property
    def promo_discount(self) -> float:
        return self.pricing.promo_discount

    @property
    def fees(self) -> dict[str, float]:
        pricing = self.pricing
        return {
            "serviceFee": pricing.service_fee,
            "deliveryFee": pricing.delivery_fee,
            "tax": pricing.tax,
        }

    @property
    def total(self) -> float:
        return self.pricing.total

    # ---------- mutations ----------

    def _find(self, item_id: str) -> CartLine | None:
        for item in self._items:
            if item.item_id == item_id:
                return item
        return None

    def _persist(self) -> PersistResult:
        self._last_persist_result = self._persistence.save(self._items, self._promo)
        if not self._last_persist_result:
            logger.warning("Cart state kept in memory only: %s", self._last_persist_result.reason)
        return self._last_persist_result

    def add_item(self, candidate: Any) -> CartLine | None:
        """Add one unit of a catalog item; price and name are fixed at first add."""
        item_id = _candidate_field(candidate, "id")
        price = _candidate_field(candidate, "price")
        if not isinstance(item_id, str) or not is_number(price) or price < 0:
            logger.debug("Ignoring malformed cart candidate: %r", candidate)
            return None

        existing = self._find(item_id)
        if existing:
            existing.quantity += 1
            line = existing
        else:
            name = _candidate_field(candidate, "name")
            line = CartLine(
                item_id=item_id,
                name=name if isinstance(name, str) else "",
                unit_price=float(price),
                quantity=1,
                notes="",
            )
            self._items.append(line)

        self._persist()
        return replace(line)

    def increment_item(self, item_id: str) -> bool:
        line = self._find(item_id)
        if line is None:
            return False
        line.quantity += 1
        self._persist()
        return True

    def decrement_item(self, item_id: str) -> bool:
        """Decrease quantity by one; the line is removed when it would reach zero."""
        line = self._find(item_id)
        if line is None:
            return False
        if line.quantity <= 1:
            self._items = [item for item in self._items if item.item_id != item_id]
        else:
            line.quantity -= 1
        self._persist()
        return True

    def remove_item(self, item_id: str) -> bool:
        before = len(self._items)
        self._items = [item for item in self._items if item.item_id != item_id]
        if len(self._items) == before:
            return False
        self._persist()
        return True

    def set_item_notes(self, item_id: str, notes: str) -> bool:
        line = self._find(item_id)
        if line is None or not isinstance(notes, str):
            return False
        line.notes = notes
        self._persist()
        return True

    def remove_ordered(self, ordered: list[CartLine]) -> None:
        """Subtract an order snapshot from the cart.

        Units added while the order was being placed stay in the cart.
        """
        ordered_qty = {line.item_id: line.quantity for line in ordered}
        remaining = []
        for item in self._items:
            item.quantity -= ordered_qty.get(item.item_id, 0)
            if item.quantity >= 1:
                remaining.append(item)
        self._items = remaining
        self._persist()

    def clear_cart(self) -> None:
        """Empty the cart. The promo is kept until cleared explicitly."""
        self._items = []
        self._persist()

    def apply_promo(self, raw_code: str | None) -> Promo:
        """Replace the promo; unknown codes are kept with a zero rate."""
        self._promo = resolve_promo(raw_code)
        self._persist()
        return self._promo

    def clear_promo(self) -> None:
        self._promo = NO_PROMO
        self._persist()


__all__ = ["CartStore"]
