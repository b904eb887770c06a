"""Order domain types and status values."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from foodcart.core.constants import INITIAL_ORDER_PROGRESS
from foodcart.core.order_math import PricingBreakdown
from foodcart.domain.cart import CartLine, is_number


class OrderStatus:
    """Simulated order lifecycle statuses (values are user-facing labels)."""

    CONFIRMED = "Confirmed"
    PREPARING = "Preparing"
    OUT_FOR_DELIVERY = "Out for delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    ALL = (CONFIRMED, PREPARING, OUT_FOR_DELIVERY, DELIVERED, CANCELLED)
    TERMINAL = frozenset({DELIVERED, CANCELLED})

    @classmethod
    def is_terminal(cls, status: str | None) -> bool:
        return status in cls.TERMINAL


@dataclass(frozen=True, slots=True)
class OrderMeta:
    remote_api_configured: bool = False
    remote_stream_configured: bool = False

    def to_dict(self) -> dict[str, bool]:
        return {
            "remoteApiConfigured": self.remote_api_configured,
            "remoteStreamConfigured": self.remote_stream_configured,
        }

    @classmethod
    def from_dict(cls, data: Any) -> OrderMeta:
        if not isinstance(data, dict):
            return cls()
        return cls(
            remote_api_configured=data.get("remoteApiConfigured") is True,
            remote_stream_configured=data.get("remoteStreamConfigured") is True,
        )


@dataclass
class Order:
    """Finalized order snapshot owned by the order tracker."""

    id: str
    created_at: int  # epoch millis
    customer_name: str
    delivery_address: str
    notes: str
    payment_method: str
    items: list[CartLine]
    pricing: PricingBreakdown
    status: str = OrderStatus.CONFIRMED
    progress: int = INITIAL_ORDER_PROGRESS
    meta: OrderMeta = field(default_factory=OrderMeta)

    @property
    def is_terminal(self) -> bool:
        return OrderStatus.is_terminal(self.status)

    def with_tracking(self, status: str, progress: int) -> Order:
        return replace(self, status=status, progress=progress)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": int(self.created_at),
            "status": self.status,
            "progress": int(self.progress),
            "customerName": self.customer_name,
            "deliveryAddress": self.delivery_address,
            "notes": self.notes,
            "paymentMethod": self.payment_method,
            "items": [item.to_dict() for item in self.items],
            "pricing": self.pricing.to_dict(),
            "meta": self.meta.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Order | None:
        """Rebuild a persisted order; ``None`` when the payload is unusable."""
        if not isinstance(data, dict):
            return None
        order_id = data.get("id")
        created_at = data.get("createdAt")
        if not isinstance(order_id, str) or not order_id or not is_number(created_at):
            return None

        def text(key: str) -> str:
            value = data.get(key)
            return value if isinstance(value, str) else ""

        status = data.get("status")
        if status not in OrderStatus.ALL:
            status = OrderStatus.CONFIRMED

        progress = data.get("progress")
        progress = max(0, min(100, int(progress))) if is_number(progress) else INITIAL_ORDER_PROGRESS

        raw_items = data.get("items")
        items: list[CartLine] = []
        if isinstance(raw_items, list):
            for raw in raw_items:
                line = CartLine.from_dict(raw)
                if line is not None:
                    items.append(line)

        return cls(
            id=order_id,
            created_at=int(created_at),
            customer_name=text("customerName"),
            delivery_address=text("deliveryAddress"),
            notes=text("notes"),
            payment_method=text("paymentMethod"),
            items=items,
            pricing=PricingBreakdown.from_dict(data.get("pricing")),
            status=status,
            progress=progress,
            meta=OrderMeta.from_dict(data.get("meta")),
        )


def order_eta_label(order: Order | None) -> str:
    if order is None:
        return "No active order"
    if order.status == OrderStatus.DELIVERED:
        return "Enjoy your meal!"
    if order.status == OrderStatus.CANCELLED:
        return "Order cancelled"
    return "Updating…"


__all__ = ["Order", "OrderMeta", "OrderStatus", "order_eta_label"]
