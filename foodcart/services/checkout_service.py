"""Checkout: turns the live cart into a tracked order."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from foodcart.core.constants import DEFAULT_PAYMENT_METHOD, MIN_ADDRESS_LENGTH
from foodcart.core.utils import Clock, generate_local_order_id, now_ms
from foodcart.domain.order import Order, OrderMeta, OrderStatus
from foodcart.integrations.order_api import OrderApiClient
from foodcart.logging_config import logger
from foodcart.services.cart_service import CartStore
from foodcart.services.order_tracking import OrderTracker


@dataclass
class CheckoutDetails:
    """Customer-entered checkout fields."""

    customer_name: str
    delivery_address: str
    notes: str = ""
    payment_method: str = DEFAULT_PAYMENT_METHOD

    def normalized(self) -> CheckoutDetails:
        return CheckoutDetails(
            customer_name=(self.customer_name or "").strip(),
            delivery_address=(self.delivery_address or "").strip(),
            notes=(self.notes or "").strip(),
            payment_method=(self.payment_method or "").strip() or DEFAULT_PAYMENT_METHOD,
        )


class CheckoutService:
    def __init__(
        self,
        cart: CartStore,
        tracker: OrderTracker,
        api_client: OrderApiClient,
        stream_url: str = "",
        clock: Clock | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._cart = cart
        self._tracker = tracker
        self._api_client = api_client
        self._stream_url = stream_url
        self._clock = clock or now_ms
        self._id_factory = id_factory or (lambda: generate_local_order_id(self._clock))
        self._placing = False

    @property
    def is_placing(self) -> bool:
        return self._placing

    def can_checkout(self, details: CheckoutDetails) -> bool:
        details = details.normalized()
        return (
            not self._cart.is_empty
            and bool(details.customer_name)
            and len(details.delivery_address) >= MIN_ADDRESS_LENGTH
        )

    def build_payload(self, details: CheckoutDetails) -> dict[str, Any]:
        details = details.normalized()
        return {
            "customerName": details.customer_name,
            "deliveryAddress": details.delivery_address,
            "notes": details.notes,
            "paymentMethod": details.payment_method,
            "items": [item.to_dict() for item in self._cart.items],
            "pricing": self._cart.pricing.to_dict(),
        }

    async def place_order(self, details: CheckoutDetails) -> Order | None:
        """Create, track and return a new order; ``None`` if checkout is not possible.

        The remote API is tried only when configured. Its failure is never
        surfaced: the order then gets a locally generated id.
        """
        if self._placing or not self.can_checkout(details):
            return None

        self._placing = True
        try:
            details = details.normalized()
            items = self._cart.items
            pricing = self._cart.pricing
            payload = self.build_payload(details)

            remote_id = None
            if self._api_client.configured:
                result = await self._api_client.submit_order(payload)
                remote_id = result.order_id if result else None

            order = Order(
                id=remote_id or self._id_factory(),
                created_at=self._clock(),
                customer_name=details.customer_name,
                delivery_address=details.delivery_address,
                notes=details.notes,
                payment_method=details.payment_method,
                items=items,
                pricing=pricing,
                status=OrderStatus.CONFIRMED,
                meta=OrderMeta(
                    remote_api_configured=self._api_client.configured,
                    remote_stream_configured=bool(self._stream_url),
                ),
            )
            self._tracker.start(order)
            self._cart.remove_ordered(items)
            logger.info(
                "Order %s placed (%s, total %.2f)",
                order.id,
                "remote" if remote_id else "local",
                pricing.total,
            )
            return order
        finally:
            self._placing = False

    def start_new_order(self) -> None:
        self._tracker.clear()


__all__ = ["CheckoutDetails", "CheckoutService"]
