"""Application bootstrap wiring storage, cart, tracker and checkout."""
from __future__ import annotations

from dataclasses import dataclass

from foodcart.core.config import Settings
from foodcart.core.kv_store import KeyValueStore, create_store
from foodcart.core.utils import Clock, now_ms
from foodcart.integrations.cart_persistence import CartPersistenceAdapter
from foodcart.integrations.order_api import OrderApiClient
from foodcart.logging_config import logger, setup_logging
from foodcart.services.cart_service import CartStore
from foodcart.services.checkout_service import CheckoutService
from foodcart.services.order_tracking import OrderTracker, TrackingTimer


@dataclass
class FoodCartApp:
    settings: Settings
    store: KeyValueStore
    cart: CartStore
    tracker: OrderTracker
    api_client: OrderApiClient
    checkout: CheckoutService

    async def start(self) -> None:
        """Resume tracking of a restored order inside the running event loop."""
        if self.tracker.resume():
            logger.info("Resumed tracking of order %s", self.tracker.order.id)

    async def close(self) -> None:
        self.tracker.cancel()
        await self.api_client.close()


def build_application(
    settings: Settings,
    store: KeyValueStore | None = None,
    clock: Clock | None = None,
) -> FoodCartApp:
    """Create runtime components from configuration and restore saved state."""
    setup_logging(settings.log_level)
    clock = clock or now_ms
    store = store if store is not None else create_store(settings.redis_url)

    cart = CartStore(CartPersistenceAdapter(store, clock=clock))
    tracker = OrderTracker(store, timer=TrackingTimer(settings.tracking_interval_ms), clock=clock)
    tracker.restore()

    api_client = OrderApiClient(settings.remote.api_base, timeout=settings.remote.timeout)
    if settings.demo_mode:
        logger.info("Demo mode: no order API configured, orders are simulated locally")

    checkout = CheckoutService(
        cart,
        tracker,
        api_client,
        stream_url=settings.remote.stream_url,
        clock=clock,
    )
    return FoodCartApp(
        settings=settings,
        store=store,
        cart=cart,
        tracker=tracker,
        api_client=api_client,
        checkout=checkout,
    )
