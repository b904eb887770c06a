"""Business services orchestrating cart, checkout and order tracking."""

from .cart_service import CartStore
from .checkout_service import CheckoutDetails, CheckoutService
from .order_tracking import OrderTracker, TrackingTimer

__all__ = [
    "CartStore",
    "CheckoutDetails",
    "CheckoutService",
    "OrderTracker",
    "TrackingTimer",
]
