"""Application-wide constants.

Centralizes pricing rates, storage keys and tracking timings so the pricing
engine, persistence adapter and order tracker agree on them.
"""

# ============== STORAGE KEYS ==============
CART_STORAGE_KEY_V1 = "food_order_cart_v1"  # legacy: items array only
CART_STORAGE_KEY_V2 = "food_order_cart_v2"  # current: versioned envelope
PROMO_STORAGE_KEY_V1 = "food_order_promo_v1"  # legacy: promo object only
ORDER_STORAGE_KEY = "food_order_last_order_v1"

CART_STORAGE_VERSION = 2

# ============== PRICING ==============
SERVICE_FEE_RATE = 0.08
SERVICE_FEE_MIN = 1.25
SERVICE_FEE_MAX = 3.50
DELIVERY_FEE = 2.99
TAX_RATE = 0.0825

MAX_PROMO_DISCOUNT_RATE = 0.5

PROMO_CODES: dict[str, float] = {
    "OCEAN10": 0.10,
    "SHIPFREE": 0.06,  # small discount to simulate fee relief
}

# ============== ORDER TRACKING (milliseconds) ==============
PREPARING_AFTER_MS = 30_000
OUT_FOR_DELIVERY_AFTER_MS = 75_000
DELIVERED_AFTER_MS = 120_000
TRACKING_INTERVAL_MS = 750

INITIAL_ORDER_PROGRESS = 3

# ============== CHECKOUT ==============
MIN_ADDRESS_LENGTH = 6
DEFAULT_PAYMENT_METHOD = "card"
REMOTE_API_TIMEOUT_SECONDS = 10.0
