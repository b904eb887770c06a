"""FoodCart: cart pricing, versioned persistence and order tracking core."""

__version__ = "1.0.0"
