"""Domain package: cart and order value types, order status rules."""
