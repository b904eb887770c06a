"""Time-driven order status rules (single source of truth)."""
from __future__ import annotations

import math
from dataclasses import dataclass

from foodcart.core.constants import (
    DELIVERED_AFTER_MS,
    OUT_FOR_DELIVERY_AFTER_MS,
    PREPARING_AFTER_MS,
)
from foodcart.domain.order import Order, OrderStatus

# (elapsed lower bound in ms, status), checked from the latest stage down
STATUS_SCHEDULE: tuple[tuple[int, str], ...] = (
    (DELIVERED_AFTER_MS, OrderStatus.DELIVERED),
    (OUT_FOR_DELIVERY_AFTER_MS, OrderStatus.OUT_FOR_DELIVERY),
    (PREPARING_AFTER_MS, OrderStatus.PREPARING),
    (0, OrderStatus.CONFIRMED),
)


@dataclass(frozen=True, slots=True)
class TrackingUpdate:
    status: str
    progress: int
    changed: bool


def status_for_elapsed(elapsed_ms: float) -> str:
    for lower_bound, status in STATUS_SCHEDULE:
        if elapsed_ms >= lower_bound:
            return status
    return OrderStatus.CONFIRMED


def progress_for_elapsed(elapsed_ms: float) -> int:
    # half-up rounding so 0.5% steps match the displayed percentage
    progress = math.floor(elapsed_ms / DELIVERED_AFTER_MS * 100 + 0.5)
    return max(0, min(100, progress))


def compute_tracking(order: Order, now_ms: int) -> TrackingUpdate:
    """Status and progress of ``order`` at ``now_ms``.

    Terminal orders are frozen: they report their stored values unchanged.
    """
    if order.is_terminal:
        return TrackingUpdate(order.status, order.progress, changed=False)

    elapsed = now_ms - order.created_at
    status = status_for_elapsed(elapsed)
    progress = progress_for_elapsed(elapsed)
    changed = status != order.status or progress != order.progress
    return TrackingUpdate(status, progress, changed)


__all__ = [
    "STATUS_SCHEDULE",
    "TrackingUpdate",
    "compute_tracking",
    "progress_for_elapsed",
    "status_for_elapsed",
]
