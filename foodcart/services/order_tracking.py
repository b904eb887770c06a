"""Simulated order tracking driven by a recurring asyncio timer."""
from __future__ import annotations

import asyncio
import functools
import json
from typing import Any, Callable

from foodcart.core.constants import ORDER_STORAGE_KEY, TRACKING_INTERVAL_MS
from foodcart.core.kv_store import KeyValueStore
from foodcart.core.utils import Clock, now_ms
from foodcart.domain.order import Order, OrderStatus
from foodcart.domain.order_fsm import compute_tracking
from foodcart.integrations.cart_persistence import PersistResult, safe_parse_json
from foodcart.logging_config import logger


class TrackingTimer:
    """At most one recurring task; ``cancel()`` is idempotent."""

    def __init__(self, interval_ms: int = TRACKING_INTERVAL_MS) -> None:
        self._interval = interval_ms / 1000
        self._task: asyncio.Task | None = None

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, callback: Callable[[], Any]) -> bool:
        """Replace any running timer with one firing ``callback`` every interval."""
        self.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; order tracking advances only on manual ticks")
            return False
        self._task = loop.create_task(self._run(callback))
        return True

    async def _run(self, callback: Callable[[], Any]) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                callback()
            except Exception:
                logger.exception("Order tracking tick failed")

    def cancel(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()


class OrderTracker:
    """Owns the active order, advances it over time and persists every change."""

    def __init__(
        self,
        store: KeyValueStore,
        timer: TrackingTimer | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._timer = timer or TrackingTimer()
        self._clock = clock or now_ms
        self._order: Order | None = None

    @property
    def order(self) -> Order | None:
        return self._order

    @property
    def is_tracking(self) -> bool:
        return self._timer.is_active

    def _persist(self) -> PersistResult:
        payload = self._order.to_dict() if self._order else None
        try:
            self._store.set(ORDER_STORAGE_KEY, json.dumps(payload, ensure_ascii=False, separators=(",", ":")))
        except Exception as exc:
            logger.warning("Order storage write failed: %s", exc)
            return PersistResult(False, reason=str(exc))
        return PersistResult(True)

    def _ensure_timer(self) -> None:
        if self._order is None or self._order.is_terminal:
            self._timer.cancel()
            return
        self._timer.start(functools.partial(self._on_timer, self._order.id))

    def _on_timer(self, order_id: str) -> None:
        if self._order is None or self._order.id != order_id:
            return
        self.tick()

    def restore(self) -> Order | None:
        """Load the persisted order on startup and resume tracking if still active."""
        try:
            raw = self._store.get(ORDER_STORAGE_KEY)
        except Exception as exc:
            logger.warning("Order storage read failed: %s", exc)
            raw = None

        self._timer.cancel()
        self._order = Order.from_dict(safe_parse_json(raw))
        if self._order is not None:
            logger.info("Restored order %s (%s)", self._order.id, self._order.status)
        self._ensure_timer()
        return self._order

    def resume(self) -> bool:
        """Restart the timer for a restored order once an event loop is running."""
        if self._order is not None:
            self.tick()
        self._ensure_timer()
        return self.is_tracking

    def start(self, order: Order) -> None:
        """Install ``order`` as the active order, replacing any previous one."""
        self._timer.cancel()
        self._order = order
        self._persist()
        self._ensure_timer()

    def tick(self, now: int | None = None) -> bool:
        """Recompute status and progress; returns True when the order changed."""
        order = self._order
        if order is None:
            self._timer.cancel()
            return False

        update = compute_tracking(order, self._clock() if now is None else now)
        if update.changed:
            self._order = order.with_tracking(update.status, update.progress)
            self._persist()
            logger.debug("Order %s -> %s (%s%%)", order.id, update.status, update.progress)

        if self._order.is_terminal:
            self._timer.cancel()
        return update.changed

    def mark_cancelled(self) -> bool:
        """Cancellation entry point for external collaborators."""
        if self._order is None or self._order.is_terminal:
            return False
        self._timer.cancel()
        self._order = self._order.with_tracking(OrderStatus.CANCELLED, self._order.progress)
        self._persist()
        return True

    def clear(self) -> None:
        """Start a new order: drop the active one and stop its timer."""
        self._timer.cancel()
        self._order = None
        self._persist()

    def cancel(self) -> None:
        self._timer.cancel()


__all__ = ["OrderTracker", "TrackingTimer"]
