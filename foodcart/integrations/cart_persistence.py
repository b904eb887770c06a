"""Versioned cart persistence with migration from the legacy key layout.

Storage layout:
- v1 stored the items array and the promo object under two separate keys.
- v2 stores one envelope ``{version, items, promo, savedAt}``.

Both layouts are written on every save so older readers keep working.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional, Sequence

from foodcart.core.constants import (
    CART_STORAGE_KEY_V1,
    CART_STORAGE_KEY_V2,
    CART_STORAGE_VERSION,
    PROMO_STORAGE_KEY_V1,
)
from foodcart.core.kv_store import KeyValueStore
from foodcart.core.utils import Clock, now_ms
from foodcart.domain.cart import NO_PROMO, CartLine, Promo
from foodcart.logging_config import logger

StorageReader = Callable[[str], Optional[str]]


@dataclass(frozen=True, slots=True)
class CartState:
    items: list[CartLine] = field(default_factory=list)
    promo: Promo = NO_PROMO


@dataclass(frozen=True, slots=True)
class PersistResult:
    ok: bool
    skipped: bool = False
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.ok


def safe_parse_json(raw: str | None, fallback: Any = None) -> Any:
    if not raw:
        return fallback
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return fallback
    return fallback if parsed is None else parsed


def sanitize_items(raw: Any) -> list[CartLine]:
    """Keep only entries with a string ``itemId``; default everything else."""
    if not isinstance(raw, list):
        return []
    items: list[CartLine] = []
    seen: set[str] = set()
    for entry in raw:
        line = CartLine.from_dict(entry)
        if line is None or line.item_id in seen:
            continue
        seen.add(line.item_id)
        items.append(line)
    return items


def sanitize_promo(raw: Any) -> Promo:
    return Promo.from_dict(raw)


def migrate_current_envelope(read: StorageReader) -> CartState | None:
    parsed = safe_parse_json(read(CART_STORAGE_KEY_V2))
    if not isinstance(parsed, dict) or parsed.get("version") != CART_STORAGE_VERSION:
        return None
    return CartState(
        items=sanitize_items(parsed.get("items")),
        promo=sanitize_promo(parsed.get("promo")),
    )


def migrate_legacy_keys(read: StorageReader) -> CartState | None:
    return CartState(
        items=sanitize_items(safe_parse_json(read(CART_STORAGE_KEY_V1), [])),
        promo=sanitize_promo(safe_parse_json(read(PROMO_STORAGE_KEY_V1))),
    )


CART_STATE_MIGRATORS: tuple[Callable[[StorageReader], CartState | None], ...] = (
    migrate_current_envelope,
    migrate_legacy_keys,
)


def _dumps(payload: Any) -> str:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


class CartPersistenceAdapter:
    """Loads and saves ``(items, promo)``; never raises on storage failure."""

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock | None = None,
        migrators: Sequence[Callable[[StorageReader], CartState | None]] = CART_STATE_MIGRATORS,
    ) -> None:
        self._store = store
        self._clock = clock or now_ms
        self._migrators = tuple(migrators)
        # state of the last successful write; process-local only
        self._last_persisted: str | None = None

    def _safe_get(self, key: str) -> str | None:
        try:
            return self._store.get(key)
        except Exception as exc:
            logger.warning("Cart storage read failed for %s: %s", key, exc)
            return None

    def _safe_set(self, key: str, value: str) -> bool:
        try:
            self._store.set(key, value)
            return True
        except Exception as exc:
            logger.warning("Cart storage write failed for %s: %s", key, exc)
            return False

    def load(self) -> CartState:
        for migrator in self._migrators:
            try:
                state = migrator(self._safe_get)
            except Exception as exc:
                logger.warning("Cart migrator %s failed: %s", getattr(migrator, "__name__", migrator), exc)
                continue
            if state is not None:
                return state
        return CartState()

    def save(self, items: Iterable[CartLine], promo: Promo) -> PersistResult:
        items_payload = [item.to_dict() for item in items]
        promo_payload = promo.to_dict()
        state = _dumps(
            {"version": CART_STORAGE_VERSION, "items": items_payload, "promo": promo_payload}
        )
        if state == self._last_persisted:
            logger.debug("Cart state unchanged; skipping write")
            return PersistResult(True, skipped=True)

        envelope = _dumps(
            {
                "version": CART_STORAGE_VERSION,
                "items": items_payload,
                "promo": promo_payload,
                "savedAt": self._clock(),
            }
        )
        if not self._safe_set(CART_STORAGE_KEY_V2, envelope):
            return PersistResult(False, reason="envelope write failed")

        # Compatibility mirrors; only attempted once the envelope is stored.
        legacy_ok = self._safe_set(CART_STORAGE_KEY_V1, _dumps(items_payload))
        legacy_ok = self._safe_set(PROMO_STORAGE_KEY_V1, _dumps(promo_payload)) and legacy_ok
        self._last_persisted = state
        if not legacy_ok:
            return PersistResult(True, reason="legacy mirror write failed")
        return PersistResult(True)


__all__ = [
    "CART_STATE_MIGRATORS",
    "CartPersistenceAdapter",
    "CartState",
    "PersistResult",
    "migrate_current_envelope",
    "migrate_legacy_keys",
    "safe_parse_json",
    "sanitize_items",
    "sanitize_promo",
]
