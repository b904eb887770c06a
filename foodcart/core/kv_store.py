"""Durable key-value storage backends shared by the cart and the order tracker."""
from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import redis

from foodcart.core.exceptions import StorageException
from foodcart.logging_config import logger


@runtime_checkable
class KeyValueStore(Protocol):
    """String-keyed, string-valued storage port.

    Implementations raise ``StorageException`` when the backend is
    unavailable; callers decide whether to degrade.
    """

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MemoryKeyValueStore:
    """Process-local store. State is lost on restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class RedisKeyValueStore:
    """Redis-backed store without expiry so cart and order survive restarts."""

    def __init__(self, client: Any, namespace: str = "") -> None:
        self._client = client
        self._namespace = namespace

    @classmethod
    def from_url(cls, redis_url: str, namespace: str = "") -> RedisKeyValueStore:
        try:
            client = redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            client.ping()
        except (redis.RedisError, ValueError) as exc:
            raise StorageException(f"Redis connection failed: {exc}") from exc
        return cls(client, namespace=namespace)

    def _key(self, key: str) -> str:
        return f"{self._namespace}{key}"

    def get(self, key: str) -> str | None:
        try:
            return self._client.get(self._key(key))
        except redis.RedisError as exc:
            raise StorageException(f"Redis GET failed: {exc}", key=key) from exc

    def set(self, key: str, value: str) -> None:
        try:
            self._client.set(self._key(key), value)
        except redis.RedisError as exc:
            raise StorageException(f"Redis SET failed: {exc}", key=key) from exc

    def delete(self, key: str) -> None:
        try:
            self._client.delete(self._key(key))
        except redis.RedisError as exc:
            raise StorageException(f"Redis DEL failed: {exc}", key=key) from exc


def create_store(redis_url: str | None = None, namespace: str = "") -> KeyValueStore:
    """Redis when configured and reachable, otherwise in-memory."""
    if not redis_url:
        logger.warning("REDIS_URL is not set; cart and order state use in-memory storage")
        return MemoryKeyValueStore()

    try:
        store = RedisKeyValueStore.from_url(redis_url, namespace=namespace)
    except StorageException as exc:
        logger.warning("Redis storage init failed, fallback to in-memory: %s", exc.message)
        return MemoryKeyValueStore()

    logger.info("Redis storage enabled")
    return store


__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "RedisKeyValueStore",
    "create_store",
]
