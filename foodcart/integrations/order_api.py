"""Optional remote order submission.

When a base URL is configured, an order is POSTed once to ``<base>/orders``.
Any failure is absorbed: the caller always gets a ``SubmissionResult`` and
falls back to a locally generated order id.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any

import aiohttp

from foodcart.core.constants import REMOTE_API_TIMEOUT_SECONDS
from foodcart.core.exceptions import RemoteApiException
from foodcart.logging_config import logger


@dataclass(frozen=True, slots=True)
class SubmissionResult:
    ok: bool
    order_id: str | None = None
    error: str | None = None

    def __bool__(self) -> bool:
        return self.ok


def extract_order_id(body: Any) -> str | None:
    """``id`` wins over ``orderId``; empty values are ignored."""
    if not isinstance(body, dict):
        return None
    for key in ("id", "orderId"):
        value = body.get(key)
        if isinstance(value, bool) or value is None:
            continue
        if isinstance(value, (str, int)) and str(value).strip():
            return str(value).strip()
    return None


class OrderApiClient:
    """Thin aiohttp client for the optional order backend."""

    def __init__(
        self,
        api_base: str | None,
        timeout: float = REMOTE_API_TIMEOUT_SECONDS,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._api_base = (api_base or "").strip()
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None

    @property
    def configured(self) -> bool:
        return bool(self._api_base)

    @property
    def orders_url(self) -> str:
        return f"{self._api_base.rstrip('/')}/orders"

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def _post_order(self, payload: dict[str, Any]) -> str:
        session = await self._get_session()
        async with session.post(
            self.orders_url,
            json=payload,
            headers={"Content-Type": "application/json"},
        ) as resp:
            if resp.status < 200 or resp.status >= 300:
                raise RemoteApiException(f"Order API returned HTTP {resp.status}", status=resp.status)
            body = await resp.json(content_type=None)

        order_id = extract_order_id(body)
        if order_id is None:
            raise RemoteApiException("Order API response has no id/orderId", status=resp.status)
        return order_id

    async def submit_order(self, payload: dict[str, Any]) -> SubmissionResult:
        """POST the order; never raises for network or protocol failures."""
        if not self.configured:
            return SubmissionResult(False, error="not configured")

        try:
            order_id = await self._post_order(payload)
        except RemoteApiException as exc:
            logger.warning("Remote order submission rejected: %s", exc.message)
            return SubmissionResult(False, error=exc.message)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.warning("Remote order submission failed: %s", exc)
            return SubmissionResult(False, error=str(exc) or exc.__class__.__name__)

        logger.info("Remote order created: %s", order_id)
        return SubmissionResult(True, order_id=order_id)


__all__ = ["OrderApiClient", "SubmissionResult", "extract_order_id"]
