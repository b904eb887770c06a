from __future__ import annotations

import asyncio
import json

import aiohttp
import pytest

from foodcart.integrations.order_api import OrderApiClient, extract_order_id


class FakeResponse:
    def __init__(self, status: int = 200, body=None, body_error: Exception | None = None) -> None:
        self.status = status
        self._body = body
        self._body_error = body_error

    async def json(self, content_type=None):
        if self._body_error is not None:
            raise self._body_error
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> bool:
        return False


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.closed = False
        self.calls: list[tuple[str, dict]] = []

    def post(self, url: str, json=None, headers=None):
        self.calls.append((url, json))
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self) -> None:
        self.closed = True


PAYLOAD = {"customerName": "Ada", "items": [], "pricing": {"total": 0}}


@pytest.mark.parametrize(
    ("body", "expected"),
    [
        ({"id": "abc"}, "abc"),
        ({"orderId": 77}, "77"),
        ({"id": "", "orderId": "fallback"}, "fallback"),
        ({"id": True}, None),
        ({"status": "ok"}, None),
        (["abc"], None),
        (None, None),
    ],
)
def test_extract_order_id(body, expected) -> None:
    assert extract_order_id(body) == expected


def test_orders_url_strips_trailing_slash() -> None:
    assert OrderApiClient("https://api.example.test/").orders_url == "https://api.example.test/orders"


@pytest.mark.asyncio
async def test_unconfigured_client_does_nothing() -> None:
    session = FakeSession(FakeResponse(body={"id": "x"}))
    client = OrderApiClient("", session=session)

    result = await client.submit_order(PAYLOAD)

    assert not result
    assert session.calls == []


@pytest.mark.asyncio
async def test_successful_submission_returns_remote_id() -> None:
    session = FakeSession(FakeResponse(201, body={"orderId": "srv-1"}))
    client = OrderApiClient("https://api.example.test", session=session)

    result = await client.submit_order(PAYLOAD)

    assert result.ok
    assert result.order_id == "srv-1"
    assert session.calls == [("https://api.example.test/orders", PAYLOAD)]


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(FakeResponse(503, body={"id": "ignored"})),
        FakeSession(FakeResponse(200, body={"message": "created"})),
        FakeSession(FakeResponse(200, body_error=json.JSONDecodeError("bad", "doc", 0))),
        FakeSession(error=aiohttp.ClientConnectionError("connection refused")),
        FakeSession(error=asyncio.TimeoutError()),
    ],
)
@pytest.mark.asyncio
async def test_failures_are_absorbed(session) -> None:
    client = OrderApiClient("https://api.example.test", session=session)

    result = await client.submit_order(PAYLOAD)

    assert not result
    assert result.order_id is None
    assert result.error


@pytest.mark.asyncio
async def test_close_leaves_injected_session_open() -> None:
    session = FakeSession()
    client = OrderApiClient("https://api.example.test", session=session)

    await client.close()

    assert not session.closed
