from __future__ import annotations

import asyncio

import httpx
import pytest

from adapters.http_source import HttpQuoteSource
from core.errors import DecodeError, TransportError

ENDPOINT = "https://example.test/posts"


def _fetch(handler, limit=None):
    async def run():
        transport = httpx.MockTransport(handler)
        async with httpx.AsyncClient(transport=transport) as client:
            return await HttpQuoteSource(client, ENDPOINT, limit=limit).fetch()

    return asyncio.run(run())


def test_fetch_returns_decoded_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert str(request.url) == ENDPOINT
        return httpx.Response(200, json=[{"title": "a", "body": "b"}])

    assert _fetch(handler) == [{"title": "a", "body": "b"}]


def test_fetch_applies_limit() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"title": str(i)} for i in range(100)])

    assert len(_fetch(handler, limit=10)) == 10


def test_http_error_status_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="down")

    with pytest.raises(TransportError):
        _fetch(handler)


def test_connection_failure_is_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(TransportError):
        _fetch(handler)


def test_non_json_body_is_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(DecodeError):
        _fetch(handler)
