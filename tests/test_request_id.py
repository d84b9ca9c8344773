from __future__ import annotations

import uuid

import httpx
import pytest
from starlette.datastructures import Headers
from starlette.requests import Request

from journal_backend.main import app
from journal_backend.request_id import request_id_headers, resolve_request_id


def _make_async_client() -> httpx.AsyncClient:
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://test")


def test_resolve_request_id_prefers_inbound_value():
    assert resolve_request_id(Headers({"x-request-id": "  abc-1  "})) == "abc-1"


@pytest.mark.parametrize("headers", [{}, {"x-request-id": "   "}])
def test_resolve_request_id_generates_uuid_when_missing(headers: dict[str, str]):
    value = resolve_request_id(Headers(headers))
    assert str(uuid.UUID(value)) == value


def test_request_id_headers_reads_request_state():
    request = Request({"type": "http", "headers": [], "state": {"request_id": "req-9"}})
    assert request_id_headers(request) == {"X-Request-Id": "req-9"}

    bare = Request({"type": "http", "headers": []})
    assert request_id_headers(bare) is None


@pytest.mark.anyio
async def test_response_carries_single_request_id_header():
    async with _make_async_client() as client:
        echoed = await client.get("/health", headers={"X-Request-Id": "req-abc"})
        generated = await client.get("/health")

    assert echoed.headers.get_list("x-request-id") == ["req-abc"]
    assert len(generated.headers.get_list("x-request-id")) == 1
    assert generated.headers["x-request-id"] != "req-abc"
