"""Per-request id, echoed from the client or generated.

The id is stored in ``request.state.request_id`` and returned in the
``X-Request-Id`` response header.
"""

from __future__ import annotations

import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "X-Request-Id"


def resolve_request_id(headers: Headers) -> str:
    inbound = headers.get(REQUEST_ID_HEADER, "").strip()
    return inbound or str(uuid.uuid4())


def request_id_headers(request: Request) -> dict[str, str] | None:
    """Response headers carrying the id, for responses built outside the middleware."""

    request_id = getattr(request.state, "request_id", None)
    if not isinstance(request_id, str) or not request_id:
        return None
    return {REQUEST_ID_HEADER: request_id}


class RequestIdMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app: ASGIApp = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = resolve_request_id(Headers(scope=scope))
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                MutableHeaders(scope=message)[REQUEST_ID_HEADER] = request_id
            await send(message)

        await self.app(scope, receive, send_with_request_id)
