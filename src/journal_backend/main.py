from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, HTTPException, Request
from starlette.responses import Response

from journal_backend.app_logging import configure_logging, log_api_call
from journal_backend.config import settings
from journal_backend.error_handlers import register_error_handlers
from journal_backend.request_id import RequestIdMiddleware
from journal_backend.routers import debug, health


configure_logging(settings.log_level)

logger = logging.getLogger(__name__)
for msg in settings.security_warnings():
    logger.warning("SECURITY WARNING: %s", msg)


app = FastAPI(title=settings.app_name, version=settings.app_version)

register_error_handlers(app)


@app.middleware("http")
async def request_logging_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    timer = log_api_call(request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception as exc:
        timer.error(500, exc)
        raise

    if response.status_code >= 400:
        timer.error(response.status_code)
    else:
        timer.success(response.status_code)
    return response


app.add_middleware(RequestIdMiddleware)


app.include_router(health.router)
if not settings.is_production():
    app.include_router(debug.router, prefix=settings.api_prefix)


@app.api_route(
    f"{settings.api_prefix.rstrip('/')}/{{path:path}}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    include_in_schema=False,
)
async def _api_fallback_not_found(path: str) -> None:  # noqa: ARG001
    raise HTTPException(status_code=404, detail="Not Found")
