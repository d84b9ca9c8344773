from __future__ import annotations

import os
import time

from fastapi import APIRouter, Response
from fastapi.responses import JSONResponse

from journal_backend.config import settings
from journal_backend.error_utils import isoformat_utc, utc_now

router = APIRouter(tags=["health"])

_STARTED_AT = time.monotonic()

_NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def missing_env_vars(names: list[str]) -> list[str]:
    return [name for name in names if not os.environ.get(name)]


@router.get("/health")
async def health() -> JSONResponse:
    start = time.perf_counter()

    required = settings.required_env_vars_list()
    missing = missing_env_vars(required)
    is_healthy = not missing

    body = {
        "status": "healthy" if is_healthy else "unhealthy",
        "timestamp": isoformat_utc(utc_now()),
        "version": settings.app_version,
        "environment": settings.environment,
        "uptime": round(time.monotonic() - _STARTED_AT, 3),
        "environment_variables": {
            "missing": missing,
            "count": len(required) - len(missing),
            "total": len(required),
        },
        "performance": {
            "responseTime": round((time.perf_counter() - start) * 1000, 3),
        },
    }
    return JSONResponse(
        status_code=200 if is_healthy else 503,
        content=body,
        headers=_NO_CACHE_HEADERS,
    )


@router.head("/health")
async def health_head() -> Response:
    return Response(status_code=200, headers=_NO_CACHE_HEADERS)
