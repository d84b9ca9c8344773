"""Uniform exception handling (ErrorResponsePayload).

Every API failure is returned with the same JSON shape:
  {message, error?, timestamp}
so that clients parse one structure instead of FastAPI's default {"detail": ...}.
"""

from __future__ import annotations

import logging
from typing import cast

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from journal_backend.config import settings
from journal_backend.error_utils import (
    ErrorResponsePayload,
    build_response_payload,
    report_failure,
)
from journal_backend.request_id import request_id_headers

logger = logging.getLogger(__name__)


def _payload_response(
    status_code: int,
    payload: ErrorResponsePayload,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=payload.to_response_dict(),
        headers=headers,
    )


def _http_detail_message(detail: object) -> str:
    # Convention: {'message': str, ...}
    if isinstance(detail, dict):
        msg = cast(dict[str, object], detail).get("message")
        if isinstance(msg, str):
            return msg
    return str(detail)


def _first_validation_error(exc: RequestValidationError) -> object:
    errors = exc.errors()
    if not errors:
        return exc
    first = cast(dict[str, object], errors[0])
    loc = first.get("loc") or ()
    where = ".".join(str(part) for part in cast(tuple[object, ...], loc))
    msg = first.get("msg")
    if where:
        return f"{where}: {msg}"
    return {"message": msg}


async def _http_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    payload = build_response_payload(_http_detail_message(http_exc.detail))
    headers = getattr(http_exc, "headers", None)
    return _payload_response(http_exc.status_code, payload, headers)


async def _validation_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    validation_exc = cast(RequestValidationError, exc)
    payload = build_response_payload(
        "Request validation error", _first_validation_error(validation_exc)
    )
    return _payload_response(422, payload)


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    context = f"{request.method} {request.url.path}"
    report_failure(context, exc)
    logger.info("unhandled exception reported request_id=%s context=%s", request_id, context)

    if settings.should_expose_error_details():
        payload = build_response_payload("Internal server error", exc)
    else:
        payload = build_response_payload("Internal server error")
    return _payload_response(500, payload, request_id_headers(request))


def register_error_handlers(app: FastAPI) -> None:
    """Register the uniform exception handlers on a FastAPI app."""

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
