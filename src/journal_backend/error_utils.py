"""Helpers for turning caught failures into stable, serializable descriptions.

Anything can reach an ``except`` block or a callback's error slot: exceptions,
plain strings, decoded JSON error bodies, ``None``. The helpers here never raise
on such input:

- ``extract_message``: best-effort human-readable message for any value
- ``build_response_payload``: uniform ``{message, error?, timestamp}`` body
- ``report_failure``: log the raw failure (and its traceback, if any)
"""

from __future__ import annotations

import enum
import logging
import traceback
from collections.abc import Callable, Mapping
from datetime import datetime, timezone
from typing import Protocol

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


class Missing(enum.Enum):
    """Marks an optional argument the caller did not pass at all."""

    MISSING = enum.auto()


MISSING = Missing.MISSING

Clock = Callable[[], datetime]


class LogSink(Protocol):
    def error(self, msg: str, *args: object) -> object: ...


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def isoformat_utc(value: datetime) -> str:
    """Render ``value`` like ``2026-01-02T03:04:05.678Z``.

    Naive datetimes are taken to be UTC already.
    """

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    rendered = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


def _safe_str(value: object) -> str | None:
    try:
        return str(value)
    except Exception:
        return None


def _safe_repr(value: object) -> str:
    try:
        return repr(value)
    except Exception:
        return f"<unrepresentable {type(value).__name__}>"


def _message_field(failure: object) -> tuple[bool, object]:
    # Decoded JSON bodies carry the message as a key; error-like objects as an attribute.
    if isinstance(failure, Mapping):
        try:
            if "message" in failure:
                return True, failure["message"]
        except Exception:
            return False, None
        return False, None

    try:
        return True, getattr(failure, "message")
    except Exception:
        return False, None


def extract_message(failure: object) -> str:
    """Return the most descriptive message available for ``failure``.

    Exceptions use their ``str()`` form, strings are returned as-is, and other
    objects fall back to a ``message`` key/attribute. Anything else, or any
    value that fails while being inspected, yields ``UNKNOWN_ERROR_MESSAGE``.
    """

    if isinstance(failure, BaseException):
        text = _safe_str(failure)
        return UNKNOWN_ERROR_MESSAGE if text is None else text

    if isinstance(failure, str):
        return failure

    if failure is not None:
        found, field = _message_field(failure)
        if found:
            text = _safe_str(field)
            if text is not None:
                return text

    return UNKNOWN_ERROR_MESSAGE


class ErrorResponsePayload(BaseModel):
    """Error body returned to API clients.

    ``error`` is only present when a failure was handed to
    ``build_response_payload``; ``to_response_dict`` drops it otherwise.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    error: str | None = None
    timestamp: str

    def to_response_dict(self) -> dict[str, str]:
        return self.model_dump(exclude_none=True)


def build_response_payload(
    message: str,
    failure: object | Missing = MISSING,
    *,
    clock: Clock = utc_now,
) -> ErrorResponsePayload:
    # Any passed value counts, including None, "" and 0.
    error = None if failure is MISSING else extract_message(failure)
    return ErrorResponsePayload(
        message=message,
        error=error,
        timestamp=isoformat_utc(clock()),
    )


def _format_stack(failure: BaseException) -> str | None:
    if failure.__traceback__ is None:
        return None
    return "".join(
        traceback.format_exception(type(failure), failure, failure.__traceback__)
    ).rstrip()


class ErrorReporter:
    """Writes failures to a log sink without ever raising."""

    def __init__(self, sink: LogSink | None = None) -> None:
        self.sink: LogSink = sink if sink is not None else logger

    def report(self, context: str, failure: object) -> None:
        try:
            self.sink.error("[%s] Error: %s", context, _safe_repr(failure))
            if isinstance(failure, BaseException):
                stack = _format_stack(failure)
                if stack is not None:
                    self.sink.error("[%s] Stack: %s", context, stack)
        except Exception:
            # Reporting runs inside the caller's own failure handling.
            pass


_default_reporter = ErrorReporter()


def report_failure(context: str, failure: object) -> None:
    _default_reporter.report(context, failure)
