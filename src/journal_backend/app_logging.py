"""Logging setup and the application logger facade.

Debug/info chatter is only emitted in development; warnings and errors are
always emitted. Logging must not change program behavior.
"""

from __future__ import annotations

import logging
import sys
import time

from journal_backend.config import Settings, settings
from journal_backend.error_utils import extract_message

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(name: str) -> int:
    # The logging module also exposes non-level names such as BASIC_FORMAT.
    level = getattr(logging, name.strip().upper(), None)
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    return logging.INFO


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger.

    Args:
        level: The log level name (DEBUG, INFO, WARNING, ERROR). Unknown
            names fall back to INFO.
    """
    logging.basicConfig(
        level=resolve_level(level),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )


def _format_duration(duration_ms: float | None) -> str:
    if duration_ms is None:
        return ""
    return f" ({duration_ms:.0f}ms)"


class AppLogger:
    def __init__(self, name: str = "journal_backend", app_settings: Settings | None = None) -> None:
        self._logger = logging.getLogger(name)
        self._settings = app_settings
        self._timers: dict[str, float] = {}

    @property
    def settings(self) -> Settings:
        return self._settings if self._settings is not None else settings

    def debug(self, message: str, *args: object) -> None:
        if self.settings.is_development():
            self._logger.debug(message, *args)

    def info(self, message: str, *args: object) -> None:
        if self.settings.is_development():
            self._logger.info(message, *args)

    def warn(self, message: str, *args: object) -> None:
        self._logger.warning(message, *args)

    def error(self, message: str, exc: object = None, **data: object) -> None:
        parts = [message]
        if exc is not None:
            parts.append(f"error={extract_message(exc)!r}")
        for key, value in data.items():
            parts.append(f"{key}={value!r}")
        self._logger.error(" ".join(parts))

    def api_request(
        self,
        method: str,
        url: str,
        status: int | None = None,
        duration_ms: float | None = None,
    ) -> None:
        message = f"{method} {url}"
        if status is not None:
            message += f" - {status}"
        message += _format_duration(duration_ms)

        if status is not None and status >= 400:
            self.warn("API Error: %s", message)
        elif duration_ms is not None and duration_ms >= self.settings.slow_request_ms:
            self.warn("API slow: %s", message)
        else:
            self.debug("API: %s", message)

    def user_action(self, action: str, user_id: str | None = None, **data: object) -> None:
        message = f"User Action: {action}"
        if user_id:
            message += f" by {user_id}"
        for key, value in data.items():
            message += f" {key}={value!r}"
        self.info("%s", message)

    def time(self, label: str) -> None:
        if self.settings.is_development():
            self._timers[label] = time.perf_counter()

    def time_end(self, label: str) -> float | None:
        """Stop the ``label`` timer and log its duration; None if it was never started."""

        started = self._timers.pop(label, None)
        if started is None:
            return None
        duration_ms = (time.perf_counter() - started) * 1000
        self.debug("%s:%s", label, _format_duration(duration_ms))
        return duration_ms


app_logger = AppLogger()


class ApiCallTimer:
    """Measures one API call and logs it once it finishes."""

    def __init__(self, method: str, endpoint: str, log: AppLogger | None = None) -> None:
        self.method = method
        self.endpoint = endpoint
        self._log = log if log is not None else app_logger
        self._start = time.perf_counter()

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._start) * 1000

    def success(self, status: int = 200) -> None:
        self._log.api_request(self.method, self.endpoint, status, self.elapsed_ms())

    def error(self, status: int, exc: BaseException | None = None) -> None:
        self._log.api_request(self.method, self.endpoint, status, self.elapsed_ms())
        if exc is not None:
            self._log.error(f"API Error in {self.method} {self.endpoint}", exc)


def log_api_call(method: str, endpoint: str, log: AppLogger | None = None) -> ApiCallTimer:
    return ApiCallTimer(method, endpoint, log)
