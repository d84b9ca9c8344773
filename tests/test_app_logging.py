from __future__ import annotations

import logging

import pytest

from journal_backend.app_logging import AppLogger, configure_logging, log_api_call, resolve_level
from journal_backend.config import Settings

LOGGER_NAME = "journal_backend.test_app_logging"


def _logger(environment: str) -> AppLogger:
    return AppLogger(LOGGER_NAME, Settings.model_validate({"environment": environment}))


def _messages(caplog: pytest.LogCaptureFixture) -> list[tuple[int, str]]:
    return [(r.levelno, r.getMessage()) for r in caplog.records if r.name == LOGGER_NAME]


def test_debug_and_info_only_in_development(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)

    _logger("production").info("hidden %s", 1)
    _logger("development").info("shown %s", 2)

    assert _messages(caplog) == [(logging.INFO, "shown 2")]


def test_api_request_logs_error_status_as_warning(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)

    _logger("production").api_request("POST", "/api/v1/save-csv", 500, 12.4)
    _logger("development").api_request("GET", "/health", 200, 3)

    assert _messages(caplog) == [
        (logging.WARNING, "API Error: POST /api/v1/save-csv - 500 (12ms)"),
        (logging.DEBUG, "API: GET /health - 200 (3ms)"),
    ]


def test_api_request_flags_slow_calls(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    log = AppLogger(LOGGER_NAME, Settings.model_validate({"slow_request_ms": 10}))

    log.api_request("GET", "/health", 200, 50)

    assert _messages(caplog) == [(logging.WARNING, "API slow: GET /health - 200 (50ms)")]


def test_error_includes_normalized_message_and_data(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.ERROR, logger=LOGGER_NAME)

    _logger("production").error("Database Error", {"message": "timeout"}, collection="trades")

    assert _messages(caplog) == [
        (logging.ERROR, "Database Error error='timeout' collection='trades'"),
    ]


def test_api_call_timer_logs_failure_and_exception(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)

    timer = log_api_call("GET", "/api/v1/trades", _logger("production"))
    timer.error(502, ConnectionError("upstream down"))

    levels_and_messages = _messages(caplog)
    assert levels_and_messages[0][0] == logging.WARNING
    assert levels_and_messages[0][1].startswith("API Error: GET /api/v1/trades - 502 (")
    assert levels_and_messages[1] == (
        logging.ERROR,
        "API Error in GET /api/v1/trades error='upstream down'",
    )
    assert timer.elapsed_ms() >= 0


def test_configure_logging_falls_back_to_info_for_unknown_level():
    root = logging.getLogger()
    old_level = root.level
    old_handlers = root.handlers[:]
    try:
        configure_logging("not-a-level")
        assert root.level == logging.INFO
        configure_logging("debug")
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = old_handlers
        root.setLevel(old_level)


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("warning", logging.WARNING),
        (" Error ", logging.ERROR),
        ("basic_format", logging.INFO),
        ("raiseExceptions", logging.INFO),
        ("verbose", logging.INFO),
    ],
)
def test_resolve_level_only_accepts_level_names(name: str, expected: int):
    assert resolve_level(name) == expected


def test_configure_logging_survives_non_level_attribute_names():
    root = logging.getLogger()
    old_level = root.level
    old_handlers = root.handlers[:]
    try:
        configure_logging("basic_format")
        assert root.level == logging.INFO
    finally:
        root.handlers[:] = old_handlers
        root.setLevel(old_level)


def test_user_action_only_in_development(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)

    _logger("production").user_action("export", "u1")
    _logger("development").user_action("export", "u1", rows=3)
    _logger("development").user_action("login")

    assert _messages(caplog) == [
        (logging.INFO, "User Action: export by u1 rows=3"),
        (logging.INFO, "User Action: login"),
    ]


def test_time_and_time_end_log_duration_in_development(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    log = _logger("development")

    log.time("load-csv")
    duration = log.time_end("load-csv")

    assert duration is not None and duration >= 0
    assert log.time_end("load-csv") is None
    messages = _messages(caplog)
    assert len(messages) == 1
    assert messages[0][0] == logging.DEBUG
    assert messages[0][1].startswith("load-csv: (")


def test_time_is_ignored_outside_development(caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    log = _logger("production")

    log.time("load-csv")

    assert log.time_end("load-csv") is None
    assert _messages(caplog) == []
