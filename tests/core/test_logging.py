from __future__ import annotations

import json
import logging

from app.core.logging import _ContainerFormatter, _JsonFormatter, setup_logging


def _record(level: int, msg: str = "hello", **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test",
        level=level,
        pathname="svc.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_setup_logging_sets_root_level() -> None:
    setup_logging("debug")
    assert logging.getLogger().level == logging.DEBUG

    setup_logging("warning")
    assert logging.getLogger().level == logging.WARNING


def test_setup_logging_defaults_to_info_for_unknown_level() -> None:
    setup_logging("nonexistent")
    assert logging.getLogger().level == logging.INFO


def test_setup_logging_quiets_driver_loggers_at_debug() -> None:
    setup_logging("debug")
    assert logging.getLogger("aiosqlite").level == logging.WARNING
    assert logging.getLogger("uvicorn").level == logging.WARNING


def test_setup_logging_selects_json_formatter() -> None:
    setup_logging("info", json_format=True)
    (handler,) = logging.getLogger().handlers
    assert isinstance(handler.formatter, _JsonFormatter)
    setup_logging("info")


def test_container_formatter_location_only_for_warning_and_up() -> None:
    fmt = _ContainerFormatter()
    assert "[svc.py:42]" not in fmt.format(_record(logging.INFO))
    assert "[svc.py:42]" in fmt.format(_record(logging.WARNING))


def test_json_formatter_includes_request_context() -> None:
    line = _JsonFormatter().format(
        _record(
            logging.INFO,
            "POST /api/verify",
            request_id="req-1",
            service="verification",
            status_code=404,
        )
    )
    entry = json.loads(line)
    assert entry["message"] == "POST /api/verify"
    assert entry["request_id"] == "req-1"
    assert entry["service"] == "verification"
    assert entry["status_code"] == 404
    assert "duration_ms" not in entry


def test_json_formatter_skips_placeholder_request_id() -> None:
    entry = json.loads(_JsonFormatter().format(_record(logging.INFO, request_id="-")))
    assert "request_id" not in entry
