# tests/unit/infrastructure/test_json_logger.py
from __future__ import annotations

import json
import logging
from decimal import Decimal

import pytest

from catalog_api.infrastructure.logging.logger import (
    _JsonFormatter,  # internal but importable
    configure_root_logging,
    get_json_logger,
)


def _capture_log(record_msg: str, level: int = logging.INFO, **extra) -> dict:
    """Emit a log record and return the parsed JSON payload."""
    logger = logging.getLogger("test.logger")
    fmt = _JsonFormatter()
    record = logger.makeRecord(
        name=logger.name,
        level=level,
        fn="test_json_logger",
        lno=123,
        msg=record_msg,
        args=(),
        exc_info=None,
        extra=extra or None,
    )
    return json.loads(fmt.format(record))


def test_configure_root_logging_installs_json_handler_once(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Root logger should get one JSON handler and respect LOG_LEVEL."""
    monkeypatch.setenv("LOG_LEVEL", "debug")
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    root.handlers.clear()
    try:
        configure_root_logging()
        configure_root_logging()
        assert root.level == logging.DEBUG
        json_handlers = [h for h in root.handlers if isinstance(h.formatter, _JsonFormatter)]
        assert len(json_handlers) == 1

        configure_root_logging("WARNING")
        assert root.level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_json_formatter_basic_fields() -> None:
    """Formatter should emit ts, level, logger and message."""
    payload = _capture_log("hello-world")
    assert payload["message"] == "hello-world"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert "ts" in payload


def test_json_formatter_merges_extra_fields() -> None:
    payload = _capture_log(
        "cache.backfill_failed",
        level=logging.WARNING,
        key="ProductById:1",
        resource="product",
        error_code="CACHE_TIMEOUT",
    )
    assert payload["key"] == "ProductById:1"
    assert payload["resource"] == "product"
    assert payload["error_code"] == "CACHE_TIMEOUT"
    assert "lineno" not in payload


def test_json_formatter_renders_non_json_values_as_strings() -> None:
    payload = _capture_log("price", price=Decimal("9.99"))
    assert payload["price"] == "9.99"


def test_json_formatter_includes_request_id_from_record_and_env(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Request ID should come from record.request_id or REQUEST_ID env."""
    monkeypatch.delenv("REQUEST_ID", raising=False)

    payload = _capture_log("with-record-id", request_id="abc-123")
    assert payload["request_id"] == "abc-123"

    monkeypatch.setenv("REQUEST_ID", "env-id")
    payload = _capture_log("with-env-id")
    assert payload["request_id"] == "env-id"


def test_json_formatter_includes_exception_info() -> None:
    """Formatter should add exc_type and exc_message for errors with exc_info."""
    logger = logging.getLogger("test.logger.exc")
    fmt = _JsonFormatter()
    try:
        raise ValueError("boom")
    except ValueError as exc:
        record = logger.makeRecord(
            logger.name, logging.ERROR, "f", 1, "failure", (), (type(exc), exc, None)
        )

    payload = json.loads(fmt.format(record))
    assert payload["level"] == "ERROR"
    assert payload["exc_type"] == "ValueError"
    assert "boom" in payload["exc_message"]


def test_get_json_logger_propagates_to_root() -> None:
    log = get_json_logger("catalog_api.test")
    assert log.name == "catalog_api.test"
    assert log.propagate is True
