"""
Unit tests for structured logging utilities.
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO

import pytest

from faultline.models.error import ErrorRecord, ErrorSeverity, ErrorType
from faultline.utils.logging import (
    OPERATOR_LOGGER_NAME,
    JSONFormatter,
    get_logger,
    get_operator_logger,
    log_error_with_context,
    log_handled_error,
    setup_logging,
)


def _capture(logger, level=logging.DEBUG) -> StringIO:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JSONFormatter())
    base = logger.logger if isinstance(logger, logging.LoggerAdapter) else logger
    base.handlers.clear()
    base.addHandler(handler)
    base.setLevel(level)
    base.propagate = False
    return stream


def _record(severity=ErrorSeverity.HIGH) -> ErrorRecord:
    return ErrorRecord(
        id="err_1_abc",
        timestamp=datetime.now(timezone.utc),
        type=ErrorType.SYSTEM_ERROR,
        severity=severity,
        retryable=False,
        component="summaries",
        operation="generate",
        session_id="sess_1",
        message="boom",
    )


def test_json_formatter():
    """Test JSON formatter produces valid JSON output."""
    logger = logging.getLogger("test_json_formatter")
    stream = _capture(logger, logging.INFO)

    logger.info("Test message", extra={"error_id": "err_1", "component": "uploads", "attempt": 2})

    log_data = json.loads(stream.getvalue())

    assert "timestamp" in log_data
    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test_json_formatter"
    assert log_data["message"] == "Test message"
    assert log_data["error_id"] == "err_1"
    assert log_data["component"] == "uploads"
    assert log_data["context"]["attempt"] == 2
    assert "source" in log_data


def test_get_logger_with_context():
    """Test getting logger with context."""
    logger = get_logger("test_module", component="summaries", operation="generate")

    assert logger.extra["component"] == "summaries"
    assert logger.extra["operation"] == "generate"


def test_setup_logging_configures_root_logger():
    """Test root logger gets a single JSON console handler."""
    root_logger = logging.getLogger()
    saved_handlers, saved_level = list(root_logger.handlers), root_logger.level

    try:
        setup_logging("debug")

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, JSONFormatter)
    finally:
        root_logger.handlers[:] = saved_handlers
        root_logger.setLevel(saved_level)


def test_operator_logger_name():
    """Test operator channel uses a dedicated logger."""
    logger = get_operator_logger(component="error_log")

    assert logger.logger.name == OPERATOR_LOGGER_NAME
    assert logger.extra["component"] == "error_log"


@pytest.mark.parametrize("severity,level", [
    (ErrorSeverity.LOW, "INFO"),
    (ErrorSeverity.MEDIUM, "WARNING"),
    (ErrorSeverity.HIGH, "ERROR"),
    (ErrorSeverity.CRITICAL, "CRITICAL"),
])
def test_log_handled_error_level_follows_severity(severity, level):
    """Test handled errors are logged at a level matching severity."""
    logger = get_logger(f"test_handled_{severity.value}")
    stream = _capture(logger)

    log_handled_error(logger, _record(severity))

    log_data = json.loads(stream.getvalue())
    assert log_data["level"] == level
    assert log_data["error_id"] == "err_1_abc"
    assert log_data["error_type"] == "SYSTEM_ERROR"
    assert log_data["session_id"] == "sess_1"
    assert log_data["context"]["severity"] == severity.value


def test_log_error_with_context_includes_stack_trace():
    """Test error logging carries exception details."""
    logger = get_logger("test_error_context")
    stream = _capture(logger)

    try:
        raise OSError("disk full")
    except OSError as e:
        log_error_with_context(logger, "Failed to write error log", e, log_file="errors.log")

    log_data = json.loads(stream.getvalue())
    assert log_data["level"] == "ERROR"
    assert "disk full" in log_data["message"]
    assert log_data["error"]["type"] == "OSError"
    assert "Traceback" in log_data["error"]["stack_trace"]
    assert log_data["context"]["log_file"] == "errors.log"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
