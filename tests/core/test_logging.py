"""Tests for the logging module.

TAG: [TEST] [LOGGING]

This module tests the engine logging setup:
- Structured JSON logging
- Colored console output with inline context
- Rotating file handler configuration
- LogContext record enrichment
"""

import json
import logging
import sys
from pathlib import Path

import pytest

from flowspec.core.logging import (
    ROOT_LOGGER_NAME,
    ColoredConsoleFormatter,
    JSONFormatter,
    LogContext,
    get_logger,
    setup_logging,
)


def make_record(msg: str = "Flow validated", level: int = logging.DEBUG) -> logging.LogRecord:
    return logging.LogRecord(
        name="flowspec.services.validation.flow_validator",
        level=level,
        pathname="flow_validator.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.fixture
def engine_logger():
    """Yield the engine root logger and close any handlers a test installs."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    yield logger
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestJSONFormatter:
    """Test JSON log formatting."""

    def test_json_formatter_creates_valid_json(self) -> None:
        """Test that JSON formatter creates valid JSON output."""
        formatter = JSONFormatter(service_name="TestEngine")

        log_entry = json.loads(formatter.format(make_record()))

        assert log_entry["level"] == "DEBUG"
        assert log_entry["logger"] == "flowspec.services.validation.flow_validator"
        assert log_entry["message"] == "Flow validated"
        assert log_entry["service"] == "TestEngine"
        assert log_entry["timestamp"].endswith("Z")

    def test_json_formatter_includes_context(self) -> None:
        """Test that JSON formatter includes context."""
        record = make_record()
        record.context = {"flow_id": "create-user", "errors": 0}

        log_entry = json.loads(JSONFormatter().format(record))

        assert log_entry["context"] == {"flow_id": "create-user", "errors": 0}

    def test_json_formatter_adds_source_for_errors(self) -> None:
        """Error records carry their source location."""
        log_entry = json.loads(JSONFormatter().format(make_record(level=logging.ERROR)))

        assert log_entry["source"]["line"] == 42
        assert log_entry["source"]["file"] == "flow_validator.py"

    def test_json_formatter_includes_exception(self) -> None:
        """Exception info is rendered as type, message and traceback."""
        try:
            raise ValueError("broken graph")
        except ValueError:
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        log_entry = json.loads(JSONFormatter().format(record))

        assert log_entry["exception"]["type"] == "ValueError"
        assert log_entry["exception"]["message"] == "broken graph"
        assert "Traceback" in log_entry["exception"]["traceback"]


class TestColoredConsoleFormatter:
    """Test the development console formatter."""

    def test_formats_context_inline(self) -> None:
        record = make_record()
        record.context = {"flow_id": "create-user"}

        output = ColoredConsoleFormatter().format(record)

        assert "Flow validated | Context:" in output
        assert '"flow_id": "create-user"' in output

    def test_colors_level_name(self) -> None:
        output = ColoredConsoleFormatter().format(make_record(level=logging.WARNING))

        assert "\033[33mWARNING\033[0m" in output


class TestLogContext:
    """Test LogContext context manager."""

    def test_log_context_adds_context_to_records(self) -> None:
        """Test that LogContext adds context to log records."""
        logger = logging.getLogger("flowspec.tests.context")
        logger.handlers.clear()
        handler = logging.StreamHandler()
        records = []

        def emit_record(record: logging.LogRecord) -> None:
            records.append(record)

        handler.emit = emit_record  # type: ignore[method-assign]
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG)

        try:
            with LogContext(logger, flow_id="create-user", scope="flow"):
                logger.debug("Validating")
            logger.debug("Outside")
        finally:
            logger.removeHandler(handler)

        assert len(records) == 2
        assert records[0].context == {"flow_id": "create-user", "scope": "flow"}
        assert not hasattr(records[1], "context")

    def test_log_context_restores_record_factory(self) -> None:
        factory = logging.getLogRecordFactory()

        with LogContext(get_logger(__name__), flow_id="x"):
            assert logging.getLogRecordFactory() is not factory

        assert logging.getLogRecordFactory() is factory


class TestSetupLogging:
    """Test logging setup function."""

    def test_setup_logging_creates_log_directory(self, tmp_path: Path, engine_logger) -> None:
        """Test that setup_logging creates log directory if it doesn't exist."""
        log_file = tmp_path / "logs" / "engine.log"

        setup_logging(log_file=str(log_file), enable_console=False)

        assert log_file.parent.exists()

    def test_setup_logging_configures_log_level(self, tmp_path: Path, engine_logger) -> None:
        """Test that setup_logging configures log level correctly."""
        logger = setup_logging(log_level="DEBUG", enable_console=False)

        assert logger.name == ROOT_LOGGER_NAME
        assert logger.level == logging.DEBUG

    def test_setup_logging_creates_file_handler(self, tmp_path: Path, engine_logger) -> None:
        """Test that setup_logging creates file handler."""
        log_file = tmp_path / "logs" / "engine.log"

        logger = setup_logging(log_file=str(log_file), enable_console=False)

        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert isinstance(file_handlers[0].formatter, JSONFormatter)

    def test_setup_logging_without_file_has_console_only(self, engine_logger) -> None:
        logger = setup_logging(log_level="INFO")

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], logging.StreamHandler)

    def test_setup_logging_replaces_handlers(self, engine_logger) -> None:
        """Calling setup twice does not duplicate handlers."""
        setup_logging(log_level="INFO")
        logger = setup_logging(log_level="INFO")

        assert len(logger.handlers) == 1

