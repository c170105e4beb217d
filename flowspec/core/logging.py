"""Structured logging configuration for the flowspec engine.

This module provides:
- JSON structured logging for machine parsing
- Colored console output for development
- Optional rotating file handler (10MB max, 5 backups)
- A context helper that attaches structured context to records

The engine itself never configures logging on import; applications embedding
it call ``setup_logging()`` once, and modules obtain loggers through
``get_logger(__name__)``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, ClassVar

from flowspec.core.config import get_settings

ROOT_LOGGER_NAME = "flowspec"


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Format:
        {
            "timestamp": "2025-01-12T10:30:45.123Z",
            "level": "DEBUG",
            "logger": "flowspec.services.validation.flow_validator",
            "message": "Flow validated",
            "context": {"flow_id": "create-user", "errors": 0}
        }
    """

    def __init__(
        self,
        service_name: str = "FlowSpecEngine",
        service_version: str = "0.1.0",
    ) -> None:
        """Initialize JSON formatter.

        Args:
            service_name: Name of the service
            service_version: Version of the service
        """
        super().__init__()
        self.service_name = service_name
        self.service_version = service_version

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC)
            .isoformat()
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "version": self.service_version,
        }

        if hasattr(record, "context"):
            log_entry["context"] = record.context

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        if record.levelno >= logging.ERROR:
            log_entry["source"] = {
                "function": record.funcName,
                "line": record.lineno,
                "file": record.pathname,
            }

        return json.dumps(log_entry, default=str, ensure_ascii=False)


class ColoredConsoleFormatter(logging.Formatter):
    """Colored console formatter for development environments."""

    COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[41m",  # Red background
    }
    RESET: ClassVar[str] = "\033[0m"

    def __init__(self) -> None:
        """Initialize colored console formatter."""
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors and inline context."""
        log_color = self.COLORS.get(record.levelname, self.RESET)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"

        if hasattr(record, "context") and record.context:
            record.msg = f"{record.msg} | Context: {json.dumps(record.context, default=str)}"

        return super().format(record)


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
    service_name: str = "FlowSpecEngine",
    enable_json: bool | None = None,
    enable_console: bool = True,
) -> logging.Logger:
    """Configure the ``flowspec`` logger hierarchy.

    Args:
        log_level: Logging level name. Defaults to settings.LOG_LEVEL.
        log_file: Optional path of a rotating log file. Defaults to
                  settings.LOG_FILE; no file handler when both are unset.
        service_name: Name of the service for log metadata.
        enable_json: Use JSON formatting for the file handler. Defaults to
                     settings.LOG_JSON_FORMAT.
        enable_console: Enable console output handler.

    Returns:
        The configured ``flowspec`` logger.

    Examples:
        >>> logger = setup_logging(log_level="DEBUG")
        >>> logger.debug("Engine ready", extra={"context": {"flows": 3}})
    """
    settings = get_settings()
    if log_level is None:
        log_level = settings.LOG_LEVEL
    if log_file is None:
        log_file = settings.LOG_FILE
    if enable_json is None:
        enable_json = settings.LOG_JSON_FORMAT

    level = getattr(logging, log_level.upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()

    if log_file:
        log_file_path = Path(log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=str(log_file_path),
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        if enable_json:
            file_handler.setFormatter(JSONFormatter(service_name=service_name))
        else:
            file_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
        logger.addHandler(file_handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        if settings.DEBUG:
            console_handler.setFormatter(ColoredConsoleFormatter())
        else:
            console_handler.setFormatter(JSONFormatter(service_name=service_name))
        logger.addHandler(console_handler)

    logger.debug(
        f"Logging initialized - Level: {log_level}, File: {log_file}",
        extra={"context": {"log_level": log_level, "log_file": log_file}},
    )

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Logger instance

    Examples:
        >>> from flowspec.core.logging import get_logger
        >>> logger = get_logger(__name__)
    """
    return logging.getLogger(name)


class LogContext:
    """Context helper for adding structured context to log records.

    Examples:
        >>> logger = get_logger(__name__)
        >>> with LogContext(logger, flow_id="create-user", scope="flow"):
        ...     logger.debug("Validating")
    """

    def __init__(self, logger: logging.Logger, **context: Any) -> None:
        """Initialize log context.

        Args:
            logger: Logger instance to add context to
            **context: Key-value pairs to add to log context
        """
        self.logger = logger
        self.context = context
        self.old_factory = logging.getLogRecordFactory()

    def __enter__(self) -> None:
        """Enter context and install a record factory carrying the context."""

        def record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = self.old_factory(*args, **kwargs)
            if not hasattr(record, "context"):
                record.context = self.context.copy()
            else:
                record.context = {**record.context, **self.context}
            return record

        logging.setLogRecordFactory(record_factory)

    def __exit__(self, *args: Any) -> None:
        """Exit context and restore old factory."""
        logging.setLogRecordFactory(self.old_factory)


__all__ = [
    "ColoredConsoleFormatter",
    "JSONFormatter",
    "LogContext",
    "ROOT_LOGGER_NAME",
    "get_logger",
    "setup_logging",
]
