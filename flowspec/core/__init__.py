"""Core engine configuration and utilities.

This package contains core functionality including:
- Configuration management (config.py)
- Logging setup (logging.py)
- Base exceptions (exceptions.py)
"""

from flowspec.core.config import Settings, get_settings
from flowspec.core.exceptions import AppError
from flowspec.core.logging import get_logger, setup_logging

__all__ = ["AppError", "Settings", "get_logger", "get_settings", "setup_logging"]
