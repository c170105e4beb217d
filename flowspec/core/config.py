"""Engine configuration using Pydantic Settings.

Environment variables (prefixed with ``FLOWSPEC_``) are loaded from .env files
and the system environment. Nothing in the engine reads the environment
directly; callers pass settings or use ``get_settings()``.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _parse_range(chunk: str) -> tuple[int, int]:
    low, _, high = chunk.strip().partition("-")
    return int(low), int(high or low)


class Settings(BaseSettings):
    """Engine settings.

    All settings can be overridden via environment variables.
    Environment variables take precedence over .env file values.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOWSPEC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "FlowSpec Engine"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str | None = None  # No file handler unless set
    LOG_JSON_FORMAT: bool = True

    # Validation cache (seconds, 0 disables expiry)
    VALIDATION_CACHE_TTL: int = 0
    # Quiet period callers should wait between edits before re-validating
    VALIDATION_DEBOUNCE_MS: int = 500

    # Path classification policy, "low-high" status ranges
    HAPPY_STATUS_RANGE: str = "200-299"
    ERROR_STATUS_RANGES: str = "400-499,500-599"

    # Status expected by failing boundary cases when the flow declares none
    DEFAULT_VALIDATION_STATUS: int | None = None

    @field_validator("HAPPY_STATUS_RANGE", "ERROR_STATUS_RANGES")
    @classmethod
    def validate_ranges(cls, v: str) -> str:
        """Reject malformed status ranges at load time."""
        for chunk in v.split(","):
            if chunk.strip():
                low, high = _parse_range(chunk)
                if low > high:
                    raise ValueError(f"Invalid status range: {chunk.strip()}")
        return v

    @property
    def happy_status_range(self) -> tuple[int, int]:
        """Parsed HAPPY_STATUS_RANGE."""
        return _parse_range(self.HAPPY_STATUS_RANGE)

    @property
    def error_status_ranges(self) -> list[tuple[int, int]]:
        """Parsed ERROR_STATUS_RANGES."""
        return [
            _parse_range(chunk)
            for chunk in self.ERROR_STATUS_RANGES.split(",")
            if chunk.strip()
        ]


@lru_cache
def get_settings() -> Settings:
    """Get cached engine settings.

    Settings are cached after first load for performance.
    """
    return Settings()
