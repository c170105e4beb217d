"""Caller-owned cache for validation results.

TAG: [VALIDATION] [CACHING]

Results are keyed by ``(scope, id)``. The cache is an explicit object
constructed and owned by the caller; the engine keeps no global instance.
Entries live until invalidated, or until their TTL passes when a TTL is set.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Generic, TypeVar

from flowspec.core.logging import get_logger
from flowspec.models.enums import ValidationScope

logger = get_logger(__name__)

T = TypeVar("T")

CacheKey = tuple[str, str]


def _now() -> datetime:
    return datetime.now(UTC)


class ValidationCache(Generic[T]):
    """In-memory cache for validation results and derived test specs.

    TAG: [VALIDATION] [CACHING]

    Example:
        >>> cache = ValidationCache[ValidationResult](ttl=300)
        >>> cache.set(ValidationScope.FLOW, "create-user", result)
        >>> cache.get(ValidationScope.FLOW, "create-user") is result
        True
        >>> cache.invalidate(ValidationScope.FLOW, "create-user")
    """

    def __init__(
        self,
        ttl: int = 0,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        """Initialize the cache.

        Args:
            ttl: Entry lifetime in seconds; 0 keeps entries until invalidated.
            clock: Time source, replaceable in tests.
        """
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[CacheKey, tuple[T, datetime | None]] = {}

    @staticmethod
    def _make_key(scope: ValidationScope | str, target_id: str) -> CacheKey:
        return (str(scope), target_id)

    def get(self, scope: ValidationScope | str, target_id: str) -> T | None:
        """Get a cached result.

        Returns:
            The cached value, or None if absent or expired.
        """
        key = self._make_key(scope, target_id)
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"Validation cache MISS: {key}")
            return None

        value, expiry_time = entry
        if expiry_time is not None and self._clock() >= expiry_time:
            del self._entries[key]
            logger.debug(f"Validation cache expired: {key}")
            return None

        logger.debug(f"Validation cache HIT: {key}")
        return value

    def set(self, scope: ValidationScope | str, target_id: str, value: T) -> None:
        """Cache a result, replacing any previous entry for the key."""
        expiry_time = self._clock() + timedelta(seconds=self.ttl) if self.ttl > 0 else None
        self._entries[self._make_key(scope, target_id)] = (value, expiry_time)

    def invalidate(self, scope: ValidationScope | str, target_id: str) -> bool:
        """Drop one entry.

        Returns:
            True if an entry was removed.
        """
        removed = self._entries.pop(self._make_key(scope, target_id), None) is not None
        if removed:
            logger.debug(f"Validation cache invalidated: {scope}:{target_id}")
        return removed

    def invalidate_scope(self, scope: ValidationScope | str) -> int:
        """Drop every entry of one scope.

        Returns:
            Number of entries removed.
        """
        prefix = str(scope)
        keys = [k for k in self._entries if k[0] == prefix]
        for key in keys:
            del self._entries[key]
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        return self.get(*key) is not None

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["ValidationCache"]
