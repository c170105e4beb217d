"""Base Pydantic schemas with common patterns.

This module defines the base schema every engine record derives from, and the
open-ended base used by node specs that must carry unrecognized keys.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Base schema with common configuration for all schemas.

    Configures Pydantic v2 settings for consistent behavior across all schemas.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
    )


class OpenSchema(BaseSchema):
    """Schema that keeps keys it does not declare.

    Unrecognized keys are stored alongside the typed fields and are returned
    verbatim by ``model_dump()``, so a load/validate/save round trip never
    drops fields the engine does not know about.
    """

    model_config = ConfigDict(extra="allow")

    @property
    def extras(self) -> dict[str, Any]:
        """Unrecognized key/value pairs, in their original order."""
        return dict(self.model_extra or {})


def is_blank(value: Any) -> bool:
    """Return True for None, empty strings, and empty collections."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


__all__ = ["BaseSchema", "OpenSchema", "is_blank"]
