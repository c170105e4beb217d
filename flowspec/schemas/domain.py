"""Pydantic schemas for domains and the project catalog.

TAG: [SCHEMAS] [DOMAIN] [CATALOG]

A domain groups flows and declares the events it publishes and consumes.
The project catalog is a read-only lookup table assembled by the caller.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, field_validator

from flowspec.schemas.base import BaseSchema


class EventWiring(BaseSchema):
    """One published or consumed event declaration."""

    event: str = Field(..., description="Event name, e.g. 'order.created'")
    payload: dict[str, Any] | None = Field(
        default=None,
        validation_alias=AliasChoices("payload", "payload_shape", "expected_payload"),
        description="Payload shape as field name to type",
    )
    from_flow: str | None = Field(default=None, description="Publishing flow id")
    handled_by_flow: str | None = Field(default=None, description="Consuming flow id")
    description: str | None = None

    @property
    def payload_fields(self) -> set[str]:
        return set(self.payload.keys()) if self.payload else set()


class DomainFlowEntry(BaseSchema):
    """Flow declaration inside a domain configuration."""

    id: str
    name: str | None = None
    type: str | None = None
    tags: list[str] = Field(default_factory=list)


class DomainStore(BaseSchema):
    """In-memory state store declared by a domain."""

    name: str
    description: str | None = None
    selectors: list[str] = Field(default_factory=list)


class EventGroup(BaseSchema):
    """Named set of events a trigger can subscribe to as one unit."""

    name: str
    events: list[str] = Field(default_factory=list)


class Domain(BaseSchema):
    """Domain configuration.

    ``flows`` holds the declared flow ids in declaration order. Entries may be
    written as plain ids or as ``{id: ...}`` mappings.
    """

    id: str
    name: str | None = None
    description: str | None = None
    flows: list[DomainFlowEntry] = Field(default_factory=list)
    publishes_events: list[EventWiring] = Field(default_factory=list)
    consumes_events: list[EventWiring] = Field(default_factory=list)
    portals: list[str] = Field(default_factory=list)
    owns_schemas: list[str] = Field(default_factory=list)
    event_groups: list[EventGroup] = Field(default_factory=list)
    stores: list[DomainStore] = Field(default_factory=list)

    @field_validator("flows", mode="before")
    @classmethod
    def coerce_flows(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [{"id": item} if isinstance(item, str) else item for item in v]
        return v

    @field_validator("publishes_events", "consumes_events", mode="before")
    @classmethod
    def coerce_events(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [{"event": item} if isinstance(item, str) else item for item in v]
        return v

    @field_validator("stores", mode="before")
    @classmethod
    def coerce_stores(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v

    @field_validator("portals", mode="before")
    @classmethod
    def coerce_portals(cls, v: Any) -> Any:
        """Accept portals as ids or as ``{target_domain: ...}`` mappings."""
        if isinstance(v, list):
            return [
                item.get("target_domain") or item.get("domain") or item.get("id", "")
                if isinstance(item, dict)
                else item
                for item in v
            ]
        return v

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def flow_ids(self) -> list[str]:
        return [f.id for f in self.flows]


class ProjectCatalog(BaseSchema):
    """Read-only lookup tables for reference checks."""

    flow_ids: set[str] = Field(default_factory=set)
    schema_names: set[str] = Field(default_factory=set)
    error_codes: set[str] = Field(default_factory=set)

    def has_flow(self, ref: str | None) -> bool:
        """Check a flow reference written as ``flow-id`` or ``domain/flow-id``."""
        if not ref:
            return False
        if ref in self.flow_ids:
            return True
        if "/" in ref:
            return ref.rsplit("/", 1)[1] in self.flow_ids
        return any(fid.rsplit("/", 1)[-1] == ref for fid in self.flow_ids)

    def has_schema(self, name: str | None) -> bool:
        if not name:
            return False
        wanted = name.lower()
        return any(s.lower() == wanted for s in self.schema_names)

    def has_error_code(self, code: str | None) -> bool:
        return bool(code) and code in self.error_codes


__all__ = [
    "Domain",
    "DomainFlowEntry",
    "DomainStore",
    "EventGroup",
    "EventWiring",
    "ProjectCatalog",
]
