"""Pydantic schemas for validation results.

TAG: [SCHEMAS] [VALIDATION]

Every rule produces ``ValidationIssue`` records; a ``ValidationResult``
bundles the issues of one scope with derived counts.
"""

from __future__ import annotations

import hashlib
from datetime import UTC, datetime

from pydantic import Field, computed_field

from flowspec.models.enums import ValidationCategory, ValidationScope, ValidationSeverity
from flowspec.schemas.base import BaseSchema

# =============================================================================
# Issue Schemas
# =============================================================================


class ValidationIssue(BaseSchema):
    """Single validation finding.

    TAG: [SCHEMAS] [VALIDATION]

    The ``id`` is derived from the issue content, so two runs over the same
    snapshot produce identical ids.
    """

    scope: ValidationScope = Field(..., description="Scope that produced the issue")
    severity: ValidationSeverity = Field(..., description="Issue severity")
    category: ValidationCategory = Field(..., description="Issue category")
    message: str = Field(..., description="Human-readable message")
    flow_id: str | None = Field(default=None, description="Affected flow ID")
    node_id: str | None = Field(default=None, description="Affected node ID")
    domain: str | None = Field(default=None, description="Affected domain ID")
    related_domain: str | None = Field(
        default=None, description="Second domain involved in a cross-domain issue"
    )
    suggestion: str | None = Field(default=None, description="Suggested fix")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def id(self) -> str:
        raw = "|".join(
            str(part or "")
            for part in (
                self.scope,
                self.category,
                self.severity,
                self.message,
                self.flow_id,
                self.node_id,
            )
        )
        return hashlib.sha1(raw.encode("utf-8")).hexdigest()[:12]

    @property
    def is_error(self) -> bool:
        return self.severity == ValidationSeverity.ERROR


# =============================================================================
# Result Schemas
# =============================================================================


class ValidationResult(BaseSchema):
    """Validation outcome for one scope.

    TAG: [SCHEMAS] [VALIDATION]
    """

    scope: ValidationScope = Field(..., description="Validated scope")
    target_id: str = Field(..., description="Flow, domain or system ID")
    issues: list[ValidationIssue] = Field(default_factory=list)
    error_count: int = Field(default=0, ge=0)
    warning_count: int = Field(default=0, ge=0)
    info_count: int = Field(default=0, ge=0)
    is_valid: bool = Field(default=True, description="True when error_count is 0")
    validated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def has_warnings(self) -> bool:
        return self.warning_count > 0

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    def issues_for_node(self, node_id: str) -> list[ValidationIssue]:
        """Issues attached to one node, for inline indicators."""
        return [i for i in self.issues if i.node_id == node_id]

    def issue_keys(self) -> list[tuple[str, str, str, str | None]]:
        """Order-preserving (severity, category, message, node) tuples."""
        return [(i.severity, i.category, i.message, i.node_id) for i in self.issues]


class ImplementGateState(BaseSchema):
    """Combined decision of the implement gate over several scopes."""

    can_implement: bool = Field(..., description="No errors in any supplied scope")
    has_warnings: bool = Field(default=False)
    blocking_issues: list[ValidationIssue] = Field(default_factory=list)
    warning_issues: list[ValidationIssue] = Field(default_factory=list)
    checked_scopes: list[ValidationScope] = Field(default_factory=list)
    blocking_scopes: list[ValidationScope] = Field(
        default_factory=list, description="Checked scopes that reported errors"
    )


__all__ = [
    "ImplementGateState",
    "ValidationIssue",
    "ValidationResult",
]
