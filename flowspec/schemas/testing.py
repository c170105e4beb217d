"""Pydantic schemas for derived test specifications.

TAG: [SCHEMAS] [TESTGEN]
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from flowspec.models.enums import (
    BoundaryTestKind,
    TestCaseSource,
    TestPathType,
    TestPriority,
)
from flowspec.schemas.base import BaseSchema


class ExpectedOutcome(BaseSchema):
    """Outcome read from the terminal that ends a path."""

    status: int | None = None
    error_code: str | None = None
    response_fields: list[str] = Field(default_factory=list)
    message: str | None = None


class TestPath(BaseSchema):
    """Trigger-to-terminal path through a flow."""

    __test__ = False

    id: str
    type: TestPathType
    node_ids: list[str] = Field(default_factory=list)
    description: str
    expected: ExpectedOutcome = Field(default_factory=ExpectedOutcome)

    @property
    def terminal_id(self) -> str | None:
        return self.node_ids[-1] if self.node_ids else None


class BoundaryTest(BaseSchema):
    """Boundary-value case for one input field."""

    __test__ = False

    field: str
    kind: BoundaryTestKind
    input_value: Any = None
    expect_success: bool
    expected_error: str | None = None
    expected_status: int | None = None
    description: str = ""
    node_id: str | None = None


class DerivedTestCase(BaseSchema):
    """Test case merged from any deriver."""

    __test__ = False

    id: str
    source: TestCaseSource
    name: str
    description: str = ""
    priority: TestPriority = TestPriority.IMPORTANT
    node_id: str | None = None
    steps: list[str] = Field(default_factory=list)
    expected: dict[str, Any] = Field(default_factory=dict)


class DerivedTestSpec(BaseSchema):
    """Complete derived test specification for one flow."""

    __test__ = False

    flow_id: str
    paths: list[TestPath] = Field(default_factory=list)
    boundary_tests: list[BoundaryTest] = Field(default_factory=list)
    test_cases: list[DerivedTestCase] = Field(default_factory=list)
    total_paths: int = 0
    total_boundary_tests: int = 0
    total_test_cases: int = 0
    node_coverage: float = 0.0
    terminal_coverage: float = 0.0
    field_coverage: float = 0.0

    def cases_from(self, source: TestCaseSource) -> list[DerivedTestCase]:
        return [c for c in self.test_cases if c.source == source]


__all__ = [
    "BoundaryTest",
    "DerivedTestCase",
    "DerivedTestSpec",
    "ExpectedOutcome",
    "TestPath",
]
