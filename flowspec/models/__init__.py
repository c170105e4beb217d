"""Engine enumerations."""

from flowspec.models.enums import (
    BoundaryTestKind,
    FlowKind,
    NodeKind,
    TestCaseSource,
    TestPathType,
    TestPriority,
    ValidationCategory,
    ValidationScope,
    ValidationSeverity,
)

__all__ = [
    "BoundaryTestKind",
    "FlowKind",
    "NodeKind",
    "TestCaseSource",
    "TestPathType",
    "TestPriority",
    "ValidationCategory",
    "ValidationScope",
    "ValidationSeverity",
]
