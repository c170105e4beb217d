"""Pydantic schemas for the engine data model.

This package contains the flow graph model, domain configuration, project
catalog, validation results and derived test specifications.
"""

from flowspec.schemas.base import BaseSchema, OpenSchema, is_blank

# Domain schemas
from flowspec.schemas.domain import (
    Domain,
    DomainFlowEntry,
    DomainStore,
    EventGroup,
    EventWiring,
    ProjectCatalog,
)

# Flow schemas
from flowspec.schemas.flow import (
    SPEC_MODELS,
    Connection,
    Flow,
    InputField,
    Node,
    NodeSpec,
)

# Test derivation schemas
from flowspec.schemas.testing import (
    BoundaryTest,
    DerivedTestCase,
    DerivedTestSpec,
    ExpectedOutcome,
    TestPath,
)

# Validation schemas
from flowspec.schemas.validation import (
    ImplementGateState,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    "SPEC_MODELS",
    "BaseSchema",
    "BoundaryTest",
    "Connection",
    "DerivedTestCase",
    "DerivedTestSpec",
    "Domain",
    "DomainFlowEntry",
    "DomainStore",
    "EventGroup",
    "EventWiring",
    "ExpectedOutcome",
    "Flow",
    "ImplementGateState",
    "InputField",
    "Node",
    "NodeSpec",
    "OpenSchema",
    "ProjectCatalog",
    "TestPath",
    "ValidationIssue",
    "ValidationResult",
    "is_blank",
]
