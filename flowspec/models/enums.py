"""Domain enum definitions for the flow-graph engine.

This module defines the closed enum types used across the engine for
type-safe representation of node kinds, flow kinds, and the vocabulary of
validation results and derived tests.
"""

from enum import Enum


class NodeKind(str, Enum):
    """Flow node kinds.

    Each kind has its own spec shape and, for branching kinds, a fixed set of
    output handle names.
    """

    TRIGGER = "trigger"
    INPUT = "input"
    PROCESS = "process"
    DECISION = "decision"
    TERMINAL = "terminal"
    DATA_STORE = "data_store"
    SERVICE_CALL = "service_call"
    EVENT = "event"
    LOOP = "loop"
    PARALLEL = "parallel"
    SUB_FLOW = "sub_flow"
    LLM_CALL = "llm_call"
    # Agent kinds
    AGENT_LOOP = "agent_loop"
    TOOL = "tool"
    GUARDRAIL = "guardrail"
    HUMAN_GATE = "human_gate"
    # Orchestration kinds
    ORCHESTRATOR = "orchestrator"
    SMART_ROUTER = "smart_router"
    HANDOFF = "handoff"
    AGENT_GROUP = "agent_group"
    # Data / utility kinds
    DELAY = "delay"
    CACHE = "cache"
    TRANSFORM = "transform"
    COLLECTION = "collection"
    PARSE = "parse"
    CRYPTO = "crypto"
    BATCH = "batch"
    TRANSACTION = "transaction"
    IPC_CALL = "ipc_call"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class FlowKind(str, Enum):
    """Flow classification."""

    TRADITIONAL = "traditional"
    AGENT = "agent"
    ORCHESTRATION = "orchestration"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class ValidationScope(str, Enum):
    """Granularity at which a ValidationResult is produced."""

    FLOW = "flow"
    DOMAIN = "domain"
    SYSTEM = "system"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class ValidationSeverity(str, Enum):
    """Issue severity. Only errors block implementation."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class ValidationCategory(str, Enum):
    """Closed set of issue categories."""

    GRAPH_COMPLETENESS = "graph_completeness"
    SPEC_COMPLETENESS = "spec_completeness"
    REFERENCE_INTEGRITY = "reference_integrity"
    AGENT_VALIDATION = "agent_validation"
    ORCHESTRATION_VALIDATION = "orchestration_validation"
    DOMAIN_CONSISTENCY = "domain_consistency"
    EVENT_WIRING = "event_wiring"
    PORTAL_WIRING = "portal_wiring"
    ORCHESTRATION_WIRING = "orchestration_wiring"
    CROSS_DOMAIN_DATA = "cross_domain_data"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class TestPathType(str, Enum):
    """Classification of a derived trigger-to-terminal path."""

    __test__ = False

    HAPPY_PATH = "happy_path"
    ERROR_PATH = "error_path"
    EDGE_CASE = "edge_case"
    AGENT_LOOP = "agent_loop"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class BoundaryTestKind(str, Enum):
    """Kinds of boundary-value cases derived from field rules."""

    __test__ = False

    VALID = "valid"
    INVALID_MISSING = "invalid_missing"
    INVALID_FORMAT = "invalid_format"
    BOUNDARY_MIN_BELOW = "boundary_min_below"
    BOUNDARY_MIN_EXACT = "boundary_min_exact"
    BOUNDARY_MAX_EXACT = "boundary_max_exact"
    BOUNDARY_MAX_ABOVE = "boundary_max_above"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class TestPriority(str, Enum):
    """Triage priority of a derived test case."""

    __test__ = False

    CRITICAL = "critical"
    IMPORTANT = "important"
    NICE_TO_HAVE = "nice_to_have"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value


class TestCaseSource(str, Enum):
    """Deriver that produced a merged test case."""

    __test__ = False

    PATH = "path"
    BOUNDARY = "boundary"
    AGENT = "agent"
    ORCHESTRATION = "orchestration"

    def __str__(self) -> str:
        """Return the string value for serialization."""
        return self.value
