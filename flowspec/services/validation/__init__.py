"""Flow, domain and system validation services.

This package contains the graph utilities, the three scoped validators,
result aggregation with the implement gate, the caller-owned result cache
and the ValidationService facade tying them together.
"""

from flowspec.services.validation.aggregator import (
    build_result,
    check_implement_gate,
    summarize_domain,
)
from flowspec.services.validation.algorithms import GraphAlgorithms, format_cycle
from flowspec.services.validation.cache import ValidationCache
from flowspec.services.validation.domain_validator import DomainValidator
from flowspec.services.validation.exceptions import (
    AmbiguousTargetError,
    FlowGraphError,
    InvalidConnectionTargetError,
    TargetNotFoundError,
)
from flowspec.services.validation.flow_validator import FlowValidator
from flowspec.services.validation.graph import Graph, build_flow_graph
from flowspec.services.validation.service import ValidationService
from flowspec.services.validation.system_validator import SystemValidator

__all__ = [
    "AmbiguousTargetError",
    "DomainValidator",
    "FlowGraphError",
    "FlowValidator",
    "Graph",
    "GraphAlgorithms",
    "InvalidConnectionTargetError",
    "SystemValidator",
    "TargetNotFoundError",
    "ValidationCache",
    "ValidationService",
    "build_flow_graph",
    "build_result",
    "check_implement_gate",
    "format_cycle",
    "summarize_domain",
]
