"""Flow graph exceptions.

TAG: [GRAPH] [EXCEPTIONS]

Structurally incomplete graphs are reported as validation issues. The
exceptions here cover graphs that cannot be analyzed at all.
"""

from typing import Any

from flowspec.core.exceptions import AppError


class FlowGraphError(AppError):
    """Base exception for flow graph errors.

    Attributes:
        message: Human-readable error message.
        error_code: Machine-readable error code.
        details: Additional error context as dictionary.
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class InvalidConnectionTargetError(FlowGraphError):
    """Raised when a connection targets a node that is not in its flow.

    Attributes:
        flow_id: Flow that owns the connection.
        source_node_id: Node the connection leaves.
        target_node_id: The missing target id.
    """

    def __init__(self, flow_id: str, source_node_id: str, target_node_id: str) -> None:
        super().__init__(
            message=(
                f"Connection from '{source_node_id}' targets unknown node "
                f"'{target_node_id}' in flow '{flow_id}'"
            ),
            error_code="INVALID_CONNECTION_TARGET",
            details={
                "flow_id": flow_id,
                "source_node_id": source_node_id,
                "target_node_id": target_node_id,
            },
        )
        self.flow_id = flow_id
        self.source_node_id = source_node_id
        self.target_node_id = target_node_id


class TargetNotFoundError(FlowGraphError):
    """Raised when a caller asks for a flow or domain the project does not have.

    Attributes:
        scope: Requested scope.
        target_id: The unknown id.
    """

    def __init__(self, scope: str, target_id: str) -> None:
        super().__init__(
            message=f"Unknown {scope} '{target_id}'",
            error_code="TARGET_NOT_FOUND",
            details={"scope": scope, "target_id": target_id},
        )
        self.scope = scope
        self.target_id = target_id


class AmbiguousTargetError(FlowGraphError):
    """Raised when a bare flow id names flows in more than one domain.

    Attributes:
        scope: Requested scope.
        target_id: The ambiguous id.
        candidates: Qualified ids the reference could mean.
    """

    def __init__(self, scope: str, target_id: str, candidates: list[str]) -> None:
        super().__init__(
            message=f"Ambiguous {scope} '{target_id}', use one of: {', '.join(candidates)}",
            error_code="AMBIGUOUS_TARGET",
            details={"scope": scope, "target_id": target_id, "candidates": candidates},
        )
        self.scope = scope
        self.target_id = target_id
        self.candidates = candidates


__all__ = [
    "AmbiguousTargetError",
    "FlowGraphError",
    "InvalidConnectionTargetError",
    "TargetNotFoundError",
]
