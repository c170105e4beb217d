"""Trigger-to-terminal path derivation.

TAG: [TESTGEN] [PATHS]

Enumerates every path from a flow's trigger to its terminals with a
depth-first traversal. A per-path visited set keeps the traversal from
re-entering a node already on the current path, so it terminates on any
graph, including cyclic ones, while still letting different paths share
nodes.
"""

from __future__ import annotations

from collections.abc import Iterator

from flowspec.core.logging import get_logger
from flowspec.models.enums import NodeKind
from flowspec.schemas.flow import (
    HANDLE_ALIASES,
    Connection,
    DecisionSpec,
    Flow,
    Node,
    TerminalSpec,
)
from flowspec.schemas.testing import ExpectedOutcome, TestPath
from flowspec.services.testgen.policy import PathClassificationPolicy

logger = get_logger(__name__)


def ordered_connections(node: Node) -> list[Connection]:
    """Outgoing connections in traversal order.

    Connections through the node kind's named handles come first, in handle
    order (``true`` before ``false``, ``branch-0`` before ``done``); every
    other connection follows in declaration order.
    """
    aliases = HANDLE_ALIASES.get(node.kind, {})
    handle_order: dict[str | None, int] = {}
    for index, handle in enumerate(node.branch_handles):
        for name in aliases.get(handle, (handle,)):
            handle_order.setdefault(name, index)
    named = [c for c in node.connections if c.source_handle in handle_order]
    named.sort(key=lambda c: handle_order[c.source_handle])
    others = [c for c in node.connections if c.source_handle not in handle_order]
    return named + others


def is_error_branch(node: Node, connection: Connection) -> bool:
    """Whether a connection leaves a decision through its error-coded branch."""
    spec = node.spec
    return (
        isinstance(spec, DecisionSpec)
        and spec.error_code is not None
        and connection.source_handle == spec.error_branch
    )


def describe_path(nodes: list[Node]) -> str:
    """``trigger (trigger) → validate (input) → ...``"""
    return " → ".join(f"{n.id} ({n.kind})" for n in nodes)


class TestPathDeriver:
    """Enumerates and classifies trigger-to-terminal paths.

    TAG: [TESTGEN] [PATHS]

    Example:
        >>> paths = TestPathDeriver().derive(flow)
        >>> [(p.id, p.type) for p in paths]
        [('path-1', 'happy_path'), ('path-2', 'error_path')]
    """

    __test__ = False

    def __init__(self, policy: PathClassificationPolicy | None = None) -> None:
        self.policy = policy or PathClassificationPolicy.from_settings()

    def derive(self, flow: Flow) -> list[TestPath]:
        """Derive every path from the trigger to a terminal.

        Paths that stop at a non-terminal node (dead ends, or nodes whose
        every successor is already on the path) are not recorded.

        Args:
            flow: The flow to traverse.

        Returns:
            Paths in traversal order, numbered ``path-1``, ``path-2``, ...
        """
        trigger = flow.trigger
        if trigger is None:
            return []

        node_map = flow.node_map
        paths: list[TestPath] = []

        trail: list[Node] = [trigger]
        on_trail: set[str] = {trigger.id}
        # Per trail node: remaining outgoing connections and whether the trail
        # up to that node has taken an error branch
        frames: list[tuple[Iterator[Connection], bool]] = [
            (iter(ordered_connections(trigger)), False)
        ]

        while frames:
            connections, error_branch = frames[-1]
            node = trail[-1]
            connection = next(connections, None)
            if connection is None:
                frames.pop()
                on_trail.discard(trail.pop().id)
                continue

            target = node_map.get(connection.target_node_id)
            if target is None or target.id in on_trail:
                continue
            took_error = error_branch or is_error_branch(node, connection)
            if target.kind == NodeKind.TERMINAL:
                paths.append(self._make_path(len(paths) + 1, [*trail, target], took_error))
                continue
            trail.append(target)
            on_trail.add(target.id)
            frames.append((iter(ordered_connections(target)), took_error))

        logger.debug(
            "Test paths derived",
            extra={"context": {"flow_id": flow.id, "paths": len(paths)}},
        )
        return paths

    def _make_path(self, number: int, trail: list[Node], error_branch: bool) -> TestPath:
        terminal = trail[-1]
        spec = terminal.spec if isinstance(terminal.spec, TerminalSpec) else TerminalSpec()
        through_agent_loop = any(n.kind == NodeKind.AGENT_LOOP for n in trail)

        return TestPath(
            id=f"path-{number}",
            type=self.policy.classify(spec.status, error_branch, through_agent_loop),
            node_ids=[n.id for n in trail],
            description=describe_path(trail),
            expected=ExpectedOutcome(
                status=spec.status,
                error_code=spec.error_code,
                response_fields=spec.response_fields,
                message=spec.message,
            ),
        )


def derive_test_paths(
    flow: Flow,
    policy: PathClassificationPolicy | None = None,
) -> list[TestPath]:
    """Derive the trigger-to-terminal paths of a flow."""
    return TestPathDeriver(policy).derive(flow)


__all__ = [
    "TestPathDeriver",
    "derive_test_paths",
    "describe_path",
    "is_error_branch",
    "ordered_connections",
]
