"""Directed graph data structure for flow and dependency analysis.

TAG: [GRAPH] [VALIDATION]

This module provides a generic directed graph with deterministic iteration
order: nodes are kept in insertion order and successors in the order their
edges were added, so every algorithm run over the same input visits nodes in
the same order and reports the same result.

Time Complexity:
- Node/Edge addition: O(1)
- Cycle detection: O(V + E)
- Reachability analysis: O(V + E)

Space Complexity: O(V + E)
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Hashable, Iterator
from typing import TYPE_CHECKING, Generic, TypeVar

from flowspec.services.validation.exceptions import InvalidConnectionTargetError

if TYPE_CHECKING:
    from flowspec.schemas.flow import Flow

NodeId = TypeVar("NodeId", bound=Hashable)


class Graph(Generic[NodeId]):
    """Directed graph with ordered adjacency lists.

    TAG: [GRAPH]

    Type Parameters:
        NodeId: Hashable type used as node identifier (node or flow id).

    Example:
        >>> graph = Graph[str]()
        >>> graph.add_edge("trigger", "input")
        >>> graph.get_successors("trigger")
        ['input']
    """

    __slots__ = ("_adjacency", "_edge_count", "_nodes")

    def __init__(self) -> None:
        """Initialize an empty directed graph."""
        self._adjacency: defaultdict[NodeId, list[NodeId]] = defaultdict(list)
        self._nodes: dict[NodeId, None] = {}
        self._edge_count: int = 0

    @property
    def node_count(self) -> int:
        """Get the number of nodes in the graph."""
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        """Get the number of edges in the graph."""
        return self._edge_count

    @property
    def nodes(self) -> list[NodeId]:
        """Node ids in insertion order."""
        return list(self._nodes)

    def add_node(self, node_id: NodeId) -> None:
        """Add a node to the graph. Existing nodes are left untouched.

        Args:
            node_id: The identifier for the node to add.
        """
        self._nodes.setdefault(node_id, None)

    def add_edge(self, source: NodeId, target: NodeId) -> None:
        """Add a directed edge from source to target.

        Both nodes are added to the graph if they don't exist. Duplicate
        edges are allowed (two handles may lead to the same node).

        Args:
            source: The source node ID.
            target: The target node ID.
        """
        self.add_node(source)
        self.add_node(target)
        self._adjacency[source].append(target)
        self._edge_count += 1

    def get_successors(self, node_id: NodeId) -> list[NodeId]:
        """Get all successor nodes (outgoing neighbors).

        Args:
            node_id: The node ID.

        Returns:
            List of successor node IDs. Empty list if node has no successors.
        """
        return self._adjacency.get(node_id, [])

    def get_out_degree(self, node_id: NodeId) -> int:
        return len(self._adjacency.get(node_id, []))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __iter__(self) -> Iterator[NodeId]:
        return iter(list(self._nodes))

    def __len__(self) -> int:
        return len(self._nodes)

    def __repr__(self) -> str:
        """Return string representation of the graph."""
        return f"Graph(nodes={self.node_count}, edges={self.edge_count})"


def build_flow_graph(flow: Flow) -> Graph[str]:
    """Build the intra-flow connection graph.

    TAG: [GRAPH] [FLOW]

    Nodes are added in declaration order; each connection becomes one edge.

    Args:
        flow: The flow to convert.

    Returns:
        Graph keyed by node id.

    Raises:
        InvalidConnectionTargetError: If a connection targets an id that is
            not a node of the flow.
    """
    graph = Graph[str]()
    for node in flow.nodes:
        graph.add_node(node.id)

    for node in flow.nodes:
        for connection in node.connections:
            if connection.target_node_id not in graph:
                raise InvalidConnectionTargetError(
                    flow_id=flow.id,
                    source_node_id=node.id,
                    target_node_id=connection.target_node_id,
                )
            graph.add_edge(node.id, connection.target_node_id)

    return graph


__all__ = ["Graph", "NodeId", "build_flow_graph"]
