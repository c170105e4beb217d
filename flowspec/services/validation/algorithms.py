"""Graph algorithms for flow validation.

TAG: [GRAPH] [ALGORITHMS]

This module provides the graph algorithms shared by the validators:
- Cycle detection using DFS with path tracking, over any edge-lookup function
- Reachability analysis using BFS
- Dead-end node detection

One cycle detector serves both the intra-flow connection graph and the
inter-flow orchestration dependency graph, so both report cycles the same
way and both terminate on any input.

Time Complexity:
- Cycle detection: O(V + E)
- Reachability: O(V + E)

Space Complexity: O(V + E) for all algorithms.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Hashable, Iterable, Iterator
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from flowspec.services.validation.graph import Graph

NodeId = TypeVar("NodeId", bound=Hashable)

_DONE: Any = object()


class GraphAlgorithms:
    """Collection of graph algorithms for flow validation.

    TAG: [GRAPH] [ALGORITHMS]

    All methods are static and side-effect free.

    Example:
        >>> graph = Graph[str]()
        >>> graph.add_edge("a", "b")
        >>> graph.add_edge("b", "a")
        >>> GraphAlgorithms.detect_cycle(graph)
        ['a', 'b', 'a']
    """

    @staticmethod
    def find_cycle(
        nodes: Iterable[NodeId],
        get_successors: Callable[[NodeId], Iterable[NodeId]],
    ) -> list[NodeId] | None:
        """Detect a cycle using DFS with visiting/visited sets.

        TAG: [GRAPH] [ALGORITHM]

        Nodes are explored in the given order and successors in the order the
        lookup returns them, so the reported cycle is deterministic.

        Args:
            nodes: Start candidates, in exploration order.
            get_successors: Edge lookup returning the successors of a node.

        Returns:
            The first cycle found as an ordered id list that closes on its
            first id, or None when the graph is acyclic.

        Time Complexity: O(V + E)
        Space Complexity: O(V)

        Example:
            >>> edges = {"a": ["b"], "b": ["c"], "c": ["a"]}
            >>> GraphAlgorithms.find_cycle(edges, lambda n: edges.get(n, []))
            ['a', 'b', 'c', 'a']
        """
        visited: set[NodeId] = set()
        visiting: set[NodeId] = set()
        path: list[NodeId] = []

        for root in nodes:
            if root in visited:
                continue
            # One (node, remaining successors) frame per node on the current path
            stack: list[tuple[NodeId, Iterator[NodeId]]] = [(root, iter(get_successors(root)))]
            visited.add(root)
            visiting.add(root)
            path.append(root)

            while stack:
                node, successors = stack[-1]
                neighbor = next(successors, _DONE)
                if neighbor is _DONE:
                    stack.pop()
                    path.pop()
                    visiting.remove(node)
                    continue
                if neighbor in visiting:
                    cycle_start = path.index(neighbor)
                    return [*path[cycle_start:], neighbor]
                if neighbor not in visited:
                    visited.add(neighbor)
                    visiting.add(neighbor)
                    path.append(neighbor)
                    stack.append((neighbor, iter(get_successors(neighbor))))

        return None

    @staticmethod
    def detect_cycle(graph: Graph[NodeId]) -> list[NodeId] | None:
        """Detect a cycle in a Graph.

        TAG: [GRAPH] [ALGORITHM]

        Args:
            graph: The graph to check for cycles.

        Returns:
            List of node IDs forming the cycle if found, None otherwise.
        """
        return GraphAlgorithms.find_cycle(graph.nodes, graph.get_successors)

    @staticmethod
    def reachable_from(
        graph: Graph[NodeId],
        start_nodes: Iterable[NodeId],
    ) -> set[NodeId]:
        """Collect every node reachable from the start nodes using BFS.

        TAG: [GRAPH] [ALGORITHM]

        Start nodes are part of the result. Ids that are not graph nodes are
        ignored, so the result never contains ids outside the graph.

        Args:
            graph: The graph to analyze.
            start_nodes: Starting nodes (typically the trigger).

        Returns:
            Set of reachable node IDs.

        Time Complexity: O(V + E)
        Space Complexity: O(V)
        """
        reachable: set[NodeId] = set()
        queue: deque[NodeId] = deque(n for n in start_nodes if n in graph)

        while queue:
            current = queue.popleft()
            if current in reachable:
                continue

            reachable.add(current)

            for successor in graph.get_successors(current):
                if successor not in reachable:
                    queue.append(successor)

        return reachable

    @staticmethod
    def find_unreachable_from(
        graph: Graph[NodeId],
        start_nodes: Iterable[NodeId],
    ) -> list[NodeId]:
        """Find nodes not reachable from any start node.

        TAG: [GRAPH] [ALGORITHM]

        Args:
            graph: The graph to analyze.
            start_nodes: Starting nodes (typically the trigger).

        Returns:
            Unreachable node IDs in graph insertion order.

        Example:
            >>> graph = Graph[str]()
            >>> graph.add_edge("a", "b")
            >>> graph.add_edge("c", "d")
            >>> GraphAlgorithms.find_unreachable_from(graph, ["a"])
            ['c', 'd']
        """
        reachable = GraphAlgorithms.reachable_from(graph, start_nodes)
        return [node for node in graph.nodes if node not in reachable]

    @staticmethod
    def find_dead_ends(
        graph: Graph[NodeId],
        allowed: Callable[[NodeId], bool] | None = None,
    ) -> list[NodeId]:
        """Find nodes with no outgoing edges that are not allowed to end.

        TAG: [GRAPH] [ALGORITHM]

        Args:
            graph: The graph to analyze.
            allowed: Predicate for nodes that may have no outputs (terminals).
                     When None every node without outputs is a dead end.

        Returns:
            Dead-end node IDs in graph insertion order.
        """
        return [
            node
            for node in graph.nodes
            if graph.get_out_degree(node) == 0 and not (allowed and allowed(node))
        ]


def format_cycle(cycle: list[str]) -> str:
    """Render a cycle as ``A → B → A``."""
    return " → ".join(cycle)


__all__ = ["GraphAlgorithms", "format_cycle"]
