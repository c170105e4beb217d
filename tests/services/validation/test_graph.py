"""Tests for the Graph data structure and flow graph construction.

TAG: [TESTING] [GRAPH]

Test Coverage Strategy:
- Node and edge bookkeeping with deterministic ordering
- Copy independence
- Flow conversion and the dangling-target contract violation
"""

import pytest

from flowspec.services.validation.exceptions import InvalidConnectionTargetError
from flowspec.services.validation.graph import Graph, build_flow_graph


class TestGraph:
    """Test Graph bookkeeping."""

    def test_empty_graph(self) -> None:
        graph = Graph[str]()

        assert graph.node_count == 0
        assert graph.edge_count == 0
        assert len(graph) == 0
        assert repr(graph) == "Graph(nodes=0, edges=0)"

    def test_add_edge_adds_nodes_in_order(self) -> None:
        graph = Graph[str]()
        graph.add_edge("trigger", "input")
        graph.add_edge("input", "done")

        assert graph.nodes == ["trigger", "input", "done"]
        assert list(graph) == ["trigger", "input", "done"]
        assert graph.edge_count == 2

    def test_add_node_is_idempotent(self) -> None:
        graph = Graph[str]()
        graph.add_node("a")
        graph.add_node("a")

        assert graph.node_count == 1

    def test_successors_keep_edge_order(self) -> None:
        graph = Graph[str]()
        graph.add_edge("check", "yes")
        graph.add_edge("check", "no")

        assert graph.get_successors("check") == ["yes", "no"]
        assert graph.get_out_degree("check") == 2
        assert graph.get_out_degree("yes") == 0

    def test_duplicate_edges_are_counted(self) -> None:
        """Two handles may lead to the same node."""
        graph = Graph[str]()
        graph.add_edge("check", "done")
        graph.add_edge("check", "done")

        assert graph.edge_count == 2
        assert graph.get_out_degree("check") == 2

    def test_unknown_node_queries(self) -> None:
        graph = Graph[str]()

        assert graph.get_successors("missing") == []
        assert "missing" not in graph


class TestBuildFlowGraph:
    """Test flow to graph conversion."""

    def test_nodes_in_declaration_order(self, create_user_flow) -> None:
        graph = build_flow_graph(create_user_flow)

        assert graph.nodes == [n.id for n in create_user_flow.nodes]
        assert graph.edge_count == 7
        assert graph.get_successors("validate") == ["check_exists", "bad_request"]

    def test_isolated_nodes_are_included(self, make_flow, make_node) -> None:
        flow = make_flow([make_node("trigger", "trigger"), make_node("orphan", "process")])

        graph = build_flow_graph(flow)

        assert "orphan" in graph
        assert graph.edge_count == 0

    def test_dangling_target_raises(self, make_flow, make_node) -> None:
        flow = make_flow([make_node("trigger", "trigger", to=["ghost"])])

        with pytest.raises(InvalidConnectionTargetError) as exc_info:
            build_flow_graph(flow)

        error = exc_info.value
        assert error.error_code == "INVALID_CONNECTION_TARGET"
        assert error.source_node_id == "trigger"
        assert error.target_node_id == "ghost"
        assert error.details["flow_id"] == "create-user"
        assert "ghost" in str(error)
