"""Derived test specification assembly.

TAG: [TESTGEN] [AGGREGATION]

Merges the output of the path, boundary and scenario derivers into one
``DerivedTestSpec`` with totals and coverage ratios.
"""

from __future__ import annotations

from flowspec.core.config import Settings
from flowspec.core.logging import get_logger
from flowspec.models.enums import NodeKind, TestCaseSource, TestPathType, TestPriority
from flowspec.schemas.flow import Flow, InputSpec
from flowspec.schemas.testing import BoundaryTest, DerivedTestCase, DerivedTestSpec, TestPath
from flowspec.services.testgen.boundary_deriver import BoundaryTestDeriver
from flowspec.services.testgen.path_deriver import TestPathDeriver
from flowspec.services.testgen.policy import PathClassificationPolicy
from flowspec.services.testgen.scenario_deriver import ScenarioTestDeriver

logger = get_logger(__name__)

PATH_PRIORITIES: dict[str, TestPriority] = {
    TestPathType.HAPPY_PATH.value: TestPriority.CRITICAL,
    TestPathType.ERROR_PATH.value: TestPriority.IMPORTANT,
    TestPathType.AGENT_LOOP.value: TestPriority.IMPORTANT,
    TestPathType.EDGE_CASE.value: TestPriority.NICE_TO_HAVE,
}


def coverage_ratio(covered: int, total: int) -> float:
    """``covered / total``, or 1.0 when there is nothing to cover."""
    if total == 0:
        return 1.0
    return round(covered / total, 4)


def path_case(path: TestPath) -> DerivedTestCase:
    expected = path.expected.model_dump(exclude_none=True)
    if not expected.get("response_fields"):
        expected.pop("response_fields", None)
    return DerivedTestCase(
        id=path.id,
        source=TestCaseSource.PATH,
        name=f"{path.type.replace('_', ' ').capitalize()}: {path.terminal_id}",
        description=path.description,
        priority=PATH_PRIORITIES.get(path.type, TestPriority.IMPORTANT),
        node_id=path.terminal_id,
        steps=list(path.node_ids),
        expected=expected,
    )


def boundary_case(number: int, test: BoundaryTest) -> DerivedTestCase:
    expected: dict = {"success": test.expect_success}
    if test.expected_status is not None:
        expected["status"] = test.expected_status
    if test.expected_error is not None:
        expected["error"] = test.expected_error

    return DerivedTestCase(
        id=f"boundary-{number}",
        source=TestCaseSource.BOUNDARY,
        name=test.description or f"{test.field}: {test.kind}",
        priority=TestPriority.IMPORTANT,
        node_id=test.node_id,
        steps=[f"Submit {test.field}={test.input_value!r}"],
        expected=expected,
    )


def build_derived_test_spec(
    flow: Flow,
    policy: PathClassificationPolicy | None = None,
    settings: Settings | None = None,
) -> DerivedTestSpec:
    """Derive and merge every test case of a flow.

    Args:
        flow: The flow to derive tests for.
        policy: Path classification policy; built from settings when omitted.
        settings: Engine settings used for boundary status defaults.

    Returns:
        The merged specification. Test cases are ordered paths first, then
        boundary cases, then agent or orchestration scenarios.

    Example:
        >>> spec = build_derived_test_spec(flow)
        >>> spec.total_paths, spec.node_coverage
        (2, 1.0)
    """
    paths = TestPathDeriver(policy).derive(flow)
    boundary_tests = BoundaryTestDeriver(settings).derive(flow)
    scenarios = ScenarioTestDeriver().derive(flow)

    test_cases = [path_case(p) for p in paths]
    test_cases.extend(boundary_case(i, t) for i, t in enumerate(boundary_tests, start=1))
    test_cases.extend(scenarios)

    # Coverage
    all_node_ids = {n.id for n in flow.nodes}
    on_path = {node_id for p in paths for node_id in p.node_ids}

    terminal_ids = {n.id for n in flow.nodes_of_kind(NodeKind.TERMINAL)}
    reached_terminals = {p.terminal_id for p in paths}

    validated_fields = {
        (node.id, f.name)
        for node in flow.nodes
        if isinstance(node.spec, InputSpec)
        for f in node.spec.fields
        if f.has_rules
    }
    tested_fields = {(t.node_id, t.field) for t in boundary_tests}

    spec = DerivedTestSpec(
        flow_id=flow.id,
        paths=paths,
        boundary_tests=boundary_tests,
        test_cases=test_cases,
        total_paths=len(paths),
        total_boundary_tests=len(boundary_tests),
        total_test_cases=len(test_cases),
        node_coverage=coverage_ratio(len(on_path & all_node_ids), len(all_node_ids)),
        terminal_coverage=coverage_ratio(len(reached_terminals & terminal_ids), len(terminal_ids)),
        field_coverage=coverage_ratio(len(tested_fields & validated_fields), len(validated_fields)),
    )

    logger.debug(
        "Derived test spec built",
        extra={
            "context": {
                "flow_id": flow.id,
                "paths": spec.total_paths,
                "boundary_tests": spec.total_boundary_tests,
                "test_cases": spec.total_test_cases,
            }
        },
    )
    return spec


__all__ = [
    "PATH_PRIORITIES",
    "build_derived_test_spec",
    "coverage_ratio",
]
