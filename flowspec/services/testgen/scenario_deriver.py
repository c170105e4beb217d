"""Agent and orchestration scenario derivation.

TAG: [TESTGEN] [SCENARIOS]

Agent and orchestration flows are tested by scenario rather than by path:
each tool, guardrail, human gate, router rule, fallback, circuit breaker and
handoff yields the scenarios listed below. Priorities are for triage only.

Agent flows:
    tool succeeds (critical), tool fails (important), guardrail blocks
    (critical), loop reaches max iterations (important), human gate approves
    (critical) or rejects (important)

Orchestration flows:
    rule matches (critical), falls back (important), breaker opens
    (important), handoff transfers context (critical), supervisor intervenes
    (nice_to_have)
"""

from __future__ import annotations

from typing import Any

from flowspec.core.logging import get_logger
from flowspec.models.enums import FlowKind, TestCaseSource, TestPriority
from flowspec.schemas.flow import (
    AgentLoopSpec,
    Flow,
    GuardrailSpec,
    HandoffSpec,
    HumanGateSpec,
    Node,
    OrchestratorSpec,
    SmartRouterSpec,
)
from flowspec.schemas.testing import DerivedTestCase

logger = get_logger(__name__)

SUPERVISOR_STRATEGY = "supervisor"


class _CaseBuilder:
    """Numbers cases per source: ``agent-1``, ``orchestration-1``, ..."""

    def __init__(self, source: TestCaseSource) -> None:
        self.source = source
        self.cases: list[DerivedTestCase] = []

    def add(
        self,
        name: str,
        priority: TestPriority,
        node: Node | None = None,
        steps: list[str] | None = None,
        **expected: Any,
    ) -> None:
        self.cases.append(
            DerivedTestCase(
                id=f"{self.source.value}-{len(self.cases) + 1}",
                source=self.source,
                name=name,
                priority=priority,
                node_id=node.id if node else None,
                steps=steps or [],
                expected=expected,
            )
        )


class ScenarioTestDeriver:
    """Derives agent and orchestration scenarios.

    TAG: [TESTGEN] [SCENARIOS]

    Traditional flows produce no scenarios.
    """

    def derive(self, flow: Flow) -> list[DerivedTestCase]:
        if flow.kind == FlowKind.AGENT:
            cases = self.derive_agent(flow)
        elif flow.kind == FlowKind.ORCHESTRATION:
            cases = self.derive_orchestration(flow)
        else:
            cases = []

        logger.debug(
            "Scenario tests derived",
            extra={"context": {"flow_id": flow.id, "scenarios": len(cases)}},
        )
        return cases

    def derive_agent(self, flow: Flow) -> list[DerivedTestCase]:
        builder = _CaseBuilder(TestCaseSource.AGENT)

        for loop in flow.nodes:
            spec = loop.spec
            if not isinstance(spec, AgentLoopSpec):
                continue
            for tool, is_terminal in flow.agent_tools(loop):
                builder.add(
                    f"Tool '{tool}' succeeds",
                    TestPriority.CRITICAL,
                    node=loop,
                    steps=[f"Agent calls '{tool}'", "Tool returns a result"],
                    tool=tool,
                    outcome="success",
                    ends_loop=is_terminal,
                )
                builder.add(
                    f"Tool '{tool}' fails",
                    TestPriority.IMPORTANT,
                    node=loop,
                    steps=[f"Agent calls '{tool}'", "Tool raises an error"],
                    tool=tool,
                    outcome="error",
                )
            if spec.max_iterations is not None:
                builder.add(
                    f"Agent loop '{loop.display_name}' reaches max iterations",
                    TestPriority.IMPORTANT,
                    node=loop,
                    steps=[f"Agent never calls a terminal tool for {spec.max_iterations} iterations"],
                    max_iterations=spec.max_iterations,
                    outcome=spec.on_max_iterations or "stopped",
                )

        for node in flow.nodes:
            if isinstance(node.spec, GuardrailSpec):
                builder.add(
                    f"Guardrail '{node.display_name}' blocks unsafe content",
                    TestPriority.CRITICAL,
                    node=node,
                    steps=["Send content that violates a guardrail check"],
                    outcome="blocked",
                    checks=[c.type for c in node.spec.checks if c.type],
                )
            elif isinstance(node.spec, HumanGateSpec):
                builder.add(
                    f"Human gate '{node.display_name}' approves",
                    TestPriority.CRITICAL,
                    node=node,
                    steps=["Reviewer approves the request"],
                    outcome="approved",
                )
                builder.add(
                    f"Human gate '{node.display_name}' rejects",
                    TestPriority.IMPORTANT,
                    node=node,
                    steps=["Reviewer rejects the request"],
                    outcome="rejected",
                )
        return builder.cases

    def derive_orchestration(self, flow: Flow) -> list[DerivedTestCase]:
        builder = _CaseBuilder(TestCaseSource.ORCHESTRATION)

        for node in flow.nodes:
            spec = node.spec
            if isinstance(spec, SmartRouterSpec):
                for rule in spec.rules:
                    label = rule.id or rule.condition or rule.route
                    builder.add(
                        f"Request matching rule '{label}' is routed to '{rule.route}'",
                        TestPriority.CRITICAL,
                        node=node,
                        steps=[f"Send a request where {rule.condition or label}"],
                        routed_to=rule.route,
                    )
                if spec.has_fallback:
                    builder.add(
                        f"Unmatched request falls back to '{spec.fallback_targets[0]}'",
                        TestPriority.IMPORTANT,
                        node=node,
                        steps=["Send a request that matches no rule"],
                        routed_to=spec.fallback_targets[0],
                        fallback_chain=spec.fallback_targets,
                    )
                if spec.breaker_enabled:
                    threshold = spec.circuit_breaker.failure_threshold
                    builder.add(
                        f"Circuit breaker opens after {threshold} failures",
                        TestPriority.IMPORTANT,
                        node=node,
                        steps=[f"Make the routed flow fail {threshold} times"],
                        breaker="open",
                        failure_threshold=threshold,
                    )
            elif isinstance(spec, HandoffSpec):
                builder.add(
                    f"Handoff '{node.display_name}' transfers context to '{spec.target_flow}'",
                    TestPriority.CRITICAL,
                    node=node,
                    steps=["Trigger the handoff", "Inspect the context received by the target"],
                    target_flow=spec.target_flow,
                    mode=spec.mode,
                )
            elif isinstance(spec, OrchestratorSpec) and spec.strategy == SUPERVISOR_STRATEGY:
                builder.add(
                    f"Supervisor '{node.display_name}' intervenes on a failing agent",
                    TestPriority.NICE_TO_HAVE,
                    node=node,
                    steps=["Make one agent produce an unacceptable result"],
                    outcome="supervisor_intervened",
                )
        return builder.cases


def derive_scenario_tests(flow: Flow) -> list[DerivedTestCase]:
    """Derive the agent or orchestration scenarios of a flow."""
    return ScenarioTestDeriver().derive(flow)


__all__ = ["ScenarioTestDeriver", "derive_scenario_tests"]
