"""Flow-scoped validation.

TAG: [VALIDATION] [FLOW]

This module provides the FlowValidator, which runs every flow-level rule:

- Graph completeness: trigger count, reachability, dead ends, branch handles
  and (for traditional flows) cycles
- Spec completeness: required fields per node kind
- Reference integrity: error codes, schemas and sub-flows against the catalog
- Agent and orchestration rules for the matching flow kinds

Every rule appends zero or more issues. No rule short-circuits another, and
the only exception raised is InvalidConnectionTargetError for a connection
whose target is not a node of the flow.
"""

from __future__ import annotations

from flowspec.core.logging import get_logger
from flowspec.models.enums import (
    FlowKind,
    NodeKind,
    ValidationCategory,
    ValidationScope,
    ValidationSeverity,
)
from flowspec.schemas.base import is_blank
from flowspec.schemas.domain import ProjectCatalog
from flowspec.schemas.flow import (
    BRANCH_HANDLES,
    AgentGroupSpec,
    AgentLoopSpec,
    DataStoreSpec,
    DecisionSpec,
    Flow,
    GuardrailSpec,
    HandoffSpec,
    HumanGateSpec,
    InputSpec,
    Node,
    OrchestratorSpec,
    ParallelSpec,
    ProcessSpec,
    ServiceCallSpec,
    SmartRouterSpec,
    SubFlowSpec,
    TerminalSpec,
    TriggerSpec,
)
from flowspec.schemas.validation import ValidationIssue, ValidationResult
from flowspec.services.validation.aggregator import build_result
from flowspec.services.validation.algorithms import GraphAlgorithms, format_cycle
from flowspec.services.validation.graph import Graph, build_flow_graph

logger = get_logger(__name__)

ERROR = ValidationSeverity.ERROR
WARNING = ValidationSeverity.WARNING
INFO = ValidationSeverity.INFO

# (spec attributes, any of which satisfies the rule; label; severity)
SpecRequirement = tuple[tuple[str, ...], str, ValidationSeverity]

REQUIRED_SPEC_FIELDS: dict[str, list[SpecRequirement]] = {
    NodeKind.SERVICE_CALL.value: [
        (("method",), "a method", ERROR),
        (("url", "path", "integration"), "a URL, path or integration", ERROR),
    ],
    NodeKind.EVENT.value: [
        (("direction",), "a direction", ERROR),
        (("event_name",), "an event name", ERROR),
    ],
    NodeKind.LOOP.value: [
        (("collection",), "a collection", ERROR),
        (("iterator",), "an iterator variable", ERROR),
    ],
    NodeKind.SUB_FLOW.value: [(("flow_ref",), "a flow reference", ERROR)],
    NodeKind.LLM_CALL.value: [
        (("model",), "a model", ERROR),
        (("prompt_template",), "a prompt template", WARNING),
    ],
    NodeKind.CACHE.value: [
        (("key",), "a key", ERROR),
        (("store",), "a store", ERROR),
    ],
    NodeKind.TRANSFORM.value: [
        (("input_schema",), "an input_schema", ERROR),
        (("output_schema",), "an output_schema", ERROR),
    ],
    NodeKind.DELAY.value: [(("min_ms",), "min_ms", ERROR)],
    NodeKind.COLLECTION.value: [
        (("operation",), "an operation", ERROR),
        (("input",), "an input", ERROR),
    ],
    NodeKind.PARSE.value: [
        (("format",), "a format", ERROR),
        (("input",), "an input", ERROR),
    ],
    NodeKind.CRYPTO.value: [
        (("operation",), "an operation", ERROR),
        (("algorithm",), "an algorithm", ERROR),
    ],
    NodeKind.BATCH.value: [
        (("input",), "an input", ERROR),
        (("operation_template",), "an operation template", ERROR),
    ],
    NodeKind.IPC_CALL.value: [(("command",), "a command name", ERROR)],
}

# Minimum number of items for list-valued spec fields
MIN_SPEC_ITEMS: dict[str, tuple[str, int]] = {
    NodeKind.PARALLEL.value: ("branches", 2),
    NodeKind.TRANSACTION.value: ("steps", 2),
}


def kind_label(kind: str) -> str:
    """``smart_router`` -> ``Smart router``."""
    return kind.replace("_", " ").capitalize()


class FlowValidator:
    """Validates one flow against the flow-scoped rules.

    TAG: [VALIDATION] [FLOW]

    The validator is stateless; the same instance can validate any number of
    flows. When no catalog is supplied the catalog-dependent reference checks
    are skipped.

    Example:
        >>> validator = FlowValidator()
        >>> result = validator.validate(flow, catalog)
        >>> if not result.is_valid:
        ...     print(result.errors)
    """

    def validate(
        self,
        flow: Flow,
        catalog: ProjectCatalog | None = None,
    ) -> ValidationResult:
        """Run every flow rule and bundle the issues.

        Args:
            flow: The flow to validate.
            catalog: Read-only project lookups (flow ids, schemas, error codes).

        Returns:
            ValidationResult with scope ``flow`` and the flow id as target.

        Raises:
            InvalidConnectionTargetError: If a connection targets a node id
                that does not exist in the flow.
        """
        graph = build_flow_graph(flow)
        issues = _FlowIssues(flow)

        self._check_graph_completeness(flow, graph, issues)
        self._check_spec_completeness(flow, issues)
        if catalog is not None:
            self._check_reference_integrity(flow, catalog, issues)
        if flow.kind == FlowKind.AGENT:
            self._check_agent_rules(flow, issues)
        if flow.kind == FlowKind.ORCHESTRATION:
            self._check_orchestration_rules(flow, catalog, issues)

        result = build_result(ValidationScope.FLOW, flow.id, issues.items)
        logger.debug(
            "Flow validated",
            extra={
                "context": {
                    "flow_id": flow.id,
                    "nodes": graph.node_count,
                    "edges": graph.edge_count,
                    "errors": result.error_count,
                    "warnings": result.warning_count,
                }
            },
        )
        return result

    # =========================================================================
    # Graph completeness
    # =========================================================================

    def _check_graph_completeness(
        self,
        flow: Flow,
        graph: Graph[str],
        issues: _FlowIssues,
    ) -> None:
        """Trigger, reachability, dead ends, handles and cycles."""
        category = ValidationCategory.GRAPH_COMPLETENESS

        seen: set[str] = set()
        for node in flow.nodes:
            if node.id in seen:
                issues.add(
                    ERROR,
                    category,
                    f"Duplicate node id '{node.id}'",
                    node=node,
                    suggestion="Give every node in the flow a unique id",
                )
            seen.add(node.id)

        triggers = flow.triggers
        if not triggers:
            issues.add(
                ERROR,
                category,
                "Flow must have a trigger node",
                suggestion="Add a trigger node as the flow entry point",
            )
        elif len(triggers) > 1:
            issues.add(
                ERROR,
                category,
                f"Flow has {len(triggers)} trigger nodes; exactly one is allowed",
                node=triggers[1],
                suggestion="Remove the extra trigger nodes",
            )

        node_map = flow.node_map
        if triggers:
            trigger_id = triggers[0].id
            reachable = GraphAlgorithms.reachable_from(graph, [trigger_id])

            for node_id in GraphAlgorithms.find_unreachable_from(graph, [trigger_id]):
                node = node_map[node_id]
                if node.kind == NodeKind.TRIGGER:
                    continue
                issues.add(
                    ERROR,
                    category,
                    f"Node '{node.display_name}' ({node.kind}) is unreachable from the trigger",
                    node=node,
                    suggestion="Connect this node to the flow graph or remove it",
                )

            def may_end(node_id: str) -> bool:
                kind = node_map[node_id].kind
                if kind == NodeKind.TERMINAL or node_id not in reachable:
                    return True
                return flow.kind == FlowKind.AGENT and kind == NodeKind.TOOL

            for node_id in GraphAlgorithms.find_dead_ends(graph, allowed=may_end):
                node = node_map[node_id]
                issues.add(
                    ERROR,
                    category,
                    f"Node '{node.display_name}' ({node.kind}) is a dead end with no outgoing connections",
                    node=node,
                    suggestion="Connect this node to a downstream node or terminal",
                )

        for node in flow.nodes:
            if node.kind == NodeKind.TERMINAL and node.connections:
                issues.add(
                    WARNING,
                    category,
                    f"Terminal '{node.display_name}' has outgoing connections; terminals should be endpoints",
                    node=node,
                    suggestion="Remove outgoing connections from this terminal",
                )
            self._check_branch_handles(node, issues)

        if flow.kind == FlowKind.TRADITIONAL:
            cycle = GraphAlgorithms.detect_cycle(graph)
            if cycle:
                issues.add(
                    ERROR,
                    category,
                    f"Flow contains a cycle: {format_cycle(cycle)}",
                    node=node_map.get(cycle[0]),
                    suggestion="Remove the cycle or convert to an agent flow if loops are intentional",
                )

    def _check_branch_handles(self, node: Node, issues: _FlowIssues) -> None:
        category = ValidationCategory.GRAPH_COMPLETENESS
        name = node.display_name
        spec = node.spec

        if node.kind == NodeKind.DECISION:
            missing = [h for h in ("true", "false") if not node.has_branch(h)]
            if len(missing) == 2:
                issues.add(
                    ERROR,
                    category,
                    f"Decision '{name}' is missing both true and false branches",
                    node=node,
                    suggestion="Connect the true and false handles to downstream nodes",
                )
            elif missing:
                handle = missing[0]
                issues.add(
                    ERROR,
                    category,
                    f"Decision '{name}' is missing {handle} branch",
                    node=node,
                    suggestion=f"Connect the '{handle}' handle to a downstream node",
                )
            return

        if node.kind == NodeKind.INPUT:
            if not node.has_branch("valid"):
                issues.add(
                    ERROR,
                    category,
                    f"Input '{name}' is missing valid branch",
                    node=node,
                    suggestion="Connect the 'valid' handle to the next step",
                )
            if not node.has_branch("invalid"):
                issues.add(
                    WARNING,
                    category,
                    f"Input '{name}' is missing invalid branch",
                    node=node,
                    suggestion="Connect the 'invalid' handle to an error terminal",
                )
            return

        if isinstance(spec, ParallelSpec):
            for index in range(len(spec.branches)):
                handle = f"branch-{index}"
                if not node.has_branch(handle):
                    issues.add(
                        ERROR,
                        category,
                        f"Parallel '{name}' is missing a connection for branch "
                        f"'{spec.branch_label(index)}'",
                        node=node,
                        suggestion=f"Connect the '{handle}' handle to a downstream node",
                    )
            if not node.has_branch("done"):
                issues.add(
                    ERROR,
                    category,
                    f"Parallel '{name}' is missing done branch",
                    node=node,
                    suggestion="Connect the 'done' handle to a downstream node",
                )
            return

        if isinstance(spec, SmartRouterSpec):
            llm_routes = set(spec.llm_routing.routes) if spec.llm_routing else set()
            for handle in spec.route_handles:
                if node.has_branch(handle):
                    continue
                route_kind = "LLM route" if handle in llm_routes else "route"
                issues.add(
                    WARNING,
                    category,
                    f"Smart router '{name}' is missing a connection for {route_kind} '{handle}'",
                    node=node,
                    suggestion=f"Connect the '{handle}' handle to a downstream node",
                )
            return

        if isinstance(spec, HumanGateSpec):
            for handle in spec.option_ids:
                if not node.has_branch(handle):
                    issues.add(
                        WARNING,
                        category,
                        f"Human gate '{name}' is missing a connection for approval option '{handle}'",
                        node=node,
                        suggestion=f"Connect the '{handle}' handle to a downstream node",
                    )
            return

        for handle in BRANCH_HANDLES.get(node.kind, ()):
            if not node.has_branch(handle):
                issues.add(
                    ERROR,
                    category,
                    f"{kind_label(node.kind)} '{name}' is missing {handle} branch",
                    node=node,
                    suggestion=f"Connect the '{handle}' handle to a downstream node",
                )

    # =========================================================================
    # Spec completeness
    # =========================================================================

    def _check_spec_completeness(self, flow: Flow, issues: _FlowIssues) -> None:
        category = ValidationCategory.SPEC_COMPLETENESS

        for node in flow.nodes:
            spec = node.spec
            name = node.display_name

            if isinstance(spec, TriggerSpec):
                if is_blank(spec.trigger_type):
                    issues.add(
                        ERROR,
                        category,
                        "Trigger must have a type or event defined",
                        node=node,
                        suggestion="Set the trigger type (e.g. http, event, schedule)",
                    )
                if spec.is_http:
                    if is_blank(spec.method):
                        issues.add(
                            ERROR,
                            category,
                            "HTTP trigger must have a method",
                            node=node,
                            suggestion="Set the HTTP method (GET, POST, PUT, PATCH, DELETE)",
                        )
                    if is_blank(spec.path):
                        issues.add(
                            ERROR,
                            category,
                            "HTTP trigger must have a path",
                            node=node,
                            suggestion="Set the endpoint path (e.g. /api/users)",
                        )

            elif isinstance(spec, InputSpec):
                for field in spec.fields:
                    if is_blank(field.type):
                        issues.add(
                            ERROR,
                            category,
                            f"Input '{name}' field '{field.name}' is missing a type",
                            node=node,
                            suggestion="Set a type for each input field (e.g. string, number)",
                        )
                    if field.has_rules and is_blank(field.error):
                        issues.add(
                            WARNING,
                            category,
                            f"Input '{name}' field '{field.name}' has validation rules but no error message",
                            node=node,
                            suggestion="Add an error message shown when the rule fails",
                        )

            elif isinstance(spec, DecisionSpec):
                if is_blank(spec.expression):
                    issues.add(
                        ERROR,
                        category,
                        f"Decision '{name}' must have a condition defined",
                        node=node,
                        suggestion="Set the condition expression",
                    )

            elif isinstance(spec, TerminalSpec):
                if flow.is_http and spec.status is None:
                    issues.add(
                        WARNING,
                        category,
                        f"Terminal '{name}' has no status code",
                        node=node,
                        suggestion="Set the HTTP status returned by this terminal",
                    )
                if flow.is_http and not spec.body:
                    issues.add(
                        INFO,
                        category,
                        f"Terminal '{name}' has no response body",
                        node=node,
                    )

            elif isinstance(spec, DataStoreSpec):
                self._check_data_store(node, spec, issues)

            elif isinstance(spec, SubFlowSpec):
                self._check_sub_flow(node, spec, issues)

            elif isinstance(spec, ProcessSpec):
                if is_blank(spec.description) and is_blank(spec.action):
                    issues.add(
                        WARNING,
                        category,
                        f"Process '{name}' has no description",
                        node=node,
                        suggestion="Describe what this step does",
                    )

            for attrs, label, severity in REQUIRED_SPEC_FIELDS.get(node.kind, []):
                if all(is_blank(getattr(spec, attr, None)) for attr in attrs):
                    issues.add(
                        severity,
                        category,
                        f"{kind_label(node.kind)} '{name}' must have {label} defined",
                        node=node,
                    )

            if node.kind in MIN_SPEC_ITEMS:
                attr, minimum = MIN_SPEC_ITEMS[node.kind]
                if len(getattr(spec, attr, None) or []) < minimum:
                    issues.add(
                        ERROR,
                        category,
                        f"{kind_label(node.kind)} '{name}' must have at least {minimum} {attr}",
                        node=node,
                    )

    def _check_data_store(self, node: Node, spec: DataStoreSpec, issues: _FlowIssues) -> None:
        """Required fields by ``store_type``."""
        category = ValidationCategory.SPEC_COMPLETENESS
        name = node.display_name

        if is_blank(spec.operation):
            issues.add(
                ERROR,
                category,
                f"Data store '{name}' must have an operation set",
                node=node,
                suggestion="Set the operation (create, read, update or delete)",
            )
        elif spec.uses_memory_operation and spec.store_type != "memory":
            issues.add(
                WARNING,
                category,
                f"Data store '{name}' uses memory operation '{spec.operation}' "
                f"but store_type is '{spec.store_type}'",
                node=node,
                suggestion="Set store_type to 'memory' or use a CRUD operation",
            )

        if spec.store_type == "database":
            if is_blank(spec.model):
                issues.add(
                    ERROR,
                    category,
                    f"Data store '{name}' must have a model defined",
                    node=node,
                    suggestion="Set the model name (e.g. User, Order)",
                )
        elif spec.store_type == "filesystem":
            if is_blank(spec.path):
                issues.add(
                    ERROR,
                    category,
                    f"Filesystem data store '{name}' must have a path defined",
                    node=node,
                    suggestion="Set the file path",
                )
        elif spec.store_type == "memory":
            if is_blank(spec.store):
                issues.add(
                    ERROR,
                    category,
                    f"Memory data store '{name}' must have a store name",
                    node=node,
                    suggestion="Set the store name (e.g. project-store)",
                )
            if spec.operation != "reset" and is_blank(spec.selector):
                issues.add(
                    ERROR,
                    category,
                    f"Memory data store '{name}' must have a selector",
                    node=node,
                    suggestion="Set the state selector (e.g. domains, currentFlow.nodes)",
                )
            if spec.operation == "update_where":
                if is_blank(spec.predicate):
                    issues.add(
                        ERROR,
                        category,
                        f"Memory data store '{name}' with update_where must have a predicate",
                        node=node,
                    )
                if is_blank(spec.patch):
                    issues.add(
                        ERROR,
                        category,
                        f"Memory data store '{name}' with update_where must have a patch",
                        node=node,
                    )

    def _check_sub_flow(self, node: Node, spec: SubFlowSpec, issues: _FlowIssues) -> None:
        """flow_ref format and mapping keys against the called flow's contract."""
        name = node.display_name

        if not is_blank(spec.flow_ref) and "/" not in spec.flow_ref:
            issues.add(
                WARNING,
                ValidationCategory.SPEC_COMPLETENESS,
                f"Sub-flow '{name}' flow_ref should be in domain/flow-id format",
                node=node,
                suggestion="Use the format domain/flow-id for the flow reference",
            )

        if spec.contract is None:
            return
        checks = (
            ("input_mapping", spec.input_mapping, spec.contract.inputs, "inputs"),
            ("output_mapping", spec.output_mapping, spec.contract.outputs, "outputs"),
        )
        for mapping_name, mapping, declared, side in checks:
            names = [f.name for f in declared]
            if not names:
                continue
            for key in mapping:
                if key not in names:
                    issues.add(
                        WARNING,
                        ValidationCategory.REFERENCE_INTEGRITY,
                        f"Sub-flow '{name}' {mapping_name} key '{key}' is not in the "
                        f"target flow's contract {side}",
                        node=node,
                        suggestion=f"Expected contract {side}: {', '.join(names)}",
                    )

    # =========================================================================
    # Reference integrity
    # =========================================================================

    def _check_reference_integrity(
        self,
        flow: Flow,
        catalog: ProjectCatalog,
        issues: _FlowIssues,
    ) -> None:
        category = ValidationCategory.REFERENCE_INTEGRITY

        for node in flow.nodes:
            for code in referenced_error_codes(node):
                if not catalog.has_error_code(code):
                    issues.add(
                        ERROR,
                        category,
                        f"Error code '{code}' is not defined in the error-code catalog",
                        node=node,
                        suggestion=f"Add '{code}' to the project error codes",
                    )

            spec = node.spec
            if isinstance(spec, DataStoreSpec) and not is_blank(spec.model):
                if not catalog.has_schema(spec.model):
                    issues.add(
                        ERROR,
                        category,
                        f"Data store '{node.display_name}' references unknown schema '{spec.model}'",
                        node=node,
                        suggestion=f"Create the schema file schemas/{spec.model.lower()}.yaml",
                    )

            if isinstance(spec, SubFlowSpec) and not is_blank(spec.flow_ref):
                if not catalog.has_flow(spec.flow_ref):
                    issues.add(
                        ERROR,
                        category,
                        f"Sub-flow '{node.display_name}' references unknown flow '{spec.flow_ref}'",
                        node=node,
                        suggestion="Point flow_ref at an existing flow (domain/flow-id)",
                    )

    # =========================================================================
    # Agent flows
    # =========================================================================

    def _check_agent_rules(self, flow: Flow, issues: _FlowIssues) -> None:
        category = ValidationCategory.AGENT_VALIDATION

        agent_loops = flow.nodes_of_kind(NodeKind.AGENT_LOOP)
        if not agent_loops:
            issues.add(
                ERROR,
                category,
                "Agent flow must have an agent_loop node",
                suggestion="Add an agent_loop node",
            )
        elif len(agent_loops) > 1:
            issues.add(
                ERROR,
                category,
                f"Agent flow has {len(agent_loops)} agent_loop nodes; exactly one is allowed",
                node=agent_loops[1],
            )

        for loop in agent_loops:
            spec = loop.spec
            if not isinstance(spec, AgentLoopSpec):
                continue
            name = loop.display_name
            tools = flow.agent_tools(loop)

            if not tools:
                issues.add(
                    ERROR,
                    category,
                    f"Agent loop '{name}' has no tools connected",
                    node=loop,
                    suggestion="Add at least one tool to the agent loop",
                )
            elif not any(is_terminal for _, is_terminal in tools):
                issues.add(
                    ERROR,
                    category,
                    f"Agent loop '{name}' has no terminal tool; the loop has no way to end",
                    node=loop,
                    suggestion="Mark at least one tool as terminal (is_terminal: true)",
                )
            if spec.max_iterations is None:
                issues.add(
                    WARNING,
                    category,
                    f"Agent loop '{name}' has no max_iterations set",
                    node=loop,
                    suggestion="Set max_iterations to bound the loop",
                )
            if is_blank(spec.model):
                issues.add(
                    WARNING,
                    category,
                    f"Agent loop '{name}' has no model specified",
                    node=loop,
                    suggestion="Set the model used by the agent",
                )

        for node in flow.nodes:
            if isinstance(node.spec, GuardrailSpec) and not node.spec.checks:
                issues.add(
                    WARNING,
                    category,
                    f"Guardrail '{node.display_name}' has no checks defined",
                    node=node,
                )
            if isinstance(node.spec, HumanGateSpec) and is_blank(node.spec.description):
                issues.add(
                    WARNING,
                    category,
                    f"Human gate '{node.display_name}' has no description",
                    node=node,
                    suggestion="Describe what the reviewer is asked to approve",
                )

    # =========================================================================
    # Orchestration flows
    # =========================================================================

    def _check_orchestration_rules(
        self,
        flow: Flow,
        catalog: ProjectCatalog | None,
        issues: _FlowIssues,
    ) -> None:
        category = ValidationCategory.ORCHESTRATION_VALIDATION

        def check_ref(node: Node, ref: str | None, what: str) -> None:
            if catalog is None or is_blank(ref) or catalog.has_flow(ref):
                return
            issues.add(
                ERROR,
                category,
                f"{kind_label(node.kind)} '{node.display_name}' references unknown {what} '{ref}'",
                node=node,
            )

        for node in flow.nodes:
            spec = node.spec
            name = node.display_name

            if isinstance(spec, OrchestratorSpec):
                if len(spec.agents) < 2:
                    issues.add(
                        ERROR,
                        category,
                        f"Orchestrator '{name}' must have at least 2 agents",
                        node=node,
                    )
                if is_blank(spec.strategy):
                    issues.add(
                        ERROR,
                        category,
                        f"Orchestrator '{name}' must have a strategy defined",
                        node=node,
                        suggestion="Set the strategy (supervisor, round_robin, broadcast or consensus)",
                    )
                for agent in spec.agents:
                    check_ref(node, agent.ref, "agent flow")

            elif isinstance(spec, SmartRouterSpec):
                if not spec.rules and not spec.llm_routing_enabled:
                    issues.add(
                        ERROR,
                        category,
                        f"Smart router '{name}' has no rules defined",
                        node=node,
                    )
                if not spec.has_fallback and not spec.llm_routing_enabled:
                    issues.add(
                        WARNING,
                        category,
                        f"Smart router '{name}' has no fallback; unmatched requests may fail",
                        node=node,
                        suggestion="Add a fallback flow",
                    )
                for rule in spec.rules:
                    check_ref(node, rule.route, "route target")
                for target in spec.fallback_targets:
                    check_ref(node, target, "fallback flow")
                if spec.breaker_enabled and spec.circuit_breaker.failure_threshold is None:
                    issues.add(
                        WARNING,
                        category,
                        f"Smart router '{name}' declares a circuit breaker without a failure threshold",
                        node=node,
                    )

            elif isinstance(spec, HandoffSpec):
                if spec.target_flow is None:
                    issues.add(
                        ERROR,
                        category,
                        f"Handoff '{name}' must have a target flow",
                        node=node,
                    )
                else:
                    check_ref(node, spec.target_flow, "target flow")
                if is_blank(spec.mode):
                    issues.add(
                        WARNING,
                        category,
                        f"Handoff '{name}' has no mode set",
                        node=node,
                        suggestion="Set the handoff mode (transfer, consult or collaborate)",
                    )

            elif isinstance(spec, AgentGroupSpec):
                if len(spec.members) < 2:
                    issues.add(
                        ERROR,
                        category,
                        f"Agent group '{name}' must have at least 2 members",
                        node=node,
                    )
                for member in spec.members:
                    check_ref(node, member.flow, "member flow")


# =============================================================================
# Helpers
# =============================================================================


class _FlowIssues:
    """Issue accumulator bound to one flow."""

    def __init__(self, flow: Flow) -> None:
        self.flow = flow
        self.items: list[ValidationIssue] = []

    def add(
        self,
        severity: ValidationSeverity,
        category: ValidationCategory,
        message: str,
        node: Node | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.items.append(
            ValidationIssue(
                scope=ValidationScope.FLOW,
                severity=severity,
                category=category,
                message=message,
                flow_id=self.flow.id,
                node_id=node.id if node else None,
                domain=self.flow.domain,
                suggestion=suggestion,
            )
        )


def referenced_error_codes(node: Node) -> list[str]:
    """Error codes a node refers to, deduplicated in declaration order."""
    spec = node.spec
    codes: list[str | None] = [spec.error_code]
    if isinstance(spec, InputSpec):
        codes.extend(field.error_code for field in spec.fields)
    if isinstance(spec, ServiceCallSpec):
        codes.extend(spec.error_mapping.values())
    return list(dict.fromkeys(c for c in codes if not is_blank(c)))


__all__ = [
    "FlowValidator",
    "kind_label",
    "referenced_error_codes",
]
