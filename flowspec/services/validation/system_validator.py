"""System-scoped validation.

TAG: [VALIDATION] [SYSTEM]

Checks the wiring between domains:

- Event wiring: every consumed event has a publisher, every published event
  has a consumer, payload shapes agree, event names share one convention
- Portal wiring: portal targets name existing domains
- Orchestration wiring: orchestration flows do not depend on each other in
  a cycle
- Cross-domain data: service calls target an endpoint some flow exposes,
  and each schema has a single owning domain
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from flowspec.core.logging import get_logger
from flowspec.models.enums import (
    FlowKind,
    ValidationCategory,
    ValidationScope,
    ValidationSeverity,
)
from flowspec.schemas.domain import Domain, EventWiring
from flowspec.schemas.flow import (
    Flow,
    HandoffSpec,
    OrchestratorSpec,
    ServiceCallSpec,
    SmartRouterSpec,
    qualify_flow_ref,
)
from flowspec.schemas.validation import ValidationIssue, ValidationResult
from flowspec.services.validation.aggregator import build_result
from flowspec.services.validation.algorithms import GraphAlgorithms, format_cycle
from flowspec.services.validation.graph import Graph

logger = get_logger(__name__)

SYSTEM_TARGET_ID = "system"

NAMING_PATTERNS: dict[str, re.Pattern[str]] = {
    "dot.case": re.compile(r"^[A-Za-z0-9]+(\.[A-Za-z0-9_]+)+$"),
    "camelCase": re.compile(r"^[a-z][a-z0-9]*([A-Z][a-z0-9]*)+$"),
    "snake_case": re.compile(r"^[a-z][a-z0-9]*(_[a-z0-9]+)+$"),
}


@dataclass(frozen=True)
class _EventEndpoint:
    """One side of an event declaration."""

    event: str
    domain: str
    wiring: EventWiring


def classify_event_name(name: str) -> str | None:
    """Return the naming pattern of an event name, None for single words."""
    for pattern_name, pattern in NAMING_PATTERNS.items():
        if pattern.match(name):
            return pattern_name
    return None


class SystemValidator:
    """Validates cross-domain wiring.

    TAG: [VALIDATION] [SYSTEM]

    Example:
        >>> result = SystemValidator().validate(domains, {"orders": order_flows})
        >>> [i.message for i in result.warnings]
    """

    def validate(
        self,
        domains: Sequence[Domain],
        flows: Mapping[str, Sequence[Flow]],
    ) -> ValidationResult:
        """Run every system rule.

        Args:
            domains: All domains in declaration order.
            flows: Domain id to the flows present in that domain.

        Returns:
            ValidationResult with scope ``system``.
        """
        flows_by_domain = {domain.id: list(flows.get(domain.id, [])) for domain in domains}
        all_flows = [flow for domain_flows in flows_by_domain.values() for flow in domain_flows]

        issues: list[ValidationIssue] = []
        issues.extend(self._check_event_wiring(domains))
        issues.extend(self._check_event_naming(domains))
        issues.extend(self._check_portals(domains))
        issues.extend(self._check_orchestration_cycles(flows_by_domain))
        issues.extend(self._check_service_calls(all_flows))
        issues.extend(self._check_schema_ownership(domains))

        result = build_result(ValidationScope.SYSTEM, SYSTEM_TARGET_ID, issues)
        logger.debug(
            "System validated",
            extra={
                "context": {
                    "domains": len(domains),
                    "flows": len(all_flows),
                    "errors": result.error_count,
                    "warnings": result.warning_count,
                }
            },
        )
        return result

    # =========================================================================
    # Event wiring
    # =========================================================================

    def _check_event_wiring(self, domains: Sequence[Domain]) -> list[ValidationIssue]:
        category = ValidationCategory.EVENT_WIRING
        issues: list[ValidationIssue] = []

        publishers = [
            _EventEndpoint(w.event, d.id, w) for d in domains for w in d.publishes_events
        ]
        consumers = [
            _EventEndpoint(w.event, d.id, w) for d in domains for w in d.consumes_events
        ]
        published_by = _domains_by_event(publishers)
        consumed_by = _domains_by_event(consumers)

        for event, endpoints in consumed_by.items():
            if event in published_by:
                continue
            issues.append(
                _system_issue(
                    ValidationSeverity.ERROR,
                    category,
                    f"Event '{event}' is consumed by {_domain_list(endpoints)} "
                    "but no domain publishes it",
                    domain=endpoints[0].domain,
                    flow_id=endpoints[0].wiring.handled_by_flow,
                    suggestion="Add the event to a domain's publishes_events or remove the consumers",
                )
            )

        for event, endpoints in published_by.items():
            if event in consumed_by:
                continue
            issues.append(
                _system_issue(
                    ValidationSeverity.WARNING,
                    category,
                    f"Event '{event}' is published by {_domain_list(endpoints)} "
                    "but no domain consumes it",
                    domain=endpoints[0].domain,
                    flow_id=endpoints[0].wiring.from_flow,
                )
            )

        for consumer in consumers:
            expected = consumer.wiring.payload_fields
            if not expected:
                continue
            for publisher in publishers:
                if publisher.event != consumer.event or not publisher.wiring.payload:
                    continue
                sent = publisher.wiring.payload_fields
                missing = sorted(expected - sent)
                unused = sorted(sent - expected)
                if missing:
                    issues.append(
                        _system_issue(
                            ValidationSeverity.ERROR,
                            category,
                            f"Event '{consumer.event}' payload mismatch: domain "
                            f"'{consumer.domain}' expects {', '.join(missing)} "
                            f"but domain '{publisher.domain}' does not send "
                            f"{'it' if len(missing) == 1 else 'them'}",
                            domain=consumer.domain,
                            related_domain=publisher.domain,
                            suggestion="Add the fields to the published payload or drop them from the consumer",
                        )
                    )
                if unused:
                    issues.append(
                        _system_issue(
                            ValidationSeverity.INFO,
                            category,
                            f"Event '{consumer.event}' fields {', '.join(unused)} sent by "
                            f"domain '{publisher.domain}' are not used by domain "
                            f"'{consumer.domain}'",
                            domain=consumer.domain,
                            related_domain=publisher.domain,
                        )
                    )
        return issues

    def _check_event_naming(self, domains: Sequence[Domain]) -> list[ValidationIssue]:
        examples: dict[str, str] = {}
        for domain in domains:
            for wiring in (*domain.publishes_events, *domain.consumes_events):
                pattern = classify_event_name(wiring.event)
                if pattern is not None:
                    examples.setdefault(pattern, wiring.event)

        if len(examples) <= 1:
            return []
        observed = ", ".join(f"{name} ('{example}')" for name, example in examples.items())
        return [
            _system_issue(
                ValidationSeverity.WARNING,
                ValidationCategory.EVENT_WIRING,
                f"Event names mix naming conventions: {observed}",
                suggestion="Use a single naming convention for all events",
            )
        ]

    # =========================================================================
    # Portal wiring
    # =========================================================================

    def _check_portals(self, domains: Sequence[Domain]) -> list[ValidationIssue]:
        domain_ids = {d.id for d in domains}
        return [
            _system_issue(
                ValidationSeverity.ERROR,
                ValidationCategory.PORTAL_WIRING,
                f"Domain '{domain.id}' has a portal to unknown domain '{target}'",
                domain=domain.id,
                related_domain=target,
                suggestion="Point the portal at an existing domain or remove it",
            )
            for domain in domains
            for target in domain.portals
            if target not in domain_ids
        ]

    # =========================================================================
    # Orchestration wiring
    # =========================================================================

    def _check_orchestration_cycles(
        self, flows: Mapping[str, Sequence[Flow]]
    ) -> list[ValidationIssue]:
        graph = build_orchestration_graph(flows)
        cycle = GraphAlgorithms.detect_cycle(graph)
        if not cycle:
            return []
        domain_id, _, flow_id = cycle[0].rpartition("/")
        return [
            _system_issue(
                ValidationSeverity.ERROR,
                ValidationCategory.ORCHESTRATION_WIRING,
                f"Orchestration dependency cycle: {format_cycle(cycle)}",
                domain=domain_id or None,
                flow_id=flow_id,
                suggestion="Break the cycle so orchestration flows do not call each other recursively",
            )
        ]

    # =========================================================================
    # Cross-domain data
    # =========================================================================

    def _check_service_calls(self, flows: Sequence[Flow]) -> list[ValidationIssue]:
        exposed = {flow.http_endpoint for flow in flows if flow.http_endpoint}
        issues: list[ValidationIssue] = []

        for flow in flows:
            for node in flow.nodes:
                if not isinstance(node.spec, ServiceCallSpec):
                    continue
                target = node.spec.target
                if target is None or target in exposed:
                    continue
                issues.append(
                    _system_issue(
                        ValidationSeverity.WARNING,
                        ValidationCategory.CROSS_DOMAIN_DATA,
                        f"Service call '{node.display_name}' targets '{target}' "
                        "which no flow in the project exposes",
                        domain=flow.domain,
                        flow_id=flow.id,
                        node_id=node.id,
                        suggestion="Ignore if the target is an external API",
                    )
                )
        return issues

    def _check_schema_ownership(self, domains: Sequence[Domain]) -> list[ValidationIssue]:
        owners: dict[str, list[str]] = {}
        names: dict[str, str] = {}
        for domain in domains:
            for schema in domain.owns_schemas:
                key = schema.lower()
                names.setdefault(key, schema)
                if domain.id not in owners.setdefault(key, []):
                    owners[key].append(domain.id)

        return [
            _system_issue(
                ValidationSeverity.WARNING,
                ValidationCategory.CROSS_DOMAIN_DATA,
                f"Schema '{names[key]}' is owned by multiple domains: {', '.join(domain_ids)}",
                domain=domain_ids[0],
                related_domain=domain_ids[1],
                suggestion="Keep one owning domain and reference the schema from the others",
            )
            for key, domain_ids in owners.items()
            if len(domain_ids) > 1
        ]


# =============================================================================
# Helpers
# =============================================================================


def orchestration_refs(flow: Flow) -> list[str]:
    """Flow ids an orchestration flow depends on, in declaration order."""
    refs: list[str | None] = []
    for node in flow.nodes:
        spec = node.spec
        if isinstance(spec, OrchestratorSpec):
            refs.extend(agent.ref for agent in spec.agents)
        elif isinstance(spec, SmartRouterSpec):
            refs.extend(rule.route for rule in spec.rules)
            refs.extend(spec.fallback_targets)
        elif isinstance(spec, HandoffSpec):
            refs.append(spec.target_flow)
    return list(dict.fromkeys(r for r in refs if r))


def build_orchestration_graph(flows: Mapping[str, Sequence[Flow]]) -> Graph[str]:
    """Dependency graph restricted to orchestration-kind flows.

    Nodes are qualified ``domain/flow-id`` keys, so flows sharing an id in
    different domains stay distinct. A bare ``flow-id`` reference resolves
    inside the referencing flow's domain; only edges into other
    orchestration flows are kept.

    Args:
        flows: Domain id to the flows present in that domain.
    """
    orchestration: dict[str, Flow] = {}
    for domain_id, domain_flows in flows.items():
        for flow in domain_flows:
            if flow.kind == FlowKind.ORCHESTRATION:
                orchestration.setdefault(qualify_flow_ref(flow.id, domain_id), flow)

    graph = Graph[str]()
    for key in orchestration:
        graph.add_node(key)
    for key, flow in orchestration.items():
        domain_id = key.rpartition("/")[0]
        for ref in orchestration_refs(flow):
            target = qualify_flow_ref(ref, domain_id)
            if target in orchestration:
                graph.add_edge(key, target)
    return graph


def _domains_by_event(endpoints: Sequence[_EventEndpoint]) -> dict[str, list[_EventEndpoint]]:
    grouped: dict[str, list[_EventEndpoint]] = {}
    for endpoint in endpoints:
        group = grouped.setdefault(endpoint.event, [])
        if all(e.domain != endpoint.domain for e in group):
            group.append(endpoint)
    return grouped


def _domain_list(endpoints: Sequence[_EventEndpoint]) -> str:
    return ", ".join(e.domain for e in endpoints)


def _system_issue(
    severity: ValidationSeverity,
    category: ValidationCategory,
    message: str,
    domain: str | None = None,
    related_domain: str | None = None,
    flow_id: str | None = None,
    node_id: str | None = None,
    suggestion: str | None = None,
) -> ValidationIssue:
    return ValidationIssue(
        scope=ValidationScope.SYSTEM,
        severity=severity,
        category=category,
        message=message,
        domain=domain,
        related_domain=related_domain,
        flow_id=flow_id,
        node_id=node_id,
        suggestion=suggestion,
    )


__all__ = [
    "NAMING_PATTERNS",
    "SYSTEM_TARGET_ID",
    "SystemValidator",
    "build_orchestration_graph",
    "classify_event_name",
    "orchestration_refs",
]
