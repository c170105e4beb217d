"""Domain-scoped validation.

TAG: [VALIDATION] [DOMAIN]

Checks one domain's flow collection for internal consistency: duplicate
flow ids, duplicate HTTP endpoints, declared-versus-present flows and
event-group declarations. Memory data stores are checked against the
stores declared across the whole project.
"""

from __future__ import annotations

from collections.abc import Sequence

from flowspec.core.logging import get_logger
from flowspec.models.enums import ValidationCategory, ValidationScope, ValidationSeverity
from flowspec.schemas.base import is_blank
from flowspec.schemas.domain import Domain
from flowspec.schemas.flow import DataStoreSpec, Flow, TriggerSpec
from flowspec.schemas.validation import ValidationIssue, ValidationResult
from flowspec.services.validation.aggregator import build_result

logger = get_logger(__name__)

EVENT_GROUP_PREFIX = "event_group:"


class DomainValidator:
    """Validates one domain and the flows it contains.

    TAG: [VALIDATION] [DOMAIN]

    Example:
        >>> result = DomainValidator().validate(domain, flows)
        >>> result.scope
        'domain'
    """

    def validate(
        self,
        domain: Domain,
        flows: Sequence[Flow],
        all_domains: Sequence[Domain] | None = None,
    ) -> ValidationResult:
        """Run every domain rule.

        Args:
            domain: The domain configuration.
            flows: Flows present in the domain, in load order.
            all_domains: Every domain of the project, for store lookups;
                only ``domain`` itself is consulted when omitted.

        Returns:
            ValidationResult with scope ``domain`` and the domain id as target.
        """
        issues: list[ValidationIssue] = []
        issues.extend(self._check_duplicate_flow_ids(domain, flows))
        issues.extend(self._check_duplicate_endpoints(domain, flows))
        issues.extend(self._check_undeclared_flows(domain, flows))
        issues.extend(self._check_event_groups(domain, flows))
        issues.extend(self._check_store_references(domain, flows, all_domains or [domain]))

        result = build_result(ValidationScope.DOMAIN, domain.id, issues)
        logger.debug(
            "Domain validated",
            extra={
                "context": {
                    "domain": domain.id,
                    "flows": len(flows),
                    "errors": result.error_count,
                    "warnings": result.warning_count,
                }
            },
        )
        return result

    def _issue(
        self,
        domain: Domain,
        severity: ValidationSeverity,
        category: ValidationCategory,
        message: str,
        flow_id: str | None = None,
        node_id: str | None = None,
        suggestion: str | None = None,
    ) -> ValidationIssue:
        return ValidationIssue(
            scope=ValidationScope.DOMAIN,
            severity=severity,
            category=category,
            message=message,
            flow_id=flow_id,
            node_id=node_id,
            domain=domain.id,
            suggestion=suggestion,
        )

    def _check_duplicate_flow_ids(
        self,
        domain: Domain,
        flows: Sequence[Flow],
    ) -> list[ValidationIssue]:
        """Seen-set scan over declared ids, then over present flows."""
        issues: list[ValidationIssue] = []
        reported: set[str] = set()

        for flow_ids in (domain.flow_ids, [f.id for f in flows]):
            seen: set[str] = set()
            for flow_id in flow_ids:
                if flow_id in seen and flow_id not in reported:
                    reported.add(flow_id)
                    issues.append(
                        self._issue(
                            domain,
                            ValidationSeverity.ERROR,
                            ValidationCategory.DOMAIN_CONSISTENCY,
                            f"Duplicate flow id '{flow_id}' in domain '{domain.display_name}'",
                            flow_id=flow_id,
                            suggestion="Rename one of the flows",
                        )
                    )
                seen.add(flow_id)
        return issues

    def _check_duplicate_endpoints(
        self,
        domain: Domain,
        flows: Sequence[Flow],
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        endpoints: dict[str, str] = {}

        for flow in flows:
            endpoint = flow.http_endpoint
            if endpoint is None:
                continue
            other = endpoints.get(endpoint)
            if other is None:
                endpoints[endpoint] = flow.id
                continue
            if other == flow.id:
                continue
            trigger = flow.trigger
            issues.append(
                self._issue(
                    domain,
                    ValidationSeverity.ERROR,
                    ValidationCategory.DOMAIN_CONSISTENCY,
                    f"Duplicate HTTP endpoint '{endpoint}': flows '{other}' and '{flow.id}'",
                    flow_id=flow.id,
                    node_id=trigger.id if trigger else None,
                    suggestion="Change the method or path of one of the flows",
                )
            )
        return issues

    def _check_undeclared_flows(
        self,
        domain: Domain,
        flows: Sequence[Flow],
    ) -> list[ValidationIssue]:
        declared = set(domain.flow_ids)
        return [
            self._issue(
                domain,
                ValidationSeverity.INFO,
                ValidationCategory.DOMAIN_CONSISTENCY,
                f"Flow '{flow.id}' is not declared in domain '{domain.display_name}'",
                flow_id=flow.id,
                suggestion="Add the flow to the domain's flow list",
            )
            for flow in flows_by_id(flows).values()
            if flow.id not in declared
        ]

    def _check_event_groups(
        self,
        domain: Domain,
        flows: Sequence[Flow],
    ) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        group_names: set[str] = set()

        for group in domain.event_groups:
            if group.name in group_names:
                issues.append(
                    self._issue(
                        domain,
                        ValidationSeverity.ERROR,
                        ValidationCategory.DOMAIN_CONSISTENCY,
                        f"Duplicate event group '{group.name}' in domain '{domain.display_name}'",
                    )
                )
            group_names.add(group.name)

        for flow in flows:
            trigger = flow.trigger
            if trigger is None or not isinstance(trigger.spec, TriggerSpec):
                continue
            for event in trigger.spec.events:
                if not event.startswith(EVENT_GROUP_PREFIX):
                    continue
                group = event[len(EVENT_GROUP_PREFIX):].strip()
                if group not in group_names:
                    issues.append(
                        self._issue(
                            domain,
                            ValidationSeverity.ERROR,
                            ValidationCategory.REFERENCE_INTEGRITY,
                            f"Trigger references undeclared event group '{group}'",
                            flow_id=flow.id,
                            node_id=trigger.id,
                            suggestion=f"Declare event group '{group}' in the domain",
                        )
                    )
        return issues

    def _check_store_references(
        self,
        domain: Domain,
        flows: Sequence[Flow],
        all_domains: Sequence[Domain],
    ) -> list[ValidationIssue]:
        """Memory data stores must name a store some domain declares."""
        declared = {store.name for d in all_domains for store in d.stores}
        if not declared:
            return []

        issues: list[ValidationIssue] = []
        for flow in flows:
            for node in flow.nodes:
                spec = node.spec
                if not isinstance(spec, DataStoreSpec) or spec.store_type != "memory":
                    continue
                if is_blank(spec.store) or spec.store in declared:
                    continue
                issues.append(
                    self._issue(
                        domain,
                        ValidationSeverity.WARNING,
                        ValidationCategory.REFERENCE_INTEGRITY,
                        f"Memory data store '{node.display_name}' references store "
                        f"'{spec.store}' which is not declared in any domain's stores",
                        flow_id=flow.id,
                        node_id=node.id,
                        suggestion=f"Declare store '{spec.store}' in a domain",
                    )
                )
        return issues


def flows_by_id(flows: Sequence[Flow]) -> dict[str, Flow]:
    """Flow id to flow; the first flow wins on duplicate ids."""
    mapping: dict[str, Flow] = {}
    for flow in flows:
        mapping.setdefault(flow.id, flow)
    return mapping


__all__ = ["DomainValidator", "flows_by_id"]
