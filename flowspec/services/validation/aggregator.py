"""Result aggregation and the implement gate.

TAG: [VALIDATION] [AGGREGATION]

Builds ValidationResult records from raw issue lists, rolls flow results up
into their domain result, and combines scopes into the implement-gate
decision. Only errors block; warnings are reported for the caller to
override.
"""

from __future__ import annotations

from collections.abc import Iterable

from flowspec.models.enums import ValidationScope, ValidationSeverity
from flowspec.schemas.validation import (
    ImplementGateState,
    ValidationIssue,
    ValidationResult,
)


def build_result(
    scope: ValidationScope,
    target_id: str,
    issues: Iterable[ValidationIssue],
) -> ValidationResult:
    """Bundle issues with derived counts.

    Args:
        scope: Validated scope.
        target_id: Flow id, domain id or system id.
        issues: Issues in emission order.

    Returns:
        ValidationResult whose ``is_valid`` is ``error_count == 0``.
    """
    issue_list = list(issues)
    error_count = sum(1 for i in issue_list if i.severity == ValidationSeverity.ERROR)
    warning_count = sum(1 for i in issue_list if i.severity == ValidationSeverity.WARNING)
    info_count = sum(1 for i in issue_list if i.severity == ValidationSeverity.INFO)
    return ValidationResult(
        scope=scope,
        target_id=target_id,
        issues=issue_list,
        error_count=error_count,
        warning_count=warning_count,
        info_count=info_count,
        is_valid=error_count == 0,
    )


def summarize_domain(
    domain_result: ValidationResult,
    flow_results: Iterable[ValidationResult],
) -> ValidationResult:
    """Roll flow error and warning counts into a domain result.

    The domain's own issues are kept; flow issues are counted but not
    copied, so a flow issue is listed once, on its flow result.

    Args:
        domain_result: Result of the domain-scoped checks.
        flow_results: Results of the domain's flows.

    Returns:
        A new domain ValidationResult with combined counts.
    """
    error_count = domain_result.error_count
    warning_count = domain_result.warning_count
    info_count = domain_result.info_count
    for flow_result in flow_results:
        error_count += flow_result.error_count
        warning_count += flow_result.warning_count
        info_count += flow_result.info_count

    return domain_result.model_copy(
        update={
            "error_count": error_count,
            "warning_count": warning_count,
            "info_count": info_count,
            "is_valid": error_count == 0,
        }
    )


def check_implement_gate(
    flow: ValidationResult | None = None,
    domain: ValidationResult | None = None,
    system: ValidationResult | None = None,
) -> ImplementGateState:
    """Combine scope results into the implement-gate decision.

    Any error in a supplied scope blocks; warnings only set ``has_warnings``.
    A rolled-up domain result blocks on its flow error counts even though
    those issues are listed only on the flow results.
    Scopes passed as None are not checked.

    Example:
        >>> gate = check_implement_gate(flow=flow_result, system=system_result)
        >>> if not gate.can_implement:
        ...     show(gate.blocking_issues)
    """
    blocking: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    checked: list[ValidationScope] = []
    blocked: list[ValidationScope] = []

    for result in (flow, domain, system):
        if result is None:
            continue
        checked.append(result.scope)
        if result.error_count:
            blocked.append(result.scope)
        blocking.extend(result.errors)
        warnings.extend(result.warnings)

    return ImplementGateState(
        can_implement=all(r.error_count == 0 for r in (flow, domain, system) if r),
        has_warnings=bool(warnings),
        blocking_issues=blocking,
        warning_issues=warnings,
        checked_scopes=checked,
        blocking_scopes=blocked,
    )


__all__ = ["build_result", "check_implement_gate", "summarize_domain"]
