"""Tests for result aggregation and the implement gate.

TAG: [TESTS] [VALIDATION] [AGGREGATION]
"""

import pytest

from flowspec.models.enums import ValidationCategory, ValidationScope, ValidationSeverity
from flowspec.schemas.validation import ValidationIssue
from flowspec.services.validation.aggregator import (
    build_result,
    check_implement_gate,
    summarize_domain,
)


def make_issue(severity: ValidationSeverity, scope=ValidationScope.FLOW, message="problem"):
    return ValidationIssue(
        scope=scope,
        severity=severity,
        category=ValidationCategory.GRAPH_COMPLETENESS,
        message=message,
        flow_id="create-user",
    )


@pytest.fixture
def clean_flow():
    return build_result(ValidationScope.FLOW, "create-user", [])


@pytest.fixture
def flow_with_error():
    return build_result(
        ValidationScope.FLOW,
        "create-user",
        [make_issue(ValidationSeverity.ERROR), make_issue(ValidationSeverity.WARNING)],
    )


class TestBuildResult:
    def test_counts_by_severity(self) -> None:
        issues = [
            make_issue(ValidationSeverity.ERROR, message="a"),
            make_issue(ValidationSeverity.WARNING, message="b"),
            make_issue(ValidationSeverity.WARNING, message="c"),
            make_issue(ValidationSeverity.INFO, message="d"),
        ]

        result = build_result(ValidationScope.FLOW, "create-user", issues)

        assert (result.error_count, result.warning_count, result.info_count) == (1, 2, 1)
        assert result.is_valid is False
        assert [i.message for i in result.issues] == ["a", "b", "c", "d"]

    def test_warnings_only_is_valid(self) -> None:
        result = build_result(
            ValidationScope.FLOW, "create-user", [make_issue(ValidationSeverity.WARNING)]
        )

        assert result.is_valid is True
        assert result.has_warnings is True

    def test_accepts_generators(self) -> None:
        result = build_result(
            ValidationScope.FLOW,
            "create-user",
            (make_issue(ValidationSeverity.INFO) for _ in range(2)),
        )

        assert result.info_count == 2


class TestSummarizeDomain:
    def test_rolls_up_flow_counts(self, flow_with_error, clean_flow) -> None:
        domain_result = build_result(
            ValidationScope.DOMAIN,
            "users",
            [make_issue(ValidationSeverity.INFO, scope=ValidationScope.DOMAIN)],
        )

        summary = summarize_domain(domain_result, [flow_with_error, clean_flow])

        assert summary.error_count == 1
        assert summary.warning_count == 1
        assert summary.info_count == 1
        assert summary.is_valid is False
        assert len(summary.issues) == 1
        assert summary.target_id == "users"

    def test_does_not_modify_input(self, flow_with_error) -> None:
        domain_result = build_result(ValidationScope.DOMAIN, "users", [])

        summarize_domain(domain_result, [flow_with_error])

        assert domain_result.error_count == 0
        assert domain_result.is_valid is True


class TestImplementGate:
    def test_all_clean(self, clean_flow) -> None:
        system = build_result(ValidationScope.SYSTEM, "system", [])

        gate = check_implement_gate(flow=clean_flow, system=system)

        assert gate.can_implement is True
        assert gate.has_warnings is False
        assert gate.blocking_issues == []
        assert gate.checked_scopes == [ValidationScope.FLOW, ValidationScope.SYSTEM]

    def test_error_in_any_scope_blocks(self, clean_flow) -> None:
        system = build_result(
            ValidationScope.SYSTEM,
            "system",
            [make_issue(ValidationSeverity.ERROR, scope=ValidationScope.SYSTEM)],
        )

        gate = check_implement_gate(flow=clean_flow, system=system)

        assert gate.can_implement is False
        assert len(gate.blocking_issues) == 1
        assert gate.blocking_issues[0].scope == ValidationScope.SYSTEM
        assert gate.blocking_scopes == [ValidationScope.SYSTEM]

    def test_rolled_up_domain_errors_block(self, clean_flow) -> None:
        domain = summarize_domain(
            build_result(ValidationScope.DOMAIN, "users", []),
            [build_result(ValidationScope.FLOW, "other", [make_issue(ValidationSeverity.ERROR)])],
        )

        gate = check_implement_gate(flow=clean_flow, domain=domain)

        assert gate.can_implement is False
        assert gate.blocking_issues == []
        assert gate.blocking_scopes == [ValidationScope.DOMAIN]

    def test_warnings_do_not_block(self) -> None:
        flow = build_result(
            ValidationScope.FLOW, "create-user", [make_issue(ValidationSeverity.WARNING)]
        )

        gate = check_implement_gate(flow=flow)

        assert gate.can_implement is True
        assert gate.has_warnings is True
        assert len(gate.warning_issues) == 1

    def test_no_scopes(self) -> None:
        gate = check_implement_gate()

        assert gate.can_implement is True
        assert gate.checked_scopes == []
