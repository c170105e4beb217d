"""Tests for SystemValidator.

TAG: [TESTS] [VALIDATION] [SYSTEM]

Test coverage for:
- Event wiring (publishers, consumers, payload shapes, naming)
- Portal targets
- Orchestration dependency cycles
- Service-call targets and schema ownership
"""

import pytest

from flowspec.models.enums import ValidationCategory, ValidationScope, ValidationSeverity
from flowspec.schemas.domain import Domain
from flowspec.services.validation.system_validator import (
    SYSTEM_TARGET_ID,
    SystemValidator,
    build_orchestration_graph,
    classify_event_name,
    orchestration_refs,
)


@pytest.fixture
def validator() -> SystemValidator:
    return SystemValidator()


@pytest.fixture
def make_orchestration_flow(make_flow, make_node):
    """Factory for orchestration flows that hand off to other flows."""

    def _make(flow_id: str, handoff_to: str, domain: str = "support"):
        return make_flow(
            [
                make_node("trigger", "trigger", {"type": "manual"}, to=["handoff"]),
                make_node(
                    "handoff",
                    "handoff",
                    {"mode": "transfer", "target": handoff_to},
                    to=["done"],
                ),
                make_node("done", "terminal"),
            ],
            flow_id=flow_id,
            kind="orchestration",
            domain=domain,
        )

    return _make


# =============================================================================
# Event wiring
# =============================================================================


class TestEventWiring:
    """Test publish/consume matching."""

    def test_published_event_without_consumer(self, validator) -> None:
        """Domain A publishes order.created and nobody consumes it: one warning."""
        domains = [Domain(id="A", publishes_events=["order.created"]), Domain(id="B")]

        result = validator.validate(domains, {})

        assert result.scope == ValidationScope.SYSTEM
        assert result.target_id == SYSTEM_TARGET_ID
        assert result.error_count == 0
        assert result.warning_count == 1
        assert result.info_count == 0
        warning = result.warnings[0]
        assert warning.message == "Event 'order.created' is published by A but no domain consumes it"
        assert warning.category == ValidationCategory.EVENT_WIRING
        assert warning.domain == "A"
        assert result.is_valid is True

    def test_consumed_event_without_publisher(self, validator) -> None:
        domains = [
            Domain(
                id="billing",
                consumes_events=[{"event": "order.created", "handled_by_flow": "charge"}],
            )
        ]

        result = validator.validate(domains, {})

        assert result.error_count == 1
        assert result.issues[0].message == (
            "Event 'order.created' is consumed by billing but no domain publishes it"
        )
        assert result.issues[0].flow_id == "charge"

    def test_two_consumers_give_one_error(self, validator) -> None:
        domains = [
            Domain(id="billing", consumes_events=["order.created"]),
            Domain(id="shipping", consumes_events=["order.created", "order.created"]),
        ]

        result = validator.validate(domains, {})

        assert [e.message for e in result.errors] == [
            "Event 'order.created' is consumed by billing, shipping but no domain publishes it"
        ]
        assert result.errors[0].domain == "billing"

    def test_two_publishers_give_one_warning(self, validator) -> None:
        domains = [
            Domain(id="orders", publishes_events=["order.created"]),
            Domain(id="checkout", publishes_events=["order.created"]),
        ]

        result = validator.validate(domains, {})

        assert [w.message for w in result.warnings] == [
            "Event 'order.created' is published by orders, checkout but no domain consumes it"
        ]

    def test_matched_events_are_clean(self, validator) -> None:
        domains = [
            Domain(id="orders", publishes_events=["order.created"]),
            Domain(id="billing", consumes_events=["order.created"]),
        ]

        assert validator.validate(domains, {}).issues == []

    def test_payload_mismatch_names_both_domains(self, validator) -> None:
        domains = [
            Domain(
                id="orders",
                publishes_events=[{"event": "order.created", "payload": {"order_id": "uuid"}}],
            ),
            Domain(
                id="billing",
                consumes_events=[
                    {"event": "order.created", "payload": {"order_id": "uuid", "total": "number"}}
                ],
            ),
        ]

        result = validator.validate(domains, {})

        assert result.error_count == 1
        error = result.errors[0]
        assert error.message == (
            "Event 'order.created' payload mismatch: domain 'billing' expects total "
            "but domain 'orders' does not send it"
        )
        assert error.domain == "billing"
        assert error.related_domain == "orders"

    def test_unused_payload_fields_are_info(self, validator) -> None:
        domains = [
            Domain(
                id="orders",
                publishes_events=[
                    {"event": "order.created", "payload": {"order_id": "uuid", "notes": "string"}}
                ],
            ),
            Domain(
                id="billing",
                consumes_events=[{"event": "order.created", "payload": {"order_id": "uuid"}}],
            ),
        ]

        result = validator.validate(domains, {})

        assert result.is_valid is True
        assert [i.severity for i in result.issues] == [ValidationSeverity.INFO]
        assert "notes" in result.issues[0].message

    def test_payload_not_compared_when_publisher_has_none(self, validator) -> None:
        domains = [
            Domain(id="orders", publishes_events=["order.created"]),
            Domain(
                id="billing",
                consumes_events=[{"event": "order.created", "payload": {"total": "number"}}],
            ),
        ]

        assert validator.validate(domains, {}).issues == []

    def test_mixed_naming_conventions(self, validator) -> None:
        domains = [
            Domain(id="orders", publishes_events=["order.created", "userSignedUp"]),
            Domain(id="billing", consumes_events=["order.created", "userSignedUp"]),
        ]

        result = validator.validate(domains, {})

        assert [i.message for i in result.warnings] == [
            "Event names mix naming conventions: dot.case ('order.created'), "
            "camelCase ('userSignedUp')"
        ]

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("order.created", "dot.case"),
            ("orderCreated", "camelCase"),
            ("order_created", "snake_case"),
            ("ping", None),
        ],
    )
    def test_classify_event_name(self, name, expected) -> None:
        assert classify_event_name(name) == expected


# =============================================================================
# Portals
# =============================================================================


class TestPortals:
    """Test portal targets."""

    def test_portal_to_unknown_domain(self, validator) -> None:
        domains = [
            Domain(id="orders", portals=["billing", {"target_domain": "shipping"}]),
            Domain(id="billing"),
        ]

        result = validator.validate(domains, {})

        assert [e.message for e in result.errors] == [
            "Domain 'orders' has a portal to unknown domain 'shipping'"
        ]
        assert result.errors[0].category == ValidationCategory.PORTAL_WIRING
        assert result.errors[0].related_domain == "shipping"


# =============================================================================
# Orchestration wiring
# =============================================================================


class TestOrchestrationCycles:
    """Test cycles between orchestration flows."""

    def test_two_flow_cycle(self, validator, make_orchestration_flow) -> None:
        """A hands off to B and B hands off to A: exactly one error."""
        domains = [Domain(id="support", flows=["A", "B"])]
        flows = {
            "support": [
                make_orchestration_flow("A", "B"),
                make_orchestration_flow("B", "support/A"),
            ]
        }

        result = validator.validate(domains, flows)

        cycle_errors = [
            i for i in result.errors if i.category == ValidationCategory.ORCHESTRATION_WIRING
        ]
        assert len(cycle_errors) == 1
        assert cycle_errors[0].message == (
            "Orchestration dependency cycle: support/A → support/B → support/A"
        )
        assert (cycle_errors[0].domain, cycle_errors[0].flow_id) == ("support", "A")

    def test_same_flow_id_in_two_domains(self, validator, make_orchestration_flow) -> None:
        """billing/router hands off to billing/worker, support/router to billing/router."""
        domains = [
            Domain(id="billing", flows=["router", "worker"]),
            Domain(id="support", flows=["router"]),
        ]
        flows = {
            "billing": [
                make_orchestration_flow("router", "worker", domain="billing"),
                make_orchestration_flow("worker", "escalation-agent", domain="billing"),
            ],
            "support": [make_orchestration_flow("router", "billing/router")],
        }

        result = validator.validate(domains, flows)
        graph = build_orchestration_graph(flows)

        assert result.issues == []
        assert graph.nodes == ["billing/router", "billing/worker", "support/router"]
        assert graph.get_successors("billing/router") == ["billing/worker"]
        assert graph.get_successors("support/router") == ["billing/router"]

    def test_cycle_between_domains_with_same_flow_id(
        self, validator, make_orchestration_flow
    ) -> None:
        domains = [Domain(id="billing", flows=["A"]), Domain(id="support", flows=["A"])]
        flows = {
            "billing": [make_orchestration_flow("A", "support/A", domain="billing")],
            "support": [make_orchestration_flow("A", "billing/A")],
        }

        result = validator.validate(domains, flows)

        assert [e.message for e in result.errors] == [
            "Orchestration dependency cycle: billing/A → support/A → billing/A"
        ]

    def test_chain_is_clean(self, validator, make_orchestration_flow) -> None:
        domains = [Domain(id="support", flows=["A", "B"])]
        flows = {
            "support": [
                make_orchestration_flow("A", "B"),
                make_orchestration_flow("B", "escalation-agent"),
            ]
        }

        assert validator.validate(domains, flows).issues == []

    def test_only_orchestration_flows_form_edges(
        self, make_orchestration_flow, support_agent_flow
    ) -> None:
        flows = {"support": [make_orchestration_flow("A", "support-agent"), support_agent_flow]}

        graph = build_orchestration_graph(flows)

        assert graph.nodes == ["support/A"]
        assert graph.edge_count == 0

    def test_orchestration_refs(self, support_router_flow) -> None:
        assert orchestration_refs(support_router_flow) == [
            "billing-agent",
            "tech-agent",
            "billing/billing-agent",
            "general-agent",
            "escalation-agent",
        ]

    def test_flows_of_undeclared_domains_are_ignored(
        self, validator, make_orchestration_flow
    ) -> None:
        flows = {
            "support": [
                make_orchestration_flow("A", "B"),
                make_orchestration_flow("B", "A"),
            ]
        }

        assert validator.validate([], flows).issues == []


# =============================================================================
# Cross-domain data
# =============================================================================


class TestCrossDomainData:
    """Test service-call targets and schema ownership."""

    def caller_flow(self, make_flow, make_node, url: str):
        return make_flow(
            [
                make_node("trigger", "trigger", {"type": "manual"}, to=["call"]),
                make_node("call", "service_call", {"method": "GET", "url": url}, to=["done"]),
                make_node("done", "terminal"),
            ],
            flow_id="sync-orders",
            domain="orders",
        )

    def test_call_to_exposed_endpoint(
        self, validator, make_flow, make_node, make_http_flow
    ) -> None:
        domains = [Domain(id="orders"), Domain(id="users")]
        flows = {
            "orders": [self.caller_flow(make_flow, make_node, "http://users-service/users/{user_id}")],
            "users": [make_http_flow("get-user", method="GET", path="/users/:id")],
        }

        assert validator.validate(domains, flows).issues == []

    def test_call_to_unknown_endpoint(self, validator, make_flow, make_node) -> None:
        domains = [Domain(id="orders")]
        flows = {"orders": [self.caller_flow(make_flow, make_node, "/inventory/items")]}

        result = validator.validate(domains, flows)

        assert result.is_valid is True
        warning = result.warnings[0]
        assert warning.message == (
            "Service call 'call' targets 'GET /inventory/items' which no flow in the project exposes"
        )
        assert warning.category == ValidationCategory.CROSS_DOMAIN_DATA
        assert (warning.flow_id, warning.node_id) == ("sync-orders", "call")

    def test_schema_with_two_owners(self, validator) -> None:
        domains = [
            Domain(id="orders", owns_schemas=["Order"]),
            Domain(id="billing", owns_schemas=["order", "Invoice"]),
        ]

        result = validator.validate(domains, {})

        assert [w.message for w in result.warnings] == [
            "Schema 'Order' is owned by multiple domains: orders, billing"
        ]
        assert result.warnings[0].related_domain == "billing"
