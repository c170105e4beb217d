"""Tests for DomainValidator.

TAG: [TESTS] [VALIDATION] [DOMAIN]

Test coverage for:
- Duplicate HTTP endpoints across flows of one domain
- Duplicate flow ids (declared and present)
- Flows present but not declared
- Event groups
- Memory data stores against declared stores
"""

import pytest

from flowspec.models.enums import ValidationCategory, ValidationScope, ValidationSeverity
from flowspec.schemas.domain import Domain
from flowspec.services.validation.domain_validator import DomainValidator, flows_by_id


@pytest.fixture
def validator() -> DomainValidator:
    return DomainValidator()


class TestDuplicateEndpoints:
    """Test HTTP endpoint collisions."""

    def test_same_method_and_path(self, validator, make_http_flow) -> None:
        """Two flows both serving POST /users: one error naming both."""
        domain = Domain(id="users", flows=["create-user", "register-user"])
        flows = [make_http_flow("create-user"), make_http_flow("register-user")]

        result = validator.validate(domain, flows)

        assert result.scope == ValidationScope.DOMAIN
        assert result.error_count == 1
        error = result.errors[0]
        assert error.message == (
            "Duplicate HTTP endpoint 'POST /users': flows 'create-user' and 'register-user'"
        )
        assert "create-user" in error.message
        assert "register-user" in error.message
        assert error.category == ValidationCategory.DOMAIN_CONSISTENCY
        assert error.flow_id == "register-user"
        assert error.node_id == "trigger"

    def test_path_parameters_are_normalized(self, validator, make_http_flow) -> None:
        domain = Domain(id="users", flows=["get-user", "fetch-user"])
        flows = [
            make_http_flow("get-user", method="GET", path="/users/{id}"),
            make_http_flow("fetch-user", method="get", path="/users/:user_id/"),
        ]

        result = validator.validate(domain, flows)

        assert [e.message for e in result.errors] == [
            "Duplicate HTTP endpoint 'GET /users/{}': flows 'get-user' and 'fetch-user'"
        ]

    def test_different_methods_do_not_collide(self, validator, make_http_flow) -> None:
        domain = Domain(id="users", flows=["create-user", "list-users"])
        flows = [
            make_http_flow("create-user"),
            make_http_flow("list-users", method="GET"),
        ]

        assert validator.validate(domain, flows).issues == []


class TestDuplicateFlowIds:
    """Test duplicate flow ids."""

    def test_duplicate_present_flows(self, validator, make_http_flow) -> None:
        domain = Domain(id="users", flows=["create-user"])
        flows = [
            make_http_flow("create-user"),
            make_http_flow("create-user", method="PUT"),
        ]

        result = validator.validate(domain, flows)

        assert [e.message for e in result.errors] == [
            "Duplicate flow id 'create-user' in domain 'users'"
        ]

    def test_duplicate_declared_ids_reported_once(self, validator, make_http_flow) -> None:
        domain = Domain(id="users", name="Users", flows=["create-user", "create-user"])
        flows = [make_http_flow("create-user"), make_http_flow("create-user", method="PUT")]

        result = validator.validate(domain, flows)

        assert [e.message for e in result.errors] == [
            "Duplicate flow id 'create-user' in domain 'Users'"
        ]

    def test_same_flow_listed_twice_is_not_an_endpoint_clash(
        self, validator, make_http_flow
    ) -> None:
        domain = Domain(id="users", flows=["create-user"])
        flow = make_http_flow("create-user")

        result = validator.validate(domain, [flow, flow])

        assert not any("endpoint" in i.message for i in result.issues)


class TestUndeclaredFlows:
    """Test flows present on disk but missing from the domain list."""

    def test_undeclared_flow_is_info(self, validator, users_domain, make_http_flow) -> None:
        flows = [make_http_flow("create-user"), make_http_flow("delete-user", method="DELETE")]

        result = validator.validate(users_domain, flows)

        assert result.is_valid is True
        assert result.info_count == 1
        issue = result.issues[0]
        assert issue.severity == ValidationSeverity.INFO
        assert issue.message == "Flow 'delete-user' is not declared in domain 'Users'"
        assert issue.flow_id == "delete-user"

    def test_declared_flows_are_clean(self, validator, users_domain, create_user_flow) -> None:
        assert validator.validate(users_domain, [create_user_flow]).issues == []

    def test_declared_but_absent_flow_is_not_reported(self, validator, users_domain) -> None:
        assert validator.validate(users_domain, []).issues == []


class TestEventGroups:
    """Test event-group declarations and references."""

    def event_flow(self, make_flow, make_node, event: str):
        return make_flow(
            [
                make_node("trigger", "trigger", {"type": "event", "event": event}, to=["done"]),
                make_node("done", "terminal"),
            ],
            flow_id="on-change",
        )

    def test_declared_group_reference(self, validator, make_flow, make_node) -> None:
        domain = Domain(
            id="users",
            flows=["on-change"],
            event_groups=[{"name": "user_changes", "events": ["user.created", "user.updated"]}],
        )
        flow = self.event_flow(make_flow, make_node, "event_group:user_changes")

        assert validator.validate(domain, [flow]).issues == []

    def test_undeclared_group_reference(self, validator, make_flow, make_node) -> None:
        domain = Domain(id="users", flows=["on-change"])
        flow = self.event_flow(make_flow, make_node, "event_group:user_changes")

        result = validator.validate(domain, [flow])

        assert [e.message for e in result.errors] == [
            "Trigger references undeclared event group 'user_changes'"
        ]
        assert result.errors[0].category == ValidationCategory.REFERENCE_INTEGRITY
        assert result.errors[0].node_id == "trigger"

    def test_duplicate_group_names(self, validator) -> None:
        domain = Domain(
            id="users",
            event_groups=[
                {"name": "user_changes", "events": ["user.created"]},
                {"name": "user_changes", "events": ["user.updated"]},
            ],
        )

        result = validator.validate(domain, [])

        assert [e.message for e in result.errors] == [
            "Duplicate event group 'user_changes' in domain 'users'"
        ]



class TestStoreReferences:
    """Memory data stores must name a store some domain declares."""

    def memory_flow(self, make_flow, make_node, store: str):
        return make_flow(
            [
                make_node("trigger", "trigger", {"type": "manual"}, to=["load"]),
                make_node(
                    "load",
                    "data_store",
                    {"operation": "get", "store_type": "memory", "store": store, "selector": "items"},
                    to=[("done", "success"), ("done", "error")],
                    label="Load items",
                ),
                make_node("done", "terminal", {"outcome": "ok"}),
            ],
            flow_id="load-items",
            domain="ui",
        )

    def test_undeclared_store(self, validator, make_flow, make_node) -> None:
        ui = Domain(id="ui", flows=["load-items"], stores=["project-store"])
        flow = self.memory_flow(make_flow, make_node, "cart-store")

        result = validator.validate(ui, [flow])

        assert [(w.message, w.category, w.node_id) for w in result.warnings] == [
            (
                "Memory data store 'Load items' references store 'cart-store' "
                "which is not declared in any domain's stores",
                ValidationCategory.REFERENCE_INTEGRITY,
                "load",
            )
        ]

    def test_store_declared_by_another_domain(self, validator, make_flow, make_node) -> None:
        ui = Domain(id="ui", flows=["load-items"])
        shared = Domain(id="shared", stores=[{"name": "cart-store", "selectors": ["items"]}])
        flow = self.memory_flow(make_flow, make_node, "cart-store")

        assert validator.validate(ui, [flow], [ui, shared]).issues == []

    def test_skipped_when_no_store_is_declared(self, validator, make_flow, make_node) -> None:
        ui = Domain(id="ui", flows=["load-items"])
        flow = self.memory_flow(make_flow, make_node, "cart-store")

        assert validator.validate(ui, [flow], [ui]).issues == []


def test_flows_by_id_first_wins(make_http_flow) -> None:
    first = make_http_flow("create-user")
    second = make_http_flow("create-user", method="PUT")

    mapping = flows_by_id([first, second])

    assert list(mapping) == ["create-user"]
    assert mapping["create-user"] is first
