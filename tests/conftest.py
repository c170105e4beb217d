"""pytest configuration and fixtures for the flowspec test suite.

TAG: [TESTING] [PYTEST] [FIXTURES]

This module provides small factories for building flows from plain node
dictionaries, plus sample flows of each kind that validate without issues:

- ``create_user_flow``: HTTP flow with input, decision, data store and terminals
- ``support_agent_flow``: agent flow with tools, a guardrail and a human gate
- ``support_router_flow``: orchestration flow with an orchestrator, a smart
  router and a handoff
"""

from collections.abc import Callable
from typing import Any

import pytest

from flowspec.core.config import Settings, get_settings
from flowspec.schemas.domain import Domain, ProjectCatalog
from flowspec.schemas.flow import Flow

NodeDict = dict[str, Any]
Target = str | tuple[str, str]

HTTP_TRIGGER = {"type": "http", "method": "POST", "path": "/users"}

# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reset cached settings so environment overrides never leak between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# FACTORIES
# =============================================================================


def build_node(
    node_id: str,
    kind: str,
    spec: dict[str, Any] | None = None,
    to: list[Target] | None = None,
    label: str | None = None,
) -> NodeDict:
    """Build a raw node dict.

    Args:
        node_id: Node id.
        kind: Node kind value.
        spec: Raw spec mapping.
        to: Targets, either plain ids (default handle) or (id, handle) pairs.
        label: Optional display label.
    """
    connections = []
    for item in to or []:
        target, handle = item if isinstance(item, tuple) else (item, None)
        connections.append({"target_node_id": target, "source_handle": handle})
    node: NodeDict = {
        "id": node_id,
        "kind": kind,
        "spec": spec or {},
        "connections": connections,
    }
    if label:
        node["label"] = label
    return node


def build_flow(
    nodes: list[NodeDict],
    flow_id: str = "create-user",
    kind: str = "traditional",
    domain: str | None = "users",
) -> Flow:
    """Build a Flow from raw node dicts."""
    return Flow.model_validate({"id": flow_id, "kind": kind, "domain": domain, "nodes": nodes})


def build_http_flow(
    flow_id: str,
    method: str = "POST",
    path: str = "/users",
    domain: str = "users",
) -> Flow:
    """Build a minimal valid HTTP flow: trigger → terminal."""
    return build_flow(
        [
            build_node("trigger", "trigger", {"type": "http", "method": method, "path": path}, to=["done"]),
            build_node("done", "terminal", {"status": 200, "body": {"ok": "boolean"}}),
        ],
        flow_id=flow_id,
        domain=domain,
    )


@pytest.fixture
def make_node() -> Callable[..., NodeDict]:
    """Factory fixture for raw node dicts."""
    return build_node


@pytest.fixture
def make_flow() -> Callable[..., Flow]:
    """Factory fixture for flows built from raw node dicts."""
    return build_flow


@pytest.fixture
def make_http_flow() -> Callable[..., Flow]:
    """Factory fixture for minimal HTTP flows."""
    return build_http_flow


# =============================================================================
# SAMPLE FLOWS
# =============================================================================


@pytest.fixture
def create_user_flow() -> Flow:
    """HTTP flow that validates input, checks for a duplicate and saves a user.

    Paths:
        trigger → validate → check_exists → conflict                (409)
        trigger → validate → check_exists → save → created        (201)
        trigger → validate → check_exists → save → save_failed    (500)
        trigger → validate → bad_request                          (422)
    """
    return build_flow(
        [
            build_node("trigger", "trigger", HTTP_TRIGGER, to=["validate"]),
            build_node(
                "validate",
                "input",
                {
                    "fields": [
                        {
                            "name": "email",
                            "type": "string",
                            "required": True,
                            "format": "email",
                            "error": "Invalid email format",
                        },
                        {
                            "name": "name",
                            "type": "string",
                            "required": True,
                            "min_length": 2,
                            "max_length": 50,
                            "error": "Name must be 2-50 characters",
                        },
                    ]
                },
                to=[("check_exists", "valid"), ("bad_request", "invalid")],
            ),
            build_node(
                "check_exists",
                "decision",
                {
                    "condition": "user with email exists",
                    "error_code": "EMAIL_TAKEN",
                    "error_branch": "true",
                },
                to=[("conflict", "true"), ("save", "false")],
            ),
            build_node(
                "save",
                "data_store",
                {"operation": "create", "model": "User"},
                to=[("created", "success"), ("save_failed", "error")],
            ),
            build_node(
                "created",
                "terminal",
                {"status": 201, "body": {"id": "uuid", "email": "string"}},
            ),
            build_node(
                "conflict",
                "terminal",
                {"status": 409, "body": {"error": "EMAIL_TAKEN"}, "error_code": "EMAIL_TAKEN"},
            ),
            build_node(
                "bad_request",
                "terminal",
                {"status": 422, "body": {"error": "VALIDATION_ERROR"}},
            ),
            build_node(
                "save_failed",
                "terminal",
                {"status": 500, "body": {"error": "INTERNAL"}},
            ),
        ]
    )


@pytest.fixture
def support_agent_flow() -> Flow:
    """Agent flow: trigger → guard → agent, with two tools and a human gate.

    The guardrail blocks to ``blocked``; the agent loop ends through the
    human gate on ``done`` and fails to ``failed``.
    """
    return build_flow(
        [
            build_node(
                "trigger",
                "trigger",
                {"type": "event", "event": "ticket.created"},
                to=["guard"],
            ),
            build_node(
                "guard",
                "guardrail",
                {"checks": ["pii"]},
                to=[("agent", "pass"), ("blocked", "block")],
            ),
            build_node(
                "agent",
                "agent_loop",
                {"model": "default", "max_iterations": 10, "on_max_iterations": "escalate"},
                to=["search_kb", "send_reply", ("approve", "done"), ("failed", "error")],
            ),
            build_node("search_kb", "tool", {"name": "search_kb"}),
            build_node("send_reply", "tool", {"name": "send_reply", "is_terminal": True}),
            build_node(
                "approve",
                "human_gate",
                {"description": "Approve refunds above the limit"},
                to=["done"],
            ),
            build_node("done", "terminal", {"outcome": "resolved"}),
            build_node("blocked", "terminal", {"outcome": "blocked"}),
            build_node("failed", "terminal", {"outcome": "failed"}),
        ],
        flow_id="support-agent",
        kind="agent",
        domain="support",
    )


@pytest.fixture
def support_router_flow() -> Flow:
    """Orchestration flow: trigger → supervisor → router, then handoff → done.

    The router's billing route goes through the handoff; its tech route ends
    directly.
    """
    return build_flow(
        [
            build_node(
                "trigger",
                "trigger",
                {"type": "http", "method": "POST", "path": "/support"},
                to=["supervisor"],
            ),
            build_node(
                "supervisor",
                "orchestrator",
                {"strategy": "supervisor", "agents": ["billing-agent", "tech-agent"]},
                to=["router"],
            ),
            build_node(
                "router",
                "smart_router",
                {
                    "rules": [
                        {
                            "id": "billing",
                            "condition": "intent == 'billing'",
                            "route": "billing/billing-agent",
                        },
                        {"id": "tech", "condition": "intent == 'tech'", "route": "tech-agent"},
                    ],
                    "fallback": "general-agent",
                    "circuit_breaker": {"failure_threshold": 3},
                },
                to=[("escalate", "billing/billing-agent"), ("done", "tech-agent")],
            ),
            build_node(
                "escalate",
                "handoff",
                {"mode": "transfer", "target": "escalation-agent"},
                to=["done"],
            ),
            build_node("done", "terminal", {"status": 200, "body": {"reply": "string"}}),
        ],
        flow_id="support-router",
        kind="orchestration",
        domain="support",
    )


@pytest.fixture
def catalog() -> ProjectCatalog:
    """Catalog matching every reference made by the sample flows."""
    return ProjectCatalog(
        flow_ids={
            "users/create-user",
            "support/support-agent",
            "support/support-router",
            "billing/billing-agent",
            "tech/tech-agent",
            "general/general-agent",
            "escalation/escalation-agent",
        },
        schema_names={"User"},
        error_codes={"EMAIL_TAKEN"},
    )


@pytest.fixture
def users_domain() -> Domain:
    return Domain(id="users", name="Users", flows=["create-user"])


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)
