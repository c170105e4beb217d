"""Pydantic schemas for flow graphs.

TAG: [SCHEMAS] [FLOW] [GRAPH]

A flow is an ordered set of typed nodes. Each node owns its outgoing
connections, and each connection leaves the node through a named handle
(``true``/``false``, ``valid``/``invalid``, ``success``/``error``, ...).

Node specs are a tagged variant: ``Node.kind`` selects the spec model from
``SPEC_MODELS``. Every spec model keeps keys it does not declare (see
``OpenSchema``), so custom fields survive validation untouched.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

from pydantic import AliasChoices, Field, SerializeAsAny, field_validator, model_validator

from flowspec.models.enums import FlowKind, NodeKind
from flowspec.schemas.base import BaseSchema, OpenSchema, is_blank

# Trigger ``type``/``event``/``source`` values that denote an HTTP endpoint
HTTP_TRIGGER_TYPES = frozenset({"http", "http_request", "api"})

# Data store operations that only apply to in-memory stores
MEMORY_OPERATIONS = frozenset({"get", "set", "merge", "reset", "subscribe", "update_where"})


def _as_mapping(value: Any, key: str) -> Any:
    """Coerce a bare string reference into ``{key: value}``."""
    if isinstance(value, str):
        return {key: value}
    return value


def qualify_flow_ref(ref: str, domain: str | None) -> str:
    """Resolve a flow reference to ``domain/flow-id``.

    Bare ids resolve inside ``domain``; references that already name a
    domain are returned unchanged.
    """
    if "/" in ref or is_blank(domain):
        return ref
    return f"{domain}/{ref}"


def normalize_endpoint(method: str | None, path: str | None) -> str | None:
    """Build the ``METHOD path`` key used to match triggers and calls.

    Path parameters written as ``{id}`` or ``:id`` are normalized to ``{}``
    and trailing slashes are dropped.
    """
    if is_blank(method) or is_blank(path):
        return None
    segments = []
    for segment in str(path).strip().split("/"):
        if segment.startswith(":") or (segment.startswith("{") and segment.endswith("}")):
            segments.append("{}")
        else:
            segments.append(segment)
    normalized = "/".join(segments).rstrip("/") or "/"
    return f"{str(method).strip().upper()} {normalized}"


# =============================================================================
# Node Specs
# =============================================================================


class NodeSpec(OpenSchema):
    """Fields shared by every node kind."""

    description: str | None = None
    error_code: str | None = None


class TriggerSpec(NodeSpec):
    """Flow entry point."""

    type: str | None = None
    event: str | list[str] | None = None
    source: str | None = None
    method: str | None = None
    path: str | None = None
    schedule: str | None = None

    @property
    def trigger_type(self) -> str | None:
        """Declared trigger type, falling back to the event name."""
        if not is_blank(self.type):
            return self.type
        if isinstance(self.event, str) and not is_blank(self.event):
            return self.event
        if isinstance(self.event, list) and self.event:
            return self.event[0]
        return None

    @property
    def events(self) -> list[str]:
        """Trigger event names as a list."""
        if isinstance(self.event, list):
            return list(self.event)
        return [self.event] if self.event else []

    @property
    def is_http(self) -> bool:
        """Whether this trigger exposes an HTTP endpoint."""
        candidates = [self.type, self.source, *self.events]
        return any(
            isinstance(c, str) and c.strip().lower() in HTTP_TRIGGER_TYPES
            for c in candidates
        )

    @property
    def endpoint(self) -> str | None:
        """``METHOD path`` for HTTP triggers, None otherwise."""
        if not self.is_http:
            return None
        return normalize_endpoint(self.method, self.path)


class InputField(OpenSchema):
    """One field accepted by an input node, with its validation rules."""

    name: str
    type: str | None = None
    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    min: float | None = None
    max: float | None = None
    format: str | None = None
    pattern: str | None = None
    error: str | None = Field(
        default=None,
        validation_alias=AliasChoices("error", "error_message", "message"),
    )
    error_code: str | None = None

    @property
    def has_rules(self) -> bool:
        """Whether the field declares any validation rule."""
        return (
            self.required
            or self.min_length is not None
            or self.max_length is not None
            or self.min is not None
            or self.max is not None
            or not is_blank(self.format)
            or not is_blank(self.pattern)
        )


class InputSpec(NodeSpec):
    fields: list[InputField] = Field(default_factory=list)
    validation: str | None = None


class ProcessSpec(NodeSpec):
    action: str | None = None
    service: str | None = None
    category: str | None = None
    inputs: list[str] = Field(default_factory=list)
    outputs: list[str] = Field(default_factory=list)


class DecisionSpec(NodeSpec):
    """Binary branch.

    ``error_code`` annotates the branch named by ``error_branch``; a path
    that leaves the decision through that handle is an error path.
    """

    condition: str | None = None
    check: str | None = None
    error_branch: str = "false"
    true_label: str | None = Field(
        default=None, validation_alias=AliasChoices("true_label", "trueLabel")
    )
    false_label: str | None = Field(
        default=None, validation_alias=AliasChoices("false_label", "falseLabel")
    )

    @property
    def expression(self) -> str | None:
        """The condition, or the check when no condition is set."""
        return self.condition if not is_blank(self.condition) else self.check


class TerminalSpec(NodeSpec):
    status: int | None = None
    body: dict[str, Any] | None = None
    message: str | None = None
    outcome: str | None = None
    response_type: str | None = None

    @property
    def response_fields(self) -> list[str]:
        return list(self.body.keys()) if self.body else []


class DataStoreSpec(NodeSpec):
    """Persistence step.

    ``store_type`` selects the required fields: a ``model`` for databases, a
    ``path`` for the filesystem, a ``store`` and ``selector`` for in-memory
    state.
    """

    operation: str | None = None
    model: str | None = None
    store_type: str = "database"
    data: dict[str, Any] | None = None
    query: dict[str, Any] | None = None
    path: str | None = None
    store: str | None = None
    selector: str | None = None
    predicate: str | None = None
    patch: dict[str, Any] | None = None

    @field_validator("store_type", mode="before")
    @classmethod
    def default_store_type(cls, v: Any) -> Any:
        return "database" if v is None else v

    @property
    def uses_memory_operation(self) -> bool:
        return self.operation in MEMORY_OPERATIONS


class ServiceCallSpec(NodeSpec):
    method: str | None = None
    url: str | None = None
    path: str | None = None
    integration: str | None = None
    timeout_ms: int | None = None
    error_mapping: dict[str, str] = Field(default_factory=dict)

    @property
    def target(self) -> str | None:
        """``METHOD path`` of the called endpoint, if declared."""
        path = self.path
        if is_blank(path) and not is_blank(self.url):
            path = urlparse(self.url).path or self.url
        return normalize_endpoint(self.method, path)


class EventNodeSpec(NodeSpec):
    direction: str | None = None
    event_name: str | None = None
    payload: dict[str, Any] | None = None


class LoopSpec(NodeSpec):
    collection: str | None = None
    iterator: str | None = None
    break_condition: str | None = None
    on_error: str | None = None


class ParallelSpec(NodeSpec):
    branches: list[str | dict[str, Any]] = Field(default_factory=list)
    join: str | None = None
    join_count: int | None = None

    def branch_label(self, index: int) -> str:
        branch = self.branches[index]
        if isinstance(branch, dict):
            return str(branch.get("label") or index)
        return branch or str(index)


class ContractField(OpenSchema):
    name: str
    type: str | None = None


class SubFlowContract(OpenSchema):
    """Inputs and outputs the called flow declares."""

    inputs: list[ContractField] = Field(default_factory=list)
    outputs: list[ContractField] = Field(default_factory=list)

    @field_validator("inputs", "outputs", mode="before")
    @classmethod
    def coerce_fields(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_as_mapping(item, "name") for item in v]
        return v


class SubFlowSpec(NodeSpec):
    flow_ref: str | None = None
    input_mapping: dict[str, Any] = Field(default_factory=dict)
    output_mapping: dict[str, Any] = Field(default_factory=dict)
    contract: SubFlowContract | None = None


class LlmCallSpec(NodeSpec):
    model: str | None = None
    system_prompt: str | None = None
    prompt_template: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None


# --- Agent kinds ---


class ToolDefinition(OpenSchema):
    """Tool declared inline on an agent loop."""

    id: str | None = None
    name: str | None = None
    description: str | None = None
    is_terminal: bool = False
    requires_confirmation: bool = False

    @property
    def display_name(self) -> str:
        return self.name or self.id or "tool"


class AgentLoopSpec(NodeSpec):
    model: str | None = None
    system_prompt: str | None = None
    max_iterations: int | None = None
    temperature: float | None = None
    tools: list[ToolDefinition] = Field(default_factory=list)
    on_max_iterations: str | None = None


class ToolSpec(NodeSpec):
    name: str | None = None
    implementation: str | None = None
    is_terminal: bool = False
    requires_confirmation: bool = False


class GuardrailCheck(OpenSchema):
    type: str | None = None
    action: str | None = None


class GuardrailSpec(NodeSpec):
    position: str | None = None
    checks: list[GuardrailCheck] = Field(default_factory=list)
    on_block: str | None = None

    @field_validator("checks", mode="before")
    @classmethod
    def coerce_checks(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_as_mapping(item, "type") for item in v]
        return v


class HumanGateSpec(NodeSpec):
    notification_channels: list[str] = Field(default_factory=list)
    approval_options: list[dict[str, Any]] = Field(default_factory=list)
    timeout: dict[str, Any] | None = None

    @property
    def option_ids(self) -> list[str]:
        """Approval option ids; each one names an output handle."""
        return [str(o["id"]) for o in self.approval_options if o.get("id")]


# --- Orchestration kinds ---


class OrchestratorAgent(OpenSchema):
    id: str | None = None
    flow: str | None = None
    specialization: str | None = None
    priority: int | None = None

    @property
    def ref(self) -> str | None:
        """Flow id this agent entry points at."""
        return self.flow or self.id


class OrchestratorSpec(NodeSpec):
    strategy: str | None = None
    model: str | None = None
    agents: list[OrchestratorAgent] = Field(default_factory=list)
    fallback_chain: list[str] = Field(default_factory=list)
    supervision: dict[str, Any] | None = None

    @field_validator("agents", mode="before")
    @classmethod
    def coerce_agents(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_as_mapping(item, "id") for item in v]
        return v


class SmartRouterRule(OpenSchema):
    id: str | None = None
    condition: str | None = None
    route: str | None = None
    priority: int | None = None


class CircuitBreaker(OpenSchema):
    enabled: bool = True
    failure_threshold: int | None = None
    timeout_seconds: int | None = None


class LlmRouting(OpenSchema):
    """Model-driven routing; ``routes`` maps a handle name to its intent."""

    enabled: bool = False
    model: str | None = None
    routing_prompt: str | None = None
    confidence_threshold: float | None = None
    routes: dict[str, Any] = Field(default_factory=dict)


class SmartRouterSpec(NodeSpec):
    rules: list[SmartRouterRule] = Field(default_factory=list)
    fallback: str | None = None
    fallback_chain: list[str] = Field(default_factory=list)
    circuit_breaker: CircuitBreaker | None = None
    llm_routing: LlmRouting | None = None

    @model_validator(mode="before")
    @classmethod
    def lift_policies(cls, data: Any) -> Any:
        """Accept ``policies.circuit_breaker`` as the breaker declaration."""
        if isinstance(data, dict) and data.get("circuit_breaker") is None:
            policies = data.get("policies")
            if isinstance(policies, dict) and policies.get("circuit_breaker"):
                data = {**data, "circuit_breaker": policies["circuit_breaker"]}
        return data

    @property
    def fallback_targets(self) -> list[str]:
        """Fallback flow ids, the single fallback first."""
        targets = [self.fallback] if not is_blank(self.fallback) else []
        return targets + [t for t in self.fallback_chain if t not in targets]

    @property
    def has_fallback(self) -> bool:
        return bool(self.fallback_targets)

    @property
    def breaker_enabled(self) -> bool:
        return self.circuit_breaker is not None and self.circuit_breaker.enabled

    @property
    def llm_routing_enabled(self) -> bool:
        return self.llm_routing is not None and self.llm_routing.enabled

    @property
    def route_handles(self) -> list[str]:
        """Handles named by rule routes, then by LLM routes."""
        handles = [rule.route for rule in self.rules if not is_blank(rule.route)]
        if self.llm_routing is not None:
            handles.extend(self.llm_routing.routes)
        return list(dict.fromkeys(handles))


class HandoffTarget(OpenSchema):
    flow: str | None = None
    domain: str | None = None


class HandoffSpec(NodeSpec):
    mode: str | None = None
    target: HandoffTarget | None = None
    context_transfer: dict[str, Any] | None = None

    @field_validator("target", mode="before")
    @classmethod
    def coerce_target(cls, v: Any) -> Any:
        return _as_mapping(v, "flow")

    @property
    def target_flow(self) -> str | None:
        if self.target is None or is_blank(self.target.flow):
            return None
        return self.target.flow


class AgentGroupMember(OpenSchema):
    flow: str | None = None
    domain: str | None = None


class AgentGroupSpec(NodeSpec):
    name: str | None = None
    members: list[AgentGroupMember] = Field(default_factory=list)
    coordination: dict[str, Any] | None = None

    @field_validator("members", mode="before")
    @classmethod
    def coerce_members(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_as_mapping(item, "flow") for item in v]
        return v


# --- Data / utility kinds ---


class DelaySpec(NodeSpec):
    min_ms: int | None = None
    max_ms: int | None = None
    strategy: str | None = None


class CacheSpec(NodeSpec):
    key: str | None = None
    ttl_ms: int | None = None
    store: str | None = None


class TransformSpec(NodeSpec):
    input_schema: str | None = None
    output_schema: str | None = None
    field_mappings: dict[str, str] = Field(default_factory=dict)


class CollectionSpec(NodeSpec):
    operation: str | None = None
    input: str | None = None
    predicate: str | None = None
    output: str | None = None


class ParseSpec(NodeSpec):
    format: str | None = None
    input: str | None = None
    strategy: str | dict[str, Any] | None = None
    output: str | None = None


class CryptoSpec(NodeSpec):
    operation: str | None = None
    algorithm: str | None = None
    key_source: dict[str, Any] | None = None
    output_field: str | None = None


class BatchSpec(NodeSpec):
    input: str | None = None
    operation_template: dict[str, Any] | None = None
    concurrency: int | None = None


class TransactionSpec(NodeSpec):
    isolation: str | None = None
    steps: list[dict[str, Any]] = Field(default_factory=list)
    rollback_on_error: bool | None = None


class IpcCallSpec(NodeSpec):
    command: str | None = None
    args: dict[str, Any] | None = None


SPEC_MODELS: dict[str, type[NodeSpec]] = {
    NodeKind.TRIGGER.value: TriggerSpec,
    NodeKind.INPUT.value: InputSpec,
    NodeKind.PROCESS.value: ProcessSpec,
    NodeKind.DECISION.value: DecisionSpec,
    NodeKind.TERMINAL.value: TerminalSpec,
    NodeKind.DATA_STORE.value: DataStoreSpec,
    NodeKind.SERVICE_CALL.value: ServiceCallSpec,
    NodeKind.EVENT.value: EventNodeSpec,
    NodeKind.LOOP.value: LoopSpec,
    NodeKind.PARALLEL.value: ParallelSpec,
    NodeKind.SUB_FLOW.value: SubFlowSpec,
    NodeKind.LLM_CALL.value: LlmCallSpec,
    NodeKind.AGENT_LOOP.value: AgentLoopSpec,
    NodeKind.TOOL.value: ToolSpec,
    NodeKind.GUARDRAIL.value: GuardrailSpec,
    NodeKind.HUMAN_GATE.value: HumanGateSpec,
    NodeKind.ORCHESTRATOR.value: OrchestratorSpec,
    NodeKind.SMART_ROUTER.value: SmartRouterSpec,
    NodeKind.HANDOFF.value: HandoffSpec,
    NodeKind.AGENT_GROUP.value: AgentGroupSpec,
    NodeKind.DELAY.value: DelaySpec,
    NodeKind.CACHE.value: CacheSpec,
    NodeKind.TRANSFORM.value: TransformSpec,
    NodeKind.COLLECTION.value: CollectionSpec,
    NodeKind.PARSE.value: ParseSpec,
    NodeKind.CRYPTO.value: CryptoSpec,
    NodeKind.BATCH.value: BatchSpec,
    NodeKind.TRANSACTION.value: TransactionSpec,
    NodeKind.IPC_CALL.value: IpcCallSpec,
}

# Named output handles per node kind, in traversal order
BRANCH_HANDLES: dict[str, tuple[str, ...]] = {
    NodeKind.DECISION.value: ("true", "false"),
    NodeKind.INPUT.value: ("valid", "invalid"),
    NodeKind.DATA_STORE.value: ("success", "error"),
    NodeKind.SERVICE_CALL.value: ("success", "error"),
    NodeKind.PARSE.value: ("success", "error"),
    NodeKind.CRYPTO.value: ("success", "error"),
    NodeKind.LLM_CALL.value: ("success", "error"),
    NodeKind.IPC_CALL.value: ("success", "error"),
    NodeKind.LOOP.value: ("body", "done"),
    NodeKind.CACHE.value: ("hit", "miss"),
    NodeKind.COLLECTION.value: ("result", "empty"),
    NodeKind.TRANSACTION.value: ("committed", "rolled_back"),
    NodeKind.BATCH.value: ("done", "error"),
    NodeKind.AGENT_LOOP.value: ("done", "error"),
    NodeKind.GUARDRAIL.value: ("pass", "block"),
}

# Alternate names accepted for a branch handle
HANDLE_ALIASES: dict[str, dict[str, tuple[str, ...]]] = {
    NodeKind.GUARDRAIL.value: {"pass": ("pass", "valid"), "block": ("block", "invalid")},
}


# =============================================================================
# Graph Records
# =============================================================================


class Connection(BaseSchema):
    """Directed edge leaving a node through a named handle."""

    target_node_id: str = Field(
        ...,
        validation_alias=AliasChoices("target_node_id", "targetNodeId", "target"),
        description="Target node ID in the same flow",
    )
    source_handle: str | None = Field(
        default=None,
        validation_alias=AliasChoices("source_handle", "sourceHandle", "handle"),
        description="Output handle name; None for the default handle",
    )
    target_handle: str | None = Field(
        default=None,
        validation_alias=AliasChoices("target_handle", "targetHandle"),
    )
    label: str | None = None


class Node(BaseSchema):
    """Flow graph vertex.

    ``spec`` is parsed into the spec model registered for ``kind``.
    """

    id: str
    kind: NodeKind = Field(..., validation_alias=AliasChoices("kind", "type"))
    label: str | None = None
    spec: SerializeAsAny[NodeSpec] = Field(default_factory=NodeSpec)
    connections: list[Connection] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def parse_spec(cls, data: Any) -> Any:
        """Parse a raw spec mapping with the model for the node's kind."""
        if not isinstance(data, dict):
            return data
        kind = data.get("kind", data.get("type"))
        kind_value = kind.value if isinstance(kind, NodeKind) else kind
        spec_model = SPEC_MODELS.get(kind_value, NodeSpec)
        raw_spec = data.get("spec")
        if raw_spec is None:
            return {**data, "spec": spec_model()}
        if isinstance(raw_spec, dict):
            return {**data, "spec": spec_model.model_validate(raw_spec)}
        return data

    @property
    def display_name(self) -> str:
        return self.label or self.id

    @property
    def branch_handles(self) -> tuple[str, ...]:
        """Named output handles of this node's kind, in traversal order."""
        if isinstance(self.spec, ParallelSpec):
            branches = tuple(f"branch-{i}" for i in range(len(self.spec.branches)))
            return (*branches, "done")
        if isinstance(self.spec, SmartRouterSpec):
            return tuple(self.spec.route_handles)
        if isinstance(self.spec, HumanGateSpec):
            return tuple(self.spec.option_ids)
        return BRANCH_HANDLES.get(self.kind, ())

    @property
    def handles(self) -> set[str | None]:
        """Handles that have at least one outgoing connection."""
        return {c.source_handle for c in self.connections}

    def has_branch(self, handle: str) -> bool:
        """Whether ``handle``, or an alternate name for it, is connected."""
        names = HANDLE_ALIASES.get(self.kind, {}).get(handle, (handle,))
        return any(name in self.handles for name in names)

    def targets(self, handle: str | None = None) -> list[str]:
        """Target ids leaving through ``handle`` (all targets when None)."""
        if handle is None:
            return [c.target_node_id for c in self.connections]
        return [c.target_node_id for c in self.connections if c.source_handle == handle]


class Flow(BaseSchema):
    """One workflow graph."""

    id: str
    name: str | None = None
    kind: FlowKind = Field(
        default=FlowKind.TRADITIONAL,
        validation_alias=AliasChoices("kind", "type"),
    )
    domain: str | None = None
    description: str | None = None
    nodes: list[Node] = Field(default_factory=list)

    @property
    def qualified_id(self) -> str:
        """``domain/flow-id``; flow ids are only unique within a domain."""
        return qualify_flow_ref(self.id, self.domain)

    @classmethod
    def from_document(
        cls,
        document: dict[str, Any],
        domain: str | None = None,
        flow_id: str | None = None,
    ) -> Flow:
        """Build a Flow from the on-disk document shape.

        The document carries flow metadata under ``flow``, the trigger node
        under ``trigger`` and every other node under ``nodes``.

        Args:
            document: Parsed flow document.
            domain: Domain id used when the document does not name one.
            flow_id: Flow id used when the document does not name one.

        Returns:
            The normalized Flow.
        """
        meta = dict(document.get("flow") or {})
        nodes: list[Any] = []
        trigger = document.get("trigger")
        if trigger:
            nodes.append({"type": NodeKind.TRIGGER.value, **trigger})
        nodes.extend(document.get("nodes") or [])
        return cls.model_validate(
            {
                "id": meta.get("id") or flow_id,
                "name": meta.get("name"),
                "type": meta.get("type") or FlowKind.TRADITIONAL.value,
                "domain": meta.get("domain") or domain,
                "description": meta.get("description"),
                "nodes": nodes,
            }
        )

    @property
    def triggers(self) -> list[Node]:
        return [n for n in self.nodes if n.kind == NodeKind.TRIGGER]

    @property
    def trigger(self) -> Node | None:
        """The first trigger node, if any."""
        triggers = self.triggers
        return triggers[0] if triggers else None

    @property
    def node_map(self) -> dict[str, Node]:
        """Node id to node; the first node wins on duplicate ids."""
        mapping: dict[str, Node] = {}
        for node in self.nodes:
            mapping.setdefault(node.id, node)
        return mapping

    def get_node(self, node_id: str) -> Node | None:
        return self.node_map.get(node_id)

    def nodes_of_kind(self, *kinds: NodeKind) -> list[Node]:
        wanted = {k.value for k in kinds}
        return [n for n in self.nodes if n.kind in wanted]

    def agent_tools(self, agent_loop: Node) -> list[tuple[str, bool]]:
        """Tools available to an agent loop as ``(name, is_terminal)`` pairs.

        Inline tools on the loop spec come first, followed by tool nodes the
        loop connects to.
        """
        tools: list[tuple[str, bool]] = []
        if isinstance(agent_loop.spec, AgentLoopSpec):
            tools.extend((t.display_name, t.is_terminal) for t in agent_loop.spec.tools)

        node_map = self.node_map
        for target_id in dict.fromkeys(agent_loop.targets()):
            target = node_map.get(target_id)
            if target is not None and isinstance(target.spec, ToolSpec):
                tools.append((target.spec.name or target.display_name, target.spec.is_terminal))
        return tools

    @property
    def terminals(self) -> list[Node]:
        return self.nodes_of_kind(NodeKind.TERMINAL)

    @property
    def http_endpoint(self) -> str | None:
        """``METHOD path`` of the HTTP trigger, if the flow has one."""
        trigger = self.trigger
        if trigger is None or not isinstance(trigger.spec, TriggerSpec):
            return None
        return trigger.spec.endpoint

    @property
    def is_http(self) -> bool:
        trigger = self.trigger
        return (
            trigger is not None
            and isinstance(trigger.spec, TriggerSpec)
            and trigger.spec.is_http
        )


__all__ = [
    "BRANCH_HANDLES",
    "HANDLE_ALIASES",
    "HTTP_TRIGGER_TYPES",
    "MEMORY_OPERATIONS",
    "SPEC_MODELS",
    "AgentGroupMember",
    "AgentGroupSpec",
    "AgentLoopSpec",
    "BatchSpec",
    "CacheSpec",
    "CircuitBreaker",
    "CollectionSpec",
    "Connection",
    "ContractField",
    "CryptoSpec",
    "DataStoreSpec",
    "DecisionSpec",
    "DelaySpec",
    "EventNodeSpec",
    "Flow",
    "GuardrailCheck",
    "GuardrailSpec",
    "HandoffSpec",
    "HandoffTarget",
    "HumanGateSpec",
    "InputField",
    "InputSpec",
    "IpcCallSpec",
    "LlmCallSpec",
    "LlmRouting",
    "LoopSpec",
    "Node",
    "NodeSpec",
    "OrchestratorAgent",
    "OrchestratorSpec",
    "ParallelSpec",
    "ParseSpec",
    "ProcessSpec",
    "ServiceCallSpec",
    "SmartRouterRule",
    "SmartRouterSpec",
    "SubFlowContract",
    "SubFlowSpec",
    "TerminalSpec",
    "ToolDefinition",
    "ToolSpec",
    "TransactionSpec",
    "TransformSpec",
    "TriggerSpec",
    "normalize_endpoint",
    "qualify_flow_ref",
]
