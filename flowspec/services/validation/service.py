"""Validation service facade.

TAG: [VALIDATION] [SERVICE]

Owns the validators, the test-spec builder, a caller-supplied cache and the
project snapshot. Results are computed on first request and served from the
cache until the caller reports an edit with ``notify_flow_changed`` or
``notify_domain_changed``, or replaces the snapshot with ``update_project``.

Flows are keyed by ``domain/flow-id``. A bare flow id is accepted wherever
it names exactly one flow.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from flowspec.core.config import Settings, get_settings
from flowspec.core.logging import get_logger
from flowspec.models.enums import ValidationScope
from flowspec.schemas.domain import Domain, ProjectCatalog
from flowspec.schemas.flow import Flow, qualify_flow_ref
from flowspec.schemas.testing import DerivedTestSpec
from flowspec.schemas.validation import (
    ImplementGateState,
    ValidationIssue,
    ValidationResult,
)
from flowspec.services.testgen.policy import PathClassificationPolicy
from flowspec.services.testgen.spec_builder import build_derived_test_spec
from flowspec.services.validation.aggregator import check_implement_gate, summarize_domain
from flowspec.services.validation.cache import ValidationCache
from flowspec.services.validation.domain_validator import DomainValidator
from flowspec.services.validation.exceptions import AmbiguousTargetError, TargetNotFoundError
from flowspec.services.validation.flow_validator import FlowValidator
from flowspec.services.validation.system_validator import SYSTEM_TARGET_ID, SystemValidator

logger = get_logger(__name__)

TESTS_SCOPE = "tests"


class ValidationService:
    """Cached validation and test derivation over one project snapshot.

    TAG: [VALIDATION] [SERVICE]

    Example:
        >>> service = ValidationService(domains, {"users": [create_user]}, catalog)
        >>> service.validate_flow("users/create-user").is_valid
        True
        >>> service.notify_flow_changed("create-user")
    """

    def __init__(
        self,
        domains: Sequence[Domain],
        flows: Mapping[str, Sequence[Flow]],
        catalog: ProjectCatalog | None = None,
        cache: ValidationCache[Any] | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            domains: All domains in declaration order.
            flows: Domain id to the flows present in that domain.
            catalog: Read-only project lookups; reference checks are skipped
                when omitted.
            cache: Result cache; a new one using ``VALIDATION_CACHE_TTL`` is
                created when omitted.
            settings: Engine settings.
        """
        self.settings = settings or get_settings()
        self.cache: ValidationCache[Any] = (
            cache if cache is not None else ValidationCache(ttl=self.settings.VALIDATION_CACHE_TTL)
        )
        self.policy = PathClassificationPolicy.from_settings(self.settings)

        self.flow_validator = FlowValidator()
        self.domain_validator = DomainValidator()
        self.system_validator = SystemValidator()

        self._domains: list[Domain] = []
        self._flows: dict[str, list[Flow]] = {}
        self._flow_index: dict[str, tuple[str, Flow]] = {}
        self.catalog: ProjectCatalog | None = None
        self.update_project(domains, flows, catalog)

    # =========================================================================
    # Project snapshot
    # =========================================================================

    def update_project(
        self,
        domains: Sequence[Domain],
        flows: Mapping[str, Sequence[Flow]],
        catalog: ProjectCatalog | None = None,
    ) -> None:
        """Replace the project snapshot and drop every cached result."""
        self._domains = list(domains)
        self._flows = {domain_id: list(items) for domain_id, items in flows.items()}
        self._flow_index = {}
        for domain_id, items in self._flows.items():
            for flow in items:
                self._flow_index.setdefault(qualify_flow_ref(flow.id, domain_id), (domain_id, flow))
        self.catalog = catalog
        self.cache.clear()

        logger.debug(
            "Validation project loaded",
            extra={
                "context": {
                    "domains": len(self._domains),
                    "flows": len(self._flow_index),
                }
            },
        )

    def resolve_flow(self, flow_ref: str) -> str:
        """Resolve a flow reference to its ``domain/flow-id`` key.

        Raises:
            TargetNotFoundError: If no domain contains the flow.
            AmbiguousTargetError: If a bare id names flows in several domains.
        """
        if flow_ref in self._flow_index:
            return flow_ref
        if "/" not in flow_ref:
            matches = [key for key, (_, flow) in self._flow_index.items() if flow.id == flow_ref]
            if len(matches) == 1:
                return matches[0]
            if matches:
                raise AmbiguousTargetError(ValidationScope.FLOW.value, flow_ref, matches)
        raise TargetNotFoundError(ValidationScope.FLOW.value, flow_ref)

    def get_flow(self, flow_ref: str) -> Flow:
        """Get a loaded flow by ``domain/flow-id`` or unique bare id."""
        return self._flow_index[self.resolve_flow(flow_ref)][1]

    def get_domain(self, domain_id: str) -> Domain:
        """Get a loaded domain.

        Raises:
            TargetNotFoundError: If the domain is not declared.
        """
        for domain in self._domains:
            if domain.id == domain_id:
                return domain
        raise TargetNotFoundError(ValidationScope.DOMAIN.value, domain_id)

    def domain_of(self, flow_ref: str) -> str:
        """Id of the domain a flow belongs to."""
        return self._flow_index[self.resolve_flow(flow_ref)][0]

    # =========================================================================
    # Validation
    # =========================================================================

    def validate_flow(self, flow_ref: str) -> ValidationResult:
        """Validate one flow, serving a cached result when present."""
        key = self.resolve_flow(flow_ref)
        cached = self.cache.get(ValidationScope.FLOW, key)
        if cached is not None:
            return cached

        result = self.flow_validator.validate(self._flow_index[key][1], self.catalog)
        self.cache.set(ValidationScope.FLOW, key, result)
        return result

    def validate_domain(self, domain_id: str) -> ValidationResult:
        """Validate one domain with its flow counts rolled in."""
        cached = self.cache.get(ValidationScope.DOMAIN, domain_id)
        if cached is not None:
            return cached

        domain = self.get_domain(domain_id)
        flows = self._flows.get(domain_id, [])
        domain_result = self.domain_validator.validate(domain, flows, self._domains)
        # Duplicate ids are reported by the domain checks; validate each id once.
        keys = list(dict.fromkeys(qualify_flow_ref(f.id, domain_id) for f in flows))
        result = summarize_domain(domain_result, [self.validate_flow(key) for key in keys])

        self.cache.set(ValidationScope.DOMAIN, domain_id, result)
        return result

    def validate_system(self) -> ValidationResult:
        """Validate cross-domain wiring."""
        cached = self.cache.get(ValidationScope.SYSTEM, SYSTEM_TARGET_ID)
        if cached is not None:
            return cached

        result = self.system_validator.validate(self._domains, self._flows)
        self.cache.set(ValidationScope.SYSTEM, SYSTEM_TARGET_ID, result)
        return result

    def derive_tests(self, flow_ref: str) -> DerivedTestSpec:
        """Derive the test specification of one flow."""
        key = self.resolve_flow(flow_ref)
        cached = self.cache.get(TESTS_SCOPE, key)
        if cached is not None:
            return cached

        spec = build_derived_test_spec(self._flow_index[key][1], self.policy, self.settings)
        self.cache.set(TESTS_SCOPE, key, spec)
        return spec

    # =========================================================================
    # Invalidation
    # =========================================================================

    def notify_flow_changed(self, flow_ref: str, flow: Flow | None = None) -> None:
        """Drop cached results affected by an edit to one flow.

        Args:
            flow_ref: The edited flow, as ``domain/flow-id`` or a unique bare id.
            flow: The new version of the flow, replacing the loaded one.
        """
        try:
            key: str | None = self.resolve_flow(flow_ref)
        except TargetNotFoundError:
            if flow is None:
                raise
            key = None

        keys = [key] if key is not None else []
        if flow is not None:
            keys.append(self._replace_flow(key, flow))

        for stale in dict.fromkeys(keys):
            self.cache.invalidate(ValidationScope.FLOW, stale)
            self.cache.invalidate(TESTS_SCOPE, stale)
            self.cache.invalidate(ValidationScope.DOMAIN, stale.rpartition("/")[0])
        self.cache.invalidate(ValidationScope.SYSTEM, SYSTEM_TARGET_ID)

    def notify_domain_changed(self, domain_id: str, domain: Domain | None = None) -> None:
        """Drop cached results affected by an edit to a domain configuration."""
        if domain is not None:
            self._domains = [domain if d.id == domain_id else d for d in self._domains]
        self.cache.invalidate(ValidationScope.DOMAIN, domain_id)
        self.cache.invalidate(ValidationScope.SYSTEM, SYSTEM_TARGET_ID)

    def _replace_flow(self, key: str | None, flow: Flow) -> str:
        domain_id = self._flow_index[key][0] if key is not None else flow.domain
        if not domain_id:
            raise TargetNotFoundError(ValidationScope.FLOW.value, flow.id)

        old_id = self._flow_index[key][1].id if key is not None else flow.id
        items = self._flows.setdefault(domain_id, [])
        for index, existing in enumerate(items):
            if existing.id == old_id:
                items[index] = flow
                break
        else:
            items.append(flow)

        if key is not None:
            self._flow_index.pop(key, None)
        new_key = qualify_flow_ref(flow.id, domain_id)
        self._flow_index[new_key] = (domain_id, flow)
        return new_key

    # =========================================================================
    # Queries
    # =========================================================================

    def get_node_issues(self, flow_ref: str, node_id: str) -> list[ValidationIssue]:
        """Issues of one node, for per-node indicators."""
        return self.validate_flow(flow_ref).issues_for_node(node_id)

    def check_implement_gate(self, flow_ref: str) -> ImplementGateState:
        """Gate code generation for a flow on its flow, domain and system results.

        The domain result carries the error counts of every flow in the
        domain, so an error in a sibling flow blocks as well.
        """
        flow_result = self.validate_flow(flow_ref)
        domain_result = self.validate_domain(self.domain_of(flow_ref))
        system_result = self.validate_system()
        return check_implement_gate(flow=flow_result, domain=domain_result, system=system_result)


__all__ = ["TESTS_SCOPE", "ValidationService"]
