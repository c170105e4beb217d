"""Boundary-value test derivation.

TAG: [TESTGEN] [BOUNDARY]

Generates boundary cases from the validation rules declared on input
fields. Each validated field gets one valid case, plus:

- ``invalid_missing`` when the field is required
- ``invalid_format`` when a format is declared
- ``boundary_min_below`` / ``boundary_min_exact`` for ``min_length``
- ``boundary_max_exact`` / ``boundary_max_above`` for ``max_length``

Failing cases carry the field's declared error message verbatim.
"""

from __future__ import annotations

from typing import Any

from flowspec.core.config import Settings, get_settings
from flowspec.core.logging import get_logger
from flowspec.models.enums import BoundaryTestKind, NodeKind
from flowspec.schemas.flow import Flow, InputField, InputSpec, Node, TerminalSpec
from flowspec.schemas.testing import BoundaryTest

logger = get_logger(__name__)

VALID_FORMAT_SAMPLES: dict[str, str] = {
    "email": "user@example.com",
    "url": "https://example.com",
    "uri": "https://example.com",
    "uuid": "123e4567-e89b-12d3-a456-426614174000",
    "date": "2024-01-15",
    "datetime": "2024-01-15T10:30:00Z",
    "date-time": "2024-01-15T10:30:00Z",
    "time": "10:30:00",
    "phone": "+15555550123",
    "ipv4": "192.168.0.1",
    "slug": "sample-slug",
}

INVALID_FORMAT_SAMPLES: dict[str, str] = {
    "email": "not-an-email",
    "url": "not a url",
    "uri": "not a uri",
    "uuid": "not-a-uuid",
    "date": "2024-13-45",
    "datetime": "not-a-datetime",
    "date-time": "not-a-datetime",
    "time": "25:61:00",
    "phone": "phone-number",
    "ipv4": "999.999.999.999",
    "slug": "Not A Slug!",
}

SHORT_FORMAT_SAMPLES: dict[str, str] = {
    "email": "a@b.io",
    "url": "https://a.io",
    "uri": "https://a.io",
}

# Samples with a fixed shape that trimming would break.
FIXED_SHAPE_FORMATS = frozenset({"uuid", "date", "datetime", "date-time", "time", "ipv4"})

NUMERIC_TYPES = frozenset({"number", "integer", "int", "float", "decimal"})
BOOLEAN_TYPES = frozenset({"boolean", "bool"})


def valid_value(field: InputField) -> Any:
    """Generate a value that satisfies every rule on the field.

    Numbers respect ``min``/``max``; strings use a format-specific sample and
    are padded or shortened into ``min_length``/``max_length``. Emails keep
    their domain and lose characters from the local part.
    """
    field_type = (field.type or "string").lower()
    if field_type in NUMERIC_TYPES:
        number = field.min if field.min is not None else field.max if field.max is not None else 1
        return int(number) if field_type in {"integer", "int"} else number
    if field_type in BOOLEAN_TYPES:
        return True

    fmt = (field.format or "").lower()
    value = VALID_FORMAT_SAMPLES.get(fmt, "valid")

    if field.min_length is not None and len(value) < field.min_length:
        padding = "a" * (field.min_length - len(value))
        if fmt == "email":
            local, _, domain = value.partition("@")
            value = f"{local}{padding}@{domain}"
        else:
            value += padding
    if field.max_length is not None and len(value) > field.max_length:
        value = _shorten(value, fmt, field.max_length)
    return value


def _shorten(value: str, fmt: str, max_length: int) -> str:
    if fmt in FIXED_SHAPE_FORMATS:
        return value
    if fmt == "email":
        local, _, domain = value.partition("@")
        keep = max_length - len(domain) - 1
        if keep >= 1:
            return f"{local[:keep]}@{domain}"
    short = SHORT_FORMAT_SAMPLES.get(fmt)
    if short is not None and len(short) <= max_length:
        return short
    return value[:max_length].rstrip("-") or value[:max_length]


def invalid_format_value(field: InputField) -> str:
    fmt = (field.format or "").lower()
    return INVALID_FORMAT_SAMPLES.get(fmt, "invalid-format")


def invalid_branch_status(flow: Flow, node: Node) -> int | None:
    """Status of the terminal reached from an input's ``invalid`` branch.

    Follows the first connection of each node after the branch until a
    terminal is reached; None when no terminal declares a status.
    """
    node_map = flow.node_map
    seen: set[str] = set()
    targets = node.targets("invalid")
    current = node_map.get(targets[0]) if targets else None

    while current is not None and current.id not in seen:
        if current.kind == NodeKind.TERMINAL:
            return current.spec.status if isinstance(current.spec, TerminalSpec) else None
        seen.add(current.id)
        next_ids = current.targets()
        current = node_map.get(next_ids[0]) if next_ids else None
    return None


class BoundaryTestDeriver:
    """Derives boundary-value cases from input field rules.

    TAG: [TESTGEN] [BOUNDARY]

    Example:
        >>> tests = BoundaryTestDeriver().derive(flow)
        >>> [t.kind for t in tests if t.field == "email"]
        ['valid', 'invalid_missing', 'invalid_format']
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def derive(self, flow: Flow) -> list[BoundaryTest]:
        """Derive boundary cases for every validated field of every input node.

        Args:
            flow: The flow whose input nodes are scanned.

        Returns:
            Cases grouped by node and field, in declaration order.
        """
        tests: list[BoundaryTest] = []
        for node in flow.nodes:
            if not isinstance(node.spec, InputSpec):
                continue
            status = invalid_branch_status(flow, node)
            if status is None:
                status = self.settings.DEFAULT_VALIDATION_STATUS
            for field in node.spec.fields:
                if field.has_rules:
                    tests.extend(self.derive_field(field, node.id, status))

        logger.debug(
            "Boundary tests derived",
            extra={"context": {"flow_id": flow.id, "tests": len(tests)}},
        )
        return tests

    def derive_field(
        self,
        field: InputField,
        node_id: str | None = None,
        expected_status: int | None = None,
    ) -> list[BoundaryTest]:
        """Derive the cases for one field.

        Args:
            field: The input field and its rules.
            node_id: Input node the field belongs to.
            expected_status: Status expected when the value is rejected.

        Returns:
            The field's cases, valid case first.
        """

        def case(
            kind: BoundaryTestKind,
            value: Any,
            success: bool,
            description: str,
        ) -> BoundaryTest:
            return BoundaryTest(
                field=field.name,
                kind=kind,
                input_value=value,
                expect_success=success,
                expected_error=None if success else field.error,
                expected_status=None if success else expected_status,
                description=f"{field.name}: {description}",
                node_id=node_id,
            )

        tests = [case(BoundaryTestKind.VALID, valid_value(field), True, "valid value is accepted")]

        if field.required:
            tests.append(
                case(BoundaryTestKind.INVALID_MISSING, None, False, "missing value is rejected")
            )
        if field.format:
            tests.append(
                case(
                    BoundaryTestKind.INVALID_FORMAT,
                    invalid_format_value(field),
                    False,
                    f"value that is not a valid {field.format} is rejected",
                )
            )
        if field.min_length is not None:
            if field.min_length > 0:
                tests.append(
                    case(
                        BoundaryTestKind.BOUNDARY_MIN_BELOW,
                        "a" * (field.min_length - 1),
                        False,
                        f"{field.min_length - 1} characters is rejected",
                    )
                )
            tests.append(
                case(
                    BoundaryTestKind.BOUNDARY_MIN_EXACT,
                    "a" * field.min_length,
                    True,
                    f"{field.min_length} characters is accepted",
                )
            )
        if field.max_length is not None:
            tests.append(
                case(
                    BoundaryTestKind.BOUNDARY_MAX_EXACT,
                    "a" * field.max_length,
                    True,
                    f"{field.max_length} characters is accepted",
                )
            )
            tests.append(
                case(
                    BoundaryTestKind.BOUNDARY_MAX_ABOVE,
                    "a" * (field.max_length + 1),
                    False,
                    f"{field.max_length + 1} characters is rejected",
                )
            )
        return tests


def derive_boundary_tests(flow: Flow, settings: Settings | None = None) -> list[BoundaryTest]:
    """Derive the boundary cases of a flow."""
    return BoundaryTestDeriver(settings).derive(flow)


__all__ = [
    "BoundaryTestDeriver",
    "derive_boundary_tests",
    "invalid_branch_status",
    "invalid_format_value",
    "valid_value",
]
