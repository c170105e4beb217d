"""Path classification policy.

TAG: [TESTGEN] [POLICY]

Derived paths are classified from the status their terminal declares and
from the branches they traverse. The status ranges are configuration, not
fixed rules: ``FLOWSPEC_HAPPY_STATUS_RANGE`` and
``FLOWSPEC_ERROR_STATUS_RANGES`` override the defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flowspec.core.config import Settings, get_settings
from flowspec.models.enums import TestPathType


@dataclass(frozen=True)
class PathClassificationPolicy:
    """Status ranges used to classify derived paths.

    Attributes:
        happy_range: Inclusive status range of happy paths.
        error_ranges: Inclusive status ranges of error paths.
    """

    happy_range: tuple[int, int] = (200, 299)
    error_ranges: tuple[tuple[int, int], ...] = field(
        default_factory=lambda: ((400, 499), (500, 599))
    )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> PathClassificationPolicy:
        """Build the policy from engine settings."""
        settings = settings or get_settings()
        return cls(
            happy_range=settings.happy_status_range,
            error_ranges=tuple(settings.error_status_ranges),
        )

    def is_happy(self, status: int | None) -> bool:
        if status is None:
            return False
        low, high = self.happy_range
        return low <= status <= high

    def is_error(self, status: int | None) -> bool:
        if status is None:
            return False
        return any(low <= status <= high for low, high in self.error_ranges)

    def classify(
        self,
        status: int | None,
        error_branch_taken: bool = False,
        through_agent_loop: bool = False,
    ) -> TestPathType:
        """Classify one path.

        Args:
            status: Status declared by the path's terminal.
            error_branch_taken: Whether the path left a decision through the
                branch annotated with an error code.
            through_agent_loop: Whether the path passes an agent_loop node.

        Returns:
            agent_loop for agent paths; error_path for error statuses or
            error branches; happy_path for happy statuses; edge_case otherwise.
        """
        if through_agent_loop:
            return TestPathType.AGENT_LOOP
        if self.is_error(status) or error_branch_taken:
            return TestPathType.ERROR_PATH
        if self.is_happy(status):
            return TestPathType.HAPPY_PATH
        return TestPathType.EDGE_CASE


__all__ = ["PathClassificationPolicy"]
