"""Test derivation services.

This package derives executable test scenarios directly from a flow graph:
trigger-to-terminal paths, boundary values from input rules, and agent or
orchestration scenarios, merged into one ``DerivedTestSpec``.
"""

from flowspec.services.testgen.boundary_deriver import (
    BoundaryTestDeriver,
    derive_boundary_tests,
)
from flowspec.services.testgen.path_deriver import TestPathDeriver, derive_test_paths
from flowspec.services.testgen.policy import PathClassificationPolicy
from flowspec.services.testgen.scenario_deriver import (
    ScenarioTestDeriver,
    derive_scenario_tests,
)
from flowspec.services.testgen.spec_builder import build_derived_test_spec

__all__ = [
    "BoundaryTestDeriver",
    "PathClassificationPolicy",
    "ScenarioTestDeriver",
    "TestPathDeriver",
    "build_derived_test_spec",
    "derive_boundary_tests",
    "derive_scenario_tests",
    "derive_test_paths",
]
