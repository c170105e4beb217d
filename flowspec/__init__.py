"""FlowSpec engine.

Static validation and test derivation for flow-graph specifications.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
