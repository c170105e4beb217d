"""Common exception classes.

Only caller contract violations are raised; every design-time problem in a
flow graph is reported as a ValidationIssue instead.
"""

from __future__ import annotations


class AppError(Exception):
    """Base exception for the engine."""


__all__ = ["AppError"]
