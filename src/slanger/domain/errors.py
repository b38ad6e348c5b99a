"""Exceptions raised at layer boundaries.

Validity findings are never exceptions: they are ValidationIssue values.
These classes cover the cases where the caller broke a contract.
"""

from __future__ import annotations


class StructuralError(ValueError):
    """Required document structure is absent or has the wrong shape.

    Raised by document coercion and by validation passes when a
    container (e.g. ``morphology.paradigms``) is not a mapping. Never
    silently coerced.
    """

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ApplyError(ValueError):
    """A generator response could not be merged into a document."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
