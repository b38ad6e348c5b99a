"""Validation results and issue constructors."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from pydantic import Field

from slanger.domain.document import DocumentModel, ValidationIssue
from slanger.domain.types import Severity, ValidationModule


def make_issue(
    module: ValidationModule,
    severity: Severity,
    rule_id: str,
    message: str,
    entity_ref: str | None = None,
) -> ValidationIssue:
    return ValidationIssue(
        rule_id=rule_id,
        module=module,
        severity=severity,
        message=message,
        entity_ref=entity_ref,
    )


def split_issues(
    issues: Iterable[ValidationIssue],
) -> tuple[list[ValidationIssue], list[ValidationIssue]]:
    """Partition *issues* into ``(errors, warnings)``, preserving order."""
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    for issue in issues:
        (errors if issue.is_error else warnings).append(issue)
    return errors, warnings


def format_issues(issues: Iterable[ValidationIssue]) -> list[str]:
    """Render each issue as ``[MODULE RULE_ID] message (ref: entity)``."""
    return [issue.format() for issue in issues]


class PassOutcome(DocumentModel):
    """Per-module verdict inside a ValidationResult summary."""

    passed: bool
    error_count: int = 0
    warning_count: int = 0


class ValidationResult(DocumentModel):
    """Aggregated verdict over all passes.

    INVARIANT: ``valid`` is True iff ``errors`` is empty.
    """

    valid: bool
    errors: tuple[ValidationIssue, ...] = ()
    warnings: tuple[ValidationIssue, ...] = ()
    summary: dict[str, PassOutcome] = Field(default_factory=dict)
    duration_ms: float = 0.0

    @classmethod
    def from_passes(
        cls,
        passes: Mapping[ValidationModule, Sequence[ValidationIssue]],
        *,
        duration_ms: float = 0.0,
    ) -> ValidationResult:
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []
        summary: dict[str, PassOutcome] = {}
        for module, issues in passes.items():
            module_errors, module_warnings = split_issues(issues)
            errors.extend(module_errors)
            warnings.extend(module_warnings)
            summary[module.value] = PassOutcome(
                passed=not module_errors,
                error_count=len(module_errors),
                warning_count=len(module_warnings),
            )
        return cls(
            valid=not errors,
            errors=tuple(errors),
            warnings=tuple(warnings),
            summary=summary,
            duration_ms=round(duration_ms, 3),
        )

    @classmethod
    def passthrough(cls) -> ValidationResult:
        """A verdict with no passes run (used by read-only operations)."""
        return cls(valid=True)

    def error_messages(self) -> list[str]:
        return format_issues(self.errors)
