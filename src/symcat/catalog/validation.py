"""
Structured validation reports.

``finalize()`` collects every structural problem of a standard into one
report instead of failing at the first one. Each issue carries the error
kind, the code it concerns, a message and a severity, so tools can render
or filter the report without parsing strings.

Manifesto:
    Validation results must be actionable:
    - **kind:** Which rule was violated (OrphanVariant, DuplicateOrdinal, ...)
    - **code:** Which symbol or color to fix
    - **message:** Human-readable explanation
    - **severity:** ERROR blocks finalize, WARNING is informational

Examples:
    >>> issue = ValidationIssue(kind="OrphanVariant", message="no parent", code="101.1")
    >>> report = ValidationReport("ISOM 2017-2", [issue])
    >>> report.ok
    False

Tags:
    validation, report, data-quality, symbol-catalog
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from symcat.core.errors import CatalogError, error_kind


class IssueSeverity(str, Enum):
    ERROR = "ERROR"
    WARNING = "WARNING"


@dataclass(frozen=True)
class ValidationIssue:
    """One finding of a validation pass."""

    kind: str
    message: str
    code: str | None = None
    standard: str | None = None
    severity: IssueSeverity = IssueSeverity.ERROR

    @classmethod
    def from_error(
        cls,
        error: Exception,
        *,
        severity: IssueSeverity = IssueSeverity.ERROR,
        standard: str | None = None,
    ) -> ValidationIssue:
        """Build an issue from a catalog error, keeping its kind and context."""
        code = None
        if isinstance(error, CatalogError):
            code = error.context.code
            standard = standard or error.context.standard
            message = error.message
        else:
            message = str(error)
        return cls(
            kind=error_kind(error),
            message=message,
            code=code,
            standard=standard,
            severity=severity,
        )

    @property
    def is_error(self) -> bool:
        return self.severity == IssueSeverity.ERROR

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "code": self.code,
            "standard": self.standard,
            "severity": self.severity.value,
            "message": self.message,
        }


@dataclass
class ValidationReport:
    """All issues found for one standard."""

    standard: str
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.is_error]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if not i.is_error]

    @property
    def ok(self) -> bool:
        return not self.errors

    def kinds(self) -> set[str]:
        return {i.kind for i in self.issues}

    def extend(self, issues: list[ValidationIssue]) -> None:
        self.issues.extend(issues)

    def to_dict(self) -> dict[str, Any]:
        return {
            "standard": self.standard,
            "ok": self.ok,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "issues": [i.to_dict() for i in self.issues],
        }
