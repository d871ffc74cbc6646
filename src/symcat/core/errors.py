"""
Structured error types for the symbol catalog.

Every failure the catalog can report is a typed ``CatalogError`` carrying a
stable ``kind`` string, a category, and structured context (standard, code,
entry kind, locale). Tools built on the catalog surface these as data
(kind + code + message) rather than as opaque strings.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure kind
    - **Stable kinds:** ``kind`` is the machine-readable name used in reports
    - **Rich Context:** Errors carry the standard and code they concern
    - **Error Chaining:** Preserve original exceptions while adding context

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                       CatalogError                               │
        │              (kind, category, context, cause)                    │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  IdentifierError    RegistryError        LocalizationError      │
        │  (IDENTIFIER)       (REGISTRY)           (LOCALIZATION)         │
        │       │                  │                     │                 │
        │  MalformedCode      DuplicateOrdinal     StaleTranslationKey    │
        │                     DuplicateCode        ImportFormat           │
        │                     OrphanVariant                               │
        │                     ColorNotFound        MigrationError         │
        │                     SymbolNotFound       (MIGRATION)            │
        │                     ColorOrder                 │                 │
        │                     MissingMigrationNotice UnknownTarget        │
        │                                          ChainedDeprecation     │
        │  CatalogStateError  StandardNotFound     DuplicateLink          │
        │  (LIFECYCLE)        DuplicateStandard                           │
        │                     StandardValidation                          │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> err = DuplicateOrdinalError(2, standard="ISOM 2017-2")
    >>> err.kind
    'DuplicateOrdinal'
    >>> err.to_dict()["context"]["standard"]
    'ISOM 2017-2'

Tags:
    error-handling, exception-hierarchy, error-context, symbol-catalog

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from symcat.catalog.validation import ValidationReport


class ErrorCategory(str, Enum):
    """
    Error categories for classification and routing.

    Categories follow the component boundaries of the catalog, so a batch
    report can be grouped by the layer that rejected an entry.

    Examples:
        >>> ErrorCategory.REGISTRY.value
        'REGISTRY'

    Tags:
        error-category, enum, classification, symbol-catalog
    """

    IDENTIFIER = "IDENTIFIER"
    REGISTRY = "REGISTRY"
    CATALOG = "CATALOG"
    LIFECYCLE = "LIFECYCLE"
    LOCALIZATION = "LOCALIZATION"
    MIGRATION = "MIGRATION"
    IMPORT = "IMPORT"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured context attached to a catalog error.

    Attributes:
        standard: Name of the standard concerned (e.g. "ISOM 2017-2")
        code: Symbol code or color ordinal as canonical text
        entry_kind: Localization entry kind label, if relevant
        locale: Target locale, if relevant
        metadata: Additional key-value pairs
    """

    standard: str | None = None
    code: str | None = None
    entry_kind: str | None = None
    locale: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["standard", "code", "entry_kind", "locale"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class CatalogError(Exception):
    """
    Base exception for all symbol catalog errors.

    Subclasses set ``kind`` (the stable, report-facing name of the failure)
    and ``default_category``. Context is optional and can be added fluently
    with ``with_context()``.

    Examples:
        >>> error = CatalogError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(standard="ISOM2000").context.standard
        'ISOM2000'

    Tags:
        exception, error-hierarchy, error-context, symbol-catalog, base-class
    """

    kind: str = "CatalogError"
    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> CatalogError:
        """
        Add context to this error (fluent API).

        Usage:
            raise SymbolNotFoundError("104").with_context(standard="ISOM2000")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "kind": self.kind,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, kind={self.kind})"


def _ctx(standard: str | None = None, code: Any = None, **metadata: Any) -> ErrorContext:
    return ErrorContext(
        standard=standard,
        code=str(code) if code is not None else None,
        metadata=metadata,
    )


# =============================================================================
# IDENTIFIER ERRORS
# =============================================================================


class MalformedCodeError(CatalogError):
    """Code string does not match the numeric-dot grammar."""

    kind = "MalformedCode"
    default_category = ErrorCategory.IDENTIFIER

    def __init__(self, code: Any, message: str | None = None, *, standard: str | None = None):
        self.code = code
        super().__init__(
            message or f"Malformed symbol code: {code!r}",
            context=_ctx(standard, code),
        )


# =============================================================================
# REGISTRY ERRORS
# =============================================================================


class RegistryError(CatalogError):
    """Uniqueness or structural violation inside one standard."""

    kind = "RegistryError"
    default_category = ErrorCategory.REGISTRY


class DuplicateOrdinalError(RegistryError):
    kind = "DuplicateOrdinal"

    def __init__(self, ordinal: int, *, standard: str | None = None, existing: str | None = None):
        self.ordinal = ordinal
        detail = f" (already used by {existing!r})" if existing else ""
        super().__init__(
            f"Color ordinal {ordinal} is already used{detail}",
            context=_ctx(standard, ordinal),
        )


class DuplicateCodeError(RegistryError):
    kind = "DuplicateCode"

    def __init__(self, code: Any, *, standard: str | None = None, message: str | None = None):
        self.code = code
        super().__init__(
            message or f"Symbol code {code} is already defined",
            context=_ctx(standard, code),
        )


class OrphanVariantError(RegistryError):
    kind = "OrphanVariant"

    def __init__(self, code: Any, parent: Any, *, standard: str | None = None):
        self.code = code
        self.parent = parent
        super().__init__(
            f"Variant {code} has no parent symbol {parent}",
            context=_ctx(standard, code, parent=str(parent)),
        )


class ColorNotFoundError(RegistryError):
    kind = "ColorNotFound"

    def __init__(self, ordinal: int, *, standard: str | None = None):
        self.ordinal = ordinal
        super().__init__(f"No color with ordinal {ordinal}", context=_ctx(standard, ordinal))


class SymbolNotFoundError(RegistryError):
    kind = "SymbolNotFound"

    def __init__(self, code: Any, *, standard: str | None = None, message: str | None = None):
        self.code = code
        where = f" in {standard}" if standard else ""
        super().__init__(message or f"No symbol {code}{where}", context=_ctx(standard, code))


class ColorOrderError(RegistryError):
    """A revision tried to insert a color before inherited print slots."""

    kind = "ColorOrder"

    def __init__(self, ordinal: int, last_inherited: int, *, standard: str | None = None):
        self.ordinal = ordinal
        super().__init__(
            f"Color ordinal {ordinal} would reorder inherited colors (new colors must follow {last_inherited})",
            context=_ctx(standard, ordinal, last_inherited=last_inherited),
        )


class MissingMigrationNoticeError(RegistryError):
    kind = "MissingMigrationNotice"

    def __init__(self, code: Any, *, standard: str | None = None):
        self.code = code
        super().__init__(
            f"Symbol {code} uses the migration suffix but its description does not mark it as deprecated",
            context=_ctx(standard, code),
        )


# =============================================================================
# CATALOG / LIFECYCLE ERRORS
# =============================================================================


class CatalogStateError(CatalogError):
    """Mutation attempted on a standard that is no longer a draft."""

    kind = "CatalogState"
    default_category = ErrorCategory.LIFECYCLE


class InvalidTransitionError(CatalogStateError):
    """Raised when an illegal lifecycle transition is attempted."""

    kind = "InvalidTransition"

    def __init__(self, current: str, target: str, *, standard: str | None = None) -> None:
        self.current = current
        self.target = target
        super().__init__(
            f"Invalid StandardState transition: {current} → {target}",
            context=_ctx(standard),
        )


class StandardNotFoundError(CatalogError):
    kind = "StandardNotFound"
    default_category = ErrorCategory.CATALOG

    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        hint = f". Available: {', '.join(available)}" if available else ""
        super().__init__(f"Standard {name!r} not found{hint}", context=_ctx(name))


class DuplicateStandardError(CatalogError):
    kind = "DuplicateStandard"
    default_category = ErrorCategory.CATALOG

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Standard {name!r} is already registered", context=_ctx(name))


class StandardValidationError(CatalogError):
    """Aggregated result of a failed ``finalize()``."""

    kind = "StandardValidation"
    default_category = ErrorCategory.CATALOG

    def __init__(self, report: ValidationReport):
        self.report = report
        errors = report.errors
        super().__init__(
            f"Standard {report.standard!r} failed validation with {len(errors)} error(s)",
            context=_ctx(report.standard, error_count=len(errors)),
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["issues"] = [issue.to_dict() for issue in self.report.issues]
        return result


class LibraryValidationError(CatalogError):
    """One or more standards of a library failed ``finalize()``.

    ``reports`` maps each failing standard to its full validation report.
    """

    kind = "LibraryValidation"
    default_category = ErrorCategory.CATALOG

    def __init__(self, reports: dict[str, ValidationReport]):
        self.reports = reports
        super().__init__(
            f"{len(reports)} standard(s) failed validation: {', '.join(reports)}",
            context=_ctx(error_count=sum(len(r.errors) for r in reports.values())),
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["standards"] = {name: report.to_dict() for name, report in self.reports.items()}
        return result


# =============================================================================
# LOCALIZATION ERRORS
# =============================================================================


class LocalizationError(CatalogError):
    kind = "LocalizationError"
    default_category = ErrorCategory.LOCALIZATION


class StaleTranslationKeyError(LocalizationError):
    """A translation references a key with no matching current source unit."""

    kind = "StaleTranslationKey"

    def __init__(
        self,
        standard: str,
        entry_kind: str,
        code: Any,
        message: str | None = None,
    ):
        self.standard = standard
        self.entry_kind = entry_kind
        self.code = code
        super().__init__(
            message or f"No current source unit for {standard} / {entry_kind} {code}",
            context=ErrorContext(standard=standard, code=str(code), entry_kind=entry_kind),
        )


class ImportFormatError(LocalizationError):
    """A translation document (or one of its entries) cannot be understood."""

    kind = "ImportFormat"
    default_category = ErrorCategory.IMPORT


# =============================================================================
# MIGRATION ERRORS
# =============================================================================


class MigrationError(CatalogError):
    kind = "MigrationError"
    default_category = ErrorCategory.MIGRATION


class UnknownTargetError(MigrationError):
    kind = "UnknownTarget"

    def __init__(self, standard: str, code: Any, reason: str | None = None):
        self.standard = standard
        self.code = code
        super().__init__(
            f"Migration target {code} is not available in {standard}" + (f": {reason}" if reason else ""),
            context=_ctx(standard, code),
        )


class ChainedDeprecationError(MigrationError):
    kind = "ChainedDeprecation"

    def __init__(self, standard: str, code: Any, reason: str):
        self.standard = standard
        self.code = code
        super().__init__(
            f"Cannot chain migration through {standard} {code}: {reason}",
            context=_ctx(standard, code),
        )


class DuplicateLinkError(MigrationError):
    kind = "DuplicateLink"

    def __init__(self, standard: str, code: Any, existing: str):
        self.standard = standard
        self.code = code
        super().__init__(
            f"{standard} {code} is already linked to {existing}",
            context=_ctx(standard, code, existing=existing),
        )


# =============================================================================
# CONFIG ERRORS
# =============================================================================


class ConfigError(CatalogError):
    kind = "Config"
    default_category = ErrorCategory.CONFIG


# =============================================================================
# UTILITIES
# =============================================================================


def error_kind(error: Exception) -> str:
    """Report-facing kind of any exception."""
    if isinstance(error, CatalogError):
        return error.kind
    return error.__class__.__name__
