"""
Standard catalog: one named, versioned symbol specification.

A ``Standard`` composes a :class:`ColorRegistry` and a
:class:`SymbolRegistry` and owns their lifecycle.

Manifesto:
    A standard is authored as a draft, validated as a whole, and then
    published as an immutable value that renderers, translation tools and
    migration tooling can share without coordination.

    - **Batch validation:** ``finalize()`` reports every problem at once
    - **Explicit lifecycle:** Transitions are checked against a table
    - **No silent mutation:** A published standard changes only by producing
      a revision (``revise()``)

State machine::

    DRAFT      → FINALIZED (finalize, when no ERROR issue)
    FINALIZED  → PUBLISHED | DRAFT (reopen)
    PUBLISHED  → (terminal; revise() creates a new DRAFT standard)

Examples:
    >>> std = Standard("ISOM 2017-2")
    >>> _ = std.add_color(0, "Purple for course overprint")
    >>> _ = std.add_symbol("101", "Contour")
    >>> std.finalize().is_ok()
    True
    >>> std.publish()
    >>> std.state
    <StandardState.PUBLISHED: 'published'>

Tags:
    standard, catalog, lifecycle, state-machine, symbol-catalog

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from symcat.core.errors import CatalogStateError, InvalidTransitionError, StandardValidationError
from symcat.core.logging import LogContext, get_logger
from symcat.core.result import Err, Ok, Result
from symcat.core.settings import CatalogSettings, get_settings

from .codes import CodeLike
from .colors import Color, ColorRegistry
from .symbols import GeometryClass, Symbol, SymbolRegistry
from .validation import ValidationReport

logger = get_logger(__name__)


class StandardState(str, Enum):
    DRAFT = "draft"
    FINALIZED = "finalized"
    PUBLISHED = "published"


VALID_TRANSITIONS: dict[StandardState, frozenset[StandardState]] = {
    StandardState.DRAFT: frozenset({StandardState.FINALIZED}),
    StandardState.FINALIZED: frozenset({StandardState.PUBLISHED, StandardState.DRAFT}),
    StandardState.PUBLISHED: frozenset(),  # terminal
}


def validate_transition(current: StandardState, target: StandardState, *, standard: str | None = None) -> None:
    """Raise :class:`InvalidTransitionError` if *current → target* is illegal."""
    if target not in VALID_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(current.value, target.value, standard=standard)


class Standard:
    """
    A named symbol standard (e.g. "ISOM 2017-2").

    Args:
        name: Unique standard name
        description: Free text shown in reports
        base: Published or finalized standard this one revises
        settings: Catalog settings (defaults to ``get_settings()``)
    """

    def __init__(
        self,
        name: str,
        *,
        description: str = "",
        base: Standard | None = None,
        settings: CatalogSettings | None = None,
    ):
        if not name or not name.strip():
            raise CatalogStateError("Standard name must not be empty")
        settings = settings or get_settings()
        self.settings = settings
        self.name = name
        self.description = description
        self.based_on = base.name if base is not None else None
        self.state = StandardState.DRAFT
        self.report: ValidationReport | None = None

        last_inherited = None
        if base is not None and len(base.colors):
            last_inherited = max(c.ordinal for c in base.colors)
        self.colors = ColorRegistry(name, append_after=last_inherited)
        self.symbols = SymbolRegistry(
            name,
            migration_suffix=settings.migration_suffix,
            notice_patterns=list(settings.migration_notice_patterns),
            strict_migration_notice=settings.strict_migration_notice,
        )
        if base is not None:
            for color in base.colors:
                self.colors._inherit(color)
            for symbol in base.symbols:
                self.symbols._inherit(symbol)

    # ── Authoring ────────────────────────────────────────────────

    def _require_draft(self) -> None:
        if self.state != StandardState.DRAFT:
            raise CatalogStateError(
                f"Standard {self.name!r} is {self.state.value}; only drafts can be modified"
            ).with_context(standard=self.name)

    def add_color(self, ordinal: int | str, name: str) -> Color:
        self._require_draft()
        return self.colors.add(ordinal, name)

    def add_symbol(
        self,
        code: CodeLike,
        name: str,
        description: str = "",
        *,
        geometry: GeometryClass | str | None = None,
        allow_new_family: bool = False,
    ) -> Symbol:
        self._require_draft()
        return self.symbols.add(
            code, name, description, geometry=geometry, allow_new_family=allow_new_family
        )

    def replace_symbol(
        self,
        code: CodeLike,
        name: str,
        description: str = "",
        *,
        geometry: GeometryClass | str | None = None,
        allow_new_family: bool = False,
    ) -> Symbol:
        self._require_draft()
        return self.symbols.replace(
            code, name, description, geometry=geometry, allow_new_family=allow_new_family
        )

    def remove_symbol(self, code: CodeLike) -> Symbol:
        self._require_draft()
        return self.symbols.remove(code)

    def replace_color(self, ordinal: int | str, name: str) -> Color:
        self._require_draft()
        return self.colors.replace(ordinal, name)

    def remove_color(self, ordinal: int | str) -> Color:
        self._require_draft()
        return self.colors.remove(ordinal)

    # ── Lookup ───────────────────────────────────────────────────

    def symbol(self, code: CodeLike) -> Symbol:
        return self.symbols.lookup(code)

    def color(self, ordinal: int | str) -> Color:
        return self.colors.lookup(ordinal)

    @property
    def is_draft(self) -> bool:
        return self.state == StandardState.DRAFT

    @property
    def is_finalized(self) -> bool:
        """True for FINALIZED and PUBLISHED standards."""
        return self.state in (StandardState.FINALIZED, StandardState.PUBLISHED)

    @property
    def is_published(self) -> bool:
        return self.state == StandardState.PUBLISHED

    # ── Lifecycle ────────────────────────────────────────────────

    def validate(self) -> ValidationReport:
        """Run every registry check without changing state."""
        report = ValidationReport(self.name)
        report.extend(self.colors.validate())
        report.extend(self.symbols.validate())
        return report

    def finalize(self) -> Result[ValidationReport]:
        """
        Validate the whole standard and, if it has no errors, freeze it.

        Returns ``Ok(report)`` (warnings may be present) or
        ``Err(StandardValidationError)`` carrying the full report. A standard
        that is already finalized or published returns its last report.
        """
        if self.is_finalized and self.report is not None:
            return Ok(self.report)

        with LogContext(standard=self.name):
            report = self.validate()
            self.report = report
            if not report.ok:
                logger.warning(
                    "standard_validation_failed",
                    errors=len(report.errors),
                    warnings=len(report.warnings),
                )
                return Err(StandardValidationError(report))

            validate_transition(self.state, StandardState.FINALIZED, standard=self.name)
            self.state = StandardState.FINALIZED
            self.colors.freeze()
            self.symbols.freeze()
            logger.info(
                "standard_finalized",
                colors=len(self.colors),
                symbols=len(self.symbols),
                warnings=len(report.warnings),
            )
        return Ok(report)

    def publish(self) -> None:
        validate_transition(self.state, StandardState.PUBLISHED, standard=self.name)
        self.state = StandardState.PUBLISHED
        logger.info("standard_published", standard=self.name)

    def reopen(self) -> None:
        """Return a finalized (not yet published) standard to draft."""
        validate_transition(self.state, StandardState.DRAFT, standard=self.name)
        self.state = StandardState.DRAFT
        self.colors._thaw()
        self.symbols._thaw()
        self.report = None
        logger.info("standard_reopened", standard=self.name)

    def revise(self, new_name: str, *, description: str = "") -> Standard:
        """Start a draft revision (e.g. "ISOM 2017-2" from "ISOM 2017")."""
        if not self.is_finalized:
            raise CatalogStateError(
                f"Only finalized or published standards can be revised, {self.name!r} is {self.state.value}"
            ).with_context(standard=self.name)
        if new_name == self.name:
            raise CatalogStateError("A revision needs a new name").with_context(standard=self.name)
        revision = Standard(new_name, description=description, base=self, settings=self.settings)
        logger.info("standard_revised", standard=new_name, based_on=self.name)
        return revision

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "state": self.state.value,
            "based_on": self.based_on,
            "colors": [c.to_dict() for c in self.colors],
            "symbols": [s.to_dict() for s in self.symbols],
        }

    def __repr__(self) -> str:
        return (
            f"Standard({self.name!r}, state={self.state.value}, "
            f"colors={len(self.colors)}, symbols={len(self.symbols)})"
        )
