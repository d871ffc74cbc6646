"""Library of standards: explicit registration and lookup by name.

Manifesto:
    Tools that work on more than one standard (migration resolution,
    coverage dashboards, exports) look standards up through a library
    object they were handed, never through process-wide state.

Tags:
    symbol-catalog, registry, standard-lookup

Doc-Types:
    api-reference
"""

from __future__ import annotations

import threading
from collections.abc import Iterator

from symcat.core.errors import (
    DuplicateStandardError,
    LibraryValidationError,
    StandardNotFoundError,
)
from symcat.core.logging import get_logger
from symcat.core.result import Err, Ok, Result

from .standard import Standard
from .validation import ValidationReport

logger = get_logger(__name__)


class StandardLibrary:
    """Catalog of catalogs."""

    def __init__(self, standards: list[Standard] | None = None):
        self._standards: dict[str, Standard] = {}
        self._lock = threading.Lock()
        for standard in standards or []:
            self.register(standard)

    def register(self, standard: Standard, *, replace: bool = False) -> Standard:
        with self._lock:
            existing = self._standards.get(standard.name)
            if existing is not None and not replace:
                raise DuplicateStandardError(standard.name)
            if existing is not None and existing.is_published:
                # published standards are never swapped out from under readers
                raise DuplicateStandardError(standard.name)
            self._standards[standard.name] = standard
        logger.debug("standard_registered", standard=standard.name, state=standard.state.value)
        return standard

    def get(self, name: str) -> Standard:
        try:
            return self._standards[name]
        except KeyError:
            raise StandardNotFoundError(name, available=self.names()) from None

    def find(self, name: str) -> Standard | None:
        return self._standards.get(name)

    def names(self) -> list[str]:
        return list(self._standards)

    def published(self) -> list[Standard]:
        return [s for s in self._standards.values() if s.is_published]

    def finalize_all(self) -> Result[list[ValidationReport]]:
        """
        Finalize every draft.

        Returns ``Ok`` with one report per standard, or ``Err`` with a
        :class:`LibraryValidationError` holding the report of every standard
        that failed. Standards that pass are finalized either way.
        """
        reports: list[ValidationReport] = []
        failed: dict[str, ValidationReport] = {}
        for standard in self:
            result = standard.finalize()
            if result.is_ok():
                reports.append(result.unwrap())
            else:
                failed[standard.name] = result.error.report
        if failed:
            logger.warning("library_validation_failed", standards=list(failed))
            return Err(LibraryValidationError(failed))
        return Ok(reports)

    def __contains__(self, name: object) -> bool:
        return name in self._standards

    def __iter__(self) -> Iterator[Standard]:
        return iter(list(self._standards.values()))

    def __len__(self) -> int:
        return len(self._standards)
