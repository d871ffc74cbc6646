"""
Quarantine for entries rejected during an import.

Localization imports are per-unit and non-fatal: an entry that cannot be
understood (bad comment, malformed code, stale key) is recorded here with
its reason and raw data while the rest of the document loads.

Manifesto:
    Every quarantined entry should answer:
    - **Where?** stage (PARSE, IMPORT, MERGE, BUILD)
    - **Why?** reason_code (an error kind) + reason_detail
    - **What?** raw_data for reproduction
    - **Source?** source_locator + position for tracing

    The reason_code enables aggregation ("how many StaleTranslationKey?")
    while reason_detail provides the specific explanation.

Guardrails:
    - Entries are never dropped; the sink only grows
    - raw_data is kept as plain dicts so reports serialize to JSON

Tags:
    quarantine, validation, audit-trail, import, symbol-catalog

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass
from typing import Any

from .errors import error_kind
from .logging import get_logger

logger = get_logger(__name__)


@dataclass
class QuarantinedUnit:
    """
    An import entry that was set aside, with classification and debugging info.

    Attributes:
        stage: Where it was rejected (PARSE, IMPORT, MERGE, BUILD).
        reason_code: Error kind (MalformedCode, StaleTranslationKey, ...).
        reason_detail: Human-readable explanation.
        raw_data: Original entry fields.
        source_locator: File path or document name.
        position: Context name and message index inside the document.

    Examples:
        >>> entry = QuarantinedUnit(
        ...     stage="IMPORT",
        ...     reason_code="MalformedCode",
        ...     reason_detail="Malformed symbol code: '10x'",
        ...     raw_data={"comment": "Name of symbol 10x"},
        ... )
        >>> entry.reason_code
        'MalformedCode'
    """

    stage: str
    reason_code: str
    reason_detail: str
    raw_data: Any = None
    source_locator: str | None = None
    position: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class Quarantine:
    """
    In-memory sink for quarantined import entries.

    Examples:
        >>> q = Quarantine(source_locator="map_symbols_es.ts")
        >>> q.reject("IMPORT", ValueError("boom"), raw_data={"source": "x"})
        >>> q.count
        1
    """

    def __init__(self, source_locator: str | None = None):
        self.source_locator = source_locator
        self._entries: list[QuarantinedUnit] = []

    @property
    def count(self) -> int:
        """Number of quarantined entries."""
        return len(self._entries)

    @property
    def entries(self) -> list[QuarantinedUnit]:
        return list(self._entries)

    def write(self, entry: QuarantinedUnit) -> None:
        """Record a single entry."""
        if entry.source_locator is None:
            entry.source_locator = self.source_locator
        self._entries.append(entry)
        logger.warning(
            "import_entry_quarantined",
            stage=entry.stage,
            reason=entry.reason_code,
            detail=entry.reason_detail,
            position=entry.position,
        )

    def write_batch(self, entries: list[QuarantinedUnit]) -> int:
        """
        Record multiple entries.

        Returns:
            Count of entries written
        """
        for entry in entries:
            self.write(entry)
        return len(entries)

    def reject(
        self,
        stage: str,
        error: Exception,
        *,
        raw_data: Any = None,
        position: str | None = None,
    ) -> None:
        """Record an entry from the exception that rejected it."""
        self.write(
            QuarantinedUnit(
                stage=stage,
                reason_code=error_kind(error),
                reason_detail=str(error),
                raw_data=raw_data,
                position=position,
            )
        )

    def by_reason(self) -> dict[str, int]:
        """Count entries per reason code."""
        return dict(Counter(entry.reason_code for entry in self._entries))

    def __iter__(self):
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
