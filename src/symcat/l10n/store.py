"""
Localization store: translatable units of many standards, with history.

Manifesto:
    Source wording of a symbol set is refined over years (numbers and
    footprints edited, sentences reworded). Translators must see which
    translations are stale, and auditors must be able to trace every
    wording a symbol ever had. The store therefore never deletes a unit:

    - **Literal keys:** A unit is identified by its exact source text
    - **One current unit per key:** Every other unit of a
      ``(standard, kind, code)`` key is obsolete
    - **No cross-standard sharing:** Identical texts in two standards are
      two units; retranslating one never touches the other
    - **Atomic per standard:** Mutations of one standard hold that
      standard's lock; different standards never contend

Architecture:
    ::

        record_source(S, "Name of symbol", 104, "Earth bank")
            → unit#1 (unfinished)
        record_source(S, "Name of symbol", 104, "Earth bank (revised)")
            → unit#1 obsolete, unit#2 (unfinished)
        set_translation(S, "Name of symbol", 104, "es", "Terraplén revisado")
            → unit#2 translated for "es"

        history(S, "Name of symbol", 104) == [unit#1, unit#2]

Tags:
    localization, translation-memory, history, symbol-catalog

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import threading
from typing import Any

from symcat.catalog.codes import CodeLike, SymbolCode, parse
from symcat.core.errors import (
    CatalogError,
    DuplicateCodeError,
    DuplicateOrdinalError,
    StaleTranslationKeyError,
)
from symcat.core.logging import get_logger

from .units import EntryKind, TranslatableUnit, Translation, UnitState

logger = get_logger(__name__)

_Key = tuple[EntryKind, SymbolCode]


def _duplicate(
    standard: str, kind: EntryKind, code: SymbolCode, existing: TranslatableUnit, detail: str
) -> CatalogError:
    if kind == EntryKind.COLOR and len(code.segments) == 1:
        return DuplicateOrdinalError(code.segments[0], standard=standard, existing=existing.source)
    return DuplicateCodeError(
        code, standard=standard, message=f"{kind.value} {code} {detail}"
    ).with_context(entry_kind=kind.value)


class LocalizationStore:
    """Holds translatable units and their history, per standard."""

    def __init__(self) -> None:
        self._units: dict[str, dict[_Key, list[TranslatableUnit]]] = {}
        self._locks: dict[str, threading.RLock] = {}
        self._guard = threading.Lock()

    def _lock(self, standard: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(standard)
            if lock is None:
                lock = self._locks[standard] = threading.RLock()
            return lock

    def _bucket(self, standard: str, kind: EntryKind, code: SymbolCode) -> list[TranslatableUnit]:
        return self._units.setdefault(standard, {}).setdefault((kind, code), [])

    # ── Source side ──────────────────────────────────────────────

    def record_source(
        self,
        standard: str,
        kind: EntryKind | str,
        code: CodeLike,
        text: str,
    ) -> TranslatableUnit:
        """
        Record the current canonical text for a key.

        Same text as the current unit: no-op. Different text: the current
        unit becomes obsolete and an unfinished unit is created, unless an
        obsolete unit with exactly this text exists, in which case that unit
        (with its translations) becomes current again.
        """
        kind = EntryKind.coerce(kind)
        parsed = parse(code)
        with self._lock(standard):
            units = self._bucket(standard, kind, parsed)
            current = next((u for u in units if not u.obsolete), None)
            if current is not None and current.source == text:
                return current
            if current is not None:
                current.obsolete = True
                logger.info(
                    "unit_obsoleted",
                    standard=standard,
                    kind=kind.value,
                    code=str(parsed),
                    unit_id=current.unit_id,
                )
            revived = next((u for u in units if u.source == text), None)
            if revived is not None:
                revived.obsolete = False
                logger.info("unit_revived", standard=standard, kind=kind.value, code=str(parsed))
                return revived
            unit = TranslatableUnit(standard=standard, kind=kind, code=parsed, source=text)
            units.append(unit)
            logger.debug("unit_recorded", standard=standard, kind=kind.value, code=str(parsed))
            return unit

    def restore(
        self,
        standard: str,
        kind: EntryKind | str,
        code: CodeLike,
        text: str,
        *,
        obsolete: bool = False,
        translations: dict[str, Translation] | None = None,
    ) -> TranslatableUnit:
        """
        Add a unit exactly as serialized (used by importers).

        Raises:
            DuplicateCodeError: the unit already exists, or a second current
                unit would be created for the key
            DuplicateOrdinalError: the same, for a ``Color`` entry
        """
        kind = EntryKind.coerce(kind)
        parsed = parse(code)
        with self._lock(standard):
            units = self._bucket(standard, kind, parsed)
            same = next((u for u in units if u.source == text), None)
            if same is not None:
                raise _duplicate(standard, kind, parsed, same, "with this source text is already present")
            current = None if obsolete else next((u for u in units if not u.obsolete), None)
            if current is not None:
                raise _duplicate(standard, kind, parsed, current, "already has a current source text")
            unit = TranslatableUnit(
                standard=standard,
                kind=kind,
                code=parsed,
                source=text,
                obsolete=obsolete,
                translations=dict(translations or {}),
            )
            units.append(unit)
            return unit

    def retire(self, standard: str, kind: EntryKind | str, code: CodeLike) -> TranslatableUnit | None:
        """Mark the current unit obsolete because its source entry was deleted."""
        kind = EntryKind.coerce(kind)
        with self._lock(standard):
            current = self.current(standard, kind, code)
            if current is not None:
                current.obsolete = True
                logger.info("unit_retired", standard=standard, kind=kind.value, code=str(current.code))
            return current

    # ── Translation side ─────────────────────────────────────────

    def set_translation(
        self,
        standard: str,
        kind: EntryKind | str,
        code: CodeLike,
        locale: str,
        text: str,
        *,
        finished: bool = True,
    ) -> TranslatableUnit:
        """
        Translate the current unit of a key.

        Raises:
            StaleTranslationKeyError: no current unit exists for the key
        """
        kind = EntryKind.coerce(kind)
        parsed = parse(code)
        with self._lock(standard):
            current = self.current(standard, kind, parsed)
            if current is None:
                raise StaleTranslationKeyError(standard, kind.value, parsed).with_context(locale=locale)
            current.translations[locale] = Translation(text=text, finished=finished)
        logger.debug(
            "unit_translated",
            standard=standard,
            kind=kind.value,
            code=str(parsed),
            locale=locale,
            finished=finished,
        )
        return current

    # ── Queries ──────────────────────────────────────────────────

    def current(self, standard: str, kind: EntryKind | str, code: CodeLike) -> TranslatableUnit | None:
        kind = EntryKind.coerce(kind)
        units = self._units.get(standard, {}).get((kind, parse(code)), [])
        return next((u for u in units if not u.obsolete), None)

    def history(self, standard: str, kind: EntryKind | str, code: CodeLike) -> list[TranslatableUnit]:
        """Every unit ever recorded for the key, oldest first."""
        kind = EntryKind.coerce(kind)
        return list(self._units.get(standard, {}).get((kind, parse(code)), []))

    def units(self, standard: str | None = None, *, include_obsolete: bool = True) -> list[TranslatableUnit]:
        """Units in insertion order, optionally for one standard only."""
        names = [standard] if standard is not None else list(self._units)
        result = []
        for name in names:
            for bucket in self._units.get(name, {}).values():
                result.extend(u for u in bucket if include_obsolete or not u.obsolete)
        return result

    def standards(self) -> list[str]:
        return list(self._units)

    def locales(self, standard: str | None = None) -> list[str]:
        found = {locale for unit in self.units(standard) for locale in unit.translations}
        return sorted(found)

    def coverage(self, standard: str, locale: str) -> float:
        """
        Share of current units translated for ``locale``.

        A standard without current units is fully covered.
        """
        current = self.units(standard, include_obsolete=False)
        if not current:
            return 1.0
        translated = sum(1 for u in current if u.state(locale) == UnitState.TRANSLATED)
        return translated / len(current)

    def coverage_summary(self, standard: str, locale: str) -> dict[str, Any]:
        counts = {state.value: 0 for state in UnitState}
        for unit in self.units(standard):
            counts[unit.state(locale).value] += 1
        return {
            "standard": standard,
            "locale": locale,
            **counts,
            "coverage": self.coverage(standard, locale),
        }

    def __len__(self) -> int:
        return len(self.units())
