"""
Translatable units: the atomic localizable facts of a standard.

A unit is keyed by ``(standard, kind, code, source text)``. The literal
source text is part of the key: when the canonical wording of a symbol
changes, the old unit is kept as obsolete history and a new, unfinished unit
takes its place.

Examples:
    >>> unit = TranslatableUnit("ISOM 2017-2", EntryKind.SYMBOL_NAME, parse("104"), "Earth bank")
    >>> unit.state("es")
    <UnitState.UNFINISHED: 'unfinished'>
    >>> unit.translations["es"] = Translation("Terraplén")
    >>> unit.state("es")
    <UnitState.TRANSLATED: 'translated'>

Tags:
    localization, translation-units, symbol-catalog
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from symcat.catalog.codes import SymbolCode
from symcat.core.errors import LocalizationError
from symcat.core.hashing import compute_hash


class EntryKind(str, Enum):
    """What a unit translates. Values are the labels used in ``.ts`` comments."""

    COLOR = "Color"
    SYMBOL_NAME = "Name of symbol"
    SYMBOL_DESCRIPTION = "Description of symbol"

    @classmethod
    def coerce(cls, value: EntryKind | str) -> EntryKind:
        """Accept the enum, its comment label or its member name."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for kind in cls:
            if text == kind.value or text.upper() == kind.name:
                return kind
        raise LocalizationError(f"Unknown entry kind {value!r}").with_context(entry_kind=text)


class UnitState(str, Enum):
    TRANSLATED = "translated"
    UNFINISHED = "unfinished"
    OBSOLETE = "obsolete"


@dataclass
class Translation:
    text: str
    finished: bool = True


@dataclass
class TranslatableUnit:
    standard: str
    kind: EntryKind
    code: SymbolCode
    source: str
    obsolete: bool = False
    translations: dict[str, Translation] = field(default_factory=dict)

    @property
    def key(self) -> tuple[str, EntryKind, SymbolCode]:
        return (self.standard, self.kind, self.code)

    @property
    def unit_id(self) -> str:
        return compute_hash(self.standard, self.kind.value, str(self.code), self.source)

    @property
    def comment(self) -> str:
        """The disambiguation comment written to ``.ts`` files."""
        return f"{self.kind.value} {self.code}"

    def state(self, locale: str) -> UnitState:
        if self.obsolete:
            return UnitState.OBSOLETE
        translation = self.translations.get(locale)
        if translation is not None and translation.finished and translation.text:
            return UnitState.TRANSLATED
        return UnitState.UNFINISHED

    def translation(self, locale: str) -> str | None:
        """Translated text for a locale, finished or not."""
        translation = self.translations.get(locale)
        return translation.text if translation is not None and translation.text else None

    def to_dict(self, locale: str | None = None) -> dict[str, Any]:
        data: dict[str, Any] = {
            "unit_id": self.unit_id,
            "standard": self.standard,
            "kind": self.kind.value,
            "code": str(self.code),
            "source": self.source,
            "obsolete": self.obsolete,
        }
        if locale is not None:
            data["locale"] = locale
            data["state"] = self.state(locale).value
            data["translation"] = self.translation(locale)
        return data
