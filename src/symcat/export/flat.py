"""
Renderer-facing flat export: one record per color and symbol.

A renderer needs display strings in the user's language, resolved once,
without knowing about translation history. Each record carries the
locale-selected name (and description) with the canonical text as fallback,
plus the structural facts the catalog derived from codes and descriptions.

A translation is used only when the current unit of the key still has the
standard's canonical wording and is translated for the locale; anything
else falls back to the canonical text.

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from symcat.catalog.codes import SymbolCode
from symcat.catalog.migration import MigrationResolver
from symcat.catalog.standard import Standard
from symcat.l10n.store import LocalizationStore
from symcat.l10n.units import EntryKind, UnitState


class DimensionRecord(BaseModel):
    quantity: str
    value: float
    unit: str


class ColorRecord(BaseModel):
    """A print color in ordinal (print) order."""

    ordinal: int = Field(description="Print-separation slot; lower prints first")
    name: str = Field(description="Locale-selected display name")
    canonical_name: str = Field(description="Source-language name")
    translated: bool = Field(default=False, description="True if ``name`` is a translation")
    tint_base: str | None = Field(default=None, description="Base ink, e.g. 'Brown' for 'Brown 50%'")
    tint_percentage: float | None = Field(default=None)


class SymbolRecord(BaseModel):
    """A symbol with resolved display strings and derived structure."""

    code: str = Field(description="Canonical dotted code, e.g. '104.1'")
    segments: list[int]
    parent: str | None = Field(default=None, description="Resolved parent code")
    family: str = Field(description="Top-level family code")
    name: str = Field(description="Locale-selected display name")
    description: str = Field(default="", description="Locale-selected description")
    canonical_name: str
    translated: bool = False
    variant_kind: str
    geometry: str
    deprecated: bool = False
    replacement: str | None = Field(
        default=None, description="Recommended symbol ('<standard> <code>') for deprecated symbols"
    )
    dimensions: list[DimensionRecord] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)


class FlatStandard(BaseModel):
    standard: str
    state: str
    locale: str | None = None
    based_on: str | None = None
    colors: list[ColorRecord] = Field(default_factory=list)
    symbols: list[SymbolRecord] = Field(default_factory=list)


def _localized(
    store: LocalizationStore | None,
    locale: str | None,
    standard: str,
    kind: EntryKind,
    code: SymbolCode,
    canonical: str,
) -> tuple[str, bool]:
    if store is None or locale is None:
        return canonical, False
    unit = store.current(standard, kind, code)
    if unit is None or unit.source != canonical or unit.state(locale) != UnitState.TRANSLATED:
        return canonical, False
    return unit.translation(locale) or canonical, True


def flatten_standard(
    standard: Standard,
    store: LocalizationStore | None = None,
    locale: str | None = None,
    *,
    resolver: MigrationResolver | None = None,
) -> FlatStandard:
    """Flatten a standard for renderers, with locale-selected strings."""
    flat = FlatStandard(
        standard=standard.name,
        state=standard.state.value,
        locale=locale,
        based_on=standard.based_on,
    )

    for color in standard.colors:
        name, translated = _localized(
            store, locale, standard.name, EntryKind.COLOR, SymbolCode((color.ordinal,)), color.name
        )
        flat.colors.append(
            ColorRecord(
                ordinal=color.ordinal,
                name=name,
                canonical_name=color.name,
                translated=translated,
                tint_base=color.tint.base if color.tint else None,
                tint_percentage=color.tint.percentage if color.tint else None,
            )
        )

    for symbol in standard.symbols:
        name, name_translated = _localized(
            store, locale, standard.name, EntryKind.SYMBOL_NAME, symbol.code, symbol.name
        )
        description, _ = _localized(
            store, locale, standard.name, EntryKind.SYMBOL_DESCRIPTION, symbol.code, symbol.description
        )
        replacement = None
        if resolver is not None:
            target = resolver.resolve(standard.name, symbol.code)
            if target.code != symbol.code or target.standard != standard.name:
                replacement = str(target)
        flat.symbols.append(
            SymbolRecord(
                code=str(symbol.code),
                segments=list(symbol.code.segments),
                parent=str(symbol.parent_code) if symbol.parent_code else None,
                family=str(symbol.code.base),
                name=name,
                description=description,
                canonical_name=symbol.name,
                translated=name_translated,
                variant_kind=symbol.variant_kind.value,
                geometry=symbol.geometry.value,
                deprecated=symbol.is_migration,
                replacement=replacement,
                dimensions=[
                    DimensionRecord(quantity=d.quantity, value=d.value, unit=d.unit)
                    for d in symbol.dimensions
                ],
                references=[str(r) for r in symbol.references],
            )
        )
    return flat
