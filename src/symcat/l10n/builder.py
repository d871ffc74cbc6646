"""
Bridges between standards and translatable units.

``record_standard`` pushes the canonical texts of a standard into a
localization store (so translators see every changed wording), and
``build_standard`` goes the other way: a draft standard assembled from the
current units of a ``.ts`` context, which is how the existing translation
files are turned into catalogs.

Tags:
    localization, catalog-builder, import, symbol-catalog
"""

from __future__ import annotations

from dataclasses import dataclass, field

from symcat.catalog.codes import SymbolCode
from symcat.catalog.standard import Standard
from symcat.core.errors import CatalogError
from symcat.core.logging import get_logger
from symcat.core.quarantine import Quarantine
from symcat.core.settings import CatalogSettings

from .store import LocalizationStore
from .units import EntryKind, TranslatableUnit

logger = get_logger(__name__)


@dataclass
class BuildResult:
    standard: Standard
    quarantine: Quarantine = field(default_factory=Quarantine)


def build_standard(
    store: LocalizationStore,
    name: str,
    *,
    settings: CatalogSettings | None = None,
    allow_new_families: bool = False,
) -> BuildResult:
    """
    Assemble a draft standard from the current units of ``name``.

    Color units become colors (their code is the ordinal), name and
    description units sharing a code become one symbol. With
    ``allow_new_families`` a variant whose parent has no units is added as
    the root of its own family instead of being reported as an orphan at
    finalize time. Entries the registries reject are quarantined.
    """
    standard = Standard(name, settings=settings)
    result = BuildResult(standard=standard, quarantine=Quarantine(source_locator=name))

    names: dict[SymbolCode, str] = {}
    descriptions: dict[SymbolCode, str] = {}
    colors: dict[SymbolCode, TranslatableUnit] = {}
    for unit in store.units(name, include_obsolete=False):
        if unit.kind == EntryKind.COLOR:
            colors[unit.code] = unit
        elif unit.kind == EntryKind.SYMBOL_NAME:
            names[unit.code] = unit.source
        else:
            descriptions[unit.code] = unit.source

    for code in sorted(colors):
        try:
            standard.add_color(code, colors[code].source)
        except CatalogError as e:
            result.quarantine.reject("BUILD", e, raw_data=colors[code].to_dict(), position=str(code))

    codes = sorted(set(names) | set(descriptions))
    known = set(codes)
    for code in codes:
        new_family = allow_new_families and code.parent is not None and code.parent not in known
        try:
            standard.add_symbol(
                code,
                names.get(code, ""),
                descriptions.get(code, ""),
                allow_new_family=new_family,
            )
        except CatalogError as e:
            result.quarantine.reject(
                "BUILD",
                e,
                raw_data={"code": str(code), "name": names.get(code), "description": descriptions.get(code)},
                position=str(code),
            )

    logger.info(
        "standard_built",
        standard=name,
        colors=len(standard.colors),
        symbols=len(standard.symbols),
        quarantined=result.quarantine.count,
    )
    return result


def record_standard(
    store: LocalizationStore,
    standard: Standard,
    *,
    retire_missing: bool = True,
) -> list[TranslatableUnit]:
    """
    Record every canonical text of a standard as a source unit.

    Changed wordings obsolete the previous unit. With ``retire_missing``,
    current units whose entry no longer exists in the standard (or whose
    description was removed) are retired.
    """
    recorded: list[TranslatableUnit] = []
    present: set[tuple[EntryKind, SymbolCode]] = set()

    for color in standard.colors:
        code = SymbolCode((color.ordinal,))
        recorded.append(store.record_source(standard.name, EntryKind.COLOR, code, color.name))
        present.add((EntryKind.COLOR, code))
    for symbol in standard.symbols:
        recorded.append(store.record_source(standard.name, EntryKind.SYMBOL_NAME, symbol.code, symbol.name))
        present.add((EntryKind.SYMBOL_NAME, symbol.code))
        if symbol.description:
            recorded.append(
                store.record_source(
                    standard.name, EntryKind.SYMBOL_DESCRIPTION, symbol.code, symbol.description
                )
            )
            present.add((EntryKind.SYMBOL_DESCRIPTION, symbol.code))

    if retire_missing:
        for unit in store.units(standard.name, include_obsolete=False):
            if (unit.kind, unit.code) not in present:
                store.retire(standard.name, unit.kind, unit.code)

    logger.info("standard_recorded", standard=standard.name, units=len(recorded))
    return recorded
