"""
Symbol registry: the symbol set of one standard.

Symbols are keyed by :class:`~symcat.catalog.codes.SymbolCode`. The
registry accepts entries in any order (source data is not guaranteed to list
a parent before its variants) and checks the family structure only when the
whole standard is validated.

Manifesto:
    Symbol sets are authored and imported in bulk. The registry therefore
    separates two phases:

    - **Load freely:** ``add()`` only rejects what is wrong on its own
      (malformed code, duplicate code)
    - **Validate once:** ``validate()`` reports every orphan variant,
      undeclared migration variant and dangling cross-reference together

    Facts that are only written down in description prose (geometry class,
    minimum dimensions, references to other symbols) are extracted once when
    a symbol is added and stored as fields.

Architecture:
    ::

        add("104.9", "Earth bank", "Provided for migration from ISOM2000 ...")
          │
          ├─ parse()            → SymbolCode((104, 9))
          ├─ classify()         → VariantKind.MIGRATION_COMPAT
          ├─ infer_geometry()   → GeometryClass.LINE
          ├─ extract_dimensions → (DimensionConstraint("length", 0.6, "mm"),)
          └─ extract_references → (SymbolCode((104,)),)

        validate()
          ├─ OrphanVariant          (ERROR)  parent code missing
          ├─ MissingMigrationNotice (ERROR|WARNING) ".9" without notice
          ├─ DanglingReference      (WARNING) "(105)" not in standard
          └─ MissingName            (WARNING)

Tags:
    symbols, registry, variants, symbol-catalog

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from symcat.core.errors import (
    CatalogStateError,
    DuplicateCodeError,
    MalformedCodeError,
    MissingMigrationNoticeError,
    OrphanVariantError,
    SymbolNotFoundError,
)
from symcat.core.logging import get_logger

from .codes import CodeLike, SymbolCode, VariantKind, classify, is_migration_variant, parse
from .validation import IssueSeverity, ValidationIssue

logger = get_logger(__name__)


class GeometryClass(str, Enum):
    POINT = "point"
    LINE = "line"
    AREA = "area"
    TEXT = "text"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class DimensionConstraint:
    """A minimum dimension stated in a description, e.g. "minimum length 0.6 mm"."""

    quantity: str
    value: float
    unit: str

    def __str__(self) -> str:
        return f"minimum {self.quantity} {self.value:g} {self.unit}"


_DIMENSION_RE = re.compile(
    r"\bminimum\s+(?P<quantity>length|width|size|area|diameter|gap|height|distance|footprint)\b"
    r"[^0-9\n]{0,30}?"
    r"(?P<value>\d+(?:[.,]\d+)?)\s*"
    r"(?P<unit>mm²|mm2|m²|m2|mm|m)(?![A-Za-z])",
    re.IGNORECASE,
)

_REFERENCE_RES = (
    re.compile(r"\((\d{3}(?:\.\d+)*)\)"),
    re.compile(r"\bsymbols?\s+(\d{3}(?:\.\d+)*)\b", re.IGNORECASE),
)

_GEOMETRY_HINTS: dict[GeometryClass, tuple[re.Pattern[str], ...]] = {
    GeometryClass.POINT: (
        re.compile(r"\bfootprint\b", re.I),
        re.compile(r"\bpoint (?:symbol|feature|object)\b", re.I),
        re.compile(r"\bdiameter\b", re.I),
        re.compile(r"\bshall be oriented\b|\bmust be oriented\b", re.I),
    ),
    GeometryClass.LINE: (
        re.compile(r"\bminimum length\b", re.I),
        re.compile(r"\bline (?:symbol|width|feature)\b", re.I),
        re.compile(r"\b(?:dashed|dotted) line\b", re.I),
    ),
    GeometryClass.AREA: (
        re.compile(r"\bminimum (?:size|area)\b", re.I),
        re.compile(r"\barea (?:symbol|feature)\b", re.I),
        re.compile(r"\b(?:small|large|open|forested) areas?\b", re.I),
    ),
}


def extract_dimensions(description: str | None) -> tuple[DimensionConstraint, ...]:
    """
    Pull minimum-dimension constraints out of description prose.

    Examples:
        >>> extract_dimensions("Minimum length: 0.6 mm (footprint 9 m).")
        (DimensionConstraint(quantity='length', value=0.6, unit='mm'),)
    """
    if not description:
        return ()
    found = []
    for match in _DIMENSION_RE.finditer(description):
        unit = match.group("unit").replace("2", "²")
        found.append(
            DimensionConstraint(
                quantity=match.group("quantity").lower(),
                value=float(match.group("value").replace(",", ".")),
                unit=unit,
            )
        )
    return tuple(found)


def extract_references(description: str | None) -> tuple[SymbolCode, ...]:
    """Codes of other symbols mentioned in a description, in order of appearance."""
    if not description:
        return ()
    seen: dict[SymbolCode, None] = {}
    hits: list[tuple[int, SymbolCode]] = []
    for pattern in _REFERENCE_RES:
        for match in pattern.finditer(description):
            hits.append((match.start(1), parse(match.group(1))))
    for _, code in sorted(hits, key=lambda h: h[0]):
        seen.setdefault(code, None)
    return tuple(seen)


def infer_geometry(name: str, description: str | None) -> GeometryClass:
    """
    Best-effort geometry class from the wording of a symbol.

    Ties and texts without any hint give ``UNKNOWN``; callers that know the
    geometry pass it explicitly to ``SymbolRegistry.add``.
    """
    if re.search(r"\btext\b", name, re.I) or re.search(r"\btext symbol\b", description or "", re.I):
        return GeometryClass.TEXT
    text = f"{name}\n{description or ''}"
    scores = {
        geometry: sum(len(p.findall(text)) for p in patterns)
        for geometry, patterns in _GEOMETRY_HINTS.items()
    }
    best = max(scores.values())
    if best == 0:
        return GeometryClass.UNKNOWN
    winners = [g for g, s in scores.items() if s == best]
    return winners[0] if len(winners) == 1 else GeometryClass.UNKNOWN


@dataclass(frozen=True, slots=True)
class Symbol:
    code: SymbolCode
    name: str
    description: str
    standard: str
    variant_kind: VariantKind
    geometry: GeometryClass = GeometryClass.UNKNOWN
    dimensions: tuple[DimensionConstraint, ...] = ()
    references: tuple[SymbolCode, ...] = ()
    family_root: bool = False

    @property
    def is_migration(self) -> bool:
        return self.variant_kind == VariantKind.MIGRATION_COMPAT

    @property
    def parent_code(self) -> SymbolCode | None:
        """Resolved parent edge; None for base symbols and new-family roots."""
        if self.family_root:
            return None
        return self.code.parent

    def to_dict(self) -> dict:
        return {
            "code": str(self.code),
            "name": self.name,
            "description": self.description,
            "standard": self.standard,
            "variant_kind": self.variant_kind.value,
            "geometry": self.geometry.value,
            "parent": str(self.parent_code) if self.parent_code else None,
            "dimensions": [
                {"quantity": d.quantity, "value": d.value, "unit": d.unit} for d in self.dimensions
            ],
            "references": [str(r) for r in self.references],
        }


@dataclass
class SymbolRegistry:
    """
    Holds and validates the symbols of one standard.

    Args:
        standard: Owning standard name
        migration_suffix: Last segment marking migration variants (settings default)
        notice_patterns: Regexes recognising a migration notice (settings default)
        strict_migration_notice: Report ``.9`` codes without a notice as errors
    """

    standard: str
    migration_suffix: int | None = None
    notice_patterns: list[str] | None = None
    strict_migration_notice: bool = True
    _symbols: dict[SymbolCode, Symbol] = field(default_factory=dict, init=False, repr=False)
    _frozen: bool = field(default=False, init=False, repr=False)

    def add(
        self,
        code: CodeLike,
        name: str,
        description: str = "",
        *,
        geometry: GeometryClass | str | None = None,
        allow_new_family: bool = False,
    ) -> Symbol:
        """
        Add a symbol.

        Parent existence is not checked here; see :meth:`validate`. With
        ``allow_new_family`` a variant code whose parent is absent is accepted
        as the root of a new family.

        Raises:
            MalformedCodeError: code does not parse
            DuplicateCodeError: code already present
            CatalogStateError: registry frozen (standard not a draft)
        """
        self._check_writable()
        parsed = self._parse(code)
        if parsed in self._symbols:
            raise DuplicateCodeError(parsed, standard=self.standard)
        symbol = self._build(parsed, name, description, geometry, allow_new_family)
        self._symbols[parsed] = symbol
        logger.debug(
            "symbol_added",
            standard=self.standard,
            code=str(parsed),
            variant_kind=symbol.variant_kind.value,
        )
        return symbol

    def replace(
        self,
        code: CodeLike,
        name: str,
        description: str = "",
        *,
        geometry: GeometryClass | str | None = None,
        allow_new_family: bool = False,
    ) -> Symbol:
        """
        Redefine an existing symbol (reworded name, edited footprint).

        Raises:
            SymbolNotFoundError: code not present
            CatalogStateError: registry frozen
        """
        self._check_writable()
        parsed = self._parse(code)
        if parsed not in self._symbols:
            raise SymbolNotFoundError(parsed, standard=self.standard)
        symbol = self._build(parsed, name, description, geometry, allow_new_family)
        self._symbols[parsed] = symbol
        logger.debug("symbol_replaced", standard=self.standard, code=str(parsed))
        return symbol

    def remove(self, code: CodeLike) -> Symbol:
        """
        Delete a symbol. Its variants stay and are reported as orphans by
        :meth:`validate` unless they are removed too.
        """
        self._check_writable()
        parsed = self._parse(code)
        try:
            symbol = self._symbols.pop(parsed)
        except KeyError:
            raise SymbolNotFoundError(parsed, standard=self.standard) from None
        logger.debug("symbol_removed", standard=self.standard, code=str(parsed))
        return symbol

    def _check_writable(self) -> None:
        if self._frozen:
            raise CatalogStateError(
                f"Symbol registry of {self.standard!r} is frozen"
            ).with_context(standard=self.standard)

    def _parse(self, code: CodeLike) -> SymbolCode:
        try:
            return parse(code)
        except MalformedCodeError as e:
            raise e.with_context(standard=self.standard)

    def _build(
        self,
        parsed: SymbolCode,
        name: str,
        description: str,
        geometry: GeometryClass | str | None,
        allow_new_family: bool,
    ) -> Symbol:
        description = description or ""
        if geometry is None:
            geom = infer_geometry(name, description)
        else:
            geom = GeometryClass(geometry)
        return Symbol(
            code=parsed,
            name=name,
            description=description,
            standard=self.standard,
            variant_kind=classify(
                parsed, description, suffix=self.migration_suffix, patterns=self.notice_patterns
            ),
            geometry=geom,
            dimensions=extract_dimensions(description),
            references=tuple(r for r in extract_references(description) if r != parsed),
            family_root=allow_new_family and not parsed.is_base,
        )

    def _inherit(self, symbol: Symbol) -> None:
        """Copy a symbol from the base standard of a revision."""
        self._symbols[symbol.code] = Symbol(
            code=symbol.code,
            name=symbol.name,
            description=symbol.description,
            standard=self.standard,
            variant_kind=symbol.variant_kind,
            geometry=symbol.geometry,
            dimensions=symbol.dimensions,
            references=symbol.references,
            family_root=symbol.family_root,
        )

    def lookup(self, code: CodeLike) -> Symbol:
        parsed = parse(code)
        try:
            return self._symbols[parsed]
        except KeyError:
            raise SymbolNotFoundError(parsed, standard=self.standard) from None

    def get(self, code: CodeLike) -> Symbol | None:
        try:
            return self._symbols.get(parse(code))
        except MalformedCodeError:
            return None

    def parent(self, symbol: Symbol) -> Symbol | None:
        """The resolved parent symbol, if present in this registry."""
        parent_code = symbol.parent_code
        if parent_code is None:
            return None
        return self._symbols.get(parent_code)

    def children_of(self, code: CodeLike) -> list[Symbol]:
        """Direct variants only (one more segment)."""
        parsed = parse(code)
        return [s for s in self if s.code.parent == parsed]

    def variants_of(self, code: CodeLike) -> list[Symbol]:
        """Every registered descendant of ``code`` in identifier order."""
        parsed = parse(code)
        return [s for s in self if s.code.is_descendant_of(parsed)]

    def deprecated_variants(self, code: CodeLike) -> list[Symbol]:
        """Variants of ``code`` kept only for migration from an older standard."""
        return [s for s in self.variants_of(code) if s.is_migration]

    def families(self) -> dict[SymbolCode, list[Symbol]]:
        """Symbols grouped by top-level family code."""
        groups: dict[SymbolCode, list[Symbol]] = {}
        for symbol in self:
            groups.setdefault(symbol.code.base, []).append(symbol)
        return groups

    def freeze(self) -> None:
        self._frozen = True

    def _thaw(self) -> None:
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def validate(self) -> list[ValidationIssue]:
        """Check the family structure of the whole registry."""
        issues: list[ValidationIssue] = []
        notice_severity = IssueSeverity.ERROR if self.strict_migration_notice else IssueSeverity.WARNING

        for symbol in self:
            code = symbol.code
            parent_code = symbol.parent_code
            if parent_code is not None and parent_code not in self._symbols:
                issues.append(
                    ValidationIssue.from_error(OrphanVariantError(code, parent_code, standard=self.standard))
                )

            if is_migration_variant(code, self.migration_suffix) and not symbol.is_migration:
                issues.append(
                    ValidationIssue.from_error(
                        MissingMigrationNoticeError(code, standard=self.standard),
                        severity=notice_severity,
                    )
                )

            for ref in symbol.references:
                if ref not in self._symbols:
                    issues.append(
                        ValidationIssue(
                            kind="DanglingReference",
                            message=f"Symbol {code} refers to {ref}, which is not defined",
                            code=str(code),
                            standard=self.standard,
                            severity=IssueSeverity.WARNING,
                        )
                    )

            if not symbol.name.strip():
                issues.append(
                    ValidationIssue(
                        kind="MissingName",
                        message=f"Symbol {code} has no name",
                        code=str(code),
                        standard=self.standard,
                        severity=IssueSeverity.WARNING,
                    )
                )
        return issues

    def __iter__(self) -> Iterator[Symbol]:
        return iter(sorted(self._symbols.values(), key=lambda s: s.code))

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, code: object) -> bool:
        if not isinstance(code, (str, int, SymbolCode)):
            return False
        return self.get(code) is not None
