"""
Identifier scheme for symbol and color codes.

Symbol codes are dotted numeric identifiers (``104``, ``104.1``, ``104.9``).
They are parsed once into a tuple of integer segments, and every relation
the catalog derives from them (parent, variant, migration) works on those
segments rather than on the text.

Manifesto:
    - **Parse once:** Code strings become ``SymbolCode`` values at the edge
    - **Integer ordering:** ``104.2 < 104.10``; a string sort would misorder
      two-digit suffixes
    - **Explicit variant kind:** The ``.9`` convention is turned into a tagged
      ``VariantKind`` when a symbol is added, not re-inferred at every query
    - **Confirmed heuristics:** A migration variant is recognised by its
      suffix *and* the notice in its description

Architecture:
    ::

        "104.9"  ──parse()──▶  SymbolCode(segments=(104, 9))
                                   │
                 parent_of() ──────┼──▶ SymbolCode((104,))
                 is_migration_variant() ──▶ True (last segment == 9)
                 classify(code, description) ──▶ VariantKind.MIGRATION_COMPAT

Examples:
    >>> parse("104.10") > parse("104.2")
    True
    >>> str(parent_of("104.1"))
    '104'
    >>> parent_of("104") is None
    True
    >>> is_migration_variant("104.9")
    True

Tags:
    identifiers, parsing, ordering, symbol-catalog

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from symcat.core.errors import MalformedCodeError
from symcat.core.settings import get_settings

_CODE_RE = re.compile(r"^\d+(\.\d+)*$")


@dataclass(frozen=True, order=True, slots=True)
class SymbolCode:
    """
    A parsed symbol or color code.

    Equality, hashing and ordering all use the integer segments, so
    ``SymbolCode`` values sort correctly and can be used as dict keys.
    ``str()`` returns the canonical text form.
    """

    segments: tuple[int, ...]

    def __post_init__(self) -> None:
        if not self.segments or any(s < 0 for s in self.segments):
            raise MalformedCodeError(self.segments)

    def __str__(self) -> str:
        return ".".join(str(s) for s in self.segments)

    @property
    def depth(self) -> int:
        return len(self.segments)

    @property
    def is_base(self) -> bool:
        return len(self.segments) == 1

    @property
    def base(self) -> SymbolCode:
        """The top-level family code (``104`` for ``104.1.2``)."""
        return SymbolCode(self.segments[:1])

    @property
    def parent(self) -> SymbolCode | None:
        if len(self.segments) == 1:
            return None
        return SymbolCode(self.segments[:-1])

    @property
    def last(self) -> int:
        return self.segments[-1]

    def is_descendant_of(self, other: SymbolCode) -> bool:
        """True when ``other`` is a strict numeric prefix of this code."""
        n = len(other.segments)
        return len(self.segments) > n and self.segments[:n] == other.segments


CodeLike = str | int | SymbolCode


def parse(code: CodeLike) -> SymbolCode:
    """
    Parse a code string into a :class:`SymbolCode`.

    Surrounding whitespace is ignored. Integers are accepted for color
    ordinals; an existing ``SymbolCode`` is returned unchanged.

    Raises:
        MalformedCodeError: if the text does not match ``^\\d+(\\.\\d+)*$``
    """
    if isinstance(code, SymbolCode):
        return code
    if isinstance(code, bool):
        raise MalformedCodeError(code)
    if isinstance(code, int):
        if code < 0:
            raise MalformedCodeError(code)
        return SymbolCode((code,))
    if not isinstance(code, str):
        raise MalformedCodeError(code)
    text = code.strip()
    if not _CODE_RE.match(text):
        raise MalformedCodeError(code)
    return SymbolCode(tuple(int(part) for part in text.split(".")))


def parent_of(code: CodeLike) -> SymbolCode | None:
    """Drop the last segment; None for a base code."""
    return parse(code).parent


def base_of(code: CodeLike) -> SymbolCode:
    return parse(code).base


def is_descendant(code: CodeLike, ancestor: CodeLike) -> bool:
    return parse(code).is_descendant_of(parse(ancestor))


def is_migration_variant(code: CodeLike, suffix: int | None = None) -> bool:
    """
    True iff the code is a variant whose last segment is the migration suffix.

    Base codes are never migration variants, even when they equal the suffix.
    """
    parsed = parse(code)
    if suffix is None:
        suffix = get_settings().migration_suffix
    return parsed.depth > 1 and parsed.last == suffix


@lru_cache(maxsize=32)
def _compile_patterns(patterns: tuple[str, ...]) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


def has_migration_notice(text: str | None, patterns: list[str] | tuple[str, ...] | None = None) -> bool:
    """True if the description marks the symbol as kept only for migration."""
    if not text:
        return False
    if patterns is None:
        patterns = get_settings().migration_notice_patterns
    return any(p.search(text) for p in _compile_patterns(tuple(patterns)))


class VariantKind(str, Enum):
    """Role of a symbol inside its family, derived once at add time."""

    PRIMARY = "primary"
    VARIANT = "variant"
    MIGRATION_COMPAT = "migration_compat"


def classify(
    code: CodeLike,
    description: str | None,
    *,
    suffix: int | None = None,
    patterns: list[str] | tuple[str, ...] | None = None,
) -> VariantKind:
    """
    Derive the variant kind of a symbol.

    The description is authoritative: a symbol that says it exists for
    migration is a migration variant whatever its number. A ``.9`` code
    without such a notice stays a plain variant; the registry reports it
    during validation.
    """
    parsed = parse(code)
    if has_migration_notice(description, patterns):
        return VariantKind.MIGRATION_COMPAT
    if parsed.is_base:
        return VariantKind.PRIMARY
    return VariantKind.VARIANT
