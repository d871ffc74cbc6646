"""
Migration resolver: deprecated symbols and their replacements.

A :class:`MigrationLink` states that a symbol kept only for compatibility
(usually a ``.9`` variant "provided for migration from ISOM2000") should be
replaced by another symbol, possibly in a newer standard. Consumers call
:meth:`MigrationResolver.resolve` to steer authors away from deprecated
numbers.

Manifesto:
    - **One hop:** A link target is never deprecated itself and never the
      source of another link, so resolution never chains and never cycles
    - **Finalized targets only:** Links point into validated standards
    - **Bulk tables:** Cross-reference tables (CRT) are loaded line by line;
      bad lines are reported together, good lines still link

Architecture:
    ::

        ISOM 2017-2 104.9 ──link──▶ ISOM 2017-2 104
        ISOM2000    106   ──link──▶ ISOM 2017-2 105

        resolve("ISOM 2017-2", "104.9") → SymbolRef("ISOM 2017-2", 104)
        resolve("ISOM 2017-2", "104")   → SymbolRef("ISOM 2017-2", 104)

CRT format::

    # new_code  old_code
    104         104.9
    105         106

Tags:
    migration, deprecation, cross-reference, symbol-catalog

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from symcat.core.errors import (
    ChainedDeprecationError,
    DuplicateLinkError,
    ImportFormatError,
    UnknownTargetError,
)
from symcat.core.logging import get_logger
from symcat.core.result import partition_results, try_result

from .codes import CodeLike, SymbolCode, is_migration_variant, parse
from .library import StandardLibrary
from .validation import ValidationIssue

logger = get_logger(__name__)


@dataclass(frozen=True, order=True, slots=True)
class SymbolRef:
    """A symbol identified across standards."""

    standard: str
    code: SymbolCode

    @classmethod
    def of(cls, standard: str, code: CodeLike) -> SymbolRef:
        return cls(standard, parse(code))

    def __str__(self) -> str:
        return f"{self.standard} {self.code}"

    def to_dict(self) -> dict[str, str]:
        return {"standard": self.standard, "code": str(self.code)}


@dataclass(frozen=True, slots=True)
class MigrationLink:
    source: SymbolRef
    target: SymbolRef
    origin: str = "manual"

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source.to_dict(),
            "target": self.target.to_dict(),
            "origin": self.origin,
        }


@dataclass
class CrtLoadResult:
    links: list[MigrationLink] = field(default_factory=list)
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.issues


class MigrationResolver:
    """Builds and validates migration links between standards of a library."""

    def __init__(self, library: StandardLibrary):
        self.library = library
        self._links: dict[SymbolRef, MigrationLink] = {}
        self._targets: dict[SymbolRef, set[SymbolRef]] = {}
        self._lock = threading.Lock()

    def link(
        self,
        old_standard: str,
        old_code: CodeLike,
        new_standard: str,
        new_code: CodeLike,
        *,
        origin: str = "manual",
    ) -> MigrationLink:
        """
        Register ``old → new``.

        Raises:
            StandardNotFoundError / SymbolNotFoundError: the source is unknown
            UnknownTargetError: target standard missing, not finalized, or
                lacking the target code
            ChainedDeprecationError: the link would create a chain
            DuplicateLinkError: the source already points elsewhere
        """
        source_std = self.library.get(old_standard)
        source_symbol = source_std.symbol(old_code)
        source = SymbolRef(source_std.name, source_symbol.code)

        target_code = parse(new_code)
        target_std = self.library.find(new_standard)
        if target_std is None:
            raise UnknownTargetError(new_standard, target_code, "standard is not registered")
        if not target_std.is_finalized:
            raise UnknownTargetError(new_standard, target_code, f"standard is {target_std.state.value}")
        target_symbol = target_std.symbols.get(target_code)
        if target_symbol is None:
            raise UnknownTargetError(new_standard, target_code)
        target = SymbolRef(target_std.name, target_symbol.code)

        if target == source:
            raise ChainedDeprecationError(new_standard, target_code, "a symbol cannot replace itself")
        if target_symbol.is_migration or is_migration_variant(
            target_symbol.code, target_std.settings.migration_suffix
        ):
            raise ChainedDeprecationError(new_standard, target_code, "target is itself a migration variant")

        with self._lock:
            if target in self._links:
                raise ChainedDeprecationError(
                    new_standard,
                    target_code,
                    f"target is deprecated in favour of {self._links[target].target}",
                )
            if source in self._targets:
                raise ChainedDeprecationError(
                    old_standard,
                    source.code,
                    "source is already the replacement of another symbol",
                )
            existing = self._links.get(source)
            if existing is not None:
                if existing.target == target:
                    return existing
                raise DuplicateLinkError(old_standard, source.code, str(existing.target))

            link = MigrationLink(source=source, target=target, origin=origin)
            self._links[source] = link
            self._targets.setdefault(target, set()).add(source)

        if not source_symbol.is_migration:
            logger.info("migration_link_from_regular_symbol", source=str(source), target=str(target))
        logger.debug("migration_linked", source=str(source), target=str(target), origin=origin)
        return link

    def resolve(self, standard: str, code: CodeLike) -> SymbolRef:
        """Recommended symbol for ``(standard, code)``; the input when no link exists."""
        ref = SymbolRef(standard, parse(code))
        link = self._links.get(ref)
        return link.target if link is not None else ref

    def resolve_code(self, standard: str, code: CodeLike) -> SymbolCode:
        return self.resolve(standard, code).code

    def link_for(self, standard: str, code: CodeLike) -> MigrationLink | None:
        return self._links.get(SymbolRef(standard, parse(code)))

    def links(self) -> list[MigrationLink]:
        return sorted(self._links.values(), key=lambda link: link.source)

    def links_from(self, standard: str) -> list[MigrationLink]:
        return [link for link in self.links() if link.source.standard == standard]

    def unresolved(self, standard: str) -> list[SymbolRef]:
        """Migration variants of a standard that have no link yet."""
        std = self.library.get(standard)
        return [
            SymbolRef(std.name, s.code)
            for s in std.symbols
            if s.is_migration and SymbolRef(std.name, s.code) not in self._links
        ]

    def suggest_links(self, standard: str) -> list[tuple[SymbolRef, SymbolRef]]:
        """
        Candidate links for unresolved migration variants.

        The candidate is the nearest ancestor in the same standard that is not
        itself a migration variant (``104.9`` → ``104``).
        """
        std = self.library.get(standard)
        suggestions = []
        for ref in self.unresolved(standard):
            parent = ref.code.parent
            while parent is not None:
                candidate = std.symbols.get(parent)
                if candidate is not None and not candidate.is_migration:
                    suggestions.append((ref, SymbolRef(std.name, candidate.code)))
                    break
                parent = parent.parent
        return suggestions

    def load_crt(
        self,
        text: str,
        old_standard: str,
        new_standard: str,
        *,
        source_locator: str | None = None,
    ) -> CrtLoadResult:
        """
        Load a cross-reference table and link every valid line.

        Each non-empty, non-comment line holds ``new_code old_code``. Errors
        are collected per line; valid lines are linked regardless.
        """
        result = CrtLoadResult()
        attempts = []
        for lineno, raw in enumerate(text.splitlines(), start=1):
            line = raw.split("#", 1)[0].split(";", 1)[0].strip()
            if not line:
                continue
            parts = line.split()
            if len(parts) != 2:
                error = ImportFormatError(
                    f"line {lineno}: expected 'new_code old_code', got {raw.strip()!r}"
                ).with_context(standard=old_standard, source_locator=source_locator, line=lineno)
                result.issues.append(ValidationIssue.from_error(error, standard=old_standard))
                continue
            new_code, old_code = parts
            attempts.append(
                try_result(
                    lambda n=new_code, o=old_code: self.link(
                        old_standard, o, new_standard, n, origin="crt"
                    )
                )
            )
        links, errors = partition_results(attempts)
        result.links.extend(links)
        result.issues.extend(ValidationIssue.from_error(e, standard=old_standard) for e in errors)
        logger.info(
            "crt_loaded",
            old_standard=old_standard,
            new_standard=new_standard,
            links=len(result.links),
            issues=len(result.issues),
            source=source_locator,
        )
        return result
