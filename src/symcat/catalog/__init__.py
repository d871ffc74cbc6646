"""
Catalog layer: codes, colors, symbols, standards and migration links.
"""

from symcat.catalog.codes import SymbolCode, VariantKind, classify, is_migration_variant, parent_of, parse
from symcat.catalog.colors import Color, ColorRegistry
from symcat.catalog.library import StandardLibrary
from symcat.catalog.migration import MigrationLink, MigrationResolver, SymbolRef
from symcat.catalog.standard import Standard, StandardState
from symcat.catalog.symbols import GeometryClass, Symbol, SymbolRegistry
from symcat.catalog.validation import IssueSeverity, ValidationIssue, ValidationReport

__all__ = [
    "SymbolCode",
    "VariantKind",
    "classify",
    "is_migration_variant",
    "parent_of",
    "parse",
    "Color",
    "ColorRegistry",
    "GeometryClass",
    "Symbol",
    "SymbolRegistry",
    "Standard",
    "StandardState",
    "StandardLibrary",
    "MigrationLink",
    "MigrationResolver",
    "SymbolRef",
    "IssueSeverity",
    "ValidationIssue",
    "ValidationReport",
]
