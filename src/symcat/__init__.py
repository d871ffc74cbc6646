"""
symcat: multi-standard orienteering symbol catalog registry.

Standards (ISOM 2017-2, ISOM2000, ISSprOM, ...) are built from colors and
symbols, validated as a whole, localized through translatable units and
cross-referenced by migration links.
"""

__version__ = "0.1.0"
