"""
Deterministic hashing for translation unit fingerprints.

A translatable unit is keyed by its literal source text. Exports that need a
compact, stable identifier for a unit (flat records, audit tooling) use a
hash of the full key instead of repeating long descriptions.

Examples:
    >>> h1 = compute_hash("ISOM 2017-2", "Name of symbol", "104", "Earth bank")
    >>> h2 = compute_hash("ISOM 2017-2", "Name of symbol", "104", "Earth bank")
    >>> h1 == h2
    True
    >>> len(compute_hash("x", length=16))
    16

Tags:
    hashing, utility, symbol-catalog
"""

import hashlib


def compute_hash(*values, length: int = 32) -> str:
    """
    Hash arbitrary values into a hex digest.

    Values are joined with ``\\x1f`` (unit separator), which cannot occur in
    symbol texts, so ``("a|b", "c")`` and ``("a", "b|c")`` never collide.

    Args:
        *values: Values to hash (converted to strings)
        length: Hex digest length (default 32 = 128 bits)
    """
    content = "\x1f".join(str(v) for v in values)
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:length]
