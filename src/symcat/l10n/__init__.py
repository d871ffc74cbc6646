"""
Localization layer: translatable units, their store and the .ts codec.
"""

from symcat.l10n.store import LocalizationStore
from symcat.l10n.units import EntryKind, TranslatableUnit, Translation, UnitState

__all__ = [
    "EntryKind",
    "LocalizationStore",
    "TranslatableUnit",
    "Translation",
    "UnitState",
]
