"""
Color registry: the ordered ink/print slots of one standard.

The ordinal of a color is its print-separation slot. Order determines
overprint behaviour, so a published standard never reorders its colors;
a revision may only append.

Tags:
    colors, registry, symbol-catalog
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from symcat.core.errors import (
    CatalogStateError,
    ColorNotFoundError,
    ColorOrderError,
    DuplicateOrdinalError,
    MalformedCodeError,
)
from symcat.core.logging import get_logger

from .codes import SymbolCode, parse
from .validation import IssueSeverity, ValidationIssue

logger = get_logger(__name__)

_TINT_RE = re.compile(r"^(?P<base>.+?)\s+(?P<pct>\d+(?:\.\d+)?)\s*%\s*$")


@dataclass(frozen=True, slots=True)
class ColorTint:
    """Structured reading of a name like ``"Brown 50%"``."""

    base: str
    percentage: float


def parse_tint(name: str) -> ColorTint | None:
    """
    Extract the base ink and percentage from a color name.

    Examples:
        >>> parse_tint("Black 100%")
        ColorTint(base='Black', percentage=100.0)
        >>> parse_tint("Opaque white") is None
        True
    """
    match = _TINT_RE.match(name.strip())
    if not match:
        return None
    return ColorTint(base=match.group("base"), percentage=float(match.group("pct")))


@dataclass(frozen=True, slots=True)
class Color:
    ordinal: int
    name: str
    standard: str
    tint: ColorTint | None = None

    def to_dict(self) -> dict:
        data = {"ordinal": self.ordinal, "name": self.name, "standard": self.standard}
        if self.tint is not None:
            data["tint"] = {"base": self.tint.base, "percentage": self.tint.percentage}
        return data


def _ordinal(value: int | str | SymbolCode) -> int:
    code = parse(value)
    if not code.is_base:
        raise MalformedCodeError(value, f"Color ordinal must be a single integer, got {value!r}")
    return code.last


class ColorRegistry:
    """
    Holds and validates the ordered color list of one standard.

    Args:
        standard: Owning standard name (used in errors and on each Color)
        append_after: Highest inherited ordinal when the standard is a
            revision; new colors must be numbered above it.
    """

    def __init__(self, standard: str, *, append_after: int | None = None):
        self.standard = standard
        self._colors: dict[int, Color] = {}
        self._append_after = append_after
        self._frozen = False

    def add(self, ordinal: int | str, name: str) -> Color:
        """Add a color; fails with ``DuplicateOrdinalError`` on a used slot."""
        self._check_writable()
        slot = _ordinal(ordinal)
        existing = self._colors.get(slot)
        if existing is not None:
            raise DuplicateOrdinalError(slot, standard=self.standard, existing=existing.name)
        if self._append_after is not None and slot <= self._append_after:
            raise ColorOrderError(slot, self._append_after, standard=self.standard)
        color = Color(ordinal=slot, name=name, standard=self.standard, tint=parse_tint(name))
        self._colors[slot] = color
        logger.debug("color_added", standard=self.standard, ordinal=slot, name=name)
        return color

    def replace(self, ordinal: int | str, name: str) -> Color:
        """Rename the color in an existing slot; the slot keeps its place."""
        self._check_writable()
        slot = self.lookup(ordinal).ordinal
        color = Color(ordinal=slot, name=name, standard=self.standard, tint=parse_tint(name))
        self._colors[slot] = color
        logger.debug("color_replaced", standard=self.standard, ordinal=slot, name=name)
        return color

    def remove(self, ordinal: int | str) -> Color:
        """
        Drop a color. Other colors keep their ordinals; in a revision the
        freed slot stays unavailable to :meth:`add`.
        """
        self._check_writable()
        color = self._colors.pop(self.lookup(ordinal).ordinal)
        logger.debug("color_removed", standard=self.standard, ordinal=color.ordinal)
        return color

    def _check_writable(self) -> None:
        if self._frozen:
            raise CatalogStateError(
                f"Color registry of {self.standard!r} is frozen"
            ).with_context(standard=self.standard)

    def _inherit(self, color: Color) -> None:
        """Copy a color from the base standard of a revision."""
        self._colors[color.ordinal] = Color(
            ordinal=color.ordinal, name=color.name, standard=self.standard, tint=color.tint
        )

    def lookup(self, ordinal: int | str) -> Color:
        slot = _ordinal(ordinal)
        try:
            return self._colors[slot]
        except KeyError:
            raise ColorNotFoundError(slot, standard=self.standard) from None

    def get(self, ordinal: int | str) -> Color | None:
        try:
            return self.lookup(ordinal)
        except (ColorNotFoundError, MalformedCodeError):
            return None

    def freeze(self) -> None:
        self._frozen = True

    def _thaw(self) -> None:
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def validate(self) -> list[ValidationIssue]:
        issues = []
        for color in self:
            if not color.name.strip():
                issues.append(
                    ValidationIssue(
                        kind="MissingName",
                        message=f"Color {color.ordinal} has no name",
                        code=str(color.ordinal),
                        standard=self.standard,
                        severity=IssueSeverity.WARNING,
                    )
                )
        return issues

    def __iter__(self) -> Iterator[Color]:
        return iter(sorted(self._colors.values(), key=lambda c: c.ordinal))

    def __len__(self) -> int:
        return len(self._colors)

    def __contains__(self, ordinal: object) -> bool:
        if not isinstance(ordinal, (int, str, SymbolCode)):
            return False
        return self.get(ordinal) is not None
