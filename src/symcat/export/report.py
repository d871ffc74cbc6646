"""
HTML symbol set report.

A self-contained page listing the colors of a standard in print order,
followed by every symbol with its code and name, its description (line
breaks kept) and flags such as "provided for migration" or the geometry
class. Texts are locale-selected like the flat export.

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from html import escape

from symcat.catalog.migration import MigrationResolver
from symcat.catalog.standard import Standard
from symcat.l10n.store import LocalizationStore

from .flat import ColorRecord, SymbolRecord, flatten_standard

_STYLE = """\
th { font-size: 120%; text-align: center; }
th, td { padding: 4px; }
table.colors { text-align: center; }
table.colors td:first-child { text-align: right; }
table.colors td.name { text-align: left; }
table.symbols { max-width: 60em; }
"""


def _color_row(color: ColorRecord) -> str:
    tint = f"{color.tint_percentage:g}%" if color.tint_percentage is not None else ""
    return (
        "<tr>"
        f"<td>{color.ordinal}</td>"
        f'<td class="name">{escape(color.name)}</td>'
        f"<td>{escape(tint)}</td>"
        "</tr>\n"
    )


def _flags(symbol: SymbolRecord) -> list[str]:
    flags = []
    if symbol.deprecated:
        flags.append("Provided for migration; not for new maps")
    if symbol.replacement:
        flags.append(f"Replaced by {symbol.replacement}")
    if symbol.geometry != "unknown":
        flags.append(f"Geometry: {symbol.geometry}")
    for dimension in symbol.dimensions:
        flags.append(f"Minimum {dimension.quantity}: {dimension.value:g} {dimension.unit}")
    return flags


def _symbol_row(symbol: SymbolRecord) -> str:
    description = "<br>\n".join(escape(line) for line in symbol.description.splitlines())
    flags = "".join(f"[X] {escape(flag)}<br>\n" for flag in _flags(symbol))
    return (
        "<tr>"
        f'<td style="vertical-align:middle;"><b>{escape(symbol.code)} {escape(symbol.name)}</b></td>'
        "</tr>\n"
        "<tr>"
        '<td style="padding-bottom:18px;">\n'
        f"<div>\n{description}</div>\n"
        f"<p>{flags}</p>"
        "</td>"
        "</tr>\n"
    )


def symbol_report_html(
    standard: Standard,
    store: LocalizationStore | None = None,
    locale: str | None = None,
    *,
    resolver: MigrationResolver | None = None,
) -> str:
    flat = flatten_standard(standard, store, locale, resolver=resolver)
    title = escape(f"Symbol Set Report on '{standard.name}'")
    colors = "".join(_color_row(c) for c in flat.colors)
    symbols = "".join(_symbol_row(s) for s in flat.symbols)
    lang = f' lang="{escape(locale)}"' if locale else ""
    return (
        "<!DOCTYPE html>\n"
        f"<html{lang}>\n"
        "<head>\n"
        '<meta charset="utf-8">'
        f"<title>{title}</title>\n"
        '<meta name="generator" content="symcat">\n'
        f"<style>\n{_STYLE}</style>\n"
        "</head>\n"
        "<body>\n"
        f"<h1>{title}</h1>\n"
        "<h2>Colors</h2>\n"
        '<table class="colors">\n'
        "<thead>\n"
        '<tr><th>Color</th><th class="name">Name</th><th>Tint</th></tr>\n'
        "</thead>\n"
        f"<tbody>\n{colors}</tbody>\n"
        "</table>\n"
        "<h2>Symbols</h2>\n"
        '<table class="symbols">\n'
        f"<tbody>\n{symbols}</tbody>\n"
        "</table>\n"
        "</body>\n"
        "</html>\n"
    )
