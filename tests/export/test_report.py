"""Tests for the HTML symbol set report."""

from symcat.catalog.migration import MigrationResolver
from symcat.catalog.standard import Standard
from symcat.export.report import symbol_report_html
from symcat.l10n.ts_format import import_document, read_ts


class TestSymbolReport:
    def test_layout(self, isom2017):
        html = symbol_report_html(isom2017)
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Symbol Set Report on &#x27;ISOM 2017-2&#x27;</title>" in html
        assert html.index("<h2>Colors</h2>") < html.index("<h2>Symbols</h2>")
        assert "<b>101 Contour</b>" in html
        assert '<td class="name">Brown 50%</td><td>50%</td>' in html

    def test_colors_in_print_order(self, isom2017):
        html = symbol_report_html(isom2017)
        assert html.index("Purple for course overprint") < html.index("Black 100%") < html.index("Brown 50%")

    def test_flags(self, isom2017):
        html = symbol_report_html(isom2017)
        assert "[X] Provided for migration; not for new maps" in html
        assert "[X] Geometry: line" in html
        assert "[X] Minimum length: 0.6 mm" in html

    def test_replacement_flag(self, library, isom2017):
        resolver = MigrationResolver(library)
        resolver.link("ISOM 2017-2", "104.9", "ISOM 2017-2", "104")
        assert "[X] Replaced by ISOM 2017-2 104" in symbol_report_html(isom2017, resolver=resolver)

    def test_localized(self, isom2017, ts_path):
        store, _ = import_document(read_ts(ts_path), locale="es")
        html = symbol_report_html(isom2017, store, "es")
        assert '<html lang="es">' in html
        assert "<b>101 Curva de nivel</b>" in html
        assert "<b>104.9 Earth bank, minimum size</b>" in html

    def test_escaping_and_line_breaks(self):
        std = Standard("ISSOM <draft>")
        std.add_symbol("401", "Open land & meadow", "Open land.\nMinimum size 1 mm.")
        html = symbol_report_html(std)
        assert "ISSOM &lt;draft&gt;" in html
        assert "<b>401 Open land &amp; meadow</b>" in html
        assert "Open land.<br>\nMinimum size 1 mm." in html
