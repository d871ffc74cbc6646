"""Tests for translatable units."""

import pytest

from symcat.catalog.codes import parse
from symcat.core.errors import LocalizationError
from symcat.l10n.units import EntryKind, TranslatableUnit, Translation, UnitState


def _unit(source: str = "Earth bank", **kwargs) -> TranslatableUnit:
    return TranslatableUnit("ISOM 2017-2", EntryKind.SYMBOL_NAME, parse("104"), source, **kwargs)


class TestEntryKind:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("Color", EntryKind.COLOR),
            ("Name of symbol", EntryKind.SYMBOL_NAME),
            ("symbol_description", EntryKind.SYMBOL_DESCRIPTION),
            (EntryKind.COLOR, EntryKind.COLOR),
        ],
    )
    def test_coerce(self, value, expected):
        assert EntryKind.coerce(value) is expected

    def test_unknown(self):
        with pytest.raises(LocalizationError):
            EntryKind.coerce("Legend")


class TestState:
    def test_untranslated_is_unfinished(self):
        assert _unit().state("es") == UnitState.UNFINISHED

    def test_finished_translation(self):
        unit = _unit(translations={"es": Translation("Talud de tierra")})
        assert unit.state("es") == UnitState.TRANSLATED
        assert unit.state("fr") == UnitState.UNFINISHED
        assert unit.translation("es") == "Talud de tierra"

    def test_unfinished_translation_keeps_text(self):
        unit = _unit(translations={"es": Translation("Talud", finished=False)})
        assert unit.state("es") == UnitState.UNFINISHED
        assert unit.translation("es") == "Talud"

    def test_empty_text_is_not_translated(self):
        unit = _unit(translations={"es": Translation("")})
        assert unit.state("es") == UnitState.UNFINISHED
        assert unit.translation("es") is None

    def test_obsolete_wins(self):
        unit = _unit(obsolete=True, translations={"es": Translation("Talud viejo")})
        assert unit.state("es") == UnitState.OBSOLETE


class TestIdentity:
    def test_comment(self):
        assert _unit().comment == "Name of symbol 104"

    def test_unit_id_follows_source_text(self):
        assert _unit().unit_id == _unit().unit_id
        assert _unit().unit_id != _unit("Earth bank, old").unit_id

    def test_to_dict(self):
        unit = _unit(translations={"es": Translation("Talud de tierra")})
        assert unit.to_dict()["code"] == "104"
        assert "state" not in unit.to_dict()
        data = unit.to_dict("es")
        assert data["state"] == "translated"
        assert data["translation"] == "Talud de tierra"
        assert data["kind"] == "Name of symbol"
