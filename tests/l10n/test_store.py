"""Tests for the localization store."""

import threading

import pytest

from symcat.core.errors import (
    DuplicateCodeError,
    DuplicateOrdinalError,
    LocalizationError,
    StaleTranslationKeyError,
)
from symcat.l10n.store import LocalizationStore
from symcat.l10n.units import EntryKind, Translation, UnitState

STD = "ISOM 2017-2"
NAME = EntryKind.SYMBOL_NAME


@pytest.fixture
def store() -> LocalizationStore:
    return LocalizationStore()


class TestRecordSource:
    def test_same_text_is_noop(self, store):
        first = store.record_source(STD, NAME, "104", "Earth bank")
        assert store.record_source(STD, "Name of symbol", " 104", "Earth bank") is first
        assert len(store) == 1

    def test_changed_text_obsoletes_previous(self, store):
        store.record_source(STD, NAME, "104", "Earth bank")
        store.set_translation(STD, NAME, "104", "es", "Talud")
        new = store.record_source(STD, NAME, "104", "Earth bank (revised)")

        old, current = store.history(STD, NAME, "104")
        assert old.obsolete and old.state("es") == UnitState.OBSOLETE
        assert current is new
        assert new.state("es") == UnitState.UNFINISHED
        assert old.translation("es") == "Talud"

    def test_revert_revives_old_unit(self, store):
        original = store.record_source(STD, NAME, "104", "Earth bank")
        store.set_translation(STD, NAME, "104", "es", "Talud")
        store.record_source(STD, NAME, "104", "Earth bank (revised)")
        assert store.record_source(STD, NAME, "104", "Earth bank") is original
        assert store.current(STD, NAME, "104").state("es") == UnitState.TRANSLATED
        assert len(store.history(STD, NAME, "104")) == 2

    def test_at_most_one_current_unit(self, store):
        for text in ["a", "b", "c", "b", "d"]:
            store.record_source(STD, NAME, "104", text)
        history = store.history(STD, NAME, "104")
        assert len(history) == 4
        assert [u.source for u in history if not u.obsolete] == ["d"]

    def test_identical_text_in_two_standards(self, store):
        a = store.record_source("ISOM2000", NAME, "104", "Earth bank")
        b = store.record_source(STD, NAME, "104", "Earth bank")
        assert a is not b
        store.set_translation(STD, NAME, "104", "es", "Talud de tierra")
        assert a.state("es") == UnitState.UNFINISHED
        assert b.state("es") == UnitState.TRANSLATED

    def test_unknown_kind(self, store):
        with pytest.raises(LocalizationError):
            store.record_source(STD, "Legend", "104", "Earth bank")


class TestRestore:
    def test_duplicate_text(self, store):
        store.restore(STD, NAME, "104", "Earth bank")
        with pytest.raises(DuplicateCodeError):
            store.restore(STD, NAME, "104", "Earth bank", obsolete=True)

    def test_second_current_unit(self, store):
        store.restore(STD, NAME, "104", "Earth bank")
        with pytest.raises(DuplicateCodeError):
            store.restore(STD, NAME, "104", "Earth bank, new")
        store.restore(STD, NAME, "104", "Earth bank, old", obsolete=True)
        assert len(store.history(STD, NAME, "104")) == 2

    def test_translations_are_kept(self, store):
        unit = store.restore(STD, NAME, "104", "Earth bank", translations={"es": Translation("Talud")})
        assert unit.state("es") == UnitState.TRANSLATED

    def test_second_color_text_is_duplicate_ordinal(self, store):
        store.restore(STD, EntryKind.COLOR, 2, "Brown 50%")
        with pytest.raises(DuplicateOrdinalError) as exc_info:
            store.restore(STD, EntryKind.COLOR, 2, "Black 100%")
        assert exc_info.value.ordinal == 2
        assert exc_info.value.context.standard == STD
        assert "Brown 50%" in exc_info.value.message


class TestRetire:
    def test_retire(self, store):
        store.record_source(STD, NAME, "104", "Earth bank")
        retired = store.retire(STD, NAME, "104")
        assert retired.obsolete
        assert store.current(STD, NAME, "104") is None
        assert store.retire(STD, NAME, "104") is None


class TestTranslate:
    def test_stale_key(self, store):
        with pytest.raises(StaleTranslationKeyError) as exc_info:
            store.set_translation(STD, NAME, "104.2", "es", "Talud")
        assert exc_info.value.kind == "StaleTranslationKey"

    def test_stale_after_retire(self, store):
        store.record_source(STD, NAME, "104", "Earth bank")
        store.retire(STD, NAME, "104")
        with pytest.raises(StaleTranslationKeyError):
            store.set_translation(STD, NAME, "104", "es", "Talud")

    def test_unfinished(self, store):
        store.record_source(STD, NAME, "104", "Earth bank")
        unit = store.set_translation(STD, NAME, "104", "es", "Talud", finished=False)
        assert unit.state("es") == UnitState.UNFINISHED
        assert store.locales() == ["es"]


class TestCoverage:
    def test_seventy_percent(self, store):
        for i in range(10):
            store.record_source(STD, NAME, str(101 + i), f"Symbol {i}")
        for i in range(7):
            store.set_translation(STD, NAME, str(101 + i), "es", f"Símbolo {i}")
        assert store.coverage(STD, "es") == pytest.approx(0.7)

    def test_obsolete_units_are_not_counted(self, store):
        store.record_source(STD, NAME, "104", "Earth bank")
        store.set_translation(STD, NAME, "104", "es", "Talud")
        store.record_source(STD, NAME, "104", "Earth bank (revised)")
        assert store.coverage(STD, "es") == 0.0
        summary = store.coverage_summary(STD, "es")
        assert summary["obsolete"] == 1
        assert summary["unfinished"] == 1
        assert summary["translated"] == 0

    def test_empty_standard_is_covered(self, store):
        assert store.coverage("ISSOM", "es") == 1.0

    def test_coverage_is_per_locale(self, store):
        store.record_source(STD, NAME, "104", "Earth bank")
        store.set_translation(STD, NAME, "104", "es", "Talud")
        assert store.coverage(STD, "es") == 1.0
        assert store.coverage(STD, "fr") == 0.0


class TestQueries:
    def test_units_and_standards(self, store):
        store.record_source("ISOM2000", NAME, "104", "Earth bank")
        store.record_source(STD, EntryKind.COLOR, 0, "Purple")
        store.record_source(STD, NAME, "104", "Earth bank")
        store.record_source(STD, NAME, "104", "Earth bank (revised)")
        assert store.standards() == ["ISOM2000", STD]
        assert len(store.units(STD)) == 3
        assert len(store.units(STD, include_obsolete=False)) == 2
        assert store.units("ISSOM") == []


class TestConcurrency:
    def test_parallel_writers_keep_one_current_unit(self, store):
        def writer(n: int) -> None:
            for i in range(50):
                store.record_source(STD, NAME, "104", f"Earth bank {n}.{i}")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        history = store.history(STD, NAME, "104")
        assert len(history) == 200
        assert sum(1 for u in history if not u.obsolete) == 1


class TestRevisedWording:
    def test_only_revised_unit_gets_translation(self, store):
        store.record_source(STD, "Name of symbol", "104", "Earth bank")
        store.record_source(STD, "Name of symbol", "104", "Earth bank (revised)")
        store.set_translation(STD, "Name of symbol", "104", "es", "Terraplén revisado")
        first, second = store.history(STD, NAME, "104")
        assert first.state("es") == UnitState.OBSOLETE
        assert second.state("es") == UnitState.TRANSLATED
        assert first.translation("es") is None
