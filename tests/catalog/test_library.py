"""Tests for the library of standards."""

import pytest

from symcat.catalog.library import StandardLibrary
from symcat.catalog.standard import Standard
from symcat.core.errors import DuplicateStandardError, LibraryValidationError, StandardNotFoundError


class TestRegister:
    def test_register_and_get(self, isom2000):
        lib = StandardLibrary()
        lib.register(isom2000)
        assert lib.get("ISOM2000") is isom2000
        assert "ISOM2000" in lib
        assert len(lib) == 1

    def test_duplicate_name(self, isom2000):
        lib = StandardLibrary([isom2000])
        with pytest.raises(DuplicateStandardError):
            lib.register(Standard("ISOM2000"))

    def test_replace_draft(self, isom2000):
        lib = StandardLibrary([isom2000])
        replacement = Standard("ISOM2000")
        lib.register(replacement, replace=True)
        assert lib.get("ISOM2000") is replacement

    def test_published_never_replaced(self, isom2000):
        isom2000.finalize().unwrap()
        isom2000.publish()
        lib = StandardLibrary([isom2000])
        with pytest.raises(DuplicateStandardError):
            lib.register(Standard("ISOM2000"), replace=True)


class TestLookup:
    def test_not_found(self, isom2000):
        lib = StandardLibrary([isom2000])
        with pytest.raises(StandardNotFoundError) as exc_info:
            lib.get("ISSOM")
        assert "ISOM2000" in exc_info.value.message
        assert lib.find("ISSOM") is None

    def test_names_and_iteration_keep_order(self, isom2000, isom2017):
        lib = StandardLibrary([isom2017, isom2000])
        assert lib.names() == ["ISOM 2017-2", "ISOM2000"]
        assert [s.name for s in lib] == ["ISOM 2017-2", "ISOM2000"]

    def test_published(self, library):
        library.get("ISOM2000").publish()
        assert [s.name for s in library.published()] == ["ISOM2000"]


class TestFinalizeAll:
    def test_all_ok(self, isom2000, isom2017):
        lib = StandardLibrary([isom2000, isom2017])
        reports = lib.finalize_all().unwrap()
        assert len(reports) == 2
        assert all(s.is_finalized for s in lib)

    def test_failure_is_reported(self, isom2000):
        broken = Standard("ISSprOM")
        broken.add_symbol("101.1", "Contour, dashed")
        lib = StandardLibrary([isom2000, broken])
        result = lib.finalize_all()
        assert result.is_err()
        assert isinstance(result.error, LibraryValidationError)
        assert list(result.error.reports) == ["ISSprOM"]
        assert isom2000.is_finalized
        assert broken.is_draft

    def test_every_failing_report_is_kept(self, isom2000):
        a = Standard("ISSprOM")
        a.add_symbol("301.2", "Uncrossable body of water, bank")
        b = Standard("ISSOM")
        b.add_symbol("101.1", "Contour, dashed")
        b.add_symbol("102.9", "Form line, old")
        result = StandardLibrary([a, isom2000, b]).finalize_all()

        error = result.error
        assert error.kind == "LibraryValidation"
        assert sorted(error.reports) == ["ISSOM", "ISSprOM"]
        assert [(i.kind, i.code) for i in error.reports["ISSprOM"].issues] == [("OrphanVariant", "301.2")]
        assert sorted(i.kind for i in error.reports["ISSOM"].errors) == [
            "MissingMigrationNotice",
            "OrphanVariant",
            "OrphanVariant",
        ]
        data = error.to_dict()
        assert data["standards"]["ISSprOM"]["issues"][0]["kind"] == "OrphanVariant"
        with pytest.raises(LibraryValidationError):
            result.unwrap()
