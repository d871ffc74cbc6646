"""Tests for the identifier scheme."""

import pytest

from symcat.catalog.codes import (
    SymbolCode,
    VariantKind,
    base_of,
    classify,
    is_descendant,
    is_migration_variant,
    parent_of,
    parse,
)
from symcat.core.errors import MalformedCodeError


class TestParse:
    @pytest.mark.parametrize(
        "text, segments",
        [
            ("104", (104,)),
            ("104.1", (104, 1)),
            ("104.10", (104, 10)),
            ("517.1.2", (517, 1, 2)),
            ("  301 ", (301,)),
            ("0", (0,)),
        ],
    )
    def test_valid_codes(self, text, segments):
        assert parse(text).segments == segments

    @pytest.mark.parametrize("text", ["", "10a", "104.", ".104", "104..1", "-1", "1 04", "104,1"])
    def test_malformed_codes(self, text):
        with pytest.raises(MalformedCodeError) as exc_info:
            parse(text)
        assert exc_info.value.kind == "MalformedCode"

    def test_integers_and_existing_codes(self):
        code = parse("104.1")
        assert parse(code) is code
        assert parse(7) == SymbolCode((7,))

    @pytest.mark.parametrize("value", [-1, True, 1.5, None])
    def test_rejects_other_values(self, value):
        with pytest.raises(MalformedCodeError):
            parse(value)

    @pytest.mark.parametrize("text", ["104", "104.1", "104.10", "517.1.2", "0"])
    def test_round_trip(self, text):
        assert parse(str(parse(text))).segments == parse(text).segments

    def test_leading_zeros_are_normalized(self):
        assert str(parse("0104.01")) == "104.1"


class TestOrdering:
    def test_integer_not_string_order(self):
        assert parse("104.2") < parse("104.10")
        assert parse("99") < parse("104")

    def test_sorting(self):
        codes = [parse(c) for c in ["104.10", "104", "104.9", "104.2", "103"]]
        assert [str(c) for c in sorted(codes)] == ["103", "104", "104.2", "104.9", "104.10"]

    def test_hashable(self):
        assert {parse("104.1"): "x"}[parse(" 104.1")] == "x"


class TestRelations:
    def test_parent_of(self):
        assert str(parent_of("104.1")) == "104"
        assert str(parent_of("517.1.2")) == "517.1"
        assert parent_of("104") is None

    def test_base_and_descendant(self):
        assert str(base_of("517.1.2")) == "517"
        assert is_descendant("104.1", "104")
        assert is_descendant("104.1.3", "104")
        assert not is_descendant("104", "104")
        assert not is_descendant("1041", "104")

    def test_migration_variant(self):
        assert is_migration_variant("104.9")
        assert not is_migration_variant("104.1")
        assert not is_migration_variant("9")
        assert is_migration_variant("104.8", suffix=8)


class TestClassify:
    def test_primary_and_variant(self):
        assert classify("104", "") == VariantKind.PRIMARY
        assert classify("104.1", "A small earth bank.") == VariantKind.VARIANT

    def test_migration_requires_notice(self):
        assert classify("104.9", "Provided for migration from ISOM2000.") == VariantKind.MIGRATION_COMPAT
        assert classify("104.9", "Earth bank, minimum size") == VariantKind.VARIANT

    def test_notice_without_suffix(self):
        assert classify("113.1", "Should not be used for new maps.") == VariantKind.MIGRATION_COMPAT
