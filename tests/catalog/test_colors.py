"""Tests for the color registry."""

import pytest

from symcat.catalog.colors import ColorRegistry, ColorTint, parse_tint
from symcat.core.errors import (
    CatalogStateError,
    ColorNotFoundError,
    ColorOrderError,
    DuplicateOrdinalError,
    MalformedCodeError,
)


@pytest.fixture
def registry() -> ColorRegistry:
    reg = ColorRegistry("ISOM 2017-2")
    reg.add(0, "Purple for course overprint")
    reg.add(2, "Black 100%")
    return reg


class TestAdd:
    def test_duplicate_ordinal(self, registry):
        """Ordinal 2 named "Black 100%" added twice with different text fails."""
        with pytest.raises(DuplicateOrdinalError) as exc_info:
            registry.add(2, "Black 65%")
        assert exc_info.value.kind == "DuplicateOrdinal"
        assert exc_info.value.context.standard == "ISOM 2017-2"
        assert registry.lookup(2).name == "Black 100%"

    def test_string_ordinal(self, registry):
        assert registry.add("3", "Brown 50%").ordinal == 3

    @pytest.mark.parametrize("ordinal", [-1, "1.5", "x"])
    def test_malformed_ordinal(self, registry, ordinal):
        with pytest.raises(MalformedCodeError):
            registry.add(ordinal, "Blue")

    def test_tint_is_parsed(self, registry):
        assert registry.lookup(2).tint == ColorTint("Black", 100.0)
        assert registry.lookup(0).tint is None

    def test_frozen(self, registry):
        registry.freeze()
        with pytest.raises(CatalogStateError):
            registry.add(5, "Yellow")
        with pytest.raises(CatalogStateError):
            registry.replace(2, "Black 65%")
        with pytest.raises(CatalogStateError):
            registry.remove(2)
        assert not hasattr(registry, "thaw")


class TestReplaceRemove:
    def test_replace_keeps_slot(self, registry):
        color = registry.replace(2, "Black 65%")
        assert color.ordinal == 2
        assert color.tint == ColorTint("Black", 65.0)
        assert [c.name for c in registry] == ["Purple for course overprint", "Black 65%"]

    def test_replace_unknown(self, registry):
        with pytest.raises(ColorNotFoundError):
            registry.replace(7, "Yellow")

    def test_remove(self, registry):
        removed = registry.remove("0")
        assert removed.name == "Purple for course overprint"
        assert [c.ordinal for c in registry] == [2]
        with pytest.raises(ColorNotFoundError):
            registry.remove(0)

    def test_removed_inherited_slot_is_not_reused(self):
        reg = ColorRegistry("ISSprOM 2019", append_after=3)
        reg._inherit(ColorRegistry("x").add(3, "Brown 100%"))
        reg.remove(3)
        with pytest.raises(ColorOrderError):
            reg.add(3, "Brown 50%")


class TestLookup:
    def test_not_found(self, registry):
        with pytest.raises(ColorNotFoundError):
            registry.lookup(7)

    def test_get_returns_none(self, registry):
        assert registry.get(7) is None
        assert registry.get("bad") is None

    def test_iteration_in_print_order(self, registry):
        registry.add(1, "Green 100%")
        assert [c.ordinal for c in registry] == [0, 1, 2]
        assert len(registry) == 3
        assert 1 in registry
        assert 9 not in registry
        assert None not in registry


class TestAppendOnly:
    def test_revision_colors_follow_inherited(self):
        reg = ColorRegistry("ISOM 2017-2", append_after=4)
        with pytest.raises(ColorOrderError):
            reg.add(3, "Blue 50%")
        assert reg.add(5, "Blue 50%").ordinal == 5


class TestValidate:
    def test_missing_name_is_warning(self, registry):
        registry.add(4, "  ")
        [issue] = registry.validate()
        assert issue.kind == "MissingName"
        assert not issue.is_error


class TestParseTint:
    def test_percentages(self):
        assert parse_tint("Brown 50%") == ColorTint("Brown", 50.0)
        assert parse_tint("Black 12.5 %") == ColorTint("Black", 12.5)

    def test_no_percentage(self):
        assert parse_tint("Opaque white") is None
