"""Tests for catalog settings and their environment overrides."""

import pytest
from pydantic import ValidationError

from symcat.catalog.codes import has_migration_notice, is_migration_variant
from symcat.core.settings import CatalogSettings, clear_settings_cache, get_settings


class TestCatalogSettings:
    def test_defaults(self):
        settings = CatalogSettings()
        assert settings.migration_suffix == 9
        assert settings.default_locale == "en"
        assert settings.coverage_threshold == 1.0
        assert settings.strict_migration_notice is True

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("SYMCAT_DEFAULT_LOCALE", "fi")
        monkeypatch.setenv("SYMCAT_COVERAGE_THRESHOLD", "0.8")
        settings = CatalogSettings()
        assert settings.default_locale == "fi"
        assert settings.coverage_threshold == 0.8

    def test_log_level_is_normalized(self):
        assert CatalogSettings(log_level="debug").log_level == "DEBUG"

    def test_rejects_unknown_log_format(self):
        with pytest.raises(ValidationError):
            CatalogSettings(log_format="xml")

    def test_rejects_threshold_above_one(self):
        with pytest.raises(ValidationError):
            CatalogSettings(coverage_threshold=1.5)


class TestSettingsCache:
    def test_cached_instance(self):
        assert get_settings() is get_settings()

    def test_clear_cache_reloads(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("SYMCAT_MIGRATION_SUFFIX", "8")
        clear_settings_cache()
        second = get_settings()
        assert second is not first
        assert second.migration_suffix == 8
        assert is_migration_variant("104.8")
        assert not is_migration_variant("104.9")


class TestNoticePatterns:
    @pytest.mark.parametrize(
        "text",
        [
            "Provided for migration from ISOM2000.",
            "This symbol should not be used for new maps.",
            "Deprecated in favour of 105.",
            "Use is DISCOURAGED.",
        ],
    )
    def test_default_patterns_match(self, text):
        assert has_migration_notice(text)

    def test_plain_description(self):
        assert not has_migration_notice("A steep earth bank. Minimum length 0.6 mm.")

    def test_custom_patterns(self):
        assert has_migration_notice("Nur für Altkarten", patterns=[r"altkarten"])
