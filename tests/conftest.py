"""
Shared pytest fixtures and configuration for symcat tests.

This module provides:
- Settings cache isolation
- Small hand-built standards (ISOM2000 / ISOM 2017-2 style)
- The Spanish ``.ts`` fixture used by import, export and CLI tests
"""

import sys
from pathlib import Path

import pytest

# Ensure symcat package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from symcat.catalog.library import StandardLibrary
from symcat.catalog.standard import Standard
from symcat.core.settings import clear_settings_cache

FIXTURES = Path(__file__).parent / "fixtures"

MIGRATION_NOTE = "Provided for migration from ISOM2000. Should not be used for new maps."


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if test_path.parts[0] == "cli":
            item.add_marker(pytest.mark.cli)
        else:
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Every test sees default settings, whatever the environment holds."""
    for var in (
        "SYMCAT_LOG_LEVEL",
        "SYMCAT_LOG_FORMAT",
        "SYMCAT_DEFAULT_LOCALE",
        "SYMCAT_COVERAGE_THRESHOLD",
        "SYMCAT_MIGRATION_SUFFIX",
        "SYMCAT_STRICT_MIGRATION_NOTICE",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def ts_path() -> Path:
    return FIXTURES / "map_symbols_es.ts"


@pytest.fixture
def ts_text(ts_path) -> str:
    return ts_path.read_text(encoding="utf-8")


@pytest.fixture
def isom2000() -> Standard:
    std = Standard("ISOM2000", description="International Specification for Orienteering Maps 2000")
    std.add_color(0, "Black 100%")
    std.add_color(1, "Brown 100%")
    std.add_symbol("101", "Contour")
    std.add_symbol("104", "Earth bank")
    std.add_symbol("106", "Earth wall")
    return std


@pytest.fixture
def isom2017() -> Standard:
    std = Standard("ISOM 2017-2")
    std.add_color(0, "Purple for course overprint")
    std.add_color(1, "Black 100%")
    std.add_color(2, "Brown 50%")
    std.add_symbol("101", "Contour", "A line joining points of equal height. Minimum length 0.6 mm.")
    std.add_symbol("104", "Earth bank")
    std.add_symbol("104.9", "Earth bank, minimum size", MIGRATION_NOTE)
    std.add_symbol("105", "Earth wall")
    return std


@pytest.fixture
def library(isom2000, isom2017) -> StandardLibrary:
    """Both standards finalized and registered."""
    isom2000.finalize().unwrap()
    isom2017.finalize().unwrap()
    return StandardLibrary([isom2000, isom2017])
