"""
Root Typer application for the symcat CLI.
"""

from __future__ import annotations

import typer
from typer import Typer

from symcat.core.logging import configure_from_settings
from symcat.core.settings import get_settings

from .catalog import coverage, export, symbols, validate

app = Typer(
    name="symcat",
    help="symcat: orienteering symbol catalogs, translations and migration links.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from symcat import __version__

        typer.echo(f"symcat {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Overrides SYMCAT_LOG_LEVEL"),
) -> None:
    """Validate standards, check translation coverage and export catalogs."""
    configure_from_settings(get_settings(), level=log_level)


# ── Commands ─────────────────────────────────────────────────────────────

app.command("validate")(validate)
app.command("coverage")(coverage)
app.command("symbols")(symbols)
app.command("export")(export)
