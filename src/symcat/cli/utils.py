"""
CLI utility helpers: loading catalogs from ``.ts`` files and output formatting.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from symcat.catalog.standard import Standard
from symcat.catalog.validation import ValidationReport
from symcat.core.errors import CatalogError, StandardNotFoundError
from symcat.l10n.builder import BuildResult, build_standard
from symcat.l10n.store import LocalizationStore
from symcat.l10n.ts_format import ImportReport, import_document, read_ts

console = Console()
err_console = Console(stderr=True)


# ── Loading ──────────────────────────────────────────────────────────────


@dataclass
class Workspace:
    """Everything loaded from one translation file."""

    path: Path
    store: LocalizationStore
    import_report: ImportReport
    builds: dict[str, BuildResult] = field(default_factory=dict)
    requested_locale: str | None = None

    @property
    def locale(self) -> str:
        """The locale to report on: ``--locale``, else the file's language."""
        return self.requested_locale or self.import_report.locale

    def standard(self, name: str) -> Standard:
        build = self.builds.get(name)
        if build is None:
            fail(StandardNotFoundError(name, available=self.store.standards()))
        return build.standard


def load_workspace(
    path: Path,
    *,
    locale: str | None = None,
    standards: list[str] | None = None,
    allow_new_families: bool = False,
    build: bool = True,
) -> Workspace:
    """
    Import a ``.ts`` file and build a draft standard per context.

    ``locale`` only selects what commands report on; translations are always
    imported under the language the file declares.
    """
    try:
        doc = read_ts(path)
    except CatalogError as e:
        fail(e)
    store, report = import_document(doc, source_locator=path.name)
    workspace = Workspace(path=path, store=store, import_report=report, requested_locale=locale)
    if not build:
        return workspace
    for name in standards or store.standards():
        if name not in store.standards():
            fail(StandardNotFoundError(name, available=store.standards()))
        workspace.builds[name] = build_standard(store, name, allow_new_families=allow_new_families)
    return workspace


# ── Output helpers ───────────────────────────────────────────────────────


def fail(error: CatalogError) -> None:
    err_console.print(f"[bold red]Error[/bold red] ({error.kind}): {escape(error.message)}")
    raise typer.Exit(code=1)


def emit_json(payload: Any) -> None:
    console.print_json(json.dumps(payload, default=str))


def print_issues(report: ValidationReport) -> None:
    if not report.issues:
        console.print(f"[green]✓[/green] {report.standard}: no issues")
        return
    table = Table(title=report.standard, show_lines=False, pad_edge=False)
    table.add_column("severity")
    table.add_column("kind")
    table.add_column("code")
    table.add_column("message", overflow="fold")
    for issue in report.issues:
        style = "red" if issue.is_error else "yellow"
        table.add_row(
            f"[{style}]{issue.severity.value}[/{style}]",
            issue.kind,
            issue.code or "",
            escape(issue.message),
        )
    console.print(table)


def print_quarantine(report: ImportReport) -> None:
    if report.quarantine.count == 0:
        return
    err_console.print(
        f"[yellow]{report.quarantine.count} entr{'y' if report.quarantine.count == 1 else 'ies'} "
        f"quarantined[/yellow]: "
        + ", ".join(f"{k}={v}" for k, v in sorted(report.quarantine.by_reason().items()))
    )


def print_rows(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*("" if v is None else escape(str(v)) for v in row.values()))
    console.print(table)
