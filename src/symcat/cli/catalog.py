"""
CLI: ``symcat validate | coverage | symbols | export``: catalog commands.

Every command reads a Qt Linguist ``.ts`` file, treats each ``<context>``
as a standard and works on the draft standards built from it.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path

import typer
from rich.markup import escape

from symcat.catalog.library import StandardLibrary
from symcat.catalog.migration import MigrationResolver
from symcat.catalog.validation import ValidationIssue, ValidationReport
from symcat.core.errors import CatalogError, ConfigError, StandardNotFoundError
from symcat.core.settings import get_settings
from symcat.export.flat import flatten_standard
from symcat.export.report import symbol_report_html
from symcat.export.schema import migration_json_schema, migration_schema
from symcat.l10n.ts_format import export_document, write_ts

from .utils import (
    Workspace,
    console,
    emit_json,
    err_console,
    fail,
    load_workspace,
    print_issues,
    print_quarantine,
    print_rows,
)


class ExportFormat(str, Enum):
    TS = "ts"
    FLAT = "flat"
    HTML = "html"
    MIGRATION = "migration"


def _combined_report(workspace: Workspace, name: str) -> ValidationReport:
    """Finalize one built standard; import and build rejections are reported as errors."""
    build = workspace.builds[name]
    report = ValidationReport(name)
    rejected = [e for e in workspace.import_report.quarantine if (e.position or "").rpartition("#")[0] == name]
    for entry in [*rejected, *build.quarantine]:
        report.issues.append(
            ValidationIssue(kind=entry.reason_code, message=entry.reason_detail, code=entry.position, standard=name)
        )
    result = build.standard.finalize()
    report.extend(result.unwrap().issues if result.is_ok() else result.error.report.issues)
    return report


def validate(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Qt Linguist .ts file"),
    standard: list[str] | None = typer.Option(None, "--standard", "-s", help="Only these contexts"),
    allow_new_families: bool = typer.Option(
        False, "--allow-new-families", help="Accept variants whose parent is absent as family roots"
    ),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Finalize every standard in a .ts file and report all issues."""
    workspace = load_workspace(path, standards=standard, allow_new_families=allow_new_families)
    reports = [_combined_report(workspace, name) for name in workspace.builds]

    if json_out:
        emit_json(
            {
                "file": path.name,
                "import": workspace.import_report.to_dict(),
                "standards": [r.to_dict() for r in reports],
            }
        )
    else:
        print_quarantine(workspace.import_report)
        for report in reports:
            print_issues(report)

    if not workspace.import_report.ok or any(not r.ok for r in reports):
        raise typer.Exit(code=1)


def coverage(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Qt Linguist .ts file"),
    locale: str | None = typer.Option(None, "--locale", "-l", help="Defaults to the file's language"),
    standard: list[str] | None = typer.Option(None, "--standard", "-s"),
    threshold: float | None = typer.Option(None, "--threshold", "-t", min=0.0, max=1.0),
    check: bool = typer.Option(False, "--check", help="Exit 1 if any standard is below the threshold"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Translation coverage per standard."""
    workspace = load_workspace(path, locale=locale, build=False)
    store = workspace.store
    names = standard or store.standards()
    for name in names:
        if name not in store.standards():
            fail(StandardNotFoundError(name, available=store.standards()))
    threshold = get_settings().coverage_threshold if threshold is None else threshold
    rows = [store.coverage_summary(name, workspace.locale) for name in names]
    below = [row["standard"] for row in rows if row["coverage"] < threshold]

    if json_out:
        emit_json({"locale": workspace.locale, "threshold": threshold, "standards": rows, "below": below})
    else:
        print_rows(
            [{**row, "coverage": f"{row['coverage']:.1%}"} for row in rows],
            title=f"Coverage ({workspace.locale})",
        )

    if check and below:
        err_console.print(f"[red]Below {threshold:.0%}[/red]: {', '.join(below)}")
        raise typer.Exit(code=1)


def symbols(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Qt Linguist .ts file"),
    name: str = typer.Argument(..., help="Standard (context) name"),
    variants_of: str | None = typer.Option(None, "--variants-of", help="Only variants of this code"),
    deprecated: bool = typer.Option(False, "--deprecated", help="Only migration variants"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List the symbols of one standard."""
    workspace = load_workspace(path, standards=[name])
    std = workspace.standard(name)
    try:
        selected = std.symbols.variants_of(variants_of) if variants_of else list(std.symbols)
    except CatalogError as e:
        fail(e)
    if deprecated:
        selected = [s for s in selected if s.is_migration]

    if json_out:
        emit_json([s.to_dict() for s in selected])
        return
    print_rows(
        [
            {
                "code": str(s.code),
                "name": s.name,
                "kind": s.variant_kind.value,
                "geometry": s.geometry.value,
                "parent": str(s.parent_code) if s.parent_code else None,
            }
            for s in selected
        ],
        title=name,
    )


def _resolver(workspace: Workspace, crt: Path, old: str | None, new: str | None) -> MigrationResolver:
    if not old or not new:
        fail(ConfigError("--crt needs both --from and --to"))
    library = StandardLibrary()
    for name in dict.fromkeys([old, new]):
        std = workspace.standard(name)
        result = std.finalize()
        if result.is_err():
            fail(result.error)
        library.register(std)
    resolver = MigrationResolver(library)
    loaded = resolver.load_crt(crt.read_text(encoding="utf-8"), old, new, source_locator=crt.name)
    for issue in loaded.issues:
        err_console.print(f"[yellow]{issue.kind}[/yellow] {issue.code or ''}: {escape(issue.message)}")
    return resolver


def export(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Qt Linguist .ts file"),
    fmt: ExportFormat = typer.Option(ExportFormat.TS, "--format", "-f"),
    standard: list[str] | None = typer.Option(None, "--standard", "-s"),
    locale: str | None = typer.Option(None, "--locale", "-l"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write here instead of stdout"),
    crt: Path | None = typer.Option(None, "--crt", exists=True, dir_okay=False, help="Cross-reference table"),
    old: str | None = typer.Option(None, "--from", help="Standard the CRT migrates from"),
    new: str | None = typer.Option(None, "--to", help="Standard the CRT migrates to"),
    json_schema: bool = typer.Option(False, "--json-schema", help="Emit the migration JSON Schema only"),
) -> None:
    """Export translations, flat renderer records, an HTML report or migration links."""
    if fmt == ExportFormat.MIGRATION and json_schema:
        _write(json.dumps(migration_json_schema(), indent=2), output)
        return

    needed = standard
    if crt is not None and needed:
        needed = list(dict.fromkeys([*needed, *(n for n in (old, new) if n)]))
    workspace = load_workspace(path, locale=locale, standards=needed)
    names = standard or list(workspace.builds)
    resolver = _resolver(workspace, crt, old, new) if crt is not None else None

    if fmt == ExportFormat.TS:
        text = write_ts(export_document(workspace.store, workspace.locale, standards=names))
    elif fmt == ExportFormat.FLAT:
        flat = [
            flatten_standard(workspace.standard(n), workspace.store, workspace.locale, resolver=resolver)
            for n in names
        ]
        text = json.dumps([f.model_dump() for f in flat], indent=2, ensure_ascii=False)
    elif fmt == ExportFormat.HTML:
        if len(names) != 1:
            fail(ConfigError("The HTML report covers one standard; pick it with --standard"))
        text = symbol_report_html(
            workspace.standard(names[0]), workspace.store, workspace.locale, resolver=resolver
        )
    else:
        if resolver is None:
            fail(ConfigError("Migration export needs --crt, --from and --to"))
        text = migration_schema(resolver).model_dump_json(indent=2)

    _write(text, output)


def _write(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text)
        return
    output.write_text(text, encoding="utf-8")
    console.print(f"[green]✓[/green] Wrote {output}")
