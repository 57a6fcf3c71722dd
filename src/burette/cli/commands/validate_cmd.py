# ABOUTME: The `burette validate` command for checking library integrity.
# ABOUTME: Reports every mismatch between the index and the document store, then exits 1 if any.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from burette.cli.options import fail, library_option, resolve_library_path
from burette.core.library import Library
from burette.core.validator import FindingKind
from burette.errors import BuretteError, LibraryNotFoundError

console = Console()

_ISSUE_LABELS = {
    FindingKind.VERSION_MISMATCH: "Version mismatch",
    FindingKind.CORRUPT_INDEX: "Corrupt index",
    FindingKind.INVALID_ENTRY: "Invalid entry",
    FindingKind.HASH_MISMATCH: "Hash mismatch",
    FindingKind.MISSING_DOCUMENT: "Missing document",
    FindingKind.ORPHAN_DOCUMENT: "Orphan document",
}


@click.command("validate")
@library_option
def validate(library_path: Path | None) -> None:
    """Validate library integrity: version, index, and stored files."""
    path = resolve_library_path(library_path)
    try:
        if not path.is_dir():
            raise LibraryNotFoundError(path)
        report = Library(path).validate()
    except BuretteError as exc:
        fail(console, exc)

    if report.is_valid:
        console.print(f"[green]All {report.ok} document(s) verified.[/green]")
        return

    table = Table()
    table.add_column("Issue", style="red", no_wrap=True)
    table.add_column("Details")

    for finding in report.findings:
        table.add_row(_ISSUE_LABELS[finding.kind], escape(finding.message))

    console.print(table)
    console.print(
        f"\n[red]{len(report.findings)} issue(s) found, "
        f"{report.ok} document(s) verified.[/red]"
    )
    raise SystemExit(1)
