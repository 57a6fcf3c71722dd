# ABOUTME: The `burette remove` command for deleting documents by hash prefix, ISBN, or DOI.
# ABOUTME: Resolves every query first and removes nothing if any is ambiguous or unmatched.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from burette.cli.options import fail, library_option, resolve_library_path
from burette.core.library import Library
from burette.errors import BuretteError, ResolutionError

console = Console()


@click.command("remove")
@click.argument("queries", nargs=-1, required=True)
@library_option
def remove(queries: tuple[str, ...], library_path: Path | None) -> None:
    """Remove documents matching hash prefixes, ISBNs, or DOIs."""
    try:
        library = Library.open(resolve_library_path(library_path))
        result = library.remove(queries)
    except ResolutionError as exc:
        for failure in exc.failures:
            console.print(f"[red]{escape(failure.describe())}[/red]")
        console.print("[red]No documents were removed.[/red]")
        raise SystemExit(1) from exc
    except BuretteError as exc:
        fail(console, exc)

    for document_id, record in result.removed:
        console.print(f"Removed [bold]{escape(record.title)}[/bold] ({document_id.short})")

    for document_id in result.missing_files:
        console.print(f"[yellow]Warning:[/yellow] file for {document_id.short} was already missing")

    if not result.complete:
        for document_id, message in result.failed:
            console.print(f"[red]Failed to delete {document_id.short}:[/red] {escape(message)}")
        for document_id in result.not_attempted:
            console.print(f"[red]Not deleted:[/red] {document_id.short}")
        console.print("[yellow]Run `burette validate` to list leftover files.[/yellow]")
        raise SystemExit(1)
