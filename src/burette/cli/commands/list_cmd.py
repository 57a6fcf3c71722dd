# ABOUTME: The `burette list` command for listing documents in the library.
# ABOUTME: Displays a Rich table of identifiers and metadata in identifier order.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from burette.cli.options import fail, library_option, resolve_library_path
from burette.core.library import Library
from burette.errors import BuretteError

console = Console()


@click.command("list")
@library_option
def list_documents(library_path: Path | None) -> None:
    """List all documents in the library."""
    try:
        documents = Library.open(resolve_library_path(library_path)).list()
    except BuretteError as exc:
        fail(console, exc)

    if not documents:
        console.print("[yellow]No documents in the library.[/yellow]")
        return

    table = Table()
    table.add_column("Hash", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Authors")
    table.add_column("ISBN")
    table.add_column("DOI")

    for document_id, record in documents:
        table.add_row(
            document_id.short,
            escape(record.title),
            escape(record.author) or "[dim]unknown[/dim]",
            "\n".join(record.isbns),
            escape(record.doi or ""),
        )

    console.print(table)
    console.print(f"\n[dim]{len(documents)} document(s)[/dim]")
