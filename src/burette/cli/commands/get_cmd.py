# ABOUTME: The `burette get` command for copying a document out of the library.
# ABOUTME: Never overwrites an existing file; defaults the file name to the document title.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from burette.cli.options import fail, library_option, resolve_library_path
from burette.core.library import Library
from burette.errors import BuretteError

console = Console()


@click.command("get")
@click.argument("query")
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Where to write the document (default: ./<title>.<ext>).",
)
@library_option
def get(query: str, output_path: Path | None, library_path: Path | None) -> None:
    """Retrieve a document by hash prefix, ISBN, or DOI."""
    try:
        library = Library.open(resolve_library_path(library_path))
        written = library.get(query, output_path)
    except BuretteError as exc:
        fail(console, exc)

    console.print(f"Wrote [bold]{escape(str(written))}[/bold]")
