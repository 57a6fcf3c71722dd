# ABOUTME: The `burette new` command for creating an empty library.
# ABOUTME: Writes the directory layout, version marker, and an empty index.

from pathlib import Path

import click
from rich.console import Console

from burette.cli.options import fail, library_option, resolve_library_path
from burette.core.library import Library
from burette.errors import BuretteError

console = Console()


@click.command("new")
@library_option
def new(library_path: Path | None) -> None:
    """Create a new, empty library."""
    path = resolve_library_path(library_path)
    try:
        Library.new(path)
    except BuretteError as exc:
        fail(console, exc)

    console.print(f"Created new library at [bold]{path}[/bold]")
