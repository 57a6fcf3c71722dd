# ABOUTME: Shared Click options and error reporting for burette CLI commands.
# ABOUTME: Provides the --library option and a helper that turns core errors into exit status 1.

from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape

from burette.store.layout import DEFAULT_LIBRARY_PATH

library_option = click.option(
    "-l",
    "--library",
    "library_path",
    type=click.Path(path_type=Path),
    default=None,
    envvar="BURETTE_LIBRARY",
    help=f"Path to the library directory (default: {DEFAULT_LIBRARY_PATH})",
)


def resolve_library_path(library_path: Path | None) -> Path:
    return library_path or DEFAULT_LIBRARY_PATH


def fail(console: Console, exc: Exception) -> NoReturn:
    """Print an error in red and exit with status 1."""
    console.print(f"[red]Error:[/red] {escape(str(exc))}", soft_wrap=True)
    raise SystemExit(1) from exc
