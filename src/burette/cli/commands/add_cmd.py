# ABOUTME: The `burette add` command for storing a document with its metadata.
# ABOUTME: Takes metadata from options or prompts for it, pre-filling the title from EPUBs.

import logging
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from burette.cli.options import fail, library_option, resolve_library_path
from burette.cli.prompts import collect_metadata
from burette.core.library import Library
from burette.errors import BuretteError
from burette.formats.epub import EpubInfo, EpubReadError, read_epub_info
from burette.metadata.types import build_metadata

logger = logging.getLogger(__name__)

console = Console()


def _suggest(path: Path) -> EpubInfo | None:
    """Read what an EPUB says about itself, or None for other files."""
    if path.suffix.lower() != ".epub":
        return None
    try:
        return read_epub_info(path)
    except EpubReadError as exc:
        logger.debug("No metadata suggestion for %s: %s", path, exc)
        return None


@click.command("add")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@library_option
@click.option("--title", default=None, help="Title; when given, no prompts are shown.")
@click.option("--author", "authors", multiple=True, help="Author (repeatable, in order).")
@click.option("--isbn", "isbns", multiple=True, help="ISBN-13 (repeatable).")
@click.option("--doi", default=None, help="DOI of the document.")
def add(
    file: Path,
    library_path: Path | None,
    title: str | None,
    authors: tuple[str, ...],
    isbns: tuple[str, ...],
    doi: str | None,
) -> None:
    """Add a document to the library."""
    try:
        library = Library.open(resolve_library_path(library_path))
        if title is None:
            record = collect_metadata(_suggest(file))
        else:
            record = build_metadata(title, authors, isbns, doi)
        document_id = library.add_file(file, record)
    except BuretteError as exc:
        fail(console, exc)

    console.print(f"Added [bold]{escape(record.title)}[/bold] ({document_id.short})")
