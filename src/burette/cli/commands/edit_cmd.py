# ABOUTME: The `burette edit` command for changing one metadata field of a document.
# ABOUTME: Takes the new value from arguments or prompts for it when none are given.

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from burette.cli.options import fail, library_option, resolve_library_path
from burette.cli.prompts import prompt_authors, prompt_doi, prompt_isbns, prompt_title
from burette.core.library import EDITABLE_FIELDS, Library
from burette.errors import BuretteError, InvalidMetadataError
from burette.metadata.types import DocMetadata

console = Console()


def _value_from_args(field_name: str, values: tuple[str, ...]) -> str | list[str] | None:
    if field_name in ("authors", "isbns"):
        return list(values)
    if len(values) != 1:
        raise InvalidMetadataError(f"{field_name} takes exactly one value")
    return values[0]


def _value_from_prompt(field_name: str, current: DocMetadata) -> str | list[str] | None:
    if field_name == "title":
        return prompt_title(default=current.title)
    if field_name == "authors":
        return prompt_authors()
    if field_name == "isbns":
        return prompt_isbns()
    return prompt_doi()


@click.command("edit")
@click.argument("query")
@click.argument("field_name", metavar="FIELD", type=click.Choice(EDITABLE_FIELDS))
@click.argument("values", nargs=-1)
@library_option
def edit(
    query: str, field_name: str, values: tuple[str, ...], library_path: Path | None
) -> None:
    """Edit the title, authors, ISBNs, or DOI of a document.

    Without VALUES, the new value is asked for interactively.
    """
    try:
        library = Library.open(resolve_library_path(library_path))
        if values:
            value = _value_from_args(field_name, values)
        else:
            _, current = library.find(query)
            value = _value_from_prompt(field_name, current)
        updated = library.edit(query, field_name, value)
    except BuretteError as exc:
        fail(console, exc)

    console.print(f"Updated {field_name} of [bold]{escape(updated.title)}[/bold]")
