# ABOUTME: Interactive metadata prompts for the add and edit commands.
# ABOUTME: Collects title, authors, ISBNs, and DOI with Click, re-prompting on invalid input.

from collections.abc import Callable
from typing import TypeVar

import click

from burette.errors import InvalidMetadataError
from burette.formats.epub import EpubInfo
from burette.metadata.identifiers import normalize_doi, normalize_isbn
from burette.metadata.types import DocMetadata, clean_authors, clean_title

T = TypeVar("T")


def _checked(parse: Callable[[str], T]) -> Callable[[str], T]:
    """Wrap a parser so Click shows its error and asks again."""

    def value_proc(text: str) -> T:
        try:
            return parse(text)
        except InvalidMetadataError as exc:
            raise click.BadParameter(str(exc)) from exc

    return value_proc


def _clean_author(text: str) -> str:
    return clean_authors([text])[0]


def _prompt_many(first: str, again: str, label: str, parse: Callable[[str], str]) -> list[str]:
    """Ask ``first``; while the answer is yes, prompt for a value and ask ``again``."""
    values: list[str] = []
    if not click.confirm(first, default=False):
        return values
    while True:
        values.append(click.prompt(label, value_proc=_checked(parse)))
        if not click.confirm(again, default=False):
            return values


def prompt_title(default: str | None = None) -> str:
    return click.prompt("Title", default=default, value_proc=_checked(clean_title))


def prompt_authors() -> list[str]:
    return _prompt_many("Add an author?", "Add another author?", "Author", _clean_author)


def prompt_isbns() -> list[str]:
    return _prompt_many("Add an ISBN?", "Add another ISBN?", "ISBN", normalize_isbn)


def prompt_doi() -> str | None:
    if not click.confirm("Add a DOI?", default=False):
        return None
    return click.prompt("DOI", value_proc=_checked(normalize_doi))


def collect_metadata(suggestion: EpubInfo | None = None) -> DocMetadata:
    """Prompt for every metadata field and return a validated record.

    A title read from the document itself is offered as the default.
    """
    title = prompt_title(default=suggestion.title if suggestion else None)
    authors = prompt_authors()
    isbns = prompt_isbns()
    doi = prompt_doi()
    return DocMetadata(
        title=title,
        authors=tuple(authors),
        isbns=tuple(dict.fromkeys(isbns)),
        doi=doi,
    )
