# ABOUTME: EPUB metadata extraction using ebooklib, for pre-filling add prompts.
# ABOUTME: Defensive wrapper that handles malformed files gracefully.

import logging
from dataclasses import dataclass, field
from pathlib import Path

from ebooklib import epub

from burette.metadata.identifiers import try_normalize_isbn

logger = logging.getLogger(__name__)


class EpubReadError(Exception):
    """Raised when an EPUB file cannot be read or parsed."""


@dataclass
class EpubInfo:
    """Metadata an EPUB declares about itself. Every field may be missing."""

    title: str | None = None
    authors: list[str] = field(default_factory=list)
    isbns: list[str] = field(default_factory=list)


def _get_metadata_value(book: epub.EpubBook, namespace: str, name: str) -> str | None:
    """Extract a single metadata value from an EpubBook, or None if missing."""
    values = book.get_metadata(namespace, name)
    if not values:
        return None
    # Metadata entries are tuples of (value, attributes)
    value = values[0][0]
    return str(value).strip() if value else None


def _get_authors(book: epub.EpubBook) -> list[str]:
    """Extract all author names from an EpubBook."""
    creators = book.get_metadata("DC", "creator")
    if not creators:
        return []
    return [str(entry[0]).strip() for entry in creators if entry[0]]


def _get_isbns(book: epub.EpubBook) -> list[str]:
    """Collect identifiers that are valid ISBN-13s, normalized.

    Identifiers are often written as ``urn:isbn:978...``; the scheme prefix
    is dropped before parsing.
    """
    isbns: list[str] = []
    for value, _attrs in book.get_metadata("DC", "identifier"):
        if not value:
            continue
        text = str(value).strip()
        if text.lower().startswith("urn:isbn:"):
            text = text[len("urn:isbn:") :]
        isbn = try_normalize_isbn(text)
        if isbn is not None and isbn not in isbns:
            isbns.append(isbn)
    return isbns


def read_epub_info(path: Path) -> EpubInfo:
    """Extract title, authors, and ISBNs from an EPUB file.

    Raises:
        EpubReadError: If the file cannot be read or parsed.
    """
    if not path.exists():
        raise EpubReadError(f"File not found: {path}")

    try:
        book = epub.read_epub(str(path), options={"ignore_ncx": True})
    except Exception as exc:
        raise EpubReadError(f"Failed to read EPUB: {path}: {exc}") from exc

    info = EpubInfo(
        title=_get_metadata_value(book, "DC", "title"),
        authors=_get_authors(book),
        isbns=_get_isbns(book),
    )
    logger.debug("Read EPUB metadata from %s: %s", path, info)
    return info
