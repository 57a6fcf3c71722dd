# ABOUTME: Core metadata data structures for documents stored in a burette library.
# ABOUTME: DocMetadata is the record the index keeps for each document identifier.

from dataclasses import dataclass
from enum import Enum

from burette.errors import InvalidMetadataError
from burette.metadata.identifiers import normalize_doi, normalize_isbn


class FileFormat(Enum):
    """Document file formats the library recognizes, valued by MIME type."""

    EPUB = "application/epub+zip"
    PDF = "application/pdf"

    @property
    def extension(self) -> str:
        return self.name.lower()

    @property
    def mime_type(self) -> str:
        return self.value

    @classmethod
    def from_mime_type(cls, mime_type: str) -> "FileFormat":
        """Look up a format by MIME type.

        Raises:
            ValueError: If the MIME type is not recognized.
        """
        try:
            return cls(mime_type)
        except ValueError:
            raise ValueError(f"Unknown file format: {mime_type}") from None


@dataclass(frozen=True)
class DocMetadata:
    """Bibliographic metadata for one stored document.

    Records are immutable; edits produce a new record with
    ``dataclasses.replace`` and the index swaps it in. ISBNs and the DOI are
    held in normalized form so uniqueness checks compare like with like.
    """

    title: str
    authors: tuple[str, ...] = ()
    isbns: tuple[str, ...] = ()
    doi: str | None = None
    file_format: FileFormat | None = None

    @property
    def author(self) -> str:
        """Convenience property: joined author string for display."""
        return ", ".join(self.authors)


def build_metadata(
    title: str,
    authors: list[str] | tuple[str, ...] = (),
    isbns: list[str] | tuple[str, ...] = (),
    doi: str | None = None,
    file_format: FileFormat | None = None,
) -> DocMetadata:
    """Validate and normalize raw field values into a DocMetadata.

    Titles and authors are stripped and must be non-empty. ISBNs and DOIs
    are normalized; an ISBN given twice is kept once, in first-seen order.

    Raises:
        InvalidMetadataError: If any field is empty or malformed.
    """
    return DocMetadata(
        title=clean_title(title),
        authors=clean_authors(authors),
        isbns=clean_isbns(isbns),
        doi=normalize_doi(doi) if doi else None,
        file_format=file_format,
    )


def clean_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise InvalidMetadataError("Title cannot be empty")
    return title


def clean_authors(authors: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    cleaned = tuple(a.strip() for a in authors)
    if any(not a for a in cleaned):
        raise InvalidMetadataError("Author names cannot be empty")
    return cleaned


def clean_isbns(isbns: list[str] | tuple[str, ...]) -> tuple[str, ...]:
    # dict.fromkeys keeps first-seen order while dropping repeats
    return tuple(dict.fromkeys(normalize_isbn(i) for i in isbns))
