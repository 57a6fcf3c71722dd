# ABOUTME: Exception hierarchy for the burette library core.
# ABOUTME: Every failure the core can report is a BuretteError subclass the CLI maps to a message.

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from burette.core.resolver import Resolution
    from burette.store.hashing import DocumentId


class BuretteError(Exception):
    """Base class for all errors raised by the burette core."""


class LibraryNotFoundError(BuretteError):
    """Raised when opening a library directory that does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Library directory {path} does not exist")
        self.path = path


class PathAlreadyExistsError(BuretteError):
    """Raised instead of overwriting an existing path."""

    def __init__(self, path: Path, what: str = "Path") -> None:
        super().__init__(f"{what} {path} already exists")
        self.path = path


class VersionMismatchError(BuretteError):
    """Raised when the library version marker is missing or not recognized."""

    def __init__(self, found: str | None, expected: str) -> None:
        if found is None:
            message = "Library version file is missing"
        else:
            message = (
                f"Library version ({found}) is incompatible with "
                f"supported schema version ({expected})"
            )
        super().__init__(message)
        self.found = found
        self.expected = expected


class CorruptIndexError(BuretteError):
    """Raised when the serialized index is missing or cannot be deserialized."""

    def __init__(self, message: str, *, missing: bool = False) -> None:
        super().__init__(message)
        self.missing = missing


class StorageError(BuretteError):
    """Raised when a filesystem operation fails for a reason other than absence."""


class InvalidMetadataError(BuretteError, ValueError):
    """Raised when a metadata value fails validation or normalization."""


class InvalidDocumentIdError(InvalidMetadataError):
    """Raised when text is not a well-formed 64-digit hex identifier."""


class InvalidIsbnError(InvalidMetadataError):
    """Raised when text is not a valid ISBN-13."""


class InvalidDoiError(InvalidMetadataError):
    """Raised when text is not a plausible DOI."""


class DocumentNotFoundError(BuretteError):
    """Raised when an identifier has no stored file or no index entry."""

    def __init__(self, document_id: DocumentId, where: str = "library") -> None:
        super().__init__(f"Document {document_id.short} not found in {where}")
        self.document_id = document_id


class DocumentExistsError(BuretteError):
    """Raised by the document store when a file named by the identifier already exists."""

    def __init__(self, document_id: DocumentId) -> None:
        super().__init__(f"Document file {document_id} already exists in the store")
        self.document_id = document_id


class DuplicateIdentifierError(BuretteError):
    """Raised when inserting an identifier that is already an index key."""

    def __init__(self, document_id: DocumentId) -> None:
        super().__init__(f"Index already has an entry for {document_id.short}")
        self.document_id = document_id


class DuplicateDocumentError(BuretteError):
    """Raised when adding content that is already stored in the library."""

    def __init__(self, document_id: DocumentId) -> None:
        super().__init__(f"Document is already in the library ({document_id.short})")
        self.document_id = document_id


class DuplicateIsbnError(BuretteError):
    """Raised when an ISBN is already recorded on another document."""

    def __init__(self, isbn: str, owner: DocumentId) -> None:
        super().__init__(f"Document with ISBN {isbn} already exists ({owner.short})")
        self.isbn = isbn
        self.owner = owner


class DuplicateDoiError(BuretteError):
    """Raised when a DOI is already recorded on another document."""

    def __init__(self, doi: str, owner: DocumentId) -> None:
        super().__init__(f"Document with DOI {doi} already exists ({owner.short})")
        self.doi = doi
        self.owner = owner


class MalformedStoreError(BuretteError):
    """Raised when the documents directory holds entries that are not identifier files."""

    def __init__(self, names: list[str]) -> None:
        super().__init__(
            "Document store contains unexpected entries: " + ", ".join(sorted(names))
        )
        self.names = names


class ResolutionError(BuretteError):
    """Raised when one or more queries do not resolve to exactly one document.

    Carries every failed Resolution so callers can report all of them,
    not just the first.
    """

    def __init__(self, failures: list[Resolution]) -> None:
        super().__init__("; ".join(failure.describe() for failure in failures))
        self.failures = failures

    @property
    def ambiguous(self) -> list[Resolution]:
        """Failed queries that matched more than one document."""
        return [f for f in self.failures if len(f.matches) > 1]

    @property
    def not_found(self) -> list[Resolution]:
        """Failed queries that matched nothing."""
        return [f for f in self.failures if not f.matches]

    @classmethod
    def from_failures(cls, failures: list[Resolution]) -> ResolutionError:
        """Build the most specific error for a set of failed resolutions."""
        if any(len(f.matches) > 1 for f in failures):
            return AmbiguousQueryError(failures)
        return QueryNotFoundError(failures)


class QueryNotFoundError(ResolutionError):
    """Raised when no query in a failed batch was ambiguous, only unmatched."""


class AmbiguousQueryError(ResolutionError):
    """Raised when at least one query matched several documents."""
