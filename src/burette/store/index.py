# ABOUTME: The metadata index: an ordered mapping from DocumentId to DocMetadata.
# ABOUTME: Enforces ISBN/DOI uniqueness on every write and persists as a single JSON array.

import json
import logging
from collections.abc import Callable, Iterator
from pathlib import Path

from burette.errors import (
    CorruptIndexError,
    DocumentNotFoundError,
    DuplicateDoiError,
    DuplicateIdentifierError,
    DuplicateIsbnError,
    StorageError,
)
from burette.metadata.types import DocMetadata
from burette.store.hashing import DocumentId
from burette.store.layout import atomic_write_text
from burette.store.mapping import entry_to_record, record_to_entry

logger = logging.getLogger(__name__)

Mutator = Callable[[DocMetadata], DocMetadata]


class MetadataIndex:
    """In-memory index of document records, iterated in identifier order.

    Inserts and updates never introduce two records sharing an ISBN or a
    DOI; a clash already present in a loaded file is kept as written. Every
    mutating method validates first and mutates second, so a failed call
    leaves the index exactly as it was.
    """

    def __init__(self, records: dict[DocumentId, DocMetadata] | None = None) -> None:
        self._records: dict[DocumentId, DocMetadata] = {}
        for document_id, record in (records or {}).items():
            self.insert(document_id, record)

    # --- Serialization ---

    @classmethod
    def loads(cls, text: str) -> "MetadataIndex":
        """Deserialize an index from its JSON text.

        Records are taken as written: ISBN and DOI uniqueness is enforced on
        insert and update, not on load, so an index that already holds a
        clash can still be read and repaired.

        Raises:
            CorruptIndexError: If the text is not a well-formed index or repeats an identifier.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CorruptIndexError(f"Index is not valid JSON: {exc}") from exc
        if not isinstance(data, list):
            raise CorruptIndexError("Index must be a JSON array of entries")

        index = cls()
        for entry in data:
            document_id, record = entry_to_record(entry)
            try:
                index._insert_unchecked(document_id, record)
            except DuplicateIdentifierError as exc:
                raise CorruptIndexError(f"Index repeats an identifier: {exc}") from exc
        return index

    def dumps(self) -> str:
        """Serialize the index to JSON text, entries sorted by identifier."""
        entries = [record_to_entry(document_id, record) for document_id, record in self]
        return json.dumps(entries, indent=2, ensure_ascii=False) + "\n"

    @classmethod
    def load(cls, path: Path) -> "MetadataIndex":
        """Read an index file.

        Raises:
            CorruptIndexError: If the file is missing or malformed.
            StorageError: If the file exists but cannot be read.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise CorruptIndexError(f"Index file {path} is missing", missing=True) from exc
        except UnicodeDecodeError as exc:
            raise CorruptIndexError(f"Index file {path} is not valid UTF-8") from exc
        except OSError as exc:
            raise StorageError(f"Failed to read index file {path}: {exc}") from exc
        return cls.loads(text)

    def save(self, path: Path) -> None:
        """Atomically write the index file.

        Raises:
            StorageError: If the file cannot be written.
        """
        try:
            atomic_write_text(path, self.dumps())
        except OSError as exc:
            raise StorageError(f"Failed to write index file {path}: {exc}") from exc
        logger.debug("Saved index with %d entries to %s", len(self), path)

    # --- Queries ---

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._records

    def __iter__(self) -> Iterator[tuple[DocumentId, DocMetadata]]:
        return self.items()

    def items(self) -> Iterator[tuple[DocumentId, DocMetadata]]:
        """Yield (identifier, record) pairs in identifier order.

        Each call starts a fresh iteration over a snapshot of the keys.
        """
        for document_id in self.ids():
            yield document_id, self._records[document_id]

    def ids(self) -> list[DocumentId]:
        return sorted(self._records)

    def get(self, document_id: DocumentId) -> DocMetadata:
        """Return the record for an identifier.

        Raises:
            DocumentNotFoundError: If the identifier is not in the index.
        """
        try:
            return self._records[document_id]
        except KeyError:
            raise DocumentNotFoundError(document_id, "index") from None

    def find_by_isbn(self, isbn: str) -> list[DocumentId]:
        """Return the identifiers of records carrying a normalized ISBN, in order.

        More than one only if a clash was loaded from disk.
        """
        return [i for i in self.ids() if isbn in self._records[i].isbns]

    def find_by_doi(self, doi: str) -> list[DocumentId]:
        """Return the identifiers of records carrying a normalized DOI, in order."""
        return [i for i in self.ids() if self._records[i].doi == doi]

    # --- Mutations ---

    def insert(self, document_id: DocumentId, record: DocMetadata) -> None:
        """Add a record under a new identifier.

        Raises:
            DuplicateIdentifierError: If the identifier is already present.
            DuplicateIsbnError: If an ISBN is already recorded on another document.
            DuplicateDoiError: If the DOI is already recorded on another document.
        """
        if document_id in self._records:
            raise DuplicateIdentifierError(document_id)
        self._check_unique(document_id, record)
        self._records[document_id] = record

    def _insert_unchecked(self, document_id: DocumentId, record: DocMetadata) -> None:
        if document_id in self._records:
            raise DuplicateIdentifierError(document_id)
        self._records[document_id] = record

    def remove(self, document_id: DocumentId) -> DocMetadata:
        """Remove and return the record for an identifier.

        Raises:
            DocumentNotFoundError: If the identifier is not in the index.
        """
        record = self.get(document_id)
        del self._records[document_id]
        return record

    def update(self, document_id: DocumentId, mutator: Mutator) -> DocMetadata:
        """Replace a record with ``mutator(record)`` and return the new record.

        The new record is checked against all other records before it is
        stored; on a uniqueness failure the old record stays in place.

        Raises:
            DocumentNotFoundError: If the identifier is not in the index.
            DuplicateIsbnError: If the new record reuses another document's ISBN.
            DuplicateDoiError: If the new record reuses another document's DOI.
        """
        updated = mutator(self.get(document_id))
        self._check_unique(document_id, updated)
        self._records[document_id] = updated
        return updated

    def _check_unique(self, document_id: DocumentId, record: DocMetadata) -> None:
        """Check a record's ISBNs and DOI against every record except its own."""
        for other_id, other in self._records.items():
            if other_id == document_id:
                continue
            for isbn in record.isbns:
                if isbn in other.isbns:
                    raise DuplicateIsbnError(isbn, other_id)
            if record.doi is not None and record.doi == other.doi:
                raise DuplicateDoiError(record.doi, other_id)
