# ABOUTME: Content-addressed document store: immutable files named by their SHA-256 identifier.
# ABOUTME: Writes go through a temp file and an atomic rename so no partial document is ever visible.

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from burette.errors import (
    DocumentExistsError,
    DocumentNotFoundError,
    MalformedStoreError,
    StorageError,
)
from burette.store.hashing import DocumentId, hash_bytes

logger = logging.getLogger(__name__)

_TMP_SUFFIX = ".tmp"


@dataclass(frozen=True)
class StoreEntry:
    """One entry of the documents directory as found on disk."""

    name: str
    path: Path
    is_file: bool
    document_id: DocumentId | None

    @property
    def is_well_formed(self) -> bool:
        """A regular file whose name is a canonical identifier."""
        return self.is_file and self.document_id is not None


class DocumentStore:
    """A directory of document files, each named by the hash of its content."""

    def __init__(self, directory: Path) -> None:
        self._dir = directory

    @property
    def directory(self) -> Path:
        return self._dir

    def path_for(self, document_id: DocumentId) -> Path:
        return self._dir / str(document_id)

    def exists(self, document_id: DocumentId) -> bool:
        return self.path_for(document_id).is_file()

    def put(self, data: bytes) -> DocumentId:
        """Store a document and return its identifier.

        Raises:
            DocumentExistsError: If a file with this identifier is already stored.
            StorageError: If the file cannot be written.
        """
        document_id = hash_bytes(data)
        target = self.path_for(document_id)
        if target.exists():
            raise DocumentExistsError(document_id)

        tmp_path = target.with_name(target.name + _TMP_SUFFIX)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            tmp_path.replace(target)
        except OSError as exc:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Failed to store document {document_id.short}: {exc}") from exc

        logger.debug("Stored document %s (%d bytes)", document_id, len(data))
        return document_id

    def get(self, document_id: DocumentId) -> bytes:
        """Read a stored document's bytes.

        Raises:
            DocumentNotFoundError: If no file is stored under this identifier.
            StorageError: If the file exists but cannot be read.
        """
        try:
            return self.path_for(document_id).read_bytes()
        except FileNotFoundError as exc:
            raise DocumentNotFoundError(document_id, "document store") from exc
        except OSError as exc:
            raise StorageError(f"Failed to read document {document_id.short}: {exc}") from exc

    def delete(self, document_id: DocumentId) -> None:
        """Remove a stored document.

        Raises:
            DocumentNotFoundError: If no file is stored under this identifier.
            StorageError: If the file cannot be removed.
        """
        try:
            self.path_for(document_id).unlink()
        except FileNotFoundError as exc:
            raise DocumentNotFoundError(document_id, "document store") from exc
        except OSError as exc:
            raise StorageError(f"Failed to remove document {document_id.short}: {exc}") from exc
        logger.debug("Deleted document %s", document_id)

    def scan(self) -> list[StoreEntry]:
        """List every entry of the documents directory, sorted by name.

        A missing documents directory is an empty store.

        Raises:
            StorageError: If the directory exists but cannot be listed.
        """
        try:
            children = sorted(self._dir.iterdir())
        except FileNotFoundError:
            return []
        except OSError as exc:
            raise StorageError(f"Failed to read document store at {self._dir}: {exc}") from exc

        return [
            StoreEntry(
                name=child.name,
                path=child,
                is_file=child.is_file() and not child.is_symlink(),
                document_id=DocumentId.from_filename(child.name),
            )
            for child in children
        ]

    def list_ids(self) -> set[DocumentId]:
        """Return the identifiers of all stored documents.

        Raises:
            MalformedStoreError: If any entry is not a regular file named by an identifier.
        """
        entries = self.scan()
        anomalies = [e.name for e in entries if not e.is_well_formed]
        if anomalies:
            raise MalformedStoreError(anomalies)
        return {e.document_id for e in entries if e.document_id is not None}
