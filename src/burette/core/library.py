# ABOUTME: The Library orchestrator: add, remove, get, edit, list, and validate documents.
# ABOUTME: Coordinates the document store and metadata index so they agree when each call returns.

import logging
import re
import shutil
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

from burette.core.resolver import require_all, resolve
from burette.core.validator import ValidationReport, validate_library
from burette.errors import (
    BuretteError,
    DocumentNotFoundError,
    DuplicateDocumentError,
    InvalidMetadataError,
    LibraryNotFoundError,
    PathAlreadyExistsError,
    StorageError,
    VersionMismatchError,
)
from burette.formats.detect import detect_format
from burette.metadata.identifiers import normalize_doi
from burette.metadata.types import DocMetadata, clean_authors, clean_isbns, clean_title
from burette.store.documents import DocumentStore
from burette.store.hashing import DocumentId, hash_bytes
from burette.store.index import MetadataIndex
from burette.store.layout import SCHEMA_VERSION, SUPPORTED_VERSIONS, LibraryLayout

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "authors", "isbns", "doi")

_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


@dataclass
class RemovalResult:
    """Outcome of a batch removal once every query has resolved.

    Index entries for all resolved documents are gone by the time files are
    deleted. ``missing_files`` were already absent from the store, which
    leaves the library consistent. A deletion that fails for any other
    reason is recorded in ``failed`` and stops the batch; those files and the
    ``not_attempted`` ones remain as orphans for ``validate`` to report.
    """

    removed: list[tuple[DocumentId, DocMetadata]] = field(default_factory=list)
    missing_files: list[DocumentId] = field(default_factory=list)
    failed: list[tuple[DocumentId, str]] = field(default_factory=list)
    not_attempted: list[DocumentId] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """Whether every resolved document's file was dealt with."""
        return not self.failed and not self.not_attempted


class Library:
    """Handle to a library directory.

    Construction does no I/O; use ``Library.new`` to create a library and
    ``Library.open`` to check an existing one before mutating it. Every
    operation reloads the index from disk, so a Library holds no state
    beyond its paths.
    """

    def __init__(self, root: Path) -> None:
        self._layout = LibraryLayout(root)
        self._store = DocumentStore(self._layout.documents_dir)

    @property
    def root(self) -> Path:
        return self._layout.root

    @property
    def layout(self) -> LibraryLayout:
        return self._layout

    @property
    def store(self) -> DocumentStore:
        return self._store

    # --- Lifecycle ---

    @classmethod
    def new(cls, root: Path) -> "Library":
        """Create an empty library at root.

        An existing empty directory is accepted. On failure, anything this
        call created is removed again.

        Raises:
            PathAlreadyExistsError: If root is a file or a non-empty directory.
            StorageError: If the layout cannot be written.
        """
        if root.exists() and (not root.is_dir() or any(root.iterdir())):
            raise PathAlreadyExistsError(root, "Library directory")

        created_root = not root.exists()
        library = cls(root)
        layout = library.layout
        try:
            root.mkdir(parents=True, exist_ok=True)
            layout.documents_dir.mkdir()
            MetadataIndex().save(layout.index_path)
            layout.write_version()
        except (OSError, StorageError) as exc:
            if created_root:
                shutil.rmtree(root, ignore_errors=True)
            else:
                _remove_layout(layout)
            raise StorageError(f"Failed to initialize library at {root}: {exc}") from exc

        logger.debug("Created library at %s (schema %s)", root, SCHEMA_VERSION)
        return library

    @classmethod
    def open(cls, root: Path) -> "Library":
        """Open an existing library after checking its version marker and index.

        This does not check the documents themselves; see ``validate``.

        Raises:
            LibraryNotFoundError: If root is not a directory.
            VersionMismatchError: If the version marker is missing or unsupported.
            CorruptIndexError: If the index is missing or malformed.
        """
        if not root.is_dir():
            raise LibraryNotFoundError(root)

        library = cls(root)
        try:
            version = library.layout.read_version()
        except OSError as exc:
            raise StorageError(f"Failed to read version file: {exc}") from exc
        if version not in SUPPORTED_VERSIONS:
            raise VersionMismatchError(version, SCHEMA_VERSION)

        library._load_index()
        return library

    def _load_index(self) -> MetadataIndex:
        return MetadataIndex.load(self._layout.index_path)

    # --- Operations ---

    def add(self, data: bytes, record: DocMetadata) -> DocumentId:
        """Store a document and index its metadata, both or neither.

        The file is written before the index entry. If indexing fails (a
        duplicate ISBN or DOI, or a failed index write), the file is deleted
        again before the error propagates.

        Raises:
            DuplicateDocumentError: If identical content is already stored.
            DuplicateIsbnError: If an ISBN belongs to another document.
            DuplicateDoiError: If the DOI belongs to another document.
        """
        document_id = hash_bytes(data)
        if self._store.exists(document_id):
            raise DuplicateDocumentError(document_id)

        index = self._load_index()
        self._store.put(data)
        try:
            index.insert(document_id, record)
            index.save(self._layout.index_path)
        except BuretteError:
            logger.warning("Indexing %s failed; removing its stored file", document_id.short)
            self._rollback_put(document_id)
            raise

        logger.debug("Added %s: %s", document_id, record.title)
        return document_id

    def add_file(self, path: Path, record: DocMetadata) -> DocumentId:
        """Add a document from a file, detecting its format if the record has none.

        Raises:
            StorageError: If the file cannot be read.
        """
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Failed to read {path}: {exc}") from exc
        if record.file_format is None:
            record = replace(record, file_format=detect_format(data))
        return self.add(data, record)

    def _rollback_put(self, document_id: DocumentId) -> None:
        try:
            self._store.delete(document_id)
        except BuretteError as exc:
            # The original error is the one the caller needs; this leaves an orphan.
            logger.warning("Could not remove %s after failed add: %s", document_id.short, exc)

    def remove(self, queries: Sequence[str]) -> RemovalResult:
        """Remove every document the queries denote.

        All queries are resolved against one index snapshot first; if any is
        ambiguous or unmatched nothing is removed. Then the index entries are
        removed and saved, then the files deleted in identifier order.

        Raises:
            AmbiguousQueryError: If any query matched several documents.
            QueryNotFoundError: If any query matched nothing.
        """
        index = self._load_index()
        ids = require_all(queries, index)

        result = RemovalResult(removed=[(i, index.remove(i)) for i in ids])
        index.save(self._layout.index_path)

        for position, document_id in enumerate(ids):
            try:
                self._store.delete(document_id)
            except DocumentNotFoundError:
                logger.warning("File for %s was already missing", document_id.short)
                result.missing_files.append(document_id)
            except StorageError as exc:
                logger.warning("Stopping removal at %s: %s", document_id.short, exc)
                result.failed.append((document_id, str(exc)))
                result.not_attempted.extend(ids[position + 1 :])
                break

        logger.debug("Removed %d document(s)", len(result.removed))
        return result

    def find(self, query: str) -> tuple[DocumentId, DocMetadata]:
        """Resolve a query to exactly one document and return it with its record.

        Raises:
            QueryNotFoundError: If nothing matched.
            AmbiguousQueryError: If more than one document matched.
        """
        index = self._load_index()
        document_id = resolve(query, index).require()
        return document_id, index.get(document_id)

    def get(self, query: str, output_path: Path | None = None) -> Path:
        """Copy the document a query denotes to output_path and return that path.

        Without an output path the file is named after the document's title
        in the current directory. An existing file is never overwritten.

        Raises:
            QueryNotFoundError: If nothing matched.
            AmbiguousQueryError: If more than one document matched.
            PathAlreadyExistsError: If the output path exists.
        """
        document_id, record = self.find(query)
        out = output_path if output_path is not None else Path(default_file_name(record))
        if out.exists():
            raise PathAlreadyExistsError(out, "Output file")

        data = self._store.get(document_id)
        try:
            with open(out, "xb") as f:
                f.write(data)
        except FileExistsError as exc:
            raise PathAlreadyExistsError(out, "Output file") from exc
        except OSError as exc:
            out.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {out}: {exc}") from exc

        logger.debug("Copied %s to %s", document_id.short, out)
        return out

    def edit(
        self, query: str, field_name: str, value: str | Iterable[str] | None
    ) -> DocMetadata:
        """Change one metadata field of the document a query denotes.

        ``title`` takes a string, ``authors`` and ``isbns`` an iterable of
        strings, and ``doi`` a string or None to clear it. The identifier never
        changes.

        Raises:
            InvalidMetadataError: If the field is unknown or the value is invalid.
            DuplicateIsbnError: If a new ISBN belongs to another document.
            DuplicateDoiError: If the new DOI belongs to another document.
        """
        normalized = _normalize_field(field_name, value)
        index = self._load_index()
        document_id = resolve(query, index).require()
        updated = index.update(document_id, lambda r: replace(r, **{field_name: normalized}))
        index.save(self._layout.index_path)
        logger.debug("Edited %s of %s", field_name, document_id.short)
        return updated

    def list(self) -> list[tuple[DocumentId, DocMetadata]]:
        """Return every (identifier, record) pair in identifier order."""
        return list(self._load_index().items())

    def validate(self) -> ValidationReport:
        """Run a full, read-only consistency check of the library."""
        return validate_library(self._layout)


def default_file_name(record: DocMetadata) -> str:
    """File name for a retrieved document: its title made filesystem-safe, plus extension."""
    stem = _UNSAFE_FILENAME_RE.sub("_", record.title).strip(" .") or "document"
    if record.file_format is None:
        return stem
    return f"{stem}.{record.file_format.extension}"


def _normalize_field(
    field_name: str, value: str | Iterable[str] | None
) -> str | tuple[str, ...] | None:
    if field_name == "title":
        if not isinstance(value, str):
            raise InvalidMetadataError("Title must be a single string")
        return clean_title(value)
    if field_name == "doi":
        if value is not None and not isinstance(value, str):
            raise InvalidMetadataError("DOI must be a single string")
        return normalize_doi(value) if value else None
    if field_name in ("authors", "isbns"):
        if value is None or isinstance(value, str):
            raise InvalidMetadataError(f"{field_name} must be a list of strings")
        values = list(value)
        return clean_authors(values) if field_name == "authors" else clean_isbns(values)
    raise InvalidMetadataError(
        f"Unknown field {field_name!r}; expected one of {', '.join(EDITABLE_FIELDS)}"
    )


def _remove_layout(layout: LibraryLayout) -> None:
    for path in (layout.index_path, layout.version_path):
        path.unlink(missing_ok=True)
    if layout.documents_dir.is_dir():
        shutil.rmtree(layout.documents_dir, ignore_errors=True)
