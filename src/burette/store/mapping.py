# ABOUTME: Converts between DocMetadata records and index.json entry dictionaries.
# ABOUTME: Validates entry shape on the way in so a bad index surfaces as CorruptIndexError.

from typing import Any

from burette.errors import CorruptIndexError, InvalidMetadataError
from burette.metadata.types import DocMetadata, FileFormat, build_metadata
from burette.store.hashing import DocumentId

_REQUIRED_KEYS = ("id", "title", "authors", "isbns")


def record_to_entry(document_id: DocumentId, record: DocMetadata) -> dict[str, Any]:
    """Convert an identifier and its record to a JSON-serializable index entry.

    Absent DOI and file format are written as null so every entry has the
    same keys.
    """
    return {
        "id": str(document_id),
        "title": record.title,
        "authors": list(record.authors),
        "isbns": list(record.isbns),
        "doi": record.doi,
        "file_format": record.file_format.mime_type if record.file_format else None,
    }


def entry_to_record(entry: Any) -> tuple[DocumentId, DocMetadata]:
    """Convert an index entry back to an identifier and record.

    Raises:
        CorruptIndexError: If the entry is not a well-formed index entry.
    """
    if not isinstance(entry, dict):
        raise CorruptIndexError(f"Index entry is not an object: {entry!r}")

    missing = [key for key in _REQUIRED_KEYS if key not in entry]
    if missing:
        raise CorruptIndexError(f"Index entry is missing keys: {', '.join(missing)}")

    authors = entry["authors"]
    isbns = entry["isbns"]
    if not _is_str_list(authors) or not _is_str_list(isbns):
        raise CorruptIndexError(f"Index entry {entry['id']!r} has malformed list fields")

    doi = entry.get("doi")
    fmt = entry.get("file_format")
    try:
        document_id = DocumentId.parse(_require_str(entry["id"]))
        file_format = FileFormat.from_mime_type(_require_str(fmt)) if fmt is not None else None
        record = build_metadata(
            title=_require_str(entry["title"]),
            authors=authors,
            isbns=isbns,
            doi=_require_str(doi) if doi is not None else None,
            file_format=file_format,
        )
    except (InvalidMetadataError, ValueError, TypeError) as exc:
        raise CorruptIndexError(f"Invalid index entry {entry.get('id')!r}: {exc}") from exc

    return document_id, record


def _is_str_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _require_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {type(value).__name__}")
    return value
