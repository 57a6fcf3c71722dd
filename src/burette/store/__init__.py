# ABOUTME: Public API for the burette storage layer.
# ABOUTME: Exports hashing, the document store, the metadata index, and the library layout.

from burette.store.documents import DocumentStore, StoreEntry
from burette.store.hashing import DocumentId, hash_bytes, hash_file, hash_stream
from burette.store.index import MetadataIndex
from burette.store.layout import (
    DEFAULT_LIBRARY_PATH,
    SCHEMA_VERSION,
    SUPPORTED_VERSIONS,
    LibraryLayout,
)

__all__ = [
    "DEFAULT_LIBRARY_PATH",
    "SCHEMA_VERSION",
    "SUPPORTED_VERSIONS",
    "DocumentId",
    "DocumentStore",
    "LibraryLayout",
    "MetadataIndex",
    "StoreEntry",
    "hash_bytes",
    "hash_file",
    "hash_stream",
]
