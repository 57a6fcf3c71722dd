# ABOUTME: Metadata package for document records and their identifying fields.
# ABOUTME: Exports DocMetadata, FileFormat, and ISBN/DOI normalization helpers.

from burette.metadata.identifiers import normalize_doi, normalize_isbn
from burette.metadata.types import DocMetadata, FileFormat, build_metadata

__all__ = [
    "DocMetadata",
    "FileFormat",
    "build_metadata",
    "normalize_doi",
    "normalize_isbn",
]
