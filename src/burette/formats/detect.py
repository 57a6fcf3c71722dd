# ABOUTME: File format detection from document bytes (magic numbers, EPUB container check).
# ABOUTME: Used at add time to record the format and later pick a file extension on get.

import io
import zipfile

from burette.metadata.types import FileFormat

_PDF_MAGIC = b"%PDF-"
_ZIP_MAGIC = b"PK\x03\x04"


def detect_format(data: bytes) -> FileFormat | None:
    """Identify a document's format from its content, or None if unrecognized.

    PDFs are recognized by their header. EPUBs are ZIP containers whose
    ``mimetype`` member reads ``application/epub+zip``.
    """
    if data.startswith(_PDF_MAGIC):
        return FileFormat.PDF
    if data.startswith(_ZIP_MAGIC) and _is_epub_container(data):
        return FileFormat.EPUB
    return None


def _is_epub_container(data: bytes) -> bool:
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            mimetype = archive.read("mimetype")
    except (zipfile.BadZipFile, KeyError):
        return False
    return mimetype.strip() == FileFormat.EPUB.mime_type.encode("ascii")
