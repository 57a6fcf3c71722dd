# ABOUTME: SHA-256 content hashing and the DocumentId value type.
# ABOUTME: A document's identifier is the digest of exactly the bytes stored under it.

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from burette.errors import InvalidDocumentIdError

_CHUNK_SIZE = 65536  # 64 KB
_DIGEST_SIZE = 32
_SHORT_LENGTH = 12

HEX_LENGTH = _DIGEST_SIZE * 2

_HEX_RE = re.compile(r"[0-9a-fA-F]*")
_CANONICAL_RE = re.compile(r"[0-9a-f]{64}")


@dataclass(frozen=True, order=True)
class DocumentId:
    """A 256-bit SHA-256 digest naming one stored document.

    Ordering and equality are by raw digest bytes, which matches the
    ordering of the lowercase hex rendering.
    """

    digest: bytes

    def __post_init__(self) -> None:
        if len(self.digest) != _DIGEST_SIZE:
            raise InvalidDocumentIdError(
                f"SHA-256 digest must be {_DIGEST_SIZE} bytes, got {len(self.digest)}"
            )

    @classmethod
    def parse(cls, text: str) -> DocumentId:
        """Parse a 64-digit hex string (any case) into a DocumentId.

        Raises:
            InvalidDocumentIdError: If the text is not exactly 64 hex digits.
        """
        if len(text) != HEX_LENGTH or not _HEX_RE.fullmatch(text):
            raise InvalidDocumentIdError(f"Invalid SHA-256 hash: {text!r}")
        return cls(bytes.fromhex(text))

    @classmethod
    def from_filename(cls, name: str) -> DocumentId | None:
        """Return the identifier a store file name denotes, or None.

        Only the canonical lowercase form names a stored document.
        """
        if not _CANONICAL_RE.fullmatch(name):
            return None
        return cls(bytes.fromhex(name))

    @property
    def hex(self) -> str:
        return self.digest.hex()

    @property
    def short(self) -> str:
        """Abbreviated hex form for display."""
        return self.hex[:_SHORT_LENGTH]

    def __str__(self) -> str:
        return self.hex

    def __repr__(self) -> str:
        return f"DocumentId({self.hex!r})"


def is_hex_prefix(text: str) -> bool:
    """Whether text could be a (possibly empty) prefix of an identifier."""
    return len(text) <= HEX_LENGTH and _HEX_RE.fullmatch(text) is not None


def hash_bytes(data: bytes) -> DocumentId:
    """Compute the identifier of an in-memory buffer."""
    return DocumentId(hashlib.sha256(data).digest())


def hash_stream(stream: BinaryIO) -> DocumentId:
    """Compute the identifier of a binary stream, reading it in 64KB chunks."""
    hasher = hashlib.sha256()
    while True:
        chunk = stream.read(_CHUNK_SIZE)
        if not chunk:
            break
        hasher.update(chunk)
    return DocumentId(hasher.digest())


def hash_file(path: Path) -> DocumentId:
    """Compute the identifier of a file on disk.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    with open(path, "rb") as f:
        return hash_stream(f)
