# ABOUTME: Unit tests for SHA-256 hashing and the DocumentId value type.
# ABOUTME: Validates known digests, parsing rules, ordering, and file/stream hashing.

import io
from pathlib import Path

import pytest

from burette.errors import InvalidDocumentIdError
from burette.store.hashing import (
    HEX_LENGTH,
    DocumentId,
    hash_bytes,
    hash_file,
    hash_stream,
    is_hex_prefix,
)

HELLO_HEX = "dffd6021bb2bd5b0af676290809ec3a53191dd81c7f70a4b28688a362182986f"
EMPTY_HEX = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


class TestHashing:
    """Tests for hash_bytes, hash_stream, and hash_file."""

    def test_known_digest(self) -> None:
        """Hashing matches the published SHA-256 of a known string."""
        assert hash_bytes(b"Hello, World!").hex == HELLO_HEX

    def test_empty_input(self) -> None:
        """The empty document has the well-known empty digest."""
        assert hash_bytes(b"").hex == EMPTY_HEX

    def test_stream_matches_bytes(self) -> None:
        """Chunked stream hashing agrees with one-shot hashing across chunk boundaries."""
        data = b"x" * 200_000
        assert hash_stream(io.BytesIO(data)) == hash_bytes(data)

    def test_file_matches_bytes(self, tmp_path: Path) -> None:
        f = tmp_path / "doc"
        f.write_bytes(b"Hello, World!")
        assert hash_file(f).hex == HELLO_HEX

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            hash_file(tmp_path / "nope")

    def test_different_content_different_id(self) -> None:
        assert hash_bytes(b"a") != hash_bytes(b"b")


class TestDocumentId:
    """Tests for parsing, rendering, and ordering identifiers."""

    def test_parse_accepts_uppercase(self) -> None:
        """Parsing is case-insensitive and renders lowercase."""
        assert str(DocumentId.parse(HELLO_HEX.upper())) == HELLO_HEX

    @pytest.mark.parametrize(
        "text",
        ["", "abc", HELLO_HEX[:-1], HELLO_HEX + "0", "g" * HEX_LENGTH, " " + HELLO_HEX[1:]],
    )
    def test_parse_rejects_malformed(self, text: str) -> None:
        with pytest.raises(InvalidDocumentIdError):
            DocumentId.parse(text)

    def test_invalid_id_is_a_value_error(self) -> None:
        """Malformed identifiers can be caught as ValueError too."""
        with pytest.raises(ValueError):
            DocumentId.parse("xyz")

    def test_wrong_digest_length(self) -> None:
        with pytest.raises(InvalidDocumentIdError):
            DocumentId(b"\x00" * 31)

    def test_from_filename_canonical_only(self) -> None:
        """Only lowercase 64-digit names denote stored documents."""
        assert DocumentId.from_filename(HELLO_HEX) == DocumentId.parse(HELLO_HEX)
        assert DocumentId.from_filename(HELLO_HEX.upper()) is None
        assert DocumentId.from_filename(HELLO_HEX + ".tmp") is None
        assert DocumentId.from_filename("notes.txt") is None

    def test_short_form(self) -> None:
        assert DocumentId.parse(HELLO_HEX).short == HELLO_HEX[:12]

    def test_ordering_matches_hex_ordering(self) -> None:
        """Byte order and lowercase hex order agree."""
        ids = [hash_bytes(bytes([i])) for i in range(20)]
        assert [i.hex for i in sorted(ids)] == sorted(i.hex for i in ids)

    def test_hashable(self) -> None:
        assert len({DocumentId.parse(HELLO_HEX), DocumentId.parse(HELLO_HEX.upper())}) == 1


class TestIsHexPrefix:
    """Tests for is_hex_prefix."""

    def test_empty_is_prefix(self) -> None:
        assert is_hex_prefix("")

    def test_mixed_case(self) -> None:
        assert is_hex_prefix("DfFd")

    def test_non_hex(self) -> None:
        assert not is_hex_prefix("978-0198853695")

    def test_too_long(self) -> None:
        assert not is_hex_prefix("a" * (HEX_LENGTH + 1))
