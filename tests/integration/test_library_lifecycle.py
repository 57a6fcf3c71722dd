# ABOUTME: Integration tests for creating and opening libraries on a real filesystem.
# ABOUTME: Validates the on-disk layout, version checks, and refusal to clobber existing paths.

import json
from pathlib import Path

import pytest

from burette.core.library import Library
from burette.errors import (
    CorruptIndexError,
    LibraryNotFoundError,
    PathAlreadyExistsError,
    VersionMismatchError,
)


class TestLibraryNew:
    """Tests for Library.new."""

    def test_creates_layout(self, tmp_path: Path) -> None:
        """A new library has a version marker, an empty index, and a documents dir."""
        root = tmp_path / "lib"
        Library.new(root)

        assert (root / "burette_version").read_text() == "1\n"
        assert (root / "index.json").read_text() == "[]\n"
        assert (root / "documents").is_dir()
        assert sorted(p.name for p in root.iterdir()) == [
            "burette_version",
            "documents",
            "index.json",
        ]

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        root = tmp_path / "a" / "b" / "lib"
        Library.new(root)
        assert (root / "index.json").exists()

    def test_accepts_empty_directory(self, tmp_path: Path) -> None:
        root = tmp_path / "lib"
        root.mkdir()
        Library.new(root)
        assert (root / "index.json").exists()

    def test_refuses_non_empty_directory(self, tmp_path: Path) -> None:
        root = tmp_path / "lib"
        root.mkdir()
        (root / "keep.txt").write_text("mine")
        with pytest.raises(PathAlreadyExistsError):
            Library.new(root)
        assert [p.name for p in root.iterdir()] == ["keep.txt"]

    def test_refuses_file(self, tmp_path: Path) -> None:
        root = tmp_path / "lib"
        root.write_text("not a dir")
        with pytest.raises(PathAlreadyExistsError):
            Library.new(root)

    def test_refuses_existing_library(self, tmp_path: Path) -> None:
        root = tmp_path / "lib"
        Library.new(root)
        with pytest.raises(PathAlreadyExistsError):
            Library.new(root)

    def test_new_library_validates(self, library: Library) -> None:
        report = library.validate()
        assert report.is_valid
        assert report.ok == 0


class TestLibraryOpen:
    """Tests for Library.open."""

    def test_open_new_library(self, library: Library) -> None:
        opened = Library.open(library.root)
        assert opened.list() == []

    def test_missing_directory(self, tmp_path: Path) -> None:
        with pytest.raises(LibraryNotFoundError):
            Library.open(tmp_path / "absent")

    def test_missing_version(self, library: Library) -> None:
        library.layout.version_path.unlink()
        with pytest.raises(VersionMismatchError, match="missing"):
            Library.open(library.root)

    def test_unsupported_version(self, library: Library) -> None:
        library.layout.version_path.write_text("7\n")
        with pytest.raises(VersionMismatchError) as excinfo:
            Library.open(library.root)
        assert excinfo.value.found == "7"

    def test_missing_index(self, library: Library) -> None:
        library.layout.index_path.unlink()
        with pytest.raises(CorruptIndexError):
            Library.open(library.root)

    def test_corrupt_index(self, library: Library) -> None:
        library.layout.index_path.write_text(json.dumps({"not": "a list"}))
        with pytest.raises(CorruptIndexError):
            Library.open(library.root)
