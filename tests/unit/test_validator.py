# ABOUTME: Unit tests for validate_library over hand-built library directories.
# ABOUTME: Each inconsistency kind is produced on disk and checked in the report.

import json
from pathlib import Path

import pytest

from burette.core import validator
from burette.core.validator import FindingKind, validate_library
from burette.metadata.types import DocMetadata
from burette.store.documents import DocumentStore
from burette.store.hashing import DocumentId, hash_bytes, hash_file
from burette.store.index import MetadataIndex
from burette.store.layout import LibraryLayout


@pytest.fixture()
def layout(tmp_path: Path) -> LibraryLayout:
    """A well-formed library holding two documents."""
    layout = LibraryLayout(tmp_path / "lib")
    layout.root.mkdir()
    layout.write_version()
    store = DocumentStore(layout.documents_dir)
    index = MetadataIndex()
    for content, title in ((b"first", "First"), (b"second", "Second")):
        index.insert(store.put(content), DocMetadata(title=title))
    index.save(layout.index_path)
    return layout


class TestValidateLibrary:
    """Tests for validate_library."""

    def test_clean_library(self, layout: LibraryLayout) -> None:
        report = validate_library(layout)
        assert report.is_valid
        assert report.ok == 2

    def test_empty_library(self, tmp_path: Path) -> None:
        layout = LibraryLayout(tmp_path)
        layout.write_version()
        layout.documents_dir.mkdir()
        MetadataIndex().save(layout.index_path)
        report = validate_library(layout)
        assert report.is_valid
        assert report.ok == 0

    def test_missing_version(self, layout: LibraryLayout) -> None:
        layout.version_path.unlink()
        report = validate_library(layout)
        assert [f.kind for f in report.findings] == [FindingKind.VERSION_MISMATCH]
        assert report.ok == 2

    def test_unsupported_version(self, layout: LibraryLayout) -> None:
        layout.version_path.write_text("2\n")
        [finding] = validate_library(layout).findings
        assert finding.kind is FindingKind.VERSION_MISMATCH
        assert "(2)" in finding.message

    def test_missing_document(self, layout: LibraryLayout) -> None:
        missing = hash_bytes(b"first")
        DocumentStore(layout.documents_dir).delete(missing)
        report = validate_library(layout)
        [finding] = report.findings
        assert finding.kind is FindingKind.MISSING_DOCUMENT
        assert finding.document_id == missing
        assert report.ok == 1

    def test_orphan_document(self, layout: LibraryLayout) -> None:
        orphan = DocumentStore(layout.documents_dir).put(b"orphan")
        [finding] = validate_library(layout).findings
        assert finding.kind is FindingKind.ORPHAN_DOCUMENT
        assert finding.document_id == orphan

    def test_renamed_file_is_single_hash_mismatch(self, layout: LibraryLayout) -> None:
        """A file renamed to a wrong id is one mismatch, not an orphan and a missing."""
        actual = hash_bytes(b"first")
        wrong = DocumentId.parse("0" * 64)
        store = DocumentStore(layout.documents_dir)
        store.path_for(actual).rename(store.path_for(wrong))

        report = validate_library(layout)
        [finding] = report.findings
        assert finding.kind is FindingKind.HASH_MISMATCH
        assert finding.document_id == wrong
        assert finding.actual == actual
        assert report.ok == 1

    def test_modified_content(self, layout: LibraryLayout) -> None:
        """Tampered content is a mismatch; the named id then has no file."""
        target = hash_bytes(b"second")
        DocumentStore(layout.documents_dir).path_for(target).write_bytes(b"tampered")
        report = validate_library(layout)
        kinds = [f.kind for f in report.findings]
        assert kinds == [FindingKind.HASH_MISMATCH, FindingKind.MISSING_DOCUMENT]
        assert report.for_id(target)

    def test_unreadable_file_does_not_stop_sweep(
        self, layout: LibraryLayout, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A file that cannot be read is one finding; the rest is still checked."""
        unreadable = hash_bytes(b"first")
        DocumentStore(layout.documents_dir).put(b"orphan")

        def guarded_hash(path: Path) -> DocumentId:
            if path.name == unreadable.hex:
                raise PermissionError(13, "Permission denied", str(path))
            return hash_file(path)

        monkeypatch.setattr(validator, "hash_file", guarded_hash)
        report = validate_library(layout)

        kinds = [f.kind for f in report.findings]
        assert kinds == [FindingKind.INVALID_ENTRY, FindingKind.ORPHAN_DOCUMENT]
        assert "Permission denied" in report.findings[0].message
        assert report.findings[0].document_id == unreadable
        assert report.ok == 1

    def test_misnamed_copy_does_not_hide_good_file(self, layout: LibraryLayout) -> None:
        """A correctly named file still verifies when a stray copy of it exists."""
        store = DocumentStore(layout.documents_dir)
        good = hash_bytes(b"first")
        store.path_for(DocumentId.parse("0" * 64)).write_bytes(b"first")

        report = validate_library(layout)

        assert [f.kind for f in report.findings] == [FindingKind.HASH_MISMATCH]
        assert report.findings[0].actual == good
        assert report.ok == 2

    def test_unindexed_file_with_misnamed_copy_is_orphan(self, layout: LibraryLayout) -> None:
        store = DocumentStore(layout.documents_dir)
        orphan = store.put(b"unindexed")
        store.path_for(DocumentId.parse("0" * 64)).write_bytes(b"unindexed")

        kinds = [f.kind for f in validate_library(layout).findings]
        assert kinds == [FindingKind.HASH_MISMATCH, FindingKind.ORPHAN_DOCUMENT]
        assert orphan in {f.document_id for f in validate_library(layout).findings}

    def test_invalid_entries(self, layout: LibraryLayout) -> None:
        (layout.documents_dir / "README").write_text("stray")
        (layout.documents_dir / "subdir").mkdir()
        report = validate_library(layout)
        invalid = report.by_kind(FindingKind.INVALID_ENTRY)
        assert {f.name for f in invalid} == {"README", "subdir"}
        assert len(report.findings) == 2

    def test_corrupt_index_skips_cross_check(self, layout: LibraryLayout) -> None:
        layout.index_path.write_text("{not json")
        report = validate_library(layout)
        assert [f.kind for f in report.findings] == [FindingKind.CORRUPT_INDEX]
        assert report.ok == 0

    def test_missing_index(self, layout: LibraryLayout) -> None:
        layout.index_path.unlink()
        [finding] = validate_library(layout).findings
        assert finding.kind is FindingKind.CORRUPT_INDEX
        assert "missing" in finding.message

    def test_findings_are_ordered_by_kind(self, layout: LibraryLayout) -> None:
        store = DocumentStore(layout.documents_dir)
        store.put(b"orphan")
        store.delete(hash_bytes(b"first"))
        (layout.documents_dir / "junk").write_text("")
        layout.version_path.unlink()

        kinds = [f.kind for f in validate_library(layout).findings]
        assert kinds == [
            FindingKind.VERSION_MISMATCH,
            FindingKind.INVALID_ENTRY,
            FindingKind.MISSING_DOCUMENT,
            FindingKind.ORPHAN_DOCUMENT,
        ]

    def test_validation_is_read_only(self, layout: LibraryLayout) -> None:
        (layout.documents_dir / "junk").write_text("")
        before = layout.index_path.read_text()
        validate_library(layout)
        assert layout.index_path.read_text() == before
        assert (layout.documents_dir / "junk").exists()
        assert json.loads(before)
