# ABOUTME: Library integrity validation: cross-checks the document store against the index.
# ABOUTME: Read-only sweep that reports every inconsistency it finds, never just the first.

import logging
from dataclasses import dataclass, field
from enum import Enum

from burette.errors import CorruptIndexError
from burette.store.documents import DocumentStore
from burette.store.hashing import DocumentId, hash_file
from burette.store.index import MetadataIndex
from burette.store.layout import SCHEMA_VERSION, SUPPORTED_VERSIONS, LibraryLayout

logger = logging.getLogger(__name__)


class FindingKind(Enum):
    """Kinds of inconsistency, in the order reports list them."""

    VERSION_MISMATCH = "version_mismatch"
    CORRUPT_INDEX = "corrupt_index"
    INVALID_ENTRY = "invalid_entry"
    HASH_MISMATCH = "hash_mismatch"
    MISSING_DOCUMENT = "missing_document"
    ORPHAN_DOCUMENT = "orphan_document"


_KIND_ORDER = {kind: i for i, kind in enumerate(FindingKind)}


@dataclass(frozen=True)
class Finding:
    """One detected inconsistency.

    ``document_id`` names the identifier involved; for a hash mismatch it is
    the identifier the file is named as, and ``actual`` is the identifier of
    its content. ``name`` is the store entry name for entry-level findings.
    """

    kind: FindingKind
    message: str
    document_id: DocumentId | None = None
    actual: DocumentId | None = None
    name: str | None = None

    def sort_key(self) -> tuple[int, str]:
        label = str(self.document_id) if self.document_id else (self.name or "")
        return _KIND_ORDER[self.kind], label

    def refers_to(self, document_id: DocumentId) -> bool:
        return document_id in (self.document_id, self.actual)


@dataclass
class ValidationReport:
    """All findings from one validation run, plus how many documents checked out."""

    findings: list[Finding] = field(default_factory=list)
    ok: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.findings

    def by_kind(self, kind: FindingKind) -> list[Finding]:
        return [f for f in self.findings if f.kind is kind]

    def for_id(self, document_id: DocumentId) -> list[Finding]:
        return [f for f in self.findings if f.refers_to(document_id)]


def validate_library(layout: LibraryLayout) -> ValidationReport:
    """Check a library directory for structural consistency.

    Checks, each reported independently:
    1. The version marker exists and names a supported schema version.
    2. The index file exists and deserializes.
    3. Every documents/ entry is a regular file named by an identifier.
    4. Every stored file's content hash equals its name.
    5. Every index key has a stored file, and every stored file an index key.

    A file whose content does not match its name is counted under its actual
    content hash for step 5, so a renamed document yields a single hash
    mismatch rather than an orphan/missing pair. A file that cannot be read
    is reported as an invalid entry and the sweep carries on.

    Raises:
        StorageError: If the documents directory itself cannot be listed.
    """
    findings: list[Finding] = []

    version_finding = _check_version(layout)
    if version_finding is not None:
        findings.append(version_finding)

    index: MetadataIndex | None
    try:
        index = MetadataIndex.load(layout.index_path)
    except CorruptIndexError as exc:
        findings.append(Finding(FindingKind.CORRUPT_INDEX, str(exc)))
        index = None

    stored: set[DocumentId] = set()
    mismatched: set[DocumentId] = set()
    named_ok: set[DocumentId] = set()
    store = DocumentStore(layout.documents_dir)
    for entry in store.scan():
        if not entry.is_file:
            findings.append(
                Finding(
                    FindingKind.INVALID_ENTRY,
                    f"{entry.name} is not a regular file",
                    name=entry.name,
                )
            )
            continue

        try:
            actual = hash_file(entry.path)
        except OSError as exc:
            findings.append(
                Finding(
                    FindingKind.INVALID_ENTRY,
                    f"{entry.name} cannot be read: {exc}",
                    document_id=entry.document_id,
                    name=entry.name,
                )
            )
            # present but unverified: neither missing nor counted as ok
            if entry.document_id is not None:
                stored.add(entry.document_id)
            continue

        if entry.document_id is None:
            findings.append(
                Finding(
                    FindingKind.INVALID_ENTRY,
                    f"{entry.name} is not named by a document identifier",
                    actual=actual,
                    name=entry.name,
                )
            )
            continue

        if actual != entry.document_id:
            findings.append(
                Finding(
                    FindingKind.HASH_MISMATCH,
                    f"{actual.short} has name {entry.name}",
                    document_id=entry.document_id,
                    actual=actual,
                    name=entry.name,
                )
            )
            mismatched.add(actual)
        else:
            named_ok.add(actual)
        stored.add(actual)

    ok = 0
    if index is not None:
        indexed = set(index.ids())
        for document_id in sorted(indexed - stored):
            findings.append(
                Finding(
                    FindingKind.MISSING_DOCUMENT,
                    f"{document_id.short} is in the index but has no stored file",
                    document_id=document_id,
                )
            )
        # content seen only under a wrong name is already reported as a mismatch
        for document_id in sorted(stored - indexed - (mismatched - named_ok)):
            findings.append(
                Finding(
                    FindingKind.ORPHAN_DOCUMENT,
                    f"{document_id.short} is stored but has no index entry",
                    document_id=document_id,
                )
            )
        ok = len(indexed & named_ok)

    findings.sort(key=Finding.sort_key)
    logger.debug("Validated %s: %d finding(s)", layout.root, len(findings))
    return ValidationReport(findings=findings, ok=ok)


def _check_version(layout: LibraryLayout) -> Finding | None:
    try:
        version = layout.read_version()
    except OSError as exc:
        return Finding(FindingKind.VERSION_MISMATCH, f"Version file cannot be read: {exc}")
    if version is None:
        return Finding(FindingKind.VERSION_MISMATCH, "Version file is missing")
    if version not in SUPPORTED_VERSIONS:
        return Finding(
            FindingKind.VERSION_MISMATCH,
            f"Library version ({version}) is incompatible with "
            f"supported schema version ({SCHEMA_VERSION})",
        )
    return None
