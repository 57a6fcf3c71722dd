# ABOUTME: On-disk layout of a burette library: paths, version marker, and atomic writes.
# ABOUTME: Owns the default library location and the schema version the layout was written with.

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

DEFAULT_LIBRARY_PATH = Path.home() / ".book-store"

DOCUMENTS_DIR = "documents"
INDEX_FILE = "index.json"
VERSION_FILE = "burette_version"

SCHEMA_VERSION = "1"
SUPPORTED_VERSIONS = frozenset({SCHEMA_VERSION})


@dataclass(frozen=True)
class LibraryLayout:
    """Paths of the files that make up a library rooted at ``root``."""

    root: Path

    @property
    def documents_dir(self) -> Path:
        return self.root / DOCUMENTS_DIR

    @property
    def index_path(self) -> Path:
        return self.root / INDEX_FILE

    @property
    def version_path(self) -> Path:
        return self.root / VERSION_FILE

    def read_version(self) -> str | None:
        """Read the version marker, or None if it does not exist.

        Trailing whitespace (such as a newline added by an editor) is ignored.

        Raises:
            OSError: If the marker exists but cannot be read.
        """
        try:
            return self.version_path.read_text(encoding="utf-8").rstrip()
        except FileNotFoundError:
            return None

    def write_version(self, version: str = SCHEMA_VERSION) -> None:
        atomic_write_text(self.version_path, version + "\n")


def atomic_write_text(path: Path, text: str) -> None:
    """Write text to path by writing a temp file in the same directory and renaming it.

    Readers see either the old content or the new content, never a partial
    file. The temp file is removed if anything fails before the rename.
    """
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise
