# ABOUTME: Shared pytest fixtures for burette tests.
# ABOUTME: Provides sample EPUB/PDF files, an empty library, and a library holding three documents.

from pathlib import Path

import pytest
from ebooklib import epub

from burette.core.library import Library
from burette.metadata.types import DocMetadata

DARWIN_DOI = "10.5962/bhl.title.59991"
MOBY_ISBNS = ("9780198853695", "9788417517212")


@pytest.fixture
def sample_epub(tmp_path: Path) -> Path:
    """Create a minimal valid EPUB file with known metadata."""
    book = epub.EpubBook()

    book.set_identifier("urn:isbn:9780375826696")
    book.set_title("The Name of the Rose")
    book.set_language("en")
    book.add_author("Umberto Eco")

    # Add a minimal chapter so the EPUB is structurally valid
    chapter = epub.EpubHtml(title="Chapter 1", file_name="chap01.xhtml", lang="en")
    chapter.content = b"<html><body><h1>Chapter 1</h1><p>Content.</p></body></html>"
    book.add_item(chapter)

    # Add navigation
    book.toc = [epub.Link("chap01.xhtml", "Chapter 1", "chap01")]
    book.add_item(epub.EpubNcx())
    book.add_item(epub.EpubNav())
    book.spine = ["nav", chapter]

    filepath = tmp_path / "name_of_the_rose.epub"
    epub.write_epub(str(filepath), book)
    return filepath


@pytest.fixture
def corrupt_epub(tmp_path: Path) -> Path:
    """Create a corrupt file that is not a valid EPUB."""
    filepath = tmp_path / "corrupt.epub"
    filepath.write_text("this is not a valid epub file")
    return filepath


@pytest.fixture
def sample_pdf(tmp_path: Path) -> Path:
    """Create a file that carries a PDF header."""
    filepath = tmp_path / "var_chrom.pdf"
    filepath.write_bytes(b"%PDF-1.7\n% fake pdf body for testing\n%%EOF\n")
    return filepath


@pytest.fixture
def library(tmp_path: Path) -> Library:
    """An empty library in a temporary directory."""
    return Library.new(tmp_path / "library")


@pytest.fixture
def darwin() -> DocMetadata:
    return DocMetadata(
        title="On the Origin of Species By Means of Natural Selection",
        authors=("Charles Darwin",),
        doi=DARWIN_DOI,
    )


@pytest.fixture
def moby_dick() -> DocMetadata:
    return DocMetadata(
        title="Moby Dick; Or, The Whale",
        authors=("Herman Melville",),
        isbns=MOBY_ISBNS,
    )


@pytest.fixture
def faust() -> DocMetadata:
    return DocMetadata(
        title="Faust: Eine Tragödie [erster Teil]",
        authors=("Johann Wolfgang von Goethe",),
    )


@pytest.fixture
def populated_library(
    library: Library, darwin: DocMetadata, moby_dick: DocMetadata, faust: DocMetadata
) -> Library:
    """A library holding three documents with distinct content."""
    library.add(b"darwin content", darwin)
    library.add(b"moby dick content", moby_dick)
    library.add(b"faust content", faust)
    return library
