# ABOUTME: Resolves user queries (hash prefixes, full hashes, ISBNs, DOIs) to document identifiers.
# ABOUTME: Pure functions over an index snapshot; no I/O, so every case is unit-testable.

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from burette.errors import ResolutionError
from burette.metadata.identifiers import try_normalize_doi, try_normalize_isbn
from burette.store.hashing import HEX_LENGTH, DocumentId, is_hex_prefix
from burette.store.index import MetadataIndex


class ResolutionStatus(Enum):
    NOT_FOUND = "not_found"
    RESOLVED = "resolved"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class Resolution:
    """The outcome of resolving one query: the identifiers it denotes."""

    query: str
    matches: tuple[DocumentId, ...]

    @property
    def status(self) -> ResolutionStatus:
        if not self.matches:
            return ResolutionStatus.NOT_FOUND
        if len(self.matches) == 1:
            return ResolutionStatus.RESOLVED
        return ResolutionStatus.AMBIGUOUS

    @property
    def is_resolved(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED

    def describe(self) -> str:
        """One-line explanation of the outcome, naming every match."""
        if self.status is ResolutionStatus.NOT_FOUND:
            return f"No document matches {self.query!r}"
        if self.status is ResolutionStatus.AMBIGUOUS:
            shorts = ", ".join(m.short for m in self.matches)
            return f"Multiple documents match {self.query!r}: {shorts}"
        return f"{self.query!r} matches {self.matches[0].short}"

    def require(self) -> DocumentId:
        """Return the single matching identifier.

        Raises:
            QueryNotFoundError: If nothing matched.
            AmbiguousQueryError: If more than one document matched.
        """
        if not self.is_resolved:
            raise ResolutionError.from_failures([self])
        return self.matches[0]


def resolve(query: str, index: MetadataIndex) -> Resolution:
    """Resolve a query against an index snapshot.

    An exact full-length hash wins outright. Otherwise the query is treated
    as a hash prefix (the empty string matches everything) and, separately,
    as an ISBN and as a DOI; the candidates are unioned. The query is used
    verbatim apart from case, so whitespace is never a prefix of anything.
    """
    lowered = query.lower()

    if len(lowered) == HEX_LENGTH and is_hex_prefix(lowered):
        exact = DocumentId.parse(lowered)
        if exact in index:
            return Resolution(query, (exact,))

    candidates: set[DocumentId] = set()
    if is_hex_prefix(lowered):
        candidates.update(i for i in index.ids() if i.hex.startswith(lowered))

    isbn = try_normalize_isbn(query)
    if isbn is not None:
        candidates.update(index.find_by_isbn(isbn))

    doi = try_normalize_doi(query)
    if doi is not None:
        candidates.update(index.find_by_doi(doi))

    return Resolution(query, tuple(sorted(candidates)))


def resolve_all(queries: Iterable[str], index: MetadataIndex) -> list[Resolution]:
    """Resolve each query independently against the same index snapshot."""
    return [resolve(query, index) for query in queries]


def require_all(queries: Iterable[str], index: MetadataIndex) -> list[DocumentId]:
    """Resolve a batch of queries, all or nothing.

    Nested or repeated queries that land on the same document are
    deduplicated.

    Returns:
        The resolved identifiers in identifier order.

    Raises:
        AmbiguousQueryError: If any query matched several documents (the
            error also lists any unmatched queries).
        QueryNotFoundError: If no query was ambiguous but some matched nothing.
    """
    resolutions = resolve_all(queries, index)
    failures = [r for r in resolutions if not r.is_resolved]
    if failures:
        raise ResolutionError.from_failures(failures)
    return sorted({r.matches[0] for r in resolutions})
