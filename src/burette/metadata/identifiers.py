# ABOUTME: Parsing and normalization of ISBN-13 and DOI values.
# ABOUTME: Normalized forms are what the index stores and compares for uniqueness.

import re

from burette.errors import InvalidDoiError, InvalidIsbnError

_ISBN_LENGTH = 13

# Resolver URLs and the "doi:" scheme are stripped before comparison.
_DOI_PREFIX_RE = re.compile(
    r"^(?:https?://(?:dx\.)?doi\.org/|doi:\s*)", re.IGNORECASE
)
_DOI_RE = re.compile(r"^10\.\d{4,9}/\S+$")


def normalize_isbn(text: str) -> str:
    """Parse an ISBN-13 and return its 13 digits without hyphens.

    Hyphens may appear anywhere and are ignored. Any other non-digit
    character, a digit count other than 13, or a bad check digit is an error.

    Raises:
        InvalidIsbnError: If the text is not a valid ISBN-13.
    """
    digits: list[int] = []
    for char in text.strip():
        if char == "-":
            continue
        if not char.isascii() or not char.isdigit():
            raise InvalidIsbnError(f"Invalid character in ISBN-13: {char!r}")
        if len(digits) == _ISBN_LENGTH:
            raise InvalidIsbnError("ISBN-13 is too long")
        digits.append(int(char))

    if len(digits) != _ISBN_LENGTH:
        raise InvalidIsbnError("ISBN-13 is too short")

    checksum = sum(d if i % 2 == 0 else d * 3 for i, d in enumerate(digits))
    if checksum % 10 != 0:
        raise InvalidIsbnError("Invalid ISBN-13 checksum")

    return "".join(str(d) for d in digits)


def try_normalize_isbn(text: str) -> str | None:
    """Return the normalized ISBN, or None if text is not an ISBN-13."""
    try:
        return normalize_isbn(text)
    except InvalidIsbnError:
        return None


def normalize_doi(text: str) -> str:
    """Normalize a DOI: strip resolver prefixes and whitespace, lowercase.

    DOIs are case-insensitive, so the lowercase form is canonical.

    Raises:
        InvalidDoiError: If the result does not look like ``10.<registrant>/<suffix>``.
    """
    doi = _DOI_PREFIX_RE.sub("", text.strip()).lower()
    if not _DOI_RE.match(doi):
        raise InvalidDoiError(f"Invalid DOI: {text!r}")
    return doi


def try_normalize_doi(text: str) -> str | None:
    """Return the normalized DOI, or None if text is not a DOI."""
    try:
        return normalize_doi(text)
    except InvalidDoiError:
        return None
