"""
ISBN Normalization

Cleans scanned or typed identifiers, computes and validates check digits,
and converts between ISBN-10 and ISBN-13.

All functions are pure.
"""

import re
from typing import Optional

from bookish.exceptions import InvalidIdentifierError


VALID_LENGTHS = (10, 13)
ISBN13_PREFIXES = ("978", "979")

_NON_ISBN_CHARS = re.compile(r"[^0-9Xx]")
_ISBN10_SHAPE = re.compile(r"^\d{9}[\dX]$")
_ISBN13_SHAPE = re.compile(r"^\d{13}$")


def clean(raw: str) -> str:
    """
    Strip everything except digits and X.

    Args:
        raw: Scanned or typed text, e.g. "978-0-06-231500-7"

    Returns:
        Digits with an uppercase X where present. Length is not checked.
    """
    if not raw:
        return ""
    return _NON_ISBN_CHARS.sub("", raw).upper()


def is_valid_length(identifier: str) -> bool:
    """True iff the identifier is exactly 10 or 13 characters."""
    return len(identifier) in VALID_LENGTHS


def is_likely_isbn13(identifier: str) -> bool:
    """True iff 13 characters with a Bookland (978/979) prefix."""
    return len(identifier) == 13 and identifier[:3] in ISBN13_PREFIXES


def isbn13_check_digit(base12: str) -> str:
    """Check digit for the first 12 digits of an ISBN-13 (weights 1,3,1,3...)."""
    total = sum(int(d) * (1 if i % 2 == 0 else 3) for i, d in enumerate(base12))
    return str((10 - total % 10) % 10)


def isbn10_check_digit(base9: str) -> str:
    """Check character for the first 9 digits of an ISBN-10 (mod 11, X for 10)."""
    total = sum(int(d) * (10 - i) for i, d in enumerate(base9))
    check = (11 - total % 11) % 11
    return "X" if check == 10 else str(check)


def is_isbn10_shape(identifier: str) -> bool:
    return bool(_ISBN10_SHAPE.match(identifier))


def is_isbn13_shape(identifier: str) -> bool:
    return bool(_ISBN13_SHAPE.match(identifier))


def is_valid_checksum(identifier: str) -> bool:
    """
    Validate the trailing check character of a cleaned ISBN.

    Returns False for anything that is not shaped like an ISBN-10 or ISBN-13.
    """
    if is_isbn10_shape(identifier):
        return isbn10_check_digit(identifier[:9]) == identifier[9]
    if is_isbn13_shape(identifier):
        return isbn13_check_digit(identifier[:12]) == identifier[12]
    return False


def is_plausible(identifier: str) -> bool:
    """
    Strict check for machine-read input (barcode frames, OCR text).

    A cleaned identifier passes when it is ISBN-10 shaped, or a 978/979
    ISBN-13, and its check character is correct.
    """
    if len(identifier) == 13 and not is_likely_isbn13(identifier):
        return False
    return is_valid_checksum(identifier)


def convert_10_to_13(isbn10: str) -> str:
    """
    Convert an ISBN-10 to its 978-prefixed ISBN-13 form.

    Args:
        isbn10: Cleaned 10-character ISBN

    Returns:
        13-digit ISBN starting with 978

    Raises:
        ValueError: If the input is not a 10-character ISBN-10
    """
    if not is_isbn10_shape(isbn10):
        raise ValueError(f"Expected a 10-character ISBN-10, got {isbn10!r}")

    base = "978" + isbn10[:9]
    return base + isbn13_check_digit(base)


def convert_13_to_10(isbn13: str) -> Optional[str]:
    """
    Convert a 978-prefixed ISBN-13 to ISBN-10.

    979-prefixed numbers have no ISBN-10 equivalent and return None.

    Raises:
        ValueError: If the input is not a 13-digit string
    """
    if not is_isbn13_shape(isbn13):
        raise ValueError(f"Expected a 13-digit ISBN-13, got {isbn13!r}")
    if not isbn13.startswith("978"):
        return None

    base = isbn13[3:12]
    return base + isbn10_check_digit(base)


def isbn_forms(identifier: str) -> tuple[Optional[str], Optional[str]]:
    """
    Both forms of a cleaned identifier.

    Returns:
        (isbn_10, isbn_13), either may be None
    """
    if is_isbn10_shape(identifier):
        return identifier, convert_10_to_13(identifier)
    if is_isbn13_shape(identifier):
        return convert_13_to_10(identifier), identifier
    return None, None


def validate(raw: str) -> str:
    """
    Clean and validate an identifier before it reaches any provider.

    Args:
        raw: Raw scanned or typed text

    Returns:
        Cleaned identifier

    Raises:
        InvalidIdentifierError: On wrong length, a 13-digit code outside
            the 978/979 range, or a misplaced X
    """
    identifier = clean(raw)

    if not is_valid_length(identifier):
        raise InvalidIdentifierError(
            raw, f"has {len(identifier)} ISBN characters, expected 10 or 13"
        )

    if len(identifier) == 13:
        if not is_isbn13_shape(identifier):
            raise InvalidIdentifierError(raw, "contains X in a 13-digit ISBN")
        if not is_likely_isbn13(identifier):
            raise InvalidIdentifierError(raw, "is not a 978/979 ISBN-13")
    elif not is_isbn10_shape(identifier):
        raise InvalidIdentifierError(raw, "has X outside the check position")

    return identifier
