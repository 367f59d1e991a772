"""
OCR Text Helpers

Cleans lines recognized from a cover or spine photo and turns the lines a
user tagged as title/author into a text query for the resolver.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Iterable, Optional

from loguru import logger

from bookish.identification import isbn as isbn_utils


# Keep letters, digits, whitespace and basic punctuation
_NOISE = re.compile(r"[^\w\s.,;:!?'\"()&-]", re.UNICODE)

_QUOTES = [
    (re.compile(r"[“”„]"), '"'),
    (re.compile(r"[‘’‚]"), "'"),
]

# Digit runs with optional hyphens/spaces, e.g. "978-0-06-231500-7"
_ISBN_RUN = re.compile(r"\d[\d\s-]{8,20}[\dXx]")

_AUTHOR_FIXES = [
    (re.compile(r"\bJr\b(?!\.)"), "Jr."),
    (re.compile(r"\bSr\b(?!\.)"), "Sr."),
    (re.compile(r"\bMc ([A-Z])"), r"Mc\1"),
    (re.compile(r"\bO ([A-Z])"), r"O'\1"),
]


def clean_ocr_line(text: str) -> str:
    """
    Normalize one line of OCR output.

    Applies NFKC (ligatures, full-width forms), straightens smart quotes,
    drops noise symbols and collapses whitespace.
    """
    if not text:
        return ""

    text = unicodedata.normalize("NFKC", text)
    text = "".join(c for c in text if unicodedata.category(c) != "Mn")

    for pattern, replacement in _QUOTES:
        text = pattern.sub(replacement, text)

    text = _NOISE.sub(" ", text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()


def clean_author_line(text: str) -> str:
    """
    Clean an author line, turning "LASTNAME, FIRSTNAME" into "Firstname Lastname".

    All-caps spine text is title-cased; mixed case is kept as printed.
    """
    name = clean_ocr_line(text)

    if "," in name:
        last, first = [p.strip() for p in name.split(",", 1)]
        if last and first:
            name = f"{first} {last}"

    if name.isupper():
        name = name.title()

    for pattern, replacement in _AUTHOR_FIXES:
        name = pattern.sub(replacement, name)

    return name.strip()


def find_isbn(text: str) -> Optional[str]:
    """
    First plausible ISBN printed in OCR text.

    Args:
        text: OCR output, e.g. "ISBN 978-0-06-231500-7  $16.99"

    Returns:
        Cleaned identifier with a valid check character, or None
    """
    if not text:
        return None

    for match in _ISBN_RUN.finditer(text):
        digits = isbn_utils.clean(match.group(0))
        # A run may swallow a trailing number such as a price
        for candidate in (digits, digits[:13], digits[:10]):
            if isbn_utils.is_plausible(candidate):
                return candidate
        logger.debug(f"Skipping ISBN-like run {match.group(0)!r}")

    return None


@dataclass
class TextQuery:
    """Candidate title and author text for a free-text lookup."""

    title: Optional[str] = None
    author: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.title or self.author)

    @classmethod
    def from_lines(
        cls,
        title_lines: Iterable[str] = (),
        author_lines: Iterable[str] = (),
    ) -> "TextQuery":
        """
        Build a query from the OCR lines tagged as title and as author.

        Lines are cleaned and joined with spaces in the order given.
        """
        title = " ".join(filter(None, (clean_ocr_line(line) for line in title_lines)))
        author = " ".join(filter(None, (clean_author_line(line) for line in author_lines)))
        return cls(title=title or None, author=author or None)
