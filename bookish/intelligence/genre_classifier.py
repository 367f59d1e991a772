"""
Genre Classifier for Bookish

Maps provider subject tags onto the library's fiction/nonfiction split and
its closed genre list.

Matching is substring containment on lower-cased text, first match wins,
so the order of each rule table is significant.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class FictionType(str, Enum):
    """Fiction / nonfiction split."""
    FICTION = "Fiction"
    NONFICTION = "Nonfiction"
    UNKNOWN = "unknown"


# Exact tags that mark a book as fiction
FICTION_MARKERS = frozenset({"fiction", "novel", "science fiction"})

# (substrings, genre) in priority order
FICTION_GENRES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("science fiction", "sci-fi", "sf"), "Science Fiction"),
    (("fantasy",), "Fantasy"),
    (("mystery", "detective"), "Mystery"),
    (("thriller", "suspense"), "Thriller"),
    (("romance",), "Romance"),
    (("historical",), "Historical Fiction"),
    (("horror",), "Horror"),
)
DEFAULT_FICTION_GENRE = "Literary Fiction"

# Nonfiction has no catch-all genre
NONFICTION_GENRES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("history",), "History"),
    (("biography", "memoir"), "Biography"),
    (("science",), "Science"),
    (("philosophy",), "Philosophy"),
    (("business", "management"), "Business"),
    (("self-help",), "Self-Help"),
    (("psychology",), "Psychology"),
)

GENRES = tuple(
    [genre for _, genre in FICTION_GENRES]
    + [DEFAULT_FICTION_GENRE]
    + [genre for _, genre in NONFICTION_GENRES]
)


@dataclass(frozen=True)
class Classification:
    """Classification result for a book."""

    fiction_type: FictionType
    genre: Optional[str] = None

    def to_dict(self) -> dict:
        return {"fiction_type": self.fiction_type.value, "genre": self.genre}


def _first_match(
    text: str,
    rules: tuple[tuple[tuple[str, ...], str], ...],
) -> Optional[str]:
    for needles, genre in rules:
        if any(needle in text for needle in needles):
            return genre
    return None


def classify(subjects: Iterable[str]) -> Classification:
    """
    Classify a book from its subject tags.

    Args:
        subjects: Free-text subjects or categories from a provider

    Returns:
        Classification; no fiction marker (including no subjects at all)
        means Nonfiction
    """
    tags = [s.strip().lower() for s in subjects if isinstance(s, str) and s.strip()]
    text = " ".join(tags)

    if FICTION_MARKERS.intersection(tags):
        genre = _first_match(text, FICTION_GENRES) or DEFAULT_FICTION_GENRE
        return Classification(FictionType.FICTION, genre)

    return Classification(FictionType.NONFICTION, _first_match(text, NONFICTION_GENRES))
