"""
Catalog View-Model

Filtering, sorting and search over a list of book records, plus building
a draft record from resolved metadata. Nothing here persists anything;
storage belongs to the caller.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional
from urllib.parse import quote

from loguru import logger

from bookish.identification.isbn import isbn_forms
from bookish.identification.models import LookupResult
from bookish.intelligence.genre_classifier import Classification, FictionType
from bookish.library.models import BookFormat, BookRecord, Difficulty


AMAZON_SEARCH_URL = "https://www.amazon.com/s?k="


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass
class LibraryFilter:
    """
    Current filter values of a library view.

    Empty fields do not constrain the result.
    """

    term: str = ""
    fiction_type: Optional[str] = None
    genre: Optional[str] = None
    difficulty: Optional[str] = None
    format: Optional[BookFormat] = None


@dataclass
class LibraryPage:
    """Filtered, sorted books with shown/total counts."""

    items: list[BookRecord]
    total: int

    @property
    def shown(self) -> int:
        return len(self.items)


def _value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def matches(book: BookRecord, library_filter: LibraryFilter) -> bool:
    """True if the book passes every active filter."""
    term = (library_filter.term or "").strip().lower()
    if term:
        haystack = " ".join(
            _value(v) for v in (book.title, book.author, book.genre, book.fiction_type)
        ).lower()
        if term not in haystack:
            return False

    if library_filter.fiction_type and _value(book.fiction_type) != library_filter.fiction_type:
        return False
    if library_filter.genre and _value(book.genre) != library_filter.genre:
        return False
    if library_filter.difficulty and _value(book.difficulty) != library_filter.difficulty:
        return False

    if library_filter.format and book.format not in (library_filter.format, BookFormat.MULTIPLE):
        return False

    return True


def apply_filters(
    books: Iterable[BookRecord],
    library_filter: Optional[LibraryFilter] = None,
) -> list[BookRecord]:
    """Linear predicate scan, preserving input order."""
    library_filter = library_filter or LibraryFilter()
    return [book for book in books if matches(book, library_filter)]


def sort_books(
    books: Iterable[BookRecord],
    field: str,
    direction: SortDirection = SortDirection.ASC,
) -> list[BookRecord]:
    """
    Sort by a record field, case-insensitively. Missing values sort as "".

    Raises:
        ValueError: If the field is not a BookRecord field
    """
    if field not in BookRecord.model_fields:
        raise ValueError(f"Cannot sort by unknown field {field!r}")

    return sorted(
        books,
        key=lambda book: _value(getattr(book, field)).lower(),
        reverse=SortDirection(direction) is SortDirection.DESC,
    )


def query_library(
    books: list[BookRecord],
    library_filter: Optional[LibraryFilter] = None,
    sort_field: Optional[str] = None,
    sort_direction: SortDirection = SortDirection.ASC,
) -> LibraryPage:
    """Filter, then optionally sort."""
    items = apply_filters(books, library_filter)
    if sort_field:
        items = sort_books(items, sort_field, sort_direction)
    return LibraryPage(items=items, total=len(books))


def available_genres(books: Iterable[BookRecord]) -> list[str]:
    """Distinct genres for the genre filter, sorted, without blanks or "Unknown"."""
    genres = {book.genre for book in books if book.genre and book.genre != "Unknown"}
    return sorted(genres)


def amazon_search_url(title: str = "", author: str = "") -> str:
    """Amazon search link for a title and author."""
    query = f"{title or ''} {author or ''}".strip()
    return AMAZON_SEARCH_URL + quote(query, safe="")


def build_book_record(
    result: LookupResult,
    classification: Optional[Classification] = None,
    isbn: Optional[str] = None,
    existing: Optional[BookRecord] = None,
) -> BookRecord:
    """
    Fill a book record from resolved metadata.

    Only empty fields are filled, so anything the user already entered
    survives, including genre and fiction type.

    Args:
        result: Metadata from a provider
        classification: Classification of the result's subjects
        isbn: Validated identifier the lookup started from
        existing: Record being edited, left unmodified

    Returns:
        New BookRecord
    """
    record = existing.model_copy(deep=True) if existing else BookRecord()

    if not record.title and result.title:
        record.title = result.title
    if not record.author and result.authors:
        record.author = ", ".join(result.authors)
    if not record.publication_date and result.publish_date:
        record.publication_date = result.publish_date
    if not record.cover_url and result.cover_url:
        record.cover_url = result.cover_url

    if not record.isbn:
        isbn_13 = result.isbn_13
        if not isbn_13 and isbn:
            isbn_13 = isbn_forms(isbn)[1]
        record.isbn = isbn_13 or isbn or result.isbn_10

    if classification is not None:
        if not record.fiction_type and classification.fiction_type is not FictionType.UNKNOWN:
            record.fiction_type = classification.fiction_type.value
        if not record.genre and classification.genre:
            record.genre = classification.genre

    if record.difficulty is None:
        record.difficulty = Difficulty.MODERATE

    logger.debug(f"Built draft record for '{record.title}' (isbn={record.isbn})")
    return record
