"""
Library Module

Book records and the catalog view-model (filter, sort, search).
"""

from bookish.library.models import (
    BookRecord,
    BookFormat,
    ReadStatus,
    Difficulty,
)
from bookish.library.catalog import (
    LibraryFilter,
    LibraryPage,
    SortDirection,
    apply_filters,
    sort_books,
    query_library,
    available_genres,
    amazon_search_url,
    build_book_record,
)

__all__ = [
    # Models
    "BookRecord",
    "BookFormat",
    "ReadStatus",
    "Difficulty",
    # Catalog
    "LibraryFilter",
    "LibraryPage",
    "SortDirection",
    "apply_filters",
    "sort_books",
    "query_library",
    "available_genres",
    "amazon_search_url",
    "build_book_record",
]
