"""
API Schemas for Bookish

Pydantic models for request validation and response serialization:
- Lookup models
- Library query models
- System models
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from bookish.library.catalog import SortDirection
from bookish.library.models import BookFormat, BookRecord


# =============================================================================
# Lookup Schemas
# =============================================================================

class LookupMetadata(BaseModel):
    """Metadata as returned by the winning provider."""

    title: Optional[str] = None
    authors: list[str] = Field(default_factory=list)
    publish_date: Optional[str] = None
    cover_url: Optional[str] = None
    subjects: list[str] = Field(default_factory=list)
    isbn_10: Optional[str] = None
    isbn_13: Optional[str] = None


class ClassificationResponse(BaseModel):
    """Fiction type and genre derived from subjects."""

    fiction_type: str
    genre: Optional[str] = None


class LookupResponse(BaseModel):
    """Successful resolution."""

    provider: str
    query: str
    isbn_10: Optional[str] = None
    isbn_13: Optional[str] = None

    metadata: LookupMetadata
    classification: ClassificationResponse
    record: BookRecord

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "provider": "openlibrary",
                "query": "9780439023481",
                "isbn_10": "0439023483",
                "isbn_13": "9780439023481",
                "metadata": {
                    "title": "The Hunger Games",
                    "authors": ["Suzanne Collins"],
                    "publish_date": "2008",
                    "subjects": ["Fiction", "Science fiction"],
                },
                "classification": {
                    "fiction_type": "Fiction",
                    "genre": "Science Fiction",
                },
            }
        }
    )


# =============================================================================
# Library Schemas
# =============================================================================

class LibraryFilterRequest(BaseModel):
    """Filter values of the library view."""

    term: str = ""
    fiction_type: Optional[str] = None
    genre: Optional[str] = None
    difficulty: Optional[str] = None
    format: Optional[BookFormat] = None


class LibraryQueryRequest(BaseModel):
    """Books to filter plus the view's filter and sort state."""

    books: list[BookRecord] = Field(default_factory=list)
    filter: LibraryFilterRequest = Field(default_factory=LibraryFilterRequest)
    sort_field: Optional[str] = None
    sort_direction: SortDirection = SortDirection.ASC


class LibraryQueryResponse(BaseModel):
    """Filtered view of the library."""

    items: list[BookRecord]
    shown: int
    total: int
    genres: list[str] = Field(default_factory=list)


class AmazonLinkResponse(BaseModel):
    """Amazon search link for a book."""

    url: str


# =============================================================================
# System Schemas
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: Optional[str] = None
    code: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    request_id: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "No metadata found",
                "detail": "No provider returned a record for '9780000000002' after 2 attempts; "
                          "enter the details manually",
                "code": "RESOLUTION_EXHAUSTED",
                "timestamp": "2025-01-01T12:00:00Z",
            }
        }
    )


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    providers: list[str] = Field(default_factory=list)
    components: dict[str, str] = Field(default_factory=dict)
