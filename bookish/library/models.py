"""
Catalog models for Bookish.

The normalized book record handed to the catalog storage collaborator.
"""

from typing import Optional
from enum import Enum

from pydantic import BaseModel, Field, ConfigDict


class ReadStatus(str, Enum):
    """Book reading status."""
    UNREAD = "unread"
    READING = "reading"
    READ = "read"


class BookFormat(str, Enum):
    """How the book is owned."""
    PHYSICAL = "physical"
    KINDLE = "kindle"
    AUDIBLE = "audible"
    MULTIPLE = "multiple"


class Difficulty(str, Enum):
    """Reading difficulty."""
    LIGHT = "Light"
    MODERATE = "Moderate"
    CHALLENGING = "Challenging"


class BookRecord(BaseModel):
    """A single book in the library."""

    id: Optional[str] = None
    title: str = ""
    author: str = ""

    status: ReadStatus = ReadStatus.UNREAD
    format: BookFormat = BookFormat.PHYSICAL

    genre: Optional[str] = None
    fiction_type: Optional[str] = None
    difficulty: Optional[Difficulty] = None

    notes: Optional[str] = None
    isbn: Optional[str] = Field(None, pattern=r"^(\d{9}[\dX]|\d{13})$")
    publication_date: Optional[str] = None
    cover_url: Optional[str] = None
    added_at: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "demo-1",
                "title": "Before We Were Yours",
                "author": "Lisa Wingate",
                "status": "unread",
                "format": "physical",
                "genre": "Historical Fiction",
                "fiction_type": "Fiction",
                "notes": "From the living-room shelf test pile.",
                "isbn": "9780425284681",
                "publication_date": "2017-06-06",
                "added_at": "2025-01-01",
            }
        },
    )
