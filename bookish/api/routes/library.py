"""
Library API Routes

Stateless view-model endpoints: the client sends its books and the current
filter/sort state and gets the visible rows back.
"""

from typing import Optional

from fastapi import APIRouter, Query
from loguru import logger

from bookish.api.schemas import (
    AmazonLinkResponse,
    ErrorResponse,
    LibraryQueryRequest,
    LibraryQueryResponse,
)
from bookish.exceptions import BookishException
from bookish.library.catalog import (
    LibraryFilter,
    amazon_search_url,
    available_genres,
    query_library,
)


router = APIRouter(prefix="/library", tags=["library"])


@router.post(
    "/query",
    response_model=LibraryQueryResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Unknown sort field"},
    },
)
async def query_books(request: LibraryQueryRequest):
    """Filter and sort the supplied books."""
    library_filter = LibraryFilter(**request.filter.model_dump())

    try:
        page = query_library(
            request.books,
            library_filter,
            sort_field=request.sort_field,
            sort_direction=request.sort_direction,
        )
    except ValueError as e:
        raise BookishException(
            message="Invalid sort field",
            code="VALIDATION_ERROR",
            status_code=400,
            detail=str(e),
        ) from e

    logger.debug(f"Library query: {page.shown} of {page.total} shown")

    return LibraryQueryResponse(
        items=page.items,
        shown=page.shown,
        total=page.total,
        genres=available_genres(request.books),
    )


@router.get("/amazon-link", response_model=AmazonLinkResponse)
async def amazon_link(
    title: Optional[str] = Query("", max_length=500),
    author: Optional[str] = Query("", max_length=200),
):
    """Amazon search URL for a title and author."""
    return AmazonLinkResponse(url=amazon_search_url(title or "", author or ""))
