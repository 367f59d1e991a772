"""
Lookup API Routes

Resolve an ISBN or title/author text into book metadata and a draft record.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger

from bookish.api.dependencies import get_resolver
from bookish.api.schemas import (
    ClassificationResponse,
    ErrorResponse,
    LookupMetadata,
    LookupResponse,
)
from bookish.exceptions import ExternalServiceError, ResolutionExhaustedError
from bookish.identification.isbn import isbn_forms, validate
from bookish.identification.models import Exhausted, Found
from bookish.identification.resolver import MetadataResolver
from bookish.intelligence.genre_classifier import classify
from bookish.library.catalog import build_book_record


router = APIRouter(prefix="/lookup", tags=["lookup"])


def _to_response(outcome: Found, query: str, identifier: Optional[str] = None) -> LookupResponse:
    """Classify the winning result and build the draft record."""
    result = outcome.result
    classification = classify(result.subjects)

    isbn_10, isbn_13 = isbn_forms(identifier) if identifier else (result.isbn_10, result.isbn_13)

    return LookupResponse(
        provider=outcome.provider,
        query=query,
        isbn_10=isbn_10,
        isbn_13=isbn_13,
        metadata=LookupMetadata(
            title=result.title,
            authors=result.authors,
            publish_date=result.publish_date,
            cover_url=result.cover_url,
            subjects=result.subjects,
            isbn_10=result.isbn_10,
            isbn_13=result.isbn_13,
        ),
        classification=ClassificationResponse(**classification.to_dict()),
        record=build_book_record(result, classification, isbn=identifier),
    )


def _raise_exhausted(outcome: Exhausted):
    # No provider answered at all, so "not found" would be misleading
    if outcome.attempts and outcome.failures == len(outcome.attempts):
        providers = ", ".join(dict.fromkeys(a.provider for a in outcome.attempts))
        raise ExternalServiceError(
            "Metadata",
            detail=f"{providers} failed for '{outcome.query}'; enter the details manually",
        )
    raise ResolutionExhaustedError(outcome.query, attempts=len(outcome.attempts))


@router.get(
    "/isbn/{isbn}",
    response_model=LookupResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid ISBN"},
        404: {"model": ErrorResponse, "description": "No provider has a record"},
        503: {"model": ErrorResponse, "description": "Every provider failed"},
    },
)
async def lookup_isbn(
    isbn: str,
    resolver: MetadataResolver = Depends(get_resolver),
):
    """
    Resolve a scanned or typed ISBN.

    ISBN-10 input is also tried as ISBN-13. A 404 carries the validated
    ISBN so the client can keep it for manual entry.
    """
    logger.info(f"ISBN lookup: {isbn}")

    identifier = validate(isbn)
    outcome = await resolver.resolve_identifier(identifier)
    if isinstance(outcome, Exhausted):
        _raise_exhausted(outcome)

    return _to_response(outcome, query=identifier, identifier=identifier)


@router.get(
    "/search",
    response_model=LookupResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Neither title nor author given"},
        404: {"model": ErrorResponse, "description": "No provider has a match"},
        503: {"model": ErrorResponse, "description": "Every provider failed"},
    },
)
async def lookup_text(
    title: Optional[str] = Query(None, max_length=500),
    author: Optional[str] = Query(None, max_length=200),
    resolver: MetadataResolver = Depends(get_resolver),
):
    """
    Resolve title/author text, typically lines picked from a cover photo.

    Tries title and author together, then title only, then author only.
    """
    logger.info(f"Text lookup: title={title!r} author={author!r}")

    outcome = await resolver.resolve_text(title=title, author=author)
    if isinstance(outcome, Exhausted):
        _raise_exhausted(outcome)

    query = " / ".join(part for part in (title, author) if part)
    return _to_response(outcome, query=query)
