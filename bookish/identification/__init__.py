"""
Book Identification Module

Turns scanned ISBNs or OCR'd title/author text into book metadata.
"""

from bookish.identification.models import (
    LookupResult,
    Found,
    NotFound,
    ProviderFailure,
    Exhausted,
    Attempt,
    AttemptKind,
)
from bookish.identification.providers import (
    MetadataProvider,
    TextSearchProvider,
    OpenLibraryClient,
    GoogleBooksClient,
    build_search_query,
    create_provider,
)
from bookish.identification.resolver import (
    MetadataResolver,
    ResolutionState,
)

__all__ = [
    # Models
    "LookupResult",
    "Found",
    "NotFound",
    "ProviderFailure",
    "Exhausted",
    "Attempt",
    "AttemptKind",
    # Providers
    "MetadataProvider",
    "TextSearchProvider",
    "OpenLibraryClient",
    "GoogleBooksClient",
    "build_search_query",
    "create_provider",
    # Resolver
    "MetadataResolver",
    "ResolutionState",
]
