"""
Metadata Provider Clients

Adapters for Open Library and Google Books. Each lookup returns a
Found / NotFound / ProviderFailure outcome and never raises for a missing
record or a malformed response.
"""

import re
from typing import Any, Optional, Protocol, runtime_checkable

import httpx
from loguru import logger

from bookish.identification.models import (
    Found,
    LookupResult,
    NotFound,
    ProviderFailure,
    ProviderOutcome,
)


# =============================================================================
# Provider contracts
# =============================================================================

@runtime_checkable
class MetadataProvider(Protocol):
    """A metadata source that can be queried by ISBN."""

    @property
    def name(self) -> str: ...

    async def lookup_by_identifier(self, identifier: str) -> ProviderOutcome: ...

    async def close(self) -> None: ...


@runtime_checkable
class TextSearchProvider(MetadataProvider, Protocol):
    """A metadata source that also supports title/author search."""

    async def search_by_title_author(
        self,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ) -> ProviderOutcome: ...


# =============================================================================
# Query helpers
# =============================================================================

_LEADING_ARTICLE = re.compile(r"^(the|a|an)\s+", re.IGNORECASE)


def strip_leading_article(title: str) -> str:
    """Drop a leading "the", "a" or "an" from a title."""
    return _LEADING_ARTICLE.sub("", title.strip(), count=1).strip()


def author_surname(author: str) -> Optional[str]:
    """Last whitespace-separated token of an author name, punctuation trimmed."""
    tokens = author.split()
    if not tokens:
        return None
    surname = tokens[-1].strip(".,;:'\"")
    return surname or None


def build_search_query(
    title: Optional[str] = None,
    author: Optional[str] = None,
) -> str:
    """
    Build a Google Books free-text query.

    Titles lose their leading article and authors are reduced to a surname,
    which keeps OCR noise from over-constraining the search.

    Returns:
        Query such as "intitle:Hobbit inauthor:Tolkien", or "" if
        neither part survives cleaning
    """
    parts = []

    if title:
        cleaned_title = strip_leading_article(title)
        if cleaned_title:
            parts.append(f"intitle:{cleaned_title}")

    if author:
        surname = author_surname(author)
        if surname:
            parts.append(f"inauthor:{surname}")

    return " ".join(parts)


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _strings(value: Any) -> list[str]:
    return [s.strip() for s in _as_list(value) if isinstance(s, str) and s.strip()]


def _https(url: Optional[str]) -> Optional[str]:
    if url and url.startswith("http:"):
        return url.replace("http:", "https:", 1)
    return url


# =============================================================================
# Open Library
# =============================================================================

class OpenLibraryClient:
    """
    Client for the Open Library edition API.

    Editions reference authors by key, so a lookup may make one extra
    request to resolve the first author's display name.
    """

    BASE_URL = "https://openlibrary.org"
    COVERS_URL = "https://covers.openlibrary.org"

    name = "openlibrary"

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            # /isbn/{isbn}.json redirects to the edition record
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
            )
        return self._client

    async def lookup_by_identifier(self, identifier: str) -> ProviderOutcome:
        """
        Look up an edition by ISBN.

        Args:
            identifier: Cleaned ISBN-10 or ISBN-13

        Returns:
            Found, NotFound or ProviderFailure
        """
        client = await self._get_client()
        url = f"{self.base_url}/isbn/{identifier}.json"

        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            logger.warning(f"OpenLibrary request failed for {identifier}: {e}")
            return ProviderFailure(self.name, identifier, f"transport: {e}")

        if response.status_code == 404:
            return NotFound(self.name, identifier)

        if response.status_code != 200:
            logger.warning(f"OpenLibrary returned {response.status_code} for {identifier}")
            return ProviderFailure(self.name, identifier, f"status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"OpenLibrary sent malformed JSON for {identifier}: {e}")
            return ProviderFailure(self.name, identifier, "malformed response")

        if not isinstance(data, dict):
            return ProviderFailure(self.name, identifier, "unexpected response shape")

        result = await self._parse_edition(data)
        if result.is_empty:
            return NotFound(self.name, identifier)

        return Found(result, self.name)

    async def _parse_edition(self, data: dict) -> LookupResult:
        """Parse edition data; missing fields stay unset."""
        authors = []
        author_refs = [_as_dict(ref) for ref in _as_list(data.get("authors"))]

        for ref in author_refs:
            name = _text(ref.get("name"))
            if name:
                authors.append(name)

        if not authors:
            # Single best-effort secondary fetch
            key = next((_text(ref.get("key")) for ref in author_refs if _text(ref.get("key"))), None)
            if key:
                name = await self._get_author_name(key)
                if name:
                    authors.append(name)

        if not authors:
            by_statement = _text(data.get("by_statement"))
            if by_statement:
                authors.append(by_statement)

        cover_url = None
        cover_ids = [c for c in _as_list(data.get("covers")) if isinstance(c, int) and c > 0]
        if cover_ids:
            cover_url = f"{self.COVERS_URL}/b/id/{cover_ids[0]}-L.jpg"

        isbn_10 = _strings(data.get("isbn_10"))
        isbn_13 = _strings(data.get("isbn_13"))

        return LookupResult(
            title=_text(data.get("title")),
            authors=authors,
            publish_date=_text(data.get("publish_date")),
            cover_url=cover_url,
            subjects=_strings(data.get("subjects")),
            isbn_10=isbn_10[0] if isbn_10 else None,
            isbn_13=isbn_13[0] if isbn_13 else None,
            source=self.name,
        )

    async def _get_author_name(self, author_key: str) -> Optional[str]:
        """Fetch an author's display name; None on any failure."""
        client = await self._get_client()

        try:
            response = await client.get(f"{self.base_url}{author_key}.json")
            if response.status_code == 200:
                return _text(_as_dict(response.json()).get("name"))
            logger.debug(f"OpenLibrary author {author_key} returned {response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.debug(f"OpenLibrary author lookup failed for {author_key}: {e}")

        return None

    async def close(self):
        """Close HTTP client."""
        if self._client and self._owns_client:
            await self._client.aclose()
        self._client = None


# =============================================================================
# Google Books
# =============================================================================

class GoogleBooksClient:
    """
    Client for the Google Books volumes API.

    Supports ISBN lookup and title/author search. Works without an API key
    at a lower rate limit.
    """

    BASE_URL = "https://www.googleapis.com/books/v1"

    name = "google_books"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

        if not self.api_key:
            logger.debug("No Google Books API key provided. Rate limits will be lower.")

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def lookup_by_identifier(self, identifier: str) -> ProviderOutcome:
        """Look up a volume by ISBN."""
        return await self._first_volume(f"isbn:{identifier}")

    async def search_by_title_author(
        self,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ) -> ProviderOutcome:
        """
        Search by title and/or author, returning only the first match.

        Args:
            title: Book title, leading article is dropped
            author: Author name, only the surname is used
        """
        query = build_search_query(title, author)
        if not query:
            return NotFound(self.name, "")
        return await self._first_volume(query)

    async def _first_volume(self, query: str) -> ProviderOutcome:
        client = await self._get_client()

        params = {"q": query}
        if self.api_key:
            params["key"] = self.api_key

        try:
            response = await client.get(f"{self.base_url}/volumes", params=params)
        except httpx.HTTPError as e:
            logger.warning(f"Google Books request failed for '{query}': {e}")
            return ProviderFailure(self.name, query, f"transport: {e}")

        if response.status_code != 200:
            logger.warning(f"Google Books returned {response.status_code} for '{query}'")
            return ProviderFailure(self.name, query, f"status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"Google Books sent malformed JSON for '{query}': {e}")
            return ProviderFailure(self.name, query, "malformed response")

        items = _as_list(_as_dict(data).get("items"))
        if not items:
            return NotFound(self.name, query)

        result = self._parse_volume(_as_dict(items[0]))
        if result.is_empty:
            return NotFound(self.name, query)

        return Found(result, self.name)

    def _parse_volume(self, item: dict) -> LookupResult:
        """Parse a volume; missing fields stay unset."""
        info = _as_dict(item.get("volumeInfo"))

        isbn_10 = None
        isbn_13 = None
        for identifier in _as_list(info.get("industryIdentifiers")):
            identifier = _as_dict(identifier)
            if identifier.get("type") == "ISBN_10":
                isbn_10 = _text(identifier.get("identifier"))
            elif identifier.get("type") == "ISBN_13":
                isbn_13 = _text(identifier.get("identifier"))

        images = _as_dict(info.get("imageLinks"))

        return LookupResult(
            title=_text(info.get("title")),
            authors=_strings(info.get("authors")),
            publish_date=_text(info.get("publishedDate")),
            cover_url=_https(_text(images.get("thumbnail"))),
            subjects=_strings(info.get("categories")),
            isbn_10=isbn_10,
            isbn_13=isbn_13,
            source=self.name,
        )

    async def close(self):
        """Close HTTP client."""
        if self._client and self._owns_client:
            await self._client.aclose()
        self._client = None


PROVIDERS = {
    OpenLibraryClient.name: OpenLibraryClient,
    GoogleBooksClient.name: GoogleBooksClient,
}


def create_provider(
    name: str,
    google_books_api_key: Optional[str] = None,
    openlibrary_base_url: Optional[str] = None,
    google_books_base_url: Optional[str] = None,
    timeout: float = 10.0,
) -> MetadataProvider:
    """
    Build a provider client by its configured name.

    Raises:
        ValueError: If the name is not a known provider
    """
    if name == OpenLibraryClient.name:
        return OpenLibraryClient(base_url=openlibrary_base_url, timeout=timeout)
    if name == GoogleBooksClient.name:
        return GoogleBooksClient(
            api_key=google_books_api_key,
            base_url=google_books_base_url,
            timeout=timeout,
        )
    raise ValueError(f"Unknown metadata provider: {name!r} (known: {', '.join(PROVIDERS)})")
