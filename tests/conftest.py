"""
Pytest configuration and fixtures for Bookish tests.
"""

import sys
from pathlib import Path
from typing import AsyncGenerator, Callable, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from bookish.api.main import create_app
from bookish.api.dependencies import Settings, get_settings, get_resolver
from bookish.identification.models import Found, LookupResult, NotFound
from bookish.identification.resolver import MetadataResolver
from bookish.library.models import BookFormat, BookRecord, ReadStatus


# =============================================================================
# Test Settings
# =============================================================================

def get_test_settings() -> Settings:
    """Return settings configured for testing."""
    return Settings(
        providers="openlibrary,google_books",
        environment="test",
        debug=True,
    )


# =============================================================================
# Fake Providers
# =============================================================================

class FakeProvider:
    """ISBN-only provider answering from a dict; unknown keys are NotFound."""

    def __init__(self, name: str, responses: Optional[dict] = None):
        self.name = name
        self.responses = responses or {}
        self.calls: list[str] = []
        self.closed = False

    async def lookup_by_identifier(self, identifier: str):
        self.calls.append(identifier)
        outcome = self.responses.get(identifier)
        return outcome if outcome is not None else NotFound(self.name, identifier)

    async def close(self):
        self.closed = True


class FakeSearchProvider(FakeProvider):
    """Provider that also answers (title, author) searches."""

    def __init__(
        self,
        name: str,
        responses: Optional[dict] = None,
        search_responses: Optional[dict] = None,
    ):
        super().__init__(name, responses)
        self.search_responses = search_responses or {}
        self.searches: list[tuple] = []

    async def search_by_title_author(self, title=None, author=None):
        self.searches.append((title, author))
        outcome = self.search_responses.get((title, author))
        return outcome if outcome is not None else NotFound(self.name, f"{title}|{author}")


# =============================================================================
# HTTP Fixtures
# =============================================================================

@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an httpx.AsyncClient whose requests are answered by a handler."""
    def factory(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return factory


# =============================================================================
# Data Fixtures
# =============================================================================

@pytest.fixture
def hunger_games() -> LookupResult:
    """Lookup result for The Hunger Games."""
    return LookupResult(
        title="The Hunger Games",
        authors=["Suzanne Collins"],
        publish_date="2008",
        cover_url="https://covers.openlibrary.org/b/id/12646537-L.jpg",
        subjects=["Fiction", "Science fiction", "Dystopias"],
        isbn_10="0439023483",
        isbn_13="9780439023481",
        source="openlibrary",
    )


@pytest.fixture
def hobbit() -> LookupResult:
    """Lookup result for The Hobbit."""
    return LookupResult(
        title="The Hobbit",
        authors=["J.R.R. Tolkien"],
        publish_date="2012-09-18",
        subjects=["Fiction", "Fantasy"],
        isbn_13="9780547928227",
        source="google_books",
    )


@pytest.fixture
def sample_books() -> list[BookRecord]:
    """Small library matching the seed data of the web app."""
    return [
        BookRecord(
            id="demo-1",
            title="Before We Were Yours",
            author="Lisa Wingate",
            status=ReadStatus.UNREAD,
            format=BookFormat.PHYSICAL,
            genre="Historical Fiction",
            fiction_type="Fiction",
            difficulty="Moderate",
            isbn="9780425284681",
            publication_date="2017-06-06",
            added_at="2025-01-01",
        ),
        BookRecord(
            id="demo-2",
            title="Most Talkative",
            author="Andy Cohen",
            status=ReadStatus.READ,
            format=BookFormat.AUDIBLE,
            genre="Memoir",
            fiction_type="Nonfiction",
            difficulty="Light",
            isbn="9781250031464",
            publication_date="2013-04-02",
            added_at="2025-01-02",
        ),
        BookRecord(
            id="demo-3",
            title="dune",
            author="Frank Herbert",
            status=ReadStatus.READING,
            format=BookFormat.MULTIPLE,
            genre="Science Fiction",
            fiction_type="Fiction",
            difficulty="Challenging",
        ),
        BookRecord(
            id="demo-4",
            title="Untitled Notebook",
            author="",
            genre="Unknown",
        ),
    ]


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def fake_providers(hunger_games, hobbit):
    """Primary ISBN-only provider and a searchable secondary."""
    primary = FakeProvider(
        "openlibrary",
        responses={"9780439023481": Found(hunger_games, "openlibrary")},
    )
    secondary = FakeSearchProvider(
        "google_books",
        search_responses={("The Hobbit", "J.R.R. Tolkien"): Found(hobbit, "google_books")},
    )
    return primary, secondary


@pytest_asyncio.fixture(scope="function")
async def app(fake_providers):
    """Create FastAPI application with fake providers."""
    application = create_app(get_test_settings())
    resolver = MetadataResolver(list(fake_providers))

    application.dependency_overrides[get_settings] = get_test_settings
    application.dependency_overrides[get_resolver] = lambda: resolver

    yield application

    application.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API tests."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
