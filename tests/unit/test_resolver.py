"""
Unit tests for the metadata resolver.
"""

import pytest

from bookish.exceptions import EmptyQueryError, InvalidIdentifierError
from bookish.identification.models import (
    AttemptKind,
    Exhausted,
    Found,
    LookupResult,
    ProviderFailure,
)
from bookish.identification.resolver import (
    MetadataResolver,
    ResolutionState,
    lookup_candidates,
    text_queries,
)

from tests.conftest import FakeProvider, FakeSearchProvider


def found(title: str, provider: str) -> Found:
    return Found(LookupResult(title=title, source=provider), provider)


class TestCandidates:
    """Tests for lookup_candidates() and text_queries()."""

    def test_isbn10_tries_isbn13_first(self):
        assert lookup_candidates("0439023483") == ["9780439023481", "0439023483"]

    def test_isbn13_is_tried_alone(self):
        assert lookup_candidates("9780439023481") == ["9780439023481"]

    def test_text_query_order(self):
        assert text_queries("The Hobbit", "Tolkien") == [
            ("The Hobbit", "Tolkien"),
            ("The Hobbit", None),
            (None, "Tolkien"),
        ]

    def test_blank_parts_are_skipped(self):
        assert text_queries("  ", "Tolkien") == [(None, "Tolkien")]
        assert text_queries("Dune", None) == [("Dune", None)]
        assert text_queries(None, "") == []


@pytest.mark.asyncio
class TestResolveIdentifier:
    """Tests for MetadataResolver.resolve_identifier()."""

    async def test_unknown_isbn_is_exhausted_after_every_provider(self):
        primary = FakeProvider("openlibrary")
        secondary = FakeProvider("google_books")
        resolver = MetadataResolver([primary, secondary])

        outcome = await resolver.resolve_identifier("9780000000002")

        assert isinstance(outcome, Exhausted)
        assert outcome.query == "9780000000002"
        assert len(outcome.attempts) == 2
        assert [a.provider for a in outcome.attempts] == ["openlibrary", "google_books"]
        assert primary.calls == ["9780000000002"]
        assert secondary.calls == ["9780000000002"]
        assert resolver.state is ResolutionState.EXHAUSTED

    async def test_isbn10_candidates_per_provider(self):
        primary = FakeProvider("openlibrary")
        secondary = FakeProvider("google_books")
        resolver = MetadataResolver([primary, secondary])

        outcome = await resolver.resolve_identifier("0-439-02348-3")

        assert isinstance(outcome, Exhausted)
        assert outcome.query == "0439023483"
        assert primary.calls == ["9780439023481", "0439023483"]
        assert secondary.calls == ["9780439023481", "0439023483"]
        assert len(outcome.attempts) == 4

    async def test_first_success_stops(self):
        primary = FakeProvider("openlibrary", {"9780439023481": found("The Hunger Games", "openlibrary")})
        secondary = FakeProvider("google_books")
        resolver = MetadataResolver([primary, secondary])

        outcome = await resolver.resolve_identifier("0439023483")

        assert isinstance(outcome, Found)
        assert outcome.provider == "openlibrary"
        assert primary.calls == ["9780439023481"]
        assert secondary.calls == []
        assert resolver.state is ResolutionState.SUCCEEDED

    async def test_isbn10_form_used_when_isbn13_misses(self):
        primary = FakeProvider("openlibrary", {"0439023483": found("The Hunger Games", "openlibrary")})
        resolver = MetadataResolver([primary])

        outcome = await resolver.resolve_identifier("0439023483")

        assert isinstance(outcome, Found)
        assert primary.calls == ["9780439023481", "0439023483"]

    async def test_failure_falls_through_to_next_provider(self):
        failure = ProviderFailure("openlibrary", "9780547928227", "status 503")
        primary = FakeProvider("openlibrary", {"9780547928227": failure})
        secondary = FakeProvider("google_books", {"9780547928227": found("The Hobbit", "google_books")})
        resolver = MetadataResolver([primary, secondary])

        outcome = await resolver.resolve_identifier("9780547928227")

        assert isinstance(outcome, Found)
        assert outcome.provider == "google_books"

    async def test_failures_are_counted_separately(self):
        failure = ProviderFailure("openlibrary", "9780547928227", "transport: timeout")
        primary = FakeProvider("openlibrary", {"9780547928227": failure})
        secondary = FakeProvider("google_books")
        resolver = MetadataResolver([primary, secondary])

        outcome = await resolver.resolve_identifier("9780547928227")

        assert [a.kind for a in outcome.attempts] == [AttemptKind.FAILED, AttemptKind.NOT_FOUND]
        assert outcome.failures == 1

    async def test_bad_checksum_is_still_looked_up(self):
        primary = FakeProvider("openlibrary")
        resolver = MetadataResolver([primary])

        await resolver.resolve_identifier("9780439023482")

        assert primary.calls == ["9780439023482"]

    @pytest.mark.parametrize("raw", ["12345", "", "1234567890123"])
    async def test_invalid_input_makes_no_requests(self, raw):
        primary = FakeProvider("openlibrary")
        resolver = MetadataResolver([primary])

        with pytest.raises(InvalidIdentifierError):
            await resolver.resolve_identifier(raw)

        assert primary.calls == []


@pytest.mark.asyncio
class TestResolveText:
    """Tests for MetadataResolver.resolve_text()."""

    async def test_only_search_providers_are_queried(self, fake_providers):
        primary, secondary = fake_providers
        resolver = MetadataResolver([primary, secondary])

        outcome = await resolver.resolve_text("The Hobbit", "J.R.R. Tolkien")

        assert isinstance(outcome, Found)
        assert outcome.result.title == "The Hobbit"
        assert primary.calls == []
        assert secondary.searches == [("The Hobbit", "J.R.R. Tolkien")]

    async def test_falls_back_to_partial_queries(self):
        provider = FakeSearchProvider(
            "google_books",
            search_responses={(None, "Tolkien"): found("The Hobbit", "google_books")},
        )
        resolver = MetadataResolver([provider])

        outcome = await resolver.resolve_text("Hobit", "Tolkien")

        assert isinstance(outcome, Found)
        assert provider.searches == [("Hobit", "Tolkien"), ("Hobit", None), (None, "Tolkien")]

    async def test_exhausted_keeps_the_query(self):
        resolver = MetadataResolver([FakeSearchProvider("google_books")])

        outcome = await resolver.resolve_text("Unknown Title", "Nobody")

        assert isinstance(outcome, Exhausted)
        assert outcome.query == "Unknown Title / Nobody"
        assert len(outcome.attempts) == 3

    async def test_no_search_providers(self):
        resolver = MetadataResolver([FakeProvider("openlibrary")])

        outcome = await resolver.resolve_text("Dune")

        assert isinstance(outcome, Exhausted)
        assert outcome.attempts == ()

    async def test_empty_query(self):
        resolver = MetadataResolver([FakeSearchProvider("google_books")])

        with pytest.raises(EmptyQueryError):
            await resolver.resolve_text("  ", None)


class TestResolverLifecycle:
    """Construction and shutdown."""

    def test_requires_a_provider(self):
        with pytest.raises(ValueError):
            MetadataResolver([])

    @pytest.mark.asyncio
    async def test_close_closes_every_provider(self, fake_providers):
        resolver = MetadataResolver(list(fake_providers))

        await resolver.close()

        assert all(p.closed for p in fake_providers)
