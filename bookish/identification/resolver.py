"""
Metadata Resolver

Drives provider clients in a fixed priority order and stops at the
first success. Requests are awaited one at a time so an early match
saves every later call.
"""

from enum import Enum
from typing import Optional, Sequence

from loguru import logger

from bookish.exceptions import EmptyQueryError
from bookish.identification import isbn as isbn_utils
from bookish.identification.models import (
    Attempt,
    AttemptKind,
    Exhausted,
    Found,
    ProviderOutcome,
    ResolutionOutcome,
)
from bookish.identification.providers import MetadataProvider, TextSearchProvider


class ResolutionState(str, Enum):
    """Resolver progress, reported in logs."""
    IDLE = "idle"
    TRYING = "trying"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"


def lookup_candidates(identifier: str) -> list[str]:
    """
    Identifier forms to try against each provider, in order.

    ISBN-10 input is tried as its ISBN-13 conversion first, then as given.
    """
    if len(identifier) == 10:
        return [isbn_utils.convert_10_to_13(identifier), identifier]
    return [identifier]


def text_queries(
    title: Optional[str],
    author: Optional[str],
) -> list[tuple[Optional[str], Optional[str]]]:
    """
    Title/author combinations from most to least specific.

    Both → title only → author only, skipping parts that are blank.
    """
    title = title.strip() if title and title.strip() else None
    author = author.strip() if author and author.strip() else None

    queries = []
    if title and author:
        queries.append((title, author))
    if title:
        queries.append((title, None))
    if author:
        queries.append((None, author))
    return queries


class MetadataResolver:
    """
    Resolve an ISBN or OCR'd title/author into book metadata.

    Usage:
        resolver = MetadataResolver([OpenLibraryClient(), GoogleBooksClient()])
        outcome = await resolver.resolve_identifier("0439023483")
        if isinstance(outcome, Found):
            print(outcome.result.title)
    """

    def __init__(self, providers: Sequence[MetadataProvider]):
        """
        Initialize resolver.

        Args:
            providers: Providers in priority order; the first is primary
        """
        if not providers:
            raise ValueError("MetadataResolver needs at least one provider")
        self.providers = list(providers)
        self.state = ResolutionState.IDLE

    @property
    def search_providers(self) -> list[TextSearchProvider]:
        return [p for p in self.providers if isinstance(p, TextSearchProvider)]

    async def resolve_identifier(self, raw: str) -> ResolutionOutcome:
        """
        Resolve a scanned or typed ISBN.

        Args:
            raw: Identifier text, punctuation allowed

        Returns:
            Found from the first provider that has a record, else Exhausted

        Raises:
            InvalidIdentifierError: Before any request, if the input is not
                a plausible ISBN
        """
        identifier = isbn_utils.validate(raw)
        if not isbn_utils.is_valid_checksum(identifier):
            # Still looked up; some printed ISBNs carry bad check digits
            logger.warning(f"ISBN {identifier} fails its checksum")

        candidates = lookup_candidates(identifier)
        attempts: list[Attempt] = []

        for index, provider in enumerate(self.providers):
            self._enter(ResolutionState.TRYING, provider.name, index)
            for candidate in candidates:
                outcome = await provider.lookup_by_identifier(candidate)
                if self._record(attempts, outcome, provider.name, candidate):
                    return outcome

        return self._exhausted(identifier, attempts)

    async def resolve_text(
        self,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ) -> ResolutionOutcome:
        """
        Resolve free text, e.g. lines picked from a cover photo.

        Args:
            title: Candidate title text
            author: Candidate author text

        Returns:
            Found or Exhausted

        Raises:
            EmptyQueryError: If neither title nor author has content
        """
        queries = text_queries(title, author)
        if not queries:
            raise EmptyQueryError()

        label = " / ".join(part for part in queries[0] if part)
        attempts: list[Attempt] = []

        for query_title, query_author in queries:
            description = f"title={query_title!r} author={query_author!r}"
            for index, provider in enumerate(self.search_providers):
                self._enter(ResolutionState.TRYING, provider.name, index)
                outcome = await provider.search_by_title_author(
                    title=query_title,
                    author=query_author,
                )
                if self._record(attempts, outcome, provider.name, description):
                    return outcome

        return self._exhausted(label, attempts)

    def _record(
        self,
        attempts: list[Attempt],
        outcome: ProviderOutcome,
        provider_name: str,
        query: str,
    ) -> bool:
        """Log and store an attempt; True when it ends the resolution."""
        attempts.append(Attempt(provider_name, query, outcome.kind))

        if isinstance(outcome, Found):
            self.state = ResolutionState.SUCCEEDED
            logger.info(
                f"Resolved {query} via {provider_name}: "
                f"'{outcome.result.title}' ({len(attempts)} attempts)"
            )
            return True

        if outcome.kind is AttemptKind.FAILED:
            logger.warning(f"{provider_name} failed for {query}: {outcome.cause}")
        else:
            logger.debug(f"{provider_name} has no record for {query}")
        return False

    def _enter(self, state: ResolutionState, provider_name: str, index: int):
        self.state = state
        logger.debug(f"Resolver {state.value}: provider #{index} ({provider_name})")

    def _exhausted(self, query: str, attempts: list[Attempt]) -> Exhausted:
        self.state = ResolutionState.EXHAUSTED
        outcome = Exhausted(query=query, attempts=tuple(attempts))
        logger.info(
            f"No metadata for {query} after {len(attempts)} attempts "
            f"({outcome.failures} provider failures)"
        )
        return outcome

    async def close(self):
        """Close provider HTTP clients."""
        for provider in self.providers:
            await provider.close()
