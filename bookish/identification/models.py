"""
Lookup Models

Provider results and the tagged outcome returned by every lookup.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union


@dataclass
class LookupResult:
    """
    Book metadata returned by a single provider.

    Fields the provider did not supply stay empty; nothing is inferred.
    """

    title: Optional[str] = None
    authors: list[str] = field(default_factory=list)
    publish_date: Optional[str] = None
    cover_url: Optional[str] = None
    subjects: list[str] = field(default_factory=list)

    # Identifiers, only when the provider reports them
    isbn_10: Optional[str] = None
    isbn_13: Optional[str] = None

    source: str = "unknown"

    @property
    def primary_author(self) -> Optional[str]:
        return self.authors[0] if self.authors else None

    @property
    def is_empty(self) -> bool:
        """True when no descriptive field is set."""
        return not (
            self.title
            or self.authors
            or self.publish_date
            or self.cover_url
            or self.subjects
        )

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "authors": list(self.authors),
            "publish_date": self.publish_date,
            "cover_url": self.cover_url,
            "subjects": list(self.subjects),
            "isbn_10": self.isbn_10,
            "isbn_13": self.isbn_13,
            "source": self.source,
        }


class AttemptKind(str, Enum):
    """How a single (provider, candidate) attempt ended."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


@dataclass(frozen=True)
class Found:
    """A provider returned a usable record."""
    result: LookupResult
    provider: str

    kind = AttemptKind.FOUND


@dataclass(frozen=True)
class NotFound:
    """The provider has no record for the query."""
    provider: str
    query: str

    kind = AttemptKind.NOT_FOUND


@dataclass(frozen=True)
class ProviderFailure:
    """Transport or parse failure; treated like NotFound for fallback."""
    provider: str
    query: str
    cause: str

    kind = AttemptKind.FAILED


ProviderOutcome = Union[Found, NotFound, ProviderFailure]


@dataclass(frozen=True)
class Attempt:
    """One (provider, candidate) pair tried by the resolver."""
    provider: str
    query: str
    kind: AttemptKind


@dataclass(frozen=True)
class Exhausted:
    """
    Terminal outcome when every provider and candidate failed.

    `query` is the validated identifier (or the text query) so the caller
    can keep it and fall back to manual entry.
    """
    query: str
    attempts: tuple[Attempt, ...] = ()

    @property
    def failures(self) -> int:
        return sum(1 for a in self.attempts if a.kind is AttemptKind.FAILED)


ResolutionOutcome = Union[Found, Exhausted]
