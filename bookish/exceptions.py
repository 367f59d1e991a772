"""
Exceptions for Bookish.

Only invalid input and exhausted resolutions cross the core boundary;
provider-level failures are absorbed by the resolver.
"""


class BookishException(Exception):
    """Base exception for Bookish errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: str = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class InvalidIdentifierError(BookishException):
    """Identifier rejected before any network call."""

    def __init__(self, identifier: str, reason: str):
        self.identifier = identifier
        super().__init__(
            message="Invalid ISBN",
            code="INVALID_IDENTIFIER",
            status_code=400,
            detail=f"'{identifier}' {reason}",
        )


class EmptyQueryError(BookishException):
    """Text search requested without a title or author."""

    def __init__(self):
        super().__init__(
            message="Title or author required",
            code="EMPTY_QUERY",
            status_code=400,
            detail="Provide a title, an author, or both",
        )


class ResolutionExhaustedError(BookishException):
    """Every provider and candidate was tried without a match."""

    def __init__(self, query: str, attempts: int = 0):
        self.query = query
        self.attempts = attempts
        super().__init__(
            message="No metadata found",
            code="RESOLUTION_EXHAUSTED",
            status_code=404,
            detail=f"No provider returned a record for '{query}' "
                   f"after {attempts} attempts; enter the details manually",
        )


class ExternalServiceError(BookishException):
    """External service failure."""

    def __init__(self, service: str, detail: str = None):
        super().__init__(
            message=f"{service} service unavailable",
            code="EXTERNAL_SERVICE_ERROR",
            status_code=503,
            detail=detail,
        )
