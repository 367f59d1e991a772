"""
Bookish - FastAPI Backend.

HTTP surface for ISBN / cover-text lookup and the library view-model.
"""

from .main import app, create_app, main
from .dependencies import (
    Settings,
    get_settings,
    get_resolver,
    get_service_container,
    ServiceContainer,
)
from .schemas import (
    LookupResponse,
    LibraryQueryRequest,
    LibraryQueryResponse,
    AmazonLinkResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    # Application
    "app",
    "create_app",
    "main",
    # Dependencies
    "Settings",
    "get_settings",
    "get_resolver",
    "get_service_container",
    "ServiceContainer",
    # Schemas
    "LookupResponse",
    "LibraryQueryRequest",
    "LibraryQueryResponse",
    "AmazonLinkResponse",
    "HealthResponse",
    "ErrorResponse",
]
