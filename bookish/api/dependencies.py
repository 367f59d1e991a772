"""
Dependency injection for FastAPI routes.

Provides injectable dependencies for:
- Configuration
- The metadata resolver and its provider clients
"""

import os
from typing import Optional
from functools import lru_cache
from dataclasses import dataclass

from fastapi import Depends

from bookish.capture.scanner import DEFAULT_POLL_INTERVAL


# =============================================================================
# Configuration
# =============================================================================

@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Metadata providers, in priority order
    providers: str = "openlibrary,google_books"
    google_books_api_key: Optional[str] = None
    openlibrary_base_url: str = "https://openlibrary.org"
    google_books_base_url: str = "https://www.googleapis.com/books/v1"
    http_timeout: float = 10.0

    # Barcode capture
    scan_poll_interval: float = DEFAULT_POLL_INTERVAL

    # CORS
    cors_origins: str = ""

    # Environment
    environment: str = "development"
    debug: bool = True

    @property
    def provider_order(self) -> list[str]:
        """Configured provider names, primary first."""
        return [name.strip() for name in self.providers.split(",") if name.strip()]

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            providers=os.getenv("BOOKISH_PROVIDERS", cls.providers),
            google_books_api_key=os.getenv("GOOGLE_BOOKS_API_KEY"),
            openlibrary_base_url=os.getenv("OPENLIBRARY_BASE_URL", cls.openlibrary_base_url),
            google_books_base_url=os.getenv("GOOGLE_BOOKS_BASE_URL", cls.google_books_base_url),
            http_timeout=float(os.getenv("HTTP_TIMEOUT", cls.http_timeout)),
            scan_poll_interval=float(os.getenv("SCAN_POLL_INTERVAL", cls.scan_poll_interval)),
            cors_origins=os.getenv("CORS_ORIGINS", cls.cors_origins),
            environment=os.getenv("BOOKISH_ENV", cls.environment),
            debug=os.getenv("DEBUG", "true").lower() == "true",
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()


# =============================================================================
# Service Dependencies (Lazy Loading)
# =============================================================================

class ServiceContainer:
    """
    Container for lazy-loaded service instances.

    Provider HTTP clients are created on first use and closed on shutdown.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._resolver = None

    @property
    def resolver(self):
        """Get metadata resolver instance."""
        if self._resolver is None:
            from ..identification.providers import create_provider
            from ..identification.resolver import MetadataResolver

            providers = [
                create_provider(
                    name,
                    google_books_api_key=self.settings.google_books_api_key,
                    openlibrary_base_url=self.settings.openlibrary_base_url,
                    google_books_base_url=self.settings.google_books_base_url,
                    timeout=self.settings.http_timeout,
                )
                for name in self.settings.provider_order
            ]
            self._resolver = MetadataResolver(providers)
        return self._resolver

    def create_scanner(self, source):
        """Barcode scanner over a front-end camera source, using the configured poll interval."""
        from ..capture.scanner import BarcodeScanner

        return BarcodeScanner(source, poll_interval=self.settings.scan_poll_interval)

    async def close(self) -> None:
        """Release provider HTTP clients."""
        if self._resolver is not None:
            await self._resolver.close()
            self._resolver = None


# Global service container
_service_container: Optional[ServiceContainer] = None


def init_services(settings: Settings) -> ServiceContainer:
    """Initialize service container."""
    global _service_container
    _service_container = ServiceContainer(settings)
    return _service_container


def get_service_container() -> ServiceContainer:
    """Get service container instance."""
    if _service_container is None:
        # Auto-initialize with default settings if not explicitly initialized
        return init_services(get_settings())
    return _service_container


# =============================================================================
# Individual Service Dependencies
# =============================================================================

def get_resolver(
    container: ServiceContainer = Depends(get_service_container),
):
    """Dependency for the metadata resolver."""
    return container.resolver
