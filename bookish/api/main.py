"""
Bookish API

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import Depends, FastAPI

from .schemas import HealthResponse
from .routes import library, lookup
from .middleware import (
    setup_cors,
    setup_logging,
    setup_exception_handlers,
    LoggingConfig,
    get_cors_config,
)
from .dependencies import (
    get_settings,
    init_services,
    Settings,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Builds the service container on startup and closes provider HTTP
    clients on shutdown.
    """
    settings = get_settings()
    logger.info(f"Starting Bookish in {settings.environment} mode")

    services = init_services(settings)
    app.state.services = services
    app.state.settings = settings
    logger.info(f"Metadata providers: {', '.join(settings.provider_order)}")

    try:
        yield
    finally:
        logger.info("Shutting down Bookish...")
        await services.close()
        logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Settings = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Bookish",
        description="Personal book library: ISBN and cover lookup.",
        version=VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # ==========================================================================
    # Middleware (order matters - last added = outermost)
    # ==========================================================================

    setup_logging(
        app,
        config=LoggingConfig(slow_request_threshold=settings.http_timeout),
        structured=settings.environment != "development",
    )

    setup_exception_handlers(app)

    setup_cors(
        app,
        config=get_cors_config(settings.environment, settings.cors_origins),
    )

    # ==========================================================================
    # Routers
    # ==========================================================================

    api_prefix = "/api/v1"

    app.include_router(lookup.router, prefix=api_prefix)
    app.include_router(library.router, prefix=api_prefix)

    # ==========================================================================
    # Root Routes
    # ==========================================================================

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Bookish",
            "version": VERSION,
            "status": "running",
            "docs": "/docs" if settings.debug else None,
        }

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check(
        current: Settings = Depends(get_settings),
    ) -> HealthResponse:
        """
        Health check endpoint.

        Reports configured providers; it does not call them.
        """
        components = {
            "google_books_api_key": (
                "configured" if current.google_books_api_key else "not_configured"
            ),
        }

        return HealthResponse(
            status="healthy" if current.provider_order else "degraded",
            version=VERSION,
            providers=current.provider_order,
            components=components,
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "bookish.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
