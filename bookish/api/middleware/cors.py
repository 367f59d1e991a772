"""
CORS Configuration

Lets the browser front-end call the lookup API from another origin.
"""

from typing import List, Optional
from dataclasses import dataclass, field

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


@dataclass
class CORSConfig:
    """CORS configuration settings."""

    allowed_origins: List[str] = field(default_factory=list)

    # The API is read-only apart from the library query
    allowed_methods: List[str] = field(default_factory=lambda: ["GET", "POST", "OPTIONS"])

    allowed_headers: List[str] = field(default_factory=lambda: [
        "Accept",
        "Content-Type",
        "X-Request-ID",
    ])

    expose_headers: List[str] = field(default_factory=lambda: ["X-Request-ID"])

    max_age: int = 3600

    # Allow all origins (development only!)
    allow_all_origins: bool = False


def get_cors_config(environment: str = "development", extra_origins: str = "") -> CORSConfig:
    """
    Get CORS configuration for the environment.

    Args:
        environment: "development" allows every origin
        extra_origins: Comma-separated origins to allow in any environment
    """
    config = CORSConfig(allow_all_origins=environment == "development")
    config.allowed_origins.extend(
        origin.strip() for origin in extra_origins.split(",") if origin.strip()
    )
    return config


def setup_cors(app: FastAPI, config: Optional[CORSConfig] = None) -> None:
    """Configure CORS middleware for the FastAPI application."""
    if config is None:
        config = get_cors_config()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if config.allow_all_origins else config.allowed_origins,
        allow_credentials=False,
        allow_methods=config.allowed_methods,
        allow_headers=config.allowed_headers,
        expose_headers=config.expose_headers,
        max_age=config.max_age,
    )
