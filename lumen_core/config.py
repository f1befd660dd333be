"""
Unified configuration for lumen-tools.

This module provides a single Settings class that consolidates all
environment variables used by the tools and the remote job clients.
Credentials are read here once and passed explicitly into the clients
that need them.
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for .env file loading (allows running from any CWD)
PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """
    Unified settings for lumen-tools.

    Environment variables are loaded from .env file and can be overridden
    by actual environment variables.
    """

    # Service identification
    SERVICE_NAME: str = "lumen-tools"
    LOG_LEVEL: str = "INFO"

    # Remote job service (background removal / upscaling)
    UPSCALING_API_URL: str = "https://image-upscaling.net"
    CLIENT_ID: str = ""

    # Per-call HTTP timeout, in seconds
    REQUEST_TIMEOUT: float = 30.0

    # Polling budgets
    POLL_INTERVAL: float = 2.0
    BGCLEANER_MAX_ATTEMPTS: int = 30
    RESIZE_MAX_ATTEMPTS: int = 60

    # "unique" appends a random token to the upload name, "stem" keeps it as-is
    CORRELATION_STRATEGY: Literal["unique", "stem"] = "unique"

    # "substring" matches the key anywhere in a result URL, "basename" only in
    # its last path segment
    MATCH_STRATEGY: Literal["substring", "basename"] = "substring"

    # Where downloaded artifacts are written
    OUTPUT_DIR: str = tempfile.gettempdir()

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        extra="ignore",
    )


# Global settings instance
settings = Settings()  # type: ignore
