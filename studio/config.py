"""
patternkit studio configuration — all environment variables in one place.

Read from environment at runtime.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Server
    HOST: str = os.environ.get("PATTERNKIT_HOST", "127.0.0.1")
    PORT: int = int(os.environ.get("PATTERNKIT_PORT", "1880"))

    # Styleguide (pattern source tree) selected at startup, if any
    STYLEGUIDE_PATH: str = os.environ.get("PATTERNKIT_STYLEGUIDE_PATH", "")

    # Exports wait this long for a preview to answer before giving up
    EXPORT_TIMEOUT_SECONDS: float = float(os.environ.get("PATTERNKIT_EXPORT_TIMEOUT", "30"))

    # Logging
    LOG_LEVEL: str = os.environ.get("PATTERNKIT_LOG_LEVEL", "INFO")

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")


# Singleton instance
settings = Settings()

if settings.EXPORT_TIMEOUT_SECONDS <= 0:
    raise RuntimeError("PATTERNKIT_EXPORT_TIMEOUT must be a positive number of seconds")
