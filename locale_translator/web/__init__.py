"""Web application package for the locale translator."""

from typing import Optional

from flask import Flask

from locale_translator.config import Settings, load_settings
from locale_translator.logger import configure_logging


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Application factory for the web interface."""
    if settings is None:
        settings = load_settings()
    configure_logging(settings.log_mode)

    from .app import build_app  # Import here to avoid circular imports

    return build_app(settings)


__all__ = ["create_app"]
