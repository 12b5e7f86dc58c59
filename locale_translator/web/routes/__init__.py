"""Route blueprints for the web application."""

from .translate import translate_bp
from .locales import locales_bp

__all__ = [
    "translate_bp",
    "locales_bp",
]
