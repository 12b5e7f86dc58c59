"""Translate nested JSON locale files into several languages via DeepL."""

__version__ = "0.1.0"
