"""
Locale Translator Exceptions

This module contains the exception classes shared by the pipeline, the
translation clients and the web layer. Kept separate to avoid circular
imports between the client and translation packages.
"""


class LocaleTranslatorError(Exception):
    """Base error with optional code and details."""

    default_code = "error"

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> dict:
        payload = {"error": str(self), "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class ParseError(LocaleTranslatorError):
    """Uploaded locale file is not valid JSON after comment stripping."""

    default_code = "parse_error"


class LocaleKeyError(LocaleTranslatorError):
    """A locale key cannot be represented as a dotted path."""

    default_code = "invalid_key"


class ConfigurationError(LocaleTranslatorError):
    """Required configuration (usually a credential) is missing or invalid."""

    default_code = "configuration_error"


class SchemaValidationError(LocaleTranslatorError):
    """A request or response payload does not match its schema."""

    default_code = "invalid_payload"


class PlaceholderMismatchError(LocaleTranslatorError):
    """Translated text did not return the placeholder markers it was sent."""

    default_code = "placeholder_mismatch"


class ProviderError(LocaleTranslatorError):
    """A single HTTP call to a translation backend failed."""

    default_code = "provider_error"

    def __init__(self, message: str, status_code: int = None, code: str = None, details: dict = None):
        super().__init__(message, code=code, details=details)
        self.status_code = status_code


class TranslationFailure(LocaleTranslatorError):
    """Translating into one target language failed after all retries."""

    default_code = "translation_failed"

    def __init__(self, language: str, cause: Exception, message: str = None):
        super().__init__(
            message or f"Translation to '{language}' failed: {cause}",
            details={"language": language, "cause": str(cause)},
        )
        self.language = language
        self.cause = cause


class TranslationTimeoutError(TranslationFailure):
    """The last attempt for a language timed out."""

    default_code = "timeout"

    def __init__(self, language: str, cause: Exception):
        super().__init__(language, cause, message=f"Translation to '{language}' timed out: {cause}")


class ExportFailure(LocaleTranslatorError):
    """Building the translations archive failed."""

    default_code = "export_failed"
