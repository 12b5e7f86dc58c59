"""
Translation Manager Module

Main TranslationManager class that coordinates one translation run:
- Parse and flatten the source locale document
- Translate into every target language, one language at a time
- Record per-language failures without aborting the run
- Track progress for callers
"""

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

import locale_translator.language_codes as lc
from locale_translator.exceptions import (
    ConfigurationError,
    LocaleKeyError,
    LocaleTranslatorError,
    ParseError,
)
from locale_translator.logger import get_logger
from locale_translator.translation.progress import ProgressState, Throttle, TranslationRun
from locale_translator.translation.utils import flatten_json, parse_locale_document

logger = get_logger(__name__)

# Errors that stop the whole run
FATAL_ERRORS = (ParseError, LocaleKeyError, ConfigurationError)


@dataclass
class TranslationResult:
    """Outcome of a run: whatever succeeded plus per-language errors."""
    translations: Dict[str, Dict[str, str]]
    errors: Dict[str, str]
    progress: ProgressState
    source_language: str
    elapsed_time: float = 0.0
    summary: Optional[str] = None
    skipped: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": not self.has_errors,
            "source_language": self.source_language,
            "languages": list(self.translations),
            "errors": dict(self.errors),
            "summary": self.summary,
            "progress": self.progress.to_dict(),
            "copied_languages": list(self.skipped),
            "elapsed_time": self.elapsed_time,
        }


class TranslationManager:
    """
    Runs the per-language translation fan-out.

    Features:
    - Sequential languages in table order, so the provider never sees bursts
    - A failed language is recorded and the run continues
    - Language policy table: 'copy' keeps the source text, 'reject' records an error
    - Progress callbacks after every language
    """

    def __init__(
        self,
        client,
        source_language: str = lc.SOURCE_LANGUAGE,
        language_policies: Optional[Mapping[str, str]] = None,
        throttle_every: int = 5,
        throttle_pause: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize translation manager.

        Args:
            client: TranslationClient used for every target language
            source_language: Code of the uploaded document's language
            language_policies: {code: 'copy' | 'reject'} for languages the provider cannot handle
            throttle_every: Requests per throttle window (direct client path)
            throttle_pause: Pause in seconds at the end of each window
            sleep: Sleep function handed to the run's throttle
        """
        if not lc.is_supported_language(source_language):
            raise ConfigurationError(f"Unsupported source language: {source_language}")

        self.client = client
        self.source_language = source_language
        self.language_policies = dict(language_policies or {})
        self.throttle_every = throttle_every
        self.throttle_pause = throttle_pause
        self.sleep = sleep

    @classmethod
    def from_settings(cls, settings, client=None, sleep: Callable[[float], None] = time.sleep, **client_kwargs):
        """Build a manager (and, unless given, its client) from Settings."""
        # Import here to avoid circular imports
        from locale_translator.client.service import build_client

        if client is None:
            client = build_client(settings, sleep=sleep, **client_kwargs)
        return cls(
            client,
            source_language=settings.source_language,
            language_policies=settings.language_policies,
            throttle_every=settings.throttle.every,
            throttle_pause=settings.throttle.pause,
            sleep=sleep,
        )

    def _resolve_target_languages(self, requested: Optional[List[str]]) -> List[str]:
        """Targets in table order, optionally restricted to the requested codes."""
        targets = lc.get_target_languages(self.source_language)
        if not requested:
            return targets

        unknown = [code for code in requested if not lc.is_supported_language(code)]
        if unknown:
            raise ConfigurationError(
                f"Unsupported target languages: {', '.join(unknown)}",
                details={"languages": unknown},
            )
        return [code for code in targets if code in requested]

    def _load_source(self, source: Union[str, bytes, Dict[str, Any]]) -> Dict[str, str]:
        if isinstance(source, bytes):
            try:
                source = source.decode("utf-8-sig")
            except UnicodeDecodeError as e:
                raise ParseError("Locale file must be UTF-8 encoded.", details={"reason": str(e)})
        if isinstance(source, str):
            source = parse_locale_document(source)
        if not isinstance(source, dict):
            raise ParseError("Locale file must contain a JSON object at the top level.")
        return flatten_json(source)

    def _translate_language(self, run: TranslationRun, flat_map: Dict[str, str], lang_code: str) -> bool:
        """Translate one language into the run. Returns True on success."""
        lang_name = lc.get_language_name(lang_code)
        policy = self.language_policies.get(lang_code)

        if policy == "copy":
            logger.info(f"{lang_name} ({lang_code}) is not supported by the provider; copying source text")
            run.translations[lang_code] = dict(flat_map)
            return True

        if policy == "reject":
            run.errors[lang_code] = f"Failed to translate to {lang_name}: language not supported by the provider"
            logger.error(run.errors[lang_code])
            return False

        logger.info(f"Starting translation for {lang_name} ({lang_code}) - {len(flat_map)} keys")
        try:
            run.translations[lang_code] = self.client.translate(flat_map, lang_code, run=run)
        except FATAL_ERRORS:
            raise
        except LocaleTranslatorError as e:
            cause = getattr(e, "cause", None) or e
            run.errors[lang_code] = f"Failed to translate to {lang_name}: {cause}"
            logger.error(f"✗ {run.errors[lang_code]}")
            return False
        except Exception as e:
            run.errors[lang_code] = f"Failed to translate to {lang_name}: {e}"
            logger.exception(f"✗ Unexpected error translating to {lang_name} ({lang_code})")
            return False

        logger.info(f"✓ Translation completed for {lang_name} ({lang_code})")
        return True

    def run(
        self,
        source: Union[str, bytes, Dict[str, Any]],
        target_languages: Optional[List[str]] = None,
        progress_callback: Optional[Callable[[ProgressState], None]] = None,
    ) -> TranslationResult:
        """
        Translate a locale document into every target language.

        Args:
            source: Raw file content or an already parsed document
            target_languages: Optional subset of the supported targets
            progress_callback: Optional callback invoked after every language

        Returns:
            TranslationResult with the (possibly partial) TranslationSet

        Raises:
            ParseError: If the source is not a valid locale document
            LocaleKeyError: If a key cannot be flattened
            ConfigurationError: If credentials are missing
        """
        flat_map = self._load_source(source)
        languages = self._resolve_target_languages(target_languages)

        run = TranslationRun(
            source_language=self.source_language,
            progress=ProgressState(total=len(languages)),
            throttle=Throttle(every=self.throttle_every, pause=self.throttle_pause, sleep=self.sleep),
            translations={self.source_language: flat_map},
        )
        progress = run.progress

        logger.info(
            f"Starting translation run: {len(flat_map)} keys, {len(languages)} target languages ({', '.join(languages)})"
        )

        copied = []
        for lang_code in languages:
            progress.current_language = lang_code
            progress.current_language_name = lc.get_language_name(lang_code)
            progress.phase = "translating"
            if progress_callback:
                progress_callback(progress)

            succeeded = False
            try:
                succeeded = self._translate_language(run, flat_map, lang_code)
                if succeeded and self.language_policies.get(lang_code) == "copy":
                    copied.append(lang_code)
            finally:
                progress.completed += 1
                if succeeded:
                    progress.success_count += 1
                else:
                    progress.failure_count += 1

            if progress_callback:
                progress_callback(progress)

        progress.phase = "completed"
        run.finished_at = time.time()

        result = TranslationResult(
            translations=run.translations,
            errors=run.errors,
            progress=progress,
            source_language=self.source_language,
            elapsed_time=run.finished_at - run.started_at,
            skipped=copied,
        )

        if run.errors:
            result.summary = (
                f"Translated {progress.success_count} of {progress.total} languages; "
                f"{progress.failure_count} failed"
            )
            logger.warning(result.summary)
        else:
            logger.info(f"Translation run completed in {result.elapsed_time:.1f} seconds ({progress.total} languages)")

        if progress_callback:
            progress_callback(progress)

        return result
