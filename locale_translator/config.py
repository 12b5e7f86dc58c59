"""
Configuration for the locale translator.

Configuration is assembled once at process start from three layers:
DEFAULT_CONFIG, an optional JSON config file and environment variables.
The merged dict is turned into a frozen Settings object that is passed
explicitly to the translation clients and the web application.
"""

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from locale_translator.exceptions import ConfigurationError
from locale_translator.logger import get_logger

logger = get_logger(__name__)

# Get base directory (project root)
BASE_DIR = Path(__file__).parent.parent
CONFIG_DIR = BASE_DIR / "config"
CONFIG_FILE = CONFIG_DIR / "config.json"

CONFIG_FILE_ENV = "LOCALE_TRANSLATOR_CONFIG"

API_KEY_PLACEHOLDER = "YOUR_API_KEY_HERE"

# Retry limits accepted from configuration
MIN_ATTEMPTS = 1
MAX_ATTEMPTS = 5

LANGUAGE_POLICIES = ("copy", "reject")

ARCHIVE_NAME = "locale-translations.zip"

# Default configuration template
DEFAULT_CONFIG = {
    "deepl": {
        "api_key": API_KEY_PLACEHOLDER,
        "api_url": "https://api-free.deepl.com/v2/translate",
        "source_lang": "EN",
        "formality": "prefer_more",
        "preserve_formatting": True,
    },
    "service": {
        "endpoint_url": "",
        "bearer_token": "",
        "timeout": 30,
    },
    "retry": {
        "max_attempts": 3,
        "base_delay": 1.0,
        "rate_limit_multiplier": 2.0,
    },
    "throttle": {
        "every": 5,
        "pause": 1.0,
    },
    "translation": {
        "source_language": "en-UK",
        "strict_placeholders": False,
        "language_policies": {},
    },
    "log_mode": "info",
}

# Environment variable overrides: env name -> (section, key)
ENV_OVERRIDES = {
    "DEEPL_API_KEY": ("deepl", "api_key"),
    "DEEPL_API_URL": ("deepl", "api_url"),
    "TRANSLATE_ENDPOINT_URL": ("service", "endpoint_url"),
    "TRANSLATE_BEARER_TOKEN": ("service", "bearer_token"),
    "LOCALE_TRANSLATOR_LOG_MODE": (None, "log_mode"),
}


def _merge(base: Dict[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def _config_file_path() -> Path:
    env_path = os.environ.get(CONFIG_FILE_ENV)
    return Path(env_path) if env_path else CONFIG_FILE


def load_config(environ: Optional[Mapping[str, str]] = None, config_file: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load the merged configuration dict.

    Args:
        environ: Environment mapping (defaults to os.environ)
        config_file: Optional JSON file path overriding the default location

    Returns:
        Configuration dict shaped like DEFAULT_CONFIG
    """
    environ = os.environ if environ is None else environ
    config = copy.deepcopy(DEFAULT_CONFIG)

    path = config_file or _config_file_path()
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                file_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Config file {path} is not valid JSON: {e}",
                details={"path": str(path)},
            )
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")
        config = _merge(config, file_config)
        logger.debug(f"Configuration loaded from {path}")

    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = environ.get(env_name)
        if value is None or value == "":
            continue
        if section is None:
            config[key] = value
        else:
            config.setdefault(section, {})[key] = value

    return config


def _has_value(value: Optional[str]) -> bool:
    return bool(value) and value != API_KEY_PLACEHOLDER


@dataclass(frozen=True)
class RetrySettings:
    """Retry-with-backoff policy for outbound translation calls."""
    max_attempts: int = 3
    base_delay: float = 1.0
    rate_limit_multiplier: float = 2.0


@dataclass(frozen=True)
class ThrottleSettings:
    """Fixed-window throttle: pause `pause` seconds after every `every` requests."""
    every: int = 5
    pause: float = 1.0


@dataclass(frozen=True)
class Settings:
    """Typed, immutable view of the configuration."""
    deepl_api_key: str = ""
    deepl_api_url: str = DEFAULT_CONFIG["deepl"]["api_url"]
    deepl_source_lang: str = "EN"
    deepl_formality: Optional[str] = "prefer_more"
    deepl_preserve_formatting: bool = True
    endpoint_url: str = ""
    bearer_token: str = ""
    timeout: float = 30.0
    retry: RetrySettings = field(default_factory=RetrySettings)
    throttle: ThrottleSettings = field(default_factory=ThrottleSettings)
    source_language: str = "en-UK"
    strict_placeholders: bool = False
    language_policies: Mapping[str, str] = field(default_factory=dict)
    log_mode: str = "info"

    @property
    def has_provider_key(self) -> bool:
        return _has_value(self.deepl_api_key)

    @property
    def has_endpoint(self) -> bool:
        return bool(self.endpoint_url)

    def require_provider_key(self) -> str:
        """Return the DeepL key or raise ConfigurationError."""
        if not self.has_provider_key:
            raise ConfigurationError(
                "DeepL API key not configured. Set DEEPL_API_KEY.",
                details={"missing_field": "deepl.api_key"},
            )
        return self.deepl_api_key

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "Settings":
        """
        Build Settings from a config dict, validating ranges and policies.

        Raises:
            ConfigurationError: If a value is out of range or unknown.
        """
        config = _merge(DEFAULT_CONFIG, config)
        deepl = config["deepl"]
        service = config["service"]
        retry = config["retry"]
        throttle = config["throttle"]
        translation = config["translation"]

        try:
            max_attempts = int(retry["max_attempts"])
            base_delay = float(retry["base_delay"])
            multiplier = float(retry["rate_limit_multiplier"])
            every = int(throttle["every"])
            pause = float(throttle["pause"])
            timeout = float(service["timeout"])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid numeric configuration value: {e}")

        if not MIN_ATTEMPTS <= max_attempts <= MAX_ATTEMPTS:
            raise ConfigurationError(
                f"retry.max_attempts must be between {MIN_ATTEMPTS} and {MAX_ATTEMPTS}, got {max_attempts}",
                details={"field": "retry.max_attempts"},
            )
        if base_delay < 0 or multiplier < 1 or pause < 0 or timeout <= 0:
            raise ConfigurationError("Delays must be non-negative and timeout positive")
        if every < 1:
            raise ConfigurationError("throttle.every must be at least 1")

        policies = dict(translation.get("language_policies") or {})
        for code, policy in policies.items():
            if policy not in LANGUAGE_POLICIES:
                raise ConfigurationError(
                    f"Unknown language policy '{policy}' for '{code}'",
                    details={"language": code, "allowed": list(LANGUAGE_POLICIES)},
                )

        return cls(
            deepl_api_key=deepl.get("api_key") or "",
            deepl_api_url=deepl["api_url"],
            deepl_source_lang=deepl.get("source_lang", "EN"),
            deepl_formality=deepl.get("formality"),
            deepl_preserve_formatting=bool(deepl.get("preserve_formatting", True)),
            endpoint_url=service.get("endpoint_url") or "",
            bearer_token=service.get("bearer_token") or "",
            timeout=timeout,
            retry=RetrySettings(max_attempts, base_delay, multiplier),
            throttle=ThrottleSettings(every, pause),
            source_language=translation["source_language"],
            strict_placeholders=bool(translation.get("strict_placeholders", False)),
            language_policies=policies,
            log_mode=config.get("log_mode", "info"),
        )


def load_settings(environ: Optional[Mapping[str, str]] = None, config_file: Optional[Path] = None) -> Settings:
    """Load configuration and build Settings. Call once at process start."""
    settings = Settings.from_config(load_config(environ, config_file))
    logger.info(
        "Settings loaded (endpoint=%s, provider_key=%s, max_attempts=%s)",
        settings.endpoint_url or "none",
        "set" if settings.has_provider_key else "missing",
        settings.retry.max_attempts,
    )
    return settings
