import logging
import os
from pathlib import Path
from typing import Mapping, Optional

LOG_DIR_ENV = "LOCALE_TRANSLATOR_LOG_DIR"
DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"


def resolve_log_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Log directory: LOCALE_TRANSLATOR_LOG_DIR if set, else logs/ under the project root."""
    environ = os.environ if environ is None else environ
    configured = environ.get(LOG_DIR_ENV)
    return Path(configured) if configured else DEFAULT_LOG_DIR


LOG_DIR = resolve_log_dir()
LOG_FILE = LOG_DIR / "app.log"

LOG_MODE_ENV = "LOCALE_TRANSLATOR_LOG_MODE"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Set by configure_logging(); falls back to the environment
_log_mode_override = None

# Loggers handed out by get_logger
_managed_loggers = set()


def _get_log_mode() -> str:
    """Get log mode: 'off', 'info' or 'debug'."""
    if _log_mode_override is not None:
        return _log_mode_override
    return os.environ.get(LOG_MODE_ENV, 'info').lower()


def _levels_for(log_mode: str):
    if log_mode == 'debug':
        return logging.DEBUG, logging.DEBUG
    if log_mode == 'off':
        # Higher than CRITICAL disables everything
        return logging.CRITICAL + 1, logging.CRITICAL + 1
    return logging.INFO, logging.INFO


def _file_handler() -> logging.FileHandler:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    f_handler = logging.FileHandler(LOG_FILE, encoding='utf-8')
    f_handler.setLevel(logging.DEBUG)
    f_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return f_handler


def _apply_mode(logger: logging.Logger, log_mode: str, file_logging: bool) -> None:
    logger_level, console_level = _levels_for(log_mode)
    logger.setLevel(logger_level)

    has_file_handler = any(isinstance(h, logging.FileHandler) for h in logger.handlers)
    has_console_handler = any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
        for h in logger.handlers
    )

    if log_mode != 'off' and file_logging and not has_file_handler:
        logger.addHandler(_file_handler())
    elif (log_mode == 'off' or not file_logging) and has_file_handler:
        for handler in [h for h in logger.handlers if isinstance(h, logging.FileHandler)]:
            handler.close()
            logger.removeHandler(handler)

    if log_mode != 'off' and not has_console_handler:
        c_handler = logging.StreamHandler()
        c_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(c_handler)

    for handler in logger.handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            handler.setLevel(console_level)


def _file_logging_enabled() -> bool:
    return os.environ.get("LOCALE_TRANSLATOR_LOG_FILE", "1") not in ("0", "false", "no")


def configure_logging(log_mode: str) -> None:
    """Set the log mode and update all existing loggers (call after settings load)."""
    global _log_mode_override
    _log_mode_override = (log_mode or 'info').lower()
    for name in list(_managed_loggers):
        _apply_mode(logging.getLogger(name), _log_mode_override, _file_logging_enabled())


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    _apply_mode(logger, _get_log_mode(), _file_logging_enabled())
    _managed_loggers.add(name)
    return logger
