"""Logging setup for the sp-metadata command line tool.

Console output follows the level chosen on the command line or in the
configuration; the rotating log file always records DEBUG so a failed
generation can be diagnosed after the fact. The log file location can be
set with the SP_METADATA_LOG_FILE environment variable.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List, Optional

from .formatters import SecretRedactingFormatter

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_LOG_FILE = Path("logs") / "sp-metadata.log"
MAX_LOG_FILE_SIZE = 10 * 1024 * 1024  # 10MB
BACKUP_COUNT = 5

LOG_FILE_ENV_VAR = "SP_METADATA_LOG_FILE"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Handlers added by configure_logging; other root handlers are left alone
_installed_handlers: List[logging.Handler] = []

logger = logging.getLogger(__name__)


def _parse_level(level: str) -> int:
    name = level.upper()
    if name not in VALID_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. Must be one of: {', '.join(VALID_LEVELS)}"
        )
    return logging.getLevelName(name)


def _resolve_log_file(log_file: Optional[Path]) -> Path:
    if log_file is not None:
        return log_file
    env_log_file = os.environ.get(LOG_FILE_ENV_VAR)
    return Path(env_log_file) if env_log_file else DEFAULT_LOG_FILE


def _remove_installed_handlers(root_logger: logging.Logger) -> None:
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()


def _install(root_logger: logging.Logger, handler: logging.Handler) -> None:
    root_logger.addHandler(handler)
    _installed_handlers.append(handler)


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    redact_secrets: bool = False,
) -> None:
    """Install console and rotating file handlers on the root logger.

    Calling this again replaces the handlers from the previous call.

    Args:
        level: Console log level. The file handler always logs DEBUG.
        log_file: Log file path. Defaults to $SP_METADATA_LOG_FILE, then
            logs/sp-metadata.log.
        redact_secrets: Mask private keys, certificates and passwords in
            both console and file output

    Raises:
        ValueError: If level is not a standard level name
        RuntimeError: If the log directory cannot be created

    Example:
        >>> configure_logging(level="DEBUG", redact_secrets=True)
        >>> configure_logging(level="WARNING", log_file=Path("out/sp.log"))
    """
    console_level = _parse_level(level)
    log_file = _resolve_log_file(log_file)

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(
            f"Cannot create log directory {log_file.parent}: {e}"
        ) from e

    root_logger = logging.getLogger()
    _remove_installed_handlers(root_logger)
    root_logger.setLevel(logging.DEBUG)

    formatter = SecretRedactingFormatter(
        fmt=DEFAULT_LOG_FORMAT, redact_secrets=redact_secrets
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    _install(root_logger, console_handler)

    try:
        file_handler = RotatingFileHandler(
            filename=str(log_file),
            maxBytes=MAX_LOG_FILE_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as e:
        root_logger.warning(
            f"Cannot open log file {log_file}: {e}. Logging to console only."
        )
    else:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        _install(root_logger, file_handler)

    logger.debug(f"Logging configured: level={level.upper()}, file={log_file}")


def get_logger(module_name: str) -> logging.Logger:
    """Return the logger for a module (pass __name__)."""
    return logging.getLogger(module_name)


def set_log_level(level: str) -> None:
    """Change the console level of installed handlers.

    The file handler keeps logging at DEBUG.

    Raises:
        ValueError: If level is not a standard level name
    """
    console_level = _parse_level(level)
    for handler in _installed_handlers:
        if not isinstance(handler, RotatingFileHandler):
            handler.setLevel(console_level)
    logger.debug(f"Console log level set to {level.upper()}")
