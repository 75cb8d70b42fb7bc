"""Logging for the VisionaryAI estimator.

Application loggers live under the "visionary" namespace.  The HTTP and
Gemini client-library loggers sit at WARNING unless the app runs at DEBUG.
"""
from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Iterable, Optional

from backend.services.shared.config import Config

_ROOT = "visionary"
_VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"

CLIENT_LOGGERS = ("google_genai", "httpx", "httpcore")


def _parse_level(level: str) -> int:
    upper = level.upper()
    if upper not in _VALID_LEVELS:
        raise ValueError(f"Invalid log level: {level!r}. Must be one of {_VALID_LEVELS}")
    return getattr(logging, upper)


def _replace_handlers(logger: logging.Logger, handlers: Iterable[logging.Handler]) -> None:
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        logger.addHandler(handler)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    client_level: Optional[str] = None,
) -> logging.Logger:
    """Configure the visionary root logger and the client-library loggers.

    Args:
        level: "DEBUG", "INFO", "WARNING", "ERROR" or "CRITICAL".
        log_file: Optional path to a rotating file log.
        max_bytes: Max size before rotation (default 10 MB).
        backup_count: Number of rotated files to keep.
        client_level: Level for CLIENT_LOGGERS.  Defaults to WARNING, or
            DEBUG when ``level`` is DEBUG.

    Returns:
        The configured "visionary" logger.

    Raises:
        ValueError: If either level is not a valid log level string.
    """
    numeric = _parse_level(level)
    if client_level is None:
        client_numeric = logging.DEBUG if numeric == logging.DEBUG else logging.WARNING
    else:
        client_numeric = _parse_level(client_level)

    fmt = logging.Formatter(_FORMAT, datefmt=_DATEFMT)
    handlers = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        ))
    for handler in handlers:
        handler.setLevel(numeric)
        handler.setFormatter(fmt)

    root = logging.getLogger(_ROOT)
    root.setLevel(numeric)
    _replace_handlers(root, handlers)
    root.propagate = False

    for name in CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(client_numeric)

    return root


def setup_logging_from_config(config: Config) -> logging.Logger:
    """Apply the ``logging.*`` section of the settings file."""
    return setup_logging(
        level=config.get("logging.level", "INFO"),
        log_file=config.get("logging.file"),
        max_bytes=config.get("logging.max_bytes", 10 * 1024 * 1024),
        backup_count=config.get("logging.backup_count", 5),
        client_level=config.get("logging.client_level"),
    )


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the visionary namespace.

    "estimate.requester" → "visionary.estimate.requester"; names that
    already start with "visionary" are used as-is.
    """
    if name.startswith(_ROOT):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT}.{name}")
