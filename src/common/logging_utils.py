"""Centralized logging helpers.

Provides one place to configure the root logger from the environment and a
couple of small utilities used to attach structured context to DEBUG traces.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

_SENSITIVE_KEYS = ("token", "password", "secret", "auth")


def configure_logging(log_file: Optional[str] = None) -> None:
    """Configure the root logger.

    The level is read from the VENDOR_BUNDLER_LOG_LEVEL environment variable
    and defaults to WARNING, matching the ``--loglevel`` default. Calling this
    function repeatedly replaces handlers installed by earlier calls instead of
    stacking them.

    Args:
        log_file: Optional path of a file that receives a copy of all records.
    """
    level_name = os.environ.get(Constants.LOG_LEVEL_ENV, "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    if not isinstance(level, int):
        level = logging.WARNING

    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_vendor_bundler", False):
            root.removeHandler(handler)
            handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
    stream_handler._vendor_bundler = True  # type: ignore[attr-defined]
    root.addHandler(stream_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
        file_handler._vendor_bundler = True  # type: ignore[attr-defined]
        root.addHandler(file_handler)

    root.setLevel(level)


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True if DEBUG records of the given logger would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**kwargs: Any) -> Dict[str, Any]:
    """Build an ``extra`` mapping for structured log records.

    None values are dropped so records only carry meaningful fields.
    """
    return {key: value for key, value in kwargs.items() if value is not None}


def safe_url(url: str) -> str:
    """Strip credentials and sensitive query parameters from a URL for logging."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<invalid url>"

    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"

    query = "&".join(
        pair for pair in parts.query.split("&")
        if pair and not any(key in pair.split("=", 1)[0].lower() for key in _SENSITIVE_KEYS)
    )
    return urlunsplit((parts.scheme, netloc, parts.path, query, ""))


class Timer:
    """Context manager measuring wall clock duration."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> float:
        """Return the elapsed time in milliseconds, also while still running."""
        end = self._end if self._end is not None else time.perf_counter()
        return round((end - self._start) * 1000, 2)
