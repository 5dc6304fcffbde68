"""Logging helpers shared by the registry client, resolver and planner.

Structured fields are passed through ``extra=`` so handlers that understand
them (JSON formatters, log shippers) can pick them up while the default
formatter keeps printing plain messages.
"""
from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from ..constants import Constants


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once for command line use.

    Args:
        level: Level name; falls back to the environment, then INFO.
    """
    name = level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO"
    value = getattr(logging, str(name).upper(), logging.INFO)
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format=Constants.LOG_FORMAT, level=value)
    root.setLevel(value)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build an ``extra`` payload, dropping fields whose value is None."""
    return {k: v for k, v in fields.items() if v is not None}


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records would be emitted by ``logger``."""
    return logger.isEnabledFor(logging.DEBUG)


def safe_url(url: str) -> str:
    """Strip credentials, query string and fragment from a URL for logging."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring elapsed wall time in milliseconds."""

    def __init__(self):
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        self._end = None
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)
