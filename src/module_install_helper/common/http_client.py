"""Shared HTTP helpers used by the registry client.

Encapsulates request/timeout handling and DEBUG traces so callers only deal
with a ``(status_code, headers, text)`` triple. A status code of 0 means the
request never produced a response.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests

from ..constants import Constants
from .logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    timeout: Optional[float] = None,
    retries: int = Constants.HTTP_RETRY_MAX,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """Perform GET request with timeout and retries on transport errors.

    Only timeouts and connection failures are retried; any HTTP response,
    including 4xx/5xx, is returned to the caller as is.

    Args:
        url: Target URL
        headers: Optional request headers
        timeout: Seconds before giving up on one attempt
        retries: Number of attempts
        **kwargs: Additional requests.get parameters

    Returns:
        Tuple of (status_code, headers_dict, body_text)
    """
    safe_target = safe_url(url)
    request_headers = {"User-Agent": Constants.USER_AGENT}
    if headers:
        request_headers.update(headers)
    timeout = timeout if timeout is not None else Constants.REQUEST_TIMEOUT

    last_exception = None
    for attempt in range(max(1, retries)):
        with Timer() as t:
            try:
                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP request",
                        extra=extra_context(
                            event="http_request",
                            component="http_client",
                            action="GET",
                            target=safe_target,
                            attempt=attempt + 1
                        )
                    )

                response = requests.get(
                    url,
                    timeout=timeout,
                    headers=request_headers,
                    **kwargs
                )

                if is_debug_enabled(logger):
                    logger.debug(
                        "HTTP response",
                        extra=extra_context(
                            event="http_response",
                            component="http_client",
                            action="GET",
                            status_code=response.status_code,
                            duration_ms=t.duration_ms(),
                            target=safe_target
                        )
                    )
                return response.status_code, dict(response.headers), response.text

            except requests.Timeout:
                last_exception = f"timed out after {timeout} seconds"
                logger.warning(
                    "GET %s timed out (attempt %d/%d)", safe_target, attempt + 1, retries
                )
            except requests.RequestException as exc:  # includes ConnectionError
                last_exception = str(exc)
                logger.warning(
                    "GET %s failed (attempt %d/%d): %s",
                    safe_target, attempt + 1, retries, exc,
                )

    return 0, {}, f"Request failed after {max(1, retries)} attempts: {last_exception}"
