"""Shared HTTP helpers used by remote Composer repositories.

Encapsulates timeout, retry and caching behaviour so repository clients only
deal with parsed payloads. Failures never raise; callers receive a zero
status code and treat the package as unavailable.
"""
from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict, Optional, Tuple

import requests

from constants import Constants
from common.logging_utils import extra_context, is_debug_enabled, safe_url, Timer

logger = logging.getLogger(__name__)

# Simple in-memory cache for HTTP responses
_http_cache: Dict[str, Tuple[Any, float]] = {}


def _get_cache_key(method: str, url: str, headers: Optional[Dict[str, str]] = None) -> str:
    """Generate cache key from request parameters."""
    headers_str = str(sorted(headers.items())) if headers else ""
    return f"{method}:{url}:{headers_str}"


def _is_cache_valid(cache_entry: Tuple[Any, float]) -> bool:
    """Check if cache entry is still valid."""
    _, cached_time = cache_entry
    return time.time() - cached_time < Constants.HTTP_CACHE_TTL_SEC


def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], str]:
    """Perform GET request with timeout, retries, and caching with DEBUG traces.

    Returns:
        Tuple of (status_code, headers_dict, body). The status code is 0 when
        every attempt failed.
    """
    cache_key = _get_cache_key("GET", url, headers)
    safe_target = safe_url(url)

    if cache_key in _http_cache and _is_cache_valid(_http_cache[cache_key]):
        cached_data, _ = _http_cache[cache_key]
        if is_debug_enabled(logger):
            logger.debug(
                "HTTP cache hit",
                extra=extra_context(
                    event="cache_hit", component="http_client", action="GET", target=safe_target
                ),
            )
        return cached_data

    last_exception = None

    for attempt in range(Constants.HTTP_RETRY_MAX):
        if attempt > 0:
            time.sleep(Constants.HTTP_RETRY_BASE_DELAY_SEC * (2 ** (attempt - 1)))
        with Timer() as t:
            try:
                response = requests.get(
                    url,
                    timeout=Constants.REQUEST_TIMEOUT,
                    headers=headers,
                    **kwargs
                )
            except requests.Timeout:
                last_exception = "timeout"
                logger.debug(
                    "HTTP timeout",
                    extra=extra_context(
                        event="http_exception",
                        component="http_client",
                        outcome="timeout",
                        attempt=attempt + 1,
                        target=safe_target,
                    ),
                )
                continue
            except requests.RequestException as exc:
                last_exception = str(exc)
                logger.debug(
                    "HTTP request exception",
                    extra=extra_context(
                        event="http_exception",
                        component="http_client",
                        outcome="request_exception",
                        attempt=attempt + 1,
                        target=safe_target,
                    ),
                )
                continue

            if response.status_code >= 500:
                last_exception = f"HTTP {response.status_code}"
                continue

            result = (response.status_code, dict(response.headers), response.text)
            _http_cache[cache_key] = (result, time.time())

            if is_debug_enabled(logger):
                logger.debug(
                    "HTTP response ok",
                    extra=extra_context(
                        event="http_response",
                        component="http_client",
                        action="GET",
                        outcome="success",
                        status_code=response.status_code,
                        duration_ms=t.duration_ms(),
                        target=safe_target,
                    ),
                )
            return result

    logger.warning("Request to %s failed after %d attempts: %s", safe_target, Constants.HTTP_RETRY_MAX, last_exception)
    return 0, {}, ""


def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform GET request and parse JSON response.

    Args:
        url: Target URL
        headers: Optional request headers
        **kwargs: Additional requests.get parameters

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    status_code, response_headers, text = robust_get(url, headers=headers, **kwargs)

    if status_code == 200 and text:
        try:
            return status_code, response_headers, json.loads(text)
        except json.JSONDecodeError:
            if is_debug_enabled(logger):
                logger.debug(
                    "JSON decode error",
                    extra=extra_context(
                        event="parse",
                        component="http_client",
                        action="get_json",
                        outcome="json_decode_error",
                        target=safe_url(url),
                    ),
                )

    return status_code, response_headers, None
