# backend/geomaps/fetch.py
"""
HTTP fetch of provider pages.

Successful responses are cached in memory for CACHE_TTL seconds, keyed by
URL, so repeated lookups of the same address do not hit the provider again.
Expired pages are evicted whenever a new page is stored.
Failures are raised as FetchFailed and never retried.
"""

import logging
import time

import requests

from .errors import FetchFailed

DEFAULT_TIMEOUT = 10
DEFAULT_USER_AGENT = 'GeoMaps/1.0'

# Cache TTL for page data (5 minutes in production)
CACHE_TTL = 300

# Simple in-memory cache with timestamps
_page_cache = {}


def fetch_page(url, config=None):
    """
    Fetch a provider page and return its body as text.

    Args:
        url: Fully formatted query URL
        config: Configuration dict (HTTP_TIMEOUT, USER_AGENT, CACHE_TTL)

    Returns:
        Response body as a string

    Raises:
        FetchFailed: on timeouts, connection errors and non-2xx responses
    """
    config = config or {}
    ttl = config.get('CACHE_TTL', CACHE_TTL)

    if url in _page_cache:
        cached_body, timestamp = _page_cache[url]
        if time.time() - timestamp < ttl:
            logging.info(f"Using cached page for {url}")
            return cached_body

    try:
        logging.info(f"Fetching provider page: {url}")
        response = requests.get(
            url,
            timeout=config.get('HTTP_TIMEOUT', DEFAULT_TIMEOUT),
            headers={'User-Agent': config.get('USER_AGENT', DEFAULT_USER_AGENT)}
        )
        response.raise_for_status()
    except requests.exceptions.Timeout as e:
        logging.warning(f"Provider timeout for {url}")
        raise FetchFailed(f"Timed out fetching {url}", url=url) from e
    except requests.exceptions.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        logging.error(f"Provider returned HTTP {status} for {url}")
        raise FetchFailed(f"HTTP {status} fetching {url}", url=url, status=status) from e
    except requests.exceptions.RequestException as e:
        logging.error(f"Provider request failed: {e}")
        raise FetchFailed(f"Request for {url} failed: {e}", url=url) from e

    body = response.text
    now = time.time()
    _evict_expired(now, ttl)
    if ttl > 0:
        _page_cache[url] = (body, now)

    return body


def _evict_expired(now, ttl):
    """Drop cached pages older than ttl."""
    expired = [url for url, (_, timestamp) in _page_cache.items() if now - timestamp >= ttl]
    for url in expired:
        del _page_cache[url]
    if expired:
        logging.debug(f"Evicted {len(expired)} expired pages from cache")


def clear_cache():
    """Clear the page cache (useful for testing)."""
    global _page_cache
    _page_cache = {}
    logging.info("Provider page cache cleared")
