#!/usr/bin/env python3
"""
Feed fetcher - retrieves one feed URL and returns its parsed items.

Order of attempts:
  1. Cache (entries younger than the TTL are returned without a request)
  2. Direct request, when the source allows it
  3. CORS-bypass proxies, starting from the last one that worked and
     wrapping around the list

fetch() never raises: when every attempt fails it logs and returns [].
"""

import logging
import threading
from typing import List, Optional, Sequence
from urllib.parse import quote

import requests

from cache import DEFAULT_TTL_MINUTES, FeedCache
from feed_parser import FeedParseError, parse_document
from models import RawFeedItem

logger = logging.getLogger(__name__)

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Accept": "application/rss+xml, application/atom+xml, application/xml;q=0.9, text/xml;q=0.9, */*;q=0.8",
}

DEFAULT_TIMEOUT = 15


def build_proxy_url(template: str, target_url: str) -> str:
    """
    Wrap a feed URL in a proxy URL.

    Templates either end where the encoded target goes
    ('https://api.allorigins.win/raw?url=') or contain a '{url}' placeholder.
    """
    encoded = quote(target_url, safe='')
    if '{url}' in template:
        return template.replace('{url}', encoded)
    return template + encoded


class FetchContext:
    """
    State shared by every fetch in a process: the feed cache and the index
    of the proxy that last succeeded. Both are guarded by locks since
    fetches run on a thread pool.
    """

    def __init__(self, proxies: Sequence[str], start_index: int = 0,
                 cache: Optional[FeedCache] = None,
                 cache_ttl_minutes: float = DEFAULT_TTL_MINUTES):
        self.proxies = list(proxies)
        self.cache = cache if cache is not None else FeedCache(ttl_minutes=cache_ttl_minutes)
        self._proxy_index = start_index % len(self.proxies) if self.proxies else 0
        self._lock = threading.Lock()

    @property
    def proxy_index(self) -> int:
        with self._lock:
            return self._proxy_index

    def remember_proxy(self, index: int):
        """Make `index` the first proxy tried by later fetches."""
        with self._lock:
            self._proxy_index = index

    def proxy_order(self) -> List[int]:
        """Proxy indices to try, starting at the current one and wrapping."""
        count = len(self.proxies)
        start = self.proxy_index
        return [(start + offset) % count for offset in range(count)]


class FeedFetcher:
    """Fetches and parses feeds through a FetchContext."""

    def __init__(self, context: FetchContext, timeout: float = DEFAULT_TIMEOUT):
        self.context = context
        self.timeout = timeout

    def _request(self, url: str) -> bytes:
        response = requests.get(url, headers=HEADERS, timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def _attempt(self, request_url: str, feed_url: str, via: str) -> Optional[List[RawFeedItem]]:
        """
        One request + parse.

        Returns:
            Parsed items, or None when the attempt failed and the next
            route should be tried
        """
        try:
            items = parse_document(self._request(request_url))
        except requests.RequestException as e:
            logger.warning("Fetch %s via %s failed: %s", feed_url, via, e)
            return None
        except FeedParseError as e:
            logger.warning("Fetch %s via %s returned malformed XML: %s", feed_url, via, e)
            return None
        except Exception:
            logger.exception("Unexpected error fetching %s via %s", feed_url, via)
            return None

        logger.info("Fetched %s via %s (%d items)", feed_url, via, len(items))
        return items

    def fetch(self, url: str, direct_access_allowed: bool = False) -> List[RawFeedItem]:
        """
        Fetch one feed.

        Args:
            url: Feed URL
            direct_access_allowed: Try a proxy-less request before the proxies

        Returns:
            Parsed items, [] when every route failed
        """
        cached = self.context.cache.get(url)
        if cached is not None:
            logger.debug("Cache hit for %s", url)
            return cached

        if direct_access_allowed:
            items = self._attempt(url, url, "direct")
            if items is not None:
                self.context.cache.set(url, items)
                return items

        for index in self.context.proxy_order():
            proxied = build_proxy_url(self.context.proxies[index], url)
            items = self._attempt(proxied, url, f"proxy #{index}")
            if items is not None:
                self.context.remember_proxy(index)
                self.context.cache.set(url, items)
                return items

        logger.error("All fetch attempts failed for %s (%d proxies tried, direct=%s)",
                     url, len(self.context.proxies), direct_access_allowed)
        return []
