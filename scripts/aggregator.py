#!/usr/bin/env python3
"""
Aggregator - one pass over every configured feed.

fetch (concurrently, one task per source URL) -> stamp with source ->
sort newest first -> deduplicate -> geo-tag.

Feed-level problems never escape: a failing feed contributes no items and
is logged. The only error raised to callers is NoContentError, when there
is nothing to show at all.
"""

import concurrent.futures
import logging
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from config import Config
from dedup import DEFAULT_KEY_LENGTH, deduplicate
from feed_fetcher import DEFAULT_TIMEOUT, FeedFetcher, FetchContext
from geotagger import GeoTagger
from models import NewsItem, RawFeedItem
from sources import FeedSource

logger = logging.getLogger(__name__)


class NoContentError(Exception):
    """
    Nothing to show: no active sources, or every source came back empty.

    Distinct from a filter that matches nothing, which is a normal empty list.
    """

    def __init__(self, reason: str, failed_sources: Sequence[str] = ()):
        self.reason = reason
        self.failed_sources = list(failed_sources)
        if reason == "no_sources":
            message = "No news sources are active"
        else:
            message = f"No news items available from {len(self.failed_sources)} source(s)"
        super().__init__(message)


def sort_items(items: Sequence[NewsItem], undated_policy: str = "now") -> List[NewsItem]:
    """
    Newest first, stable for equal timestamps.

    undated_policy:
        now  - items whose date could not be read keep their fallback
               timestamp (fetch time) and therefore sort as the newest
        last - those items go after every dated item
    """
    if undated_policy == "last":
        return sorted(items, key=lambda i: (not i.date_inferred, i.pub_date), reverse=True)
    return sorted(items, key=lambda i: i.pub_date, reverse=True)


class Aggregator:
    """Owns the fetch context and runs aggregation passes over it."""

    def __init__(self, context: FetchContext, timeout: float = DEFAULT_TIMEOUT,
                 max_workers: int = 10, undated_policy: str = "now",
                 dedup_key_length: int = DEFAULT_KEY_LENGTH,
                 geotagger: Optional[GeoTagger] = None):
        self.context = context
        self.fetcher = FeedFetcher(context, timeout=timeout)
        self.max_workers = max_workers
        self.undated_policy = undated_policy
        self.dedup_key_length = dedup_key_length
        self.geotagger = geotagger or GeoTagger()

    @classmethod
    def from_config(cls, config: Config, context: Optional[FetchContext] = None) -> "Aggregator":
        if context is None:
            context = FetchContext(
                config.fetch.proxies,
                start_index=config.fetch.proxy_start_index,
                cache_ttl_minutes=config.fetch.cache_ttl_minutes,
            )
        return cls(
            context,
            timeout=config.fetch.timeout_seconds,
            max_workers=config.fetch.max_workers,
            undated_policy=config.aggregation.undated_policy,
            dedup_key_length=config.aggregation.dedup_key_length,
        )

    def _fetch_all(self, sources: Mapping[str, FeedSource]) -> Tuple[List[NewsItem], List[str], int]:
        """
        Fetch every (source, url) pair in parallel.

        Returns:
            Tuple of (items in task submission order, ids of sources that
            produced nothing, number of feed URLs requested)
        """
        tasks = [(source, url) for source in sources.values() for url in source.urls]
        results: List[List[RawFeedItem]] = [[] for _ in tasks]

        workers = max(1, min(self.max_workers, len(tasks)))
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_index = {
                executor.submit(self.fetcher.fetch, url, source.direct): index
                for index, (source, url) in enumerate(tasks)
            }
            for future in concurrent.futures.as_completed(future_to_index):
                index = future_to_index[future]
                source, url = tasks[index]
                try:
                    results[index] = future.result()
                except Exception:
                    logger.exception("Fetch task for %s (%s) crashed", source.id, url)

        items: List[NewsItem] = []
        produced = set()
        for (source, _), raw_items in zip(tasks, results):
            if raw_items:
                produced.add(source.id)
            items.extend(NewsItem.from_raw(raw, source.id, source.name, source.color)
                         for raw in raw_items)

        failed = [sid for sid in sources if sid not in produced]
        return items, failed, len(tasks)

    def aggregate_with_meta(self, sources: Mapping[str, FeedSource]) -> Tuple[List[NewsItem], Dict]:
        """
        Run one aggregation pass.

        Returns:
            Tuple of (items, meta) where meta carries fetch/dedup stats

        Raises:
            NoContentError when no source is active or nothing came back
        """
        if not sources:
            logger.error("Aggregation skipped: no active sources")
            raise NoContentError("no_sources")

        merged, failed, feeds_requested = self._fetch_all(sources)
        if failed:
            logger.warning("No items from %d of %d source(s): %s",
                           len(failed), len(sources), ", ".join(failed))

        ordered = sort_items(merged, self.undated_policy)
        unique, dedup_meta = deduplicate(ordered, self.dedup_key_length)
        tagged = self.geotagger.tag(unique)

        if not tagged:
            logger.error("Aggregation produced no items from %d source(s)", len(sources))
            raise NoContentError("no_items", failed)

        meta = {
            'sources_scanned': len(sources),
            'feeds_requested': feeds_requested,
            'failed_sources': failed,
            **dedup_meta,
            'fetched_at': datetime.now(timezone.utc).isoformat(),
        }
        logger.info("Aggregated %d items (%d duplicates removed) from %d source(s)",
                    len(tagged), dedup_meta['duplicates_removed'], len(sources))
        return tagged, meta

    def aggregate(self, sources: Mapping[str, FeedSource]) -> List[NewsItem]:
        """Deduplicated, geo-tagged, newest-first items from all sources."""
        items, _ = self.aggregate_with_meta(sources)
        return items
