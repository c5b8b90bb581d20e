#!/usr/bin/env python3
"""
Feed sources - the built-in table plus runtime registration of custom feeds.
"""

import logging
import re
import threading
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_CUSTOM_COLOR = "#6C757D"

SOURCE_ID_RE = re.compile(r'^[a-z0-9][a-z0-9_-]*$')


@dataclass(frozen=True)
class FeedSource:
    """A news outlet and the feed URLs it publishes."""
    id: str
    name: str
    urls: Tuple[str, ...]
    color: str
    direct: bool = False
    custom: bool = False

    @classmethod
    def from_dict(cls, source_id: str, data: dict, custom: bool = False) -> "FeedSource":
        urls = data.get('urls') or ([data['url']] if data.get('url') else [])
        return cls(
            id=source_id,
            name=data.get('name', source_id),
            urls=tuple(urls),
            color=data.get('color', DEFAULT_CUSTOM_COLOR),
            direct=bool(data.get('direct', False)),
            custom=custom,
        )

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'urls': list(self.urls),
            'color': self.color,
            'direct': self.direct,
            'custom': self.custom,
        }


DEFAULT_SOURCES: List[FeedSource] = [
    FeedSource('reuters', 'Reuters', (
        'https://www.reutersagency.com/feed/',
        'https://www.reuters.com/rssfeed/worldNews',
    ), '#FF6B00'),
    FeedSource('afp', 'AFP', (
        'https://www.afp.com/en/news/feed',
    ), '#E63946'),
    FeedSource('tass', 'TASS', (
        'https://tass.com/rss/v2.xml',
    ), '#457B9D'),
    FeedSource('politico', 'Politico', (
        'https://www.politico.com/rss/politicopicks.xml',
        'https://www.politico.com/rss/congress.xml',
    ), '#DC143C'),
    FeedSource('lemonde', 'Le Monde', (
        'https://www.lemonde.fr/rss/une.xml',
        'https://www.lemonde.fr/international/rss_full.xml',
    ), '#003D5C'),
    FeedSource('guardian', 'The Guardian', (
        'https://www.theguardian.com/world/rss',
        'https://www.theguardian.com/international/rss',
    ), '#052962'),
    FeedSource('telegraph', 'The Telegraph', (
        'https://www.telegraph.co.uk/rss.xml',
    ), '#004A77'),
    FeedSource('aljazeera', 'Al Jazeera', (
        'https://www.aljazeera.com/xml/rss/all.xml',
    ), '#F39200'),
]


class SourceRegistry:
    """
    Ordered set of feed sources.

    Built-in sources are registered at startup; custom feeds can be added
    and removed between aggregation passes. Changes never touch the fetch
    cache, they only decide which sources the next pass includes.
    """

    def __init__(self, sources: Iterable[FeedSource] = ()):
        self._sources: Dict[str, FeedSource] = {}
        self._lock = threading.Lock()
        for source in sources:
            self.add(source)

    def add(self, source: FeedSource) -> FeedSource:
        """
        Register a source.

        Raises:
            ValueError if the id is malformed, already taken, or has no URLs
        """
        if not SOURCE_ID_RE.match(source.id):
            raise ValueError(f"Invalid source id: {source.id!r}")
        if not source.urls:
            raise ValueError(f"Source {source.id!r} has no feed URLs")

        with self._lock:
            if source.id in self._sources:
                raise ValueError(f"Source already registered: {source.id!r}")
            self._sources[source.id] = source

        logger.debug("Registered source %s (%d feed(s))", source.id, len(source.urls))
        return source

    def add_custom_feed(self, source_id: str, name: str, url: str,
                        color: str = DEFAULT_CUSTOM_COLOR) -> FeedSource:
        """Register a user-supplied single-URL feed."""
        if not url.startswith(('http://', 'https://')):
            raise ValueError(f"Feed URL must be http(s): {url!r}")
        return self.add(FeedSource(source_id, name, (url,), color, custom=True))

    def remove(self, source_id: str) -> bool:
        """Unregister a source. Returns False if it wasn't registered."""
        with self._lock:
            removed = self._sources.pop(source_id, None)
        if removed is not None:
            logger.debug("Removed source %s", source_id)
        return removed is not None

    def get(self, source_id: str) -> Optional[FeedSource]:
        return self._sources.get(source_id)

    def ids(self) -> List[str]:
        return list(self._sources)

    def custom_sources(self) -> List[FeedSource]:
        return [s for s in self._sources.values() if s.custom]

    def active(self, enabled: Optional[Iterable[str]] = None) -> Dict[str, FeedSource]:
        """
        Snapshot of the sources to aggregate, in registration order.

        Args:
            enabled: Ids to include; None or empty includes everything.
                Custom feeds are always included.
        """
        with self._lock:
            snapshot = dict(self._sources)

        wanted = set(enabled or ())
        if not wanted:
            return snapshot

        unknown = wanted - set(snapshot)
        if unknown:
            logger.warning("Ignoring unknown source id(s): %s", ", ".join(sorted(unknown)))

        return {sid: s for sid, s in snapshot.items() if sid in wanted or s.custom}

    def __contains__(self, source_id: str) -> bool:
        return source_id in self._sources

    def __len__(self) -> int:
        return len(self._sources)
