#!/usr/bin/env python3
"""
Item records that flow through the pipeline.

RawFeedItem comes out of the parser, NewsItem out of the aggregator.
"""

import hashlib
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple


Coords = Tuple[float, float]


def generate_id(link: str, title: str) -> str:
    """Deterministic id from link + title."""
    digest = hashlib.sha1(f"{link or ''}{title or ''}".encode('utf-8')).hexdigest()
    return digest[:12]


@dataclass(frozen=True)
class RawFeedItem:
    """One normalized entry from a feed document."""
    title: str
    description: str
    link: str
    pub_date: datetime
    image: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    date_inferred: bool = False
    id: str = ""

    def __post_init__(self):
        if not self.id:
            object.__setattr__(self, 'id', generate_id(self.link, self.title))


@dataclass(frozen=True)
class LocationMatch:
    """A gazetteer place found in an item's text."""
    name: str
    coords: Coords
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'coords': list(self.coords),
            'count': self.count,
        }


@dataclass(frozen=True)
class NewsItem:
    """A feed item stamped with its source and geographic tags."""
    title: str
    description: str
    link: str
    pub_date: datetime
    id: str
    source: str
    source_name: str
    source_color: str
    image: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    date_inferred: bool = False
    locations: List[LocationMatch] = field(default_factory=list)
    region: Optional[str] = None

    @property
    def primary_location(self) -> Optional[LocationMatch]:
        return self.locations[0] if self.locations else None

    @classmethod
    def from_raw(cls, raw: RawFeedItem, source_id: str, source_name: str,
                 source_color: str) -> "NewsItem":
        return cls(
            title=raw.title,
            description=raw.description,
            link=raw.link,
            pub_date=raw.pub_date,
            id=raw.id,
            source=source_id,
            source_name=source_name,
            source_color=source_color,
            image=raw.image,
            categories=list(raw.categories),
            date_inferred=raw.date_inferred,
        )

    def with_geo(self, locations: List[LocationMatch], region: Optional[str]) -> "NewsItem":
        return replace(self, locations=list(locations), region=region)

    def to_dict(self) -> Dict[str, Any]:
        primary = self.primary_location
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'link': self.link,
            'pub_date': self.pub_date.isoformat(),
            'date_inferred': self.date_inferred,
            'image': self.image,
            'categories': list(self.categories),
            'source': self.source,
            'source_name': self.source_name,
            'source_color': self.source_color,
            'locations': [loc.to_dict() for loc in self.locations],
            'primary_location': primary.to_dict() if primary else None,
            'region': self.region,
        }


@dataclass
class Cluster:
    """Items grouped around the primary location of the first one."""
    center: Coords
    location: str
    items: List[NewsItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'center': list(self.center),
            'location': self.location,
            'count': len(self.items),
            'ids': [item.id for item in self.items],
        }
