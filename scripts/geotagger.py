#!/usr/bin/env python3
"""
Geo-tagging - finds gazetteer places and regions in item text.

No geocoding service is involved; everything is keyword matching against
the static tables in gazetteer.py, so results are deterministic and the
functions here are safe to call from any thread.
"""

import math
import re
from typing import Dict, List, Mapping, Optional, Sequence

from gazetteer import LOCATION_COORDS, REGIONS, Coords, Region
from models import Cluster, LocationMatch, NewsItem

# Earth's radius in kilometers
EARTH_RADIUS_KM = 6371.0

DEFAULT_CLUSTER_DISTANCE_KM = 500


def haversine_km(a: Coords, b: Coords) -> float:
    """
    Calculate great-circle distance between two (lat, lon) points in kilometers.
    """
    lat1, lon1 = map(math.radians, a)
    lat2, lon2 = map(math.radians, b)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, h)))


def item_text(item: NewsItem) -> str:
    return f"{item.title} {item.description}"


class GeoTagger:
    """Location and region detection over a fixed gazetteer."""

    def __init__(self, locations: Mapping[str, Coords] = LOCATION_COORDS,
                 regions: Mapping[str, Region] = REGIONS):
        self.locations = dict(locations)
        self.regions = dict(regions)
        self._patterns = [
            (name, coords, re.compile(rf'\b{re.escape(name)}\b', re.IGNORECASE))
            for name, coords in self.locations.items()
        ]

    def detect_locations(self, text: str) -> List[LocationMatch]:
        """
        Count whole-word, case-insensitive mentions of each gazetteer place.

        Returns:
            Matches with count > 0, most mentioned first; ties keep
            gazetteer order
        """
        if not text:
            return []

        matches = []
        for name, coords, pattern in self._patterns:
            count = len(pattern.findall(text))
            if count:
                matches.append(LocationMatch(name=name, coords=coords, count=count))

        matches.sort(key=lambda m: m.count, reverse=True)

        unique = []
        seen = set()
        for match in matches:
            if match.name not in seen:
                seen.add(match.name)
                unique.append(match)
        return unique

    def detect_region(self, text: str) -> Optional[str]:
        """
        First region (declaration order) with a keyword contained in the text.

        Keywords are plain case-insensitive substrings, so both region order
        and keyword order decide ambiguous text.
        """
        if not text:
            return None

        text_lower = text.lower()
        for region_id, region in self.regions.items():
            for keyword in region.keywords:
                if keyword.lower() in text_lower:
                    return region_id
        return None

    def tag_item(self, item: NewsItem) -> NewsItem:
        text = item_text(item)
        return item.with_geo(self.detect_locations(text), self.detect_region(text))

    def tag(self, items: Sequence[NewsItem]) -> List[NewsItem]:
        """Return copies of the items with locations and region filled in."""
        return [self.tag_item(item) for item in items]

    def geo_stats(self, items: Sequence[NewsItem]) -> Dict:
        """
        Counts per region (every declared region listed) and per primary
        location, plus totals.
        """
        by_region = {region_id: 0 for region_id in self.regions}
        by_location: Dict[str, int] = {}
        with_location = 0

        for item in items:
            if item.region:
                by_region[item.region] = by_region.get(item.region, 0) + 1

            primary = item.primary_location
            if primary:
                with_location += 1
                by_location[primary.name] = by_location.get(primary.name, 0) + 1

        return {
            'by_region': by_region,
            'by_location': by_location,
            'total': len(items),
            'with_location': with_location,
        }


def filter_by_region(items: Sequence[NewsItem], region_id: str) -> List[NewsItem]:
    """'all' returns everything, otherwise items tagged with that region."""
    if region_id == 'all':
        return list(items)
    return [item for item in items if item.region == region_id]


def cluster_by_location(items: Sequence[NewsItem],
                        max_distance_km: float = DEFAULT_CLUSTER_DISTANCE_KM) -> List[Cluster]:
    """
    Greedy proximity clustering for map display.

    The first unclustered item with a primary location becomes a center and
    absorbs every later unclustered item whose primary location is strictly
    closer than `max_distance_km` to that center. Distances are never
    chained through absorbed items, and the result depends on input order.
    Items without a primary location are left out.
    """
    clusters = []
    processed = set()

    for i, item in enumerate(items):
        if i in processed or item.primary_location is None:
            continue

        center = item.primary_location
        cluster = Cluster(center=center.coords, location=center.name, items=[item])
        processed.add(i)

        for j in range(i + 1, len(items)):
            other = items[j]
            if j in processed or other.primary_location is None:
                continue
            if haversine_km(center.coords, other.primary_location.coords) < max_distance_km:
                cluster.items.append(other)
                processed.add(j)

        clusters.append(cluster)

    return clusters
