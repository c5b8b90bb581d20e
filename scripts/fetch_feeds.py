#!/usr/bin/env python3
"""
World News Monitor - aggregates international RSS/Atom feeds, removes
duplicate headlines and tags each story with the places and region it
mentions.

Sources:
  Reuters, AFP, TASS, Politico, Le Monde, The Guardian, The Telegraph,
  Al Jazeera, plus any custom feeds from config.yaml or --feed.

Usage:
  python3 fetch_feeds.py
  python3 fetch_feeds.py --source reuters,guardian --region europe
  python3 fetch_feeds.py --keyword "election,vote" --format md
  python3 fetch_feeds.py --feed bbc=https://feeds.bbci.co.uk/news/world/rss.xml
  python3 fetch_feeds.py --cluster --cluster-km 300
  python3 fetch_feeds.py --list-sources
"""

import argparse
import json
import logging
import re
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from aggregator import Aggregator, NoContentError, sort_items
from config import get_config, reload_config
from formatters import format_output
from gazetteer import REGIONS
from geotagger import cluster_by_location, filter_by_region
from models import NewsItem
from sources import SourceRegistry

logger = logging.getLogger(__name__)

EXIT_NO_CONTENT = 2

SORT_CHOICES = ('date-desc', 'date-asc', 'source')


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    # Reduce noise from verbose libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def filter_items(items: Sequence[NewsItem], keyword: Optional[str] = None) -> List[NewsItem]:
    """Filter items by keyword (case-insensitive, supports comma-separated keywords)."""
    if not keyword:
        return list(items)
    keywords = [k.strip() for k in keyword.split(',') if k.strip()]
    if not keywords:
        return list(items)
    regex = re.compile('|'.join(re.escape(k) for k in keywords), re.IGNORECASE)
    return [item for item in items if regex.search(f"{item.title} {item.description}")]


def reorder(items: Sequence[NewsItem], sort_by: str, undated_policy: str) -> List[NewsItem]:
    if sort_by == 'date-asc':
        return list(reversed(sort_items(items, undated_policy)))
    if sort_by == 'source':
        return sorted(items, key=lambda i: i.source_name.lower())
    return list(items)


def add_cli_feeds(registry: SourceRegistry, feeds: Sequence[str]):
    """Register --feed ID=URL entries as custom sources."""
    for spec in feeds:
        source_id, sep, url = spec.partition('=')
        if not sep:
            raise ValueError(f"--feed expects ID=URL, got {spec!r}")
        registry.add_custom_feed(source_id.strip(), source_id.strip(), url.strip())


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Aggregate and geo-tag international news feeds')
    parser.add_argument('--source', default='all',
                        help='Comma-separated source ids (default: all)')
    parser.add_argument('--feed', action='append', default=[], metavar='ID=URL',
                        help='Add a custom feed for this run (repeatable)')
    parser.add_argument('--config', type=Path, help='Path to config.yaml')
    parser.add_argument('--keyword', help='Comma-separated keyword filter')
    parser.add_argument('--region', default='all', choices=['all', *REGIONS.keys()],
                        help='Only stories tagged with this region')
    parser.add_argument('--sort', choices=SORT_CHOICES, default='date-desc',
                        help='Output order (default: date-desc)')
    parser.add_argument('--limit', type=int, default=0, help='Maximum stories to output (0 = no limit)')
    parser.add_argument('--cluster', action='store_true', help='Include location clusters')
    parser.add_argument('--cluster-km', type=float, dest='cluster_km',
                        help='Cluster distance threshold in km')
    parser.add_argument('--direct', action='store_true',
                        help='Try direct requests before proxies for every source')
    parser.add_argument('--format', choices=['json', 'md', 'markdown'],
                        help='Output format (default from config, json)')
    parser.add_argument('--list-sources', action='store_true', dest='list_sources',
                        help='Print the configured sources and exit')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    config = reload_config(args.config) if args.config else get_config()
    registry = config.build_registry()
    try:
        add_cli_feeds(registry, args.feed)
    except ValueError as e:
        parser.error(str(e))

    if args.list_sources:
        sources = registry.active().values()
        print(json.dumps([s.to_dict() for s in sources], indent=2, ensure_ascii=False))
        return 0

    if args.source == 'all':
        enabled = config.sources.enabled
    else:
        enabled = [s.strip() for s in args.source.split(',') if s.strip()]
    sources = registry.active(enabled)

    if args.direct:
        sources = {sid: replace(s, direct=True) for sid, s in sources.items()}

    aggregator = Aggregator.from_config(config)
    try:
        items, meta = aggregator.aggregate_with_meta(sources)
    except NoContentError as e:
        sys.stderr.write(f"No content available: {e}\n")
        return EXIT_NO_CONTENT

    items = filter_by_region(items, args.region)
    items = filter_items(items, args.keyword)
    items = reorder(items, args.sort, config.aggregation.undated_policy)
    if args.limit > 0:
        items = items[:args.limit]

    meta['shown'] = len(items)
    meta['geo'] = aggregator.geotagger.geo_stats(items)

    clusters = None
    if args.cluster:
        distance = args.cluster_km or config.geo.cluster_distance_km
        clusters = cluster_by_location(items, distance)

    print(format_output(items, meta, args.format or config.output.default_format, clusters))
    return 0


if __name__ == "__main__":
    sys.exit(main())
