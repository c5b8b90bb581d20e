#!/usr/bin/env python3
"""
Output formatters for the news monitor.

Supports:
- JSON (default, machine-readable)
- Markdown (human-readable briefing grouped by region)
"""

import json
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from gazetteer import REGIONS
from models import Cluster, NewsItem
from utils.time_parser import format_age, format_human_readable

MAX_DESCRIPTION_LENGTH = 200
STORIES_PER_REGION = 10


def truncate(text: str, length: int = MAX_DESCRIPTION_LENGTH) -> str:
    if not text or len(text) <= length:
        return text or ''
    return text[:length].rstrip() + '...'


def format_json(items: Sequence[NewsItem], meta: Dict,
                clusters: Optional[List[Cluster]] = None) -> str:
    """
    Format output as JSON: {"meta": ..., "stories": [...]} plus
    "clusters" when clustering was requested.
    """
    output = {
        'meta': meta,
        'stories': [item.to_dict() for item in items],
    }
    if clusters is not None:
        output['clusters'] = [cluster.to_dict() for cluster in clusters]
    return json.dumps(output, indent=2, ensure_ascii=False)


def format_markdown(items: Sequence[NewsItem], meta: Dict,
                    clusters: Optional[List[Cluster]] = None) -> str:
    """
    Format output as a Markdown briefing.

    Stories are grouped by region in region declaration order, with
    untagged stories last.
    """
    now = datetime.now(timezone.utc)
    lines = []

    lines.append("# 🌍 World News Briefing")
    lines.append("")

    lines.append("---")
    lines.append(f"📊 **Scan Summary**: {meta.get('sources_scanned', 'N/A')} sources • "
                 f"{meta.get('raw_items', 'N/A')} items fetched • "
                 f"{meta.get('after_dedup', len(items))} unique stories "
                 f"({meta.get('duplicates_removed', 0)} duplicates removed)")
    failed = meta.get('failed_sources') or []
    if failed:
        lines.append(f"⚠️ **No items from**: {', '.join(failed)}")
    lines.append("---")
    lines.append("")

    grouped: Dict[Optional[str], List[NewsItem]] = {}
    for item in items:
        grouped.setdefault(item.region, []).append(item)

    sections = [(rid, region.name) for rid, region in REGIONS.items()]
    sections.append((None, "Other"))

    for region_id, title in sections:
        stories = grouped.get(region_id)
        if not stories:
            continue
        lines.append(f"## {title} ({len(stories)})")
        lines.append("")
        for i, item in enumerate(stories[:STORIES_PER_REGION], 1):
            lines.extend(_format_story_md(item, i, now))
        lines.append("")

    if clusters:
        lines.append("## 📍 Hotspots")
        lines.append("")
        for cluster in clusters:
            if len(cluster.items) > 1:
                lines.append(f"- **{cluster.location}**: {len(cluster.items)} stories")
        lines.append("")

    lines.append("---")
    fetched_at = meta.get('fetched_at')
    stamp = format_human_readable(datetime.fromisoformat(fetched_at)) if fetched_at else format_human_readable(now)
    lines.append(f"*Generated at {stamp}*")

    return "\n".join(lines)


def _format_story_md(item: NewsItem, index: int, now: datetime) -> List[str]:
    """Format a single story as Markdown."""
    lines = []

    lines.append(f"### {index}. [{item.title}]({item.link or '#'})")

    age = "date unknown" if item.date_inferred else format_age(item.pub_date, now)
    meta_parts = [f"**Source**: {item.source_name}", f"**Time**: {age}"]
    primary = item.primary_location
    if primary:
        meta_parts.append(f"**Location**: {primary.name}")
    lines.append(" | ".join(meta_parts))

    if item.description:
        lines.append("")
        lines.append(truncate(item.description))

    lines.append("")
    return lines


def format_output(items: Sequence[NewsItem], meta: Dict, format_type: str = "json",
                  clusters: Optional[List[Cluster]] = None) -> str:
    """
    Format output in the specified format.

    Args:
        items: Aggregated news items
        meta: Metadata dict
        format_type: "json", "md" or "markdown"
        clusters: Optional clusters to include

    Returns:
        Formatted string
    """
    format_type = format_type.lower()

    if format_type in ("md", "markdown"):
        return format_markdown(items, meta, clusters)
    # Default to JSON for unknown formats
    return format_json(items, meta, clusters)
