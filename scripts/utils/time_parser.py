#!/usr/bin/env python3
"""
Publication-date handling for feed items.

All timestamps are normalized to UTC with timezone info.
"""

import re
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Optional, Tuple


# Formats seen in the wild that neither RFC 2822 nor fromisoformat accept
FALLBACK_FORMATS = [
    '%Y-%m-%d %H:%M',
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%dT%H:%M:%S.%f%z',
    '%a, %d %b %Y %H:%M:%S %Z',
    '%a, %d %b %Y %H:%M %Z',
    '%d %b %Y %H:%M:%S',
    '%b %d, %Y',
    '%B %d, %Y',
    '%Y-%m-%d',
]


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_time(time_str: str) -> Optional[datetime]:
    """
    Parse a feed date string to a UTC-aware datetime.

    Supports:
    - RFC 822/2822 (RSS pubDate): "Sat, 25 Jan 2026 10:30:00 GMT"
    - ISO 8601 / RFC 3339 (Atom, dc:date): "2026-01-25T10:30:00Z"
    - Simple datetime: "2026-01-25 10:30"
    - Date only: "Jan 25, 2026", "2026-01-25"

    Returns UTC-aware datetime or None if unparseable.
    """
    if not time_str:
        return None

    time_str = str(time_str).strip()
    if not time_str:
        return None

    # RFC 2822 first, it is what RSS 2.0 mandates
    try:
        dt = parsedate_to_datetime(time_str)
        if dt is not None:
            return _as_utc(dt)
    except (TypeError, ValueError, IndexError):
        pass

    # ISO 8601 (handles Z and +00:00)
    try:
        iso_str = re.sub(r'Z$', '+00:00', time_str)
        return _as_utc(datetime.fromisoformat(iso_str))
    except ValueError:
        pass

    for fmt in FALLBACK_FORMATS:
        try:
            return _as_utc(datetime.strptime(time_str, fmt))
        except ValueError:
            continue

    return None


def parse_pub_date(time_str: Optional[str], now: Optional[datetime] = None) -> Tuple[datetime, bool]:
    """
    Parse a publication date, substituting the current time when it can't be read.

    Args:
        time_str: Raw date text from the feed (may be None)
        now: Clock override, mostly for tests

    Returns:
        Tuple of (timestamp, inferred) where inferred is True when the
        fallback was used
    """
    parsed = parse_time(time_str) if time_str else None
    if parsed is not None:
        return parsed, False
    return (now or datetime.now(timezone.utc)), True


def format_human_readable(dt: datetime) -> str:
    """
    Format a datetime for human display.

    Returns format like: "Jan 25, 2026 10:30 AM UTC"
    """
    return _as_utc(dt).strftime('%b %d, %Y %I:%M %p UTC')


def format_age(dt: datetime, now: Optional[datetime] = None) -> str:
    """
    Describe how long ago a timestamp was: "just now", "12 min ago",
    "3 h ago", "yesterday", "4 days ago", and the full date after a week.
    """
    now = now or datetime.now(timezone.utc)
    delta = now - _as_utc(dt)

    if delta < timedelta(minutes=1):
        return "just now"
    if delta < timedelta(hours=1):
        return f"{int(delta.total_seconds() // 60)} min ago"
    if delta < timedelta(days=1):
        return f"{int(delta.total_seconds() // 3600)} h ago"
    if delta.days == 1:
        return "yesterday"
    if delta.days < 7:
        return f"{delta.days} days ago"
    return _as_utc(dt).strftime('%b %d, %Y')
