#!/usr/bin/env python3
"""
Title-based deduplication for aggregated feed items.

Wire stories are republished by several outlets with the same headline and
slightly different punctuation or casing. Two items are duplicates when:
1. Their title keys match (lowercase, alphanumerics only, first 50 chars)
2. Or their content-derived ids match (same link + title)

The first occurrence wins, so callers sort before deduplicating.
"""

import re
from typing import Dict, List, Sequence, Tuple

from models import NewsItem


DEFAULT_KEY_LENGTH = 50

NON_ALNUM_RE = re.compile(r'[\W_]+', re.UNICODE)


def title_key(title: str, length: int = DEFAULT_KEY_LENGTH) -> str:
    """
    Normalize title for comparison:
    - Lowercase
    - Drop every non-alphanumeric character (Unicode aware, so Cyrillic
      or accented titles keep their letters)
    - Truncate to `length` characters
    """
    if not title:
        return ""

    return NON_ALNUM_RE.sub('', title.lower())[:length]


def deduplicate(items: Sequence[NewsItem],
                key_length: int = DEFAULT_KEY_LENGTH) -> Tuple[List[NewsItem], Dict]:
    """
    Main deduplication function.

    Every key counts, the empty one included: titles made only of
    punctuation or emoji all share the key '' and collapse to the first.

    Returns:
        Tuple of (deduplicated_items, meta_stats)
    """
    seen_keys = set()
    seen_ids = set()
    unique = []

    for item in items:
        key = title_key(item.title, key_length)
        if item.id in seen_ids or key in seen_keys:
            continue

        seen_ids.add(item.id)
        seen_keys.add(key)
        unique.append(item)

    meta = {
        'raw_items': len(items),
        'after_dedup': len(unique),
        'duplicates_removed': len(items) - len(unique),
    }

    return unique, meta
