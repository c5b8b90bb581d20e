#!/usr/bin/env python3
"""
Feed parser - turns RSS 2.0, RSS 1.0 and Atom documents into RawFeedItem lists.

The dialect is detected once per document (RSS if any <item> exists,
otherwise Atom if any <entry> exists). Every logical field is read through
an ordered list of accessors for that dialect; the first accessor that
yields a non-empty value wins. Add an accessor to FIELD_ACCESSORS to teach
the parser a new alias.

Usage:
  items = parse(xml_text)          # never raises, malformed XML -> []
  items = parse_document(xml)      # raises FeedParseError on malformed XML
"""

import html
import logging
import re
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import Tag
from lxml import etree

from models import RawFeedItem
from utils.time_parser import parse_pub_date, parse_time

logger = logging.getLogger(__name__)

Accessor = Callable[[Tag], Optional[str]]

TAG_RE = re.compile(r'<[^>]*>')
WHITESPACE_RE = re.compile(r'\s+')
IMG_SRC_RE = re.compile(r'<img[^>]+src=["\']([^"\'>]+)["\']', re.IGNORECASE)


# Namespace URI -> canonical prefix ('' for the feed's own vocabulary)
NAMESPACE_PREFIXES: Dict[str, str] = {
    'http://www.w3.org/2005/Atom': '',
    'http://purl.org/rss/1.0/': '',
    'http://purl.org/rss/1.0/modules/content/': 'content',
    'http://purl.org/dc/elements/1.1/': 'dc',
    'http://search.yahoo.com/mrss/': 'media',
    'http://search.yahoo.com/mrss': 'media',
}


class FeedParseError(Exception):
    """Raised when a feed document is not well-formed XML."""


class FeedDialect(Enum):
    RSS = "rss"
    ATOM = "atom"


# =============================================================================
# TEXT HELPERS
# =============================================================================

def clean_text(text: Optional[str]) -> str:
    """
    Sanitize a text field:
    - Strip HTML tags
    - Decode HTML entities
    - Collapse whitespace runs to single spaces and trim
    """
    if not text:
        return ""

    text = TAG_RE.sub('', text)
    text = html.unescape(text)
    return WHITESPACE_RE.sub(' ', text).strip()


def _qname(tag: Tag) -> str:
    """
    Canonical qualified tag name, e.g. 'content:encoded' or 'title'.

    Known namespaces are resolved by URI, so `<atom:title>` and a
    `<m:thumbnail>` bound to Media RSS read as 'title' and
    'media:thumbnail'. Unknown namespaces keep the document's prefix.
    """
    prefix = NAMESPACE_PREFIXES.get(tag.namespace)
    if prefix is None:
        prefix = tag.prefix
    return f"{prefix}:{tag.name}" if prefix else tag.name


def _find(entry: Tag, name: str) -> Optional[Tag]:
    return entry.find(lambda tag: _qname(tag) == name)


def _find_all(entry: Tag, name: str) -> List[Tag]:
    return entry.find_all(lambda tag: _qname(tag) == name)


def _markup(element: Tag) -> str:
    """
    Raw content of an element as HTML.

    Escaped or CDATA HTML comes back as text already; inline XHTML (Atom
    type="xhtml") has child elements and is serialized instead.
    """
    if element.find(True) is not None:
        return element.decode_contents()
    return element.get_text()


# =============================================================================
# ACCESSORS
# =============================================================================

def child_text(name: str) -> Accessor:
    """Text of the first descendant named `name`."""
    def accessor(entry: Tag) -> Optional[str]:
        element = _find(entry, name)
        return element.get_text() if element is not None else None
    accessor.__name__ = f"text<{name}>"
    return accessor


def child_markup(name: str) -> Accessor:
    """HTML content of the first descendant named `name`."""
    def accessor(entry: Tag) -> Optional[str]:
        element = _find(entry, name)
        return _markup(element) if element is not None else None
    accessor.__name__ = f"markup<{name}>"
    return accessor


def child_attr(name: str, attr: str,
               where: Optional[Callable[[Tag], bool]] = None) -> Accessor:
    """Attribute of the first descendant named `name` that passes `where`."""
    def accessor(entry: Tag) -> Optional[str]:
        for element in _find_all(entry, name):
            if where is not None and not where(element):
                continue
            value = element.get(attr)
            if value:
                return value
        return None
    accessor.__name__ = f"attr<{name}@{attr}>"
    return accessor


def _is_alternate_link(element: Tag) -> bool:
    # Atom: a link without rel is an alternate link
    return element.get('rel') in (None, '', 'alternate')


def _is_image_enclosure(element: Tag) -> bool:
    return (element.get('type') or '').lower().startswith('image')


def _is_media_image(element: Tag) -> bool:
    return _qname(element) in ('media:thumbnail', 'media:content') and bool(element.get('url'))


DESCRIPTION_ALIASES = ['description', 'summary', 'content', 'content:encoded']

LINK_ACCESSORS: List[Accessor] = [
    child_text('link'),
    child_attr('link', 'href', where=_is_alternate_link),
    child_attr('link', 'href'),
]

FIELD_ACCESSORS: Dict[FeedDialect, Dict[str, List[Accessor]]] = {
    FeedDialect.RSS: {
        'title': [child_text('title')],
        'description': [child_markup(name) for name in DESCRIPTION_ALIASES],
        'link': LINK_ACCESSORS,
        'date': [child_text(name) for name in ('pubDate', 'dc:date', 'published', 'updated')],
    },
    FeedDialect.ATOM: {
        'title': [child_text('title')],
        'description': [child_markup(name) for name in DESCRIPTION_ALIASES],
        'link': LINK_ACCESSORS,
        'date': [child_text(name) for name in ('published', 'updated', 'dc:date', 'pubDate')],
    },
}


def first_value(entry: Tag, accessors: List[Accessor]) -> str:
    """Run accessors in order and return the first non-blank result."""
    for accessor in accessors:
        value = accessor(entry)
        if value and value.strip():
            return value
    return ""


# =============================================================================
# FIELD EXTRACTION
# =============================================================================

def extract_date(entry: Tag, dialect: FeedDialect) -> Tuple[datetime, bool]:
    """First parseable date among the dialect's date aliases, else now."""
    for accessor in FIELD_ACCESSORS[dialect]['date']:
        raw = accessor(entry)
        if raw and parse_time(raw) is not None:
            return parse_pub_date(raw)
    return parse_pub_date(None)


def extract_image(entry: Tag) -> Optional[str]:
    """
    Find an image URL, trying in order:
    1. media:thumbnail / media:content url attribute
    2. enclosure with an image/* type
    3. first <img src> inside description/content HTML
    """
    media = entry.find(_is_media_image)
    if media is not None:
        return media.get('url')

    for enclosure in _find_all(entry, 'enclosure'):
        if _is_image_enclosure(enclosure) and enclosure.get('url'):
            return enclosure.get('url')

    for name in DESCRIPTION_ALIASES:
        element = _find(entry, name)
        if element is None:
            continue
        match = IMG_SRC_RE.search(_markup(element))
        if match:
            return html.unescape(match.group(1))

    return None


def extract_categories(entry: Tag) -> List[str]:
    """Every category's text or term attribute, in order, duplicates kept."""
    categories = []
    for element in _find_all(entry, 'category'):
        text = clean_text(element.get_text()) or clean_text(element.get('term'))
        if text:
            categories.append(text)
    return categories


def parse_entry(entry: Tag, dialect: FeedDialect) -> Optional[RawFeedItem]:
    """Build a RawFeedItem from one <item>/<entry>, or None without a title."""
    fields = FIELD_ACCESSORS[dialect]

    title = clean_text(first_value(entry, fields['title']))
    if not title:
        return None

    pub_date, inferred = extract_date(entry, dialect)

    return RawFeedItem(
        title=title,
        description=clean_text(first_value(entry, fields['description'])),
        link=first_value(entry, fields['link']).strip(),
        pub_date=pub_date,
        image=extract_image(entry),
        categories=extract_categories(entry),
        date_inferred=inferred,
    )


# =============================================================================
# DOCUMENT
# =============================================================================

def _as_bytes(raw: Union[str, bytes]) -> bytes:
    if isinstance(raw, str):
        return raw.encode('utf-8')
    return raw


def check_well_formed(raw: Union[str, bytes]):
    """Raise FeedParseError unless the document is well-formed XML."""
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        etree.fromstring(_as_bytes(raw), parser=parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise FeedParseError(str(e)) from e


def detect_dialect(soup: BeautifulSoup) -> Optional[FeedDialect]:
    if _find(soup, 'item') is not None:
        return FeedDialect.RSS
    if _find(soup, 'entry') is not None:
        return FeedDialect.ATOM
    return None


def parse_document(raw: Union[str, bytes]) -> List[RawFeedItem]:
    """
    Parse a feed document strictly.

    Args:
        raw: Feed XML as text or bytes

    Returns:
        Items in document order (entries without a title are dropped)

    Raises:
        FeedParseError if the document is not well-formed XML
    """
    if not raw:
        raise FeedParseError("empty document")

    # Some servers send a blank line before the XML declaration
    raw = raw.lstrip()
    check_well_formed(raw)

    try:
        soup = BeautifulSoup(raw, 'xml')
    except ParserRejectedMarkup as e:
        raise FeedParseError(str(e)) from e

    dialect = detect_dialect(soup)
    if dialect is None:
        return []

    container = 'item' if dialect is FeedDialect.RSS else 'entry'
    items = []
    for entry in _find_all(soup, container):
        item = parse_entry(entry, dialect)
        if item is not None:
            items.append(item)
    return items


def parse(raw: Union[str, bytes]) -> List[RawFeedItem]:
    """Parse a feed document, returning [] for malformed XML."""
    try:
        return parse_document(raw)
    except FeedParseError as e:
        logger.warning("Discarding malformed feed document: %s", e)
        return []
