"""Pytest configuration and fixtures for the news monitor tests."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add scripts directory to path for imports
scripts_dir = Path(__file__).parent.parent / "scripts"
sys.path.insert(0, str(scripts_dir))

from models import NewsItem, RawFeedItem, generate_id  # noqa: E402


RSS_SAMPLE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
     xmlns:media="http://search.yahoo.com/mrss/"
     xmlns:content="http://purl.org/rss/1.0/modules/content/"
     xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>World Desk</title>
    <link>https://example.com/</link>
    <description>Top stories</description>
    <item>
      <title>Talks resume in Brussels</title>
      <link>https://example.com/brussels</link>
      <description>&lt;p&gt;Leaders meet in &lt;b&gt;Brussels&lt;/b&gt; &amp;amp; Paris.&lt;/p&gt;</description>
      <pubDate>Mon, 19 Oct 2026 10:00:00 GMT</pubDate>
      <media:title>Not the headline</media:title>
      <media:thumbnail url="https://img.example.com/brussels.jpg"/>
      <category>Europe</category>
      <category>Politics</category>
      <category>Europe</category>
    </item>
    <item>
      <description>An item without a title is dropped</description>
      <link>https://example.com/orphan</link>
    </item>
    <item>
      <title><![CDATA[Quake  hits
        <i>Tokyo</i>]]></title>
      <link>https://example.com/tokyo</link>
      <pubDate>not a date</pubDate>
      <enclosure url="https://img.example.com/tokyo.jpg" type="image/jpeg" length="1000"/>
      <content:encoded><![CDATA[<p><img src="https://img.example.com/ignored.png"> Buildings swayed.</p>]]></content:encoded>
    </item>
    <item>
      <title>Nile photo essay</title>
      <link>https://example.com/nile</link>
      <description><![CDATA[<p>Photo <img src="https://img.example.com/inline.png"> from Cairo</p>]]></description>
      <dc:date>2026-10-17T09:15:00Z</dc:date>
    </item>
  </channel>
</rss>
"""

ATOM_SAMPLE = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom World</title>
  <link href="https://atom.example.com/" rel="alternate"/>
  <updated>2026-10-18T08:00:00Z</updated>
  <entry>
    <title type="html">Election in &lt;em&gt;Delhi&lt;/em&gt;</title>
    <link rel="self" href="https://atom.example.com/self/1"/>
    <link rel="alternate" href="https://atom.example.com/delhi"/>
    <id>urn:example:1</id>
    <updated>2026-10-18T08:00:00Z</updated>
    <published>2026-10-18T07:30:00+02:00</published>
    <summary>Voters in Delhi head to the polls.</summary>
    <category term="Asia"/>
    <category term="Elections"/>
  </entry>
  <entry>
    <title>Markets</title>
    <link href="https://atom.example.com/markets"/>
    <id>urn:example:2</id>
    <updated>2026-10-17T12:00:00Z</updated>
    <content type="html">&lt;p&gt;Stocks &lt;img src="https://img.example.com/chart.png"/&gt; rose.&lt;/p&gt;</content>
  </entry>
</feed>
"""


def rss_document(*titles: str) -> str:
    """Minimal RSS 2.0 document with one dated item per title."""
    items = "".join(
        f"<item><title>{title}</title><link>https://example.com/{i}</link>"
        f"<pubDate>Mon, 19 Oct 2026 {10 - i:02d}:00:00 GMT</pubDate></item>"
        for i, title in enumerate(titles)
    )
    return f'<?xml version="1.0"?><rss version="2.0"><channel><title>t</title>{items}</channel></rss>'


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_raw_item(title, pub_date=None, link=None, description="", inferred=False):
    link = link or f"https://example.com/{generate_id('', title)}"
    return RawFeedItem(
        title=title,
        description=description,
        link=link,
        pub_date=pub_date or utc(2026, 10, 19, 12),
        date_inferred=inferred,
    )


def make_news_item(title, pub_date=None, source="a", link=None, description="", inferred=False):
    raw = make_raw_item(title, pub_date, link, description, inferred)
    return NewsItem.from_raw(raw, source, source.upper(), "#000000")


@pytest.fixture
def rss_xml():
    return RSS_SAMPLE


@pytest.fixture
def atom_xml():
    return ATOM_SAMPLE
