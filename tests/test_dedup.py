"""Tests for deduplication logic."""

from conftest import make_news_item
from dedup import deduplicate, title_key


class TestTitleKey:
    """Tests for title normalization."""

    def test_lowercases(self):
        """Titles should be lowercased."""
        assert title_key("DOOM Ported") == "doomported"

    def test_removes_punctuation_and_spaces(self):
        """Only letters and digits survive."""
        assert title_key("Hello, World! 2026") == "helloworld2026"
        assert title_key("snake_case - title") == "snakecasetitle"

    def test_truncates(self):
        """Keys are cut to the configured length."""
        assert len(title_key("a" * 80)) == 50
        assert title_key("abcdef", length=3) == "abc"

    def test_unicode_letters_kept(self):
        """Non-Latin titles do not collapse to an empty key."""
        assert title_key("Привет, мир!") == "приветмир"
        assert title_key("Élection à Paris") == "électionàparis"

    def test_handles_empty(self):
        """Empty titles should return empty string."""
        assert title_key("") == ""
        assert title_key(None) == ""


class TestDeduplicate:
    """Tests for the main deduplicate function."""

    def test_first_occurrence_wins(self):
        """Later items with the same key are dropped."""
        first = make_news_item("Summit opens in Berlin", source="a")
        second = make_news_item("SUMMIT opens in Berlin!", source="b")
        unique, meta = deduplicate([first, second])
        assert unique == [first]
        assert meta == {'raw_items': 2, 'after_dedup': 1, 'duplicates_removed': 1}

    def test_preserves_order(self):
        """Surviving items keep their input order."""
        items = [make_news_item(t) for t in ("C story", "A story", "B story", "A story")]
        unique, _ = deduplicate(items)
        assert [i.title for i in unique] == ["C story", "A story", "B story"]

    def test_same_prefix_beyond_key_length(self):
        """Titles identical in their first 50 key characters are duplicates."""
        stem = "x" * 50
        unique, _ = deduplicate([make_news_item(stem + " one"), make_news_item(stem + " two")])
        assert len(unique) == 1

    def test_same_id_is_duplicate(self):
        """Identical link and title always deduplicate."""
        first = make_news_item("!!!", link="https://example.com/x")
        again = make_news_item("!!!", link="https://example.com/x")
        unique, _ = deduplicate([first, again])
        assert unique == [first]

    def test_empty_keys_collapse(self):
        """Titles without letters or digits share the empty key, first one kept."""
        items = [
            make_news_item("!!!", link="https://example.com/1"),
            make_news_item("???", link="https://example.com/2"),
            make_news_item("🔥🔥", link="https://example.com/3"),
        ]
        unique, meta = deduplicate(items)
        assert unique == [items[0]]
        assert meta['duplicates_removed'] == 2

    def test_result_keys_are_unique(self):
        items = [make_news_item(t) for t in ("One", "one", "Two", "TWO!", "Three")]
        unique, meta = deduplicate(items)
        keys = [title_key(i.title) for i in unique]
        assert len(keys) == len(set(keys)) == 3
        assert meta['duplicates_removed'] == 2

    def test_empty_input(self):
        unique, meta = deduplicate([])
        assert unique == []
        assert meta['raw_items'] == 0
