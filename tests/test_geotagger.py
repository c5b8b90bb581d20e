"""Tests for location detection, region tagging and clustering."""

import pytest

from conftest import make_news_item
from gazetteer import LOCATION_COORDS, REGIONS
from geotagger import GeoTagger, cluster_by_location, filter_by_region, haversine_km

LONDON = LOCATION_COORDS["London"]
PARIS = LOCATION_COORDS["Paris"]

# Points one and two 3-degree steps east of (0, 0) on the equator,
# about 333.6 km apart
LINE_GAZETTEER = {
    "Alpha": (0.0, 0.0),
    "Bravo": (0.0, 3.0),
    "Charlie": (0.0, 6.0),
}


@pytest.fixture
def tagger():
    return GeoTagger()


class TestHaversine:
    """Tests for great-circle distance."""

    def test_london_paris(self):
        assert abs(haversine_km(LONDON, PARIS) - 343.5) < 1.0

    def test_same_point_is_zero(self):
        assert haversine_km(PARIS, PARIS) == 0

    def test_symmetric(self):
        assert haversine_km(LONDON, PARIS) == pytest.approx(haversine_km(PARIS, LONDON))

    def test_antipodes(self):
        """Half the circumference, no math domain error."""
        assert haversine_km((0.0, 0.0), (0.0, 180.0)) == pytest.approx(20015.1, abs=1)


class TestDetectLocations:
    """Tests for gazetteer matching."""

    def test_counts_and_order(self, tagger):
        matches = tagger.detect_locations("London calling: London and Paris talks")
        assert [(m.name, m.count) for m in matches] == [("London", 2), ("Paris", 1)]
        assert matches[0].coords == LONDON

    def test_ties_keep_gazetteer_order(self, tagger):
        matches = tagger.detect_locations("Paris and London")
        assert [m.name for m in matches] == ["London", "Paris"]

    def test_case_insensitive(self, tagger):
        matches = tagger.detect_locations("TOKYO markets, tokyo again")
        assert [(m.name, m.count) for m in matches] == [("Tokyo", 2)]

    def test_whole_words_only(self, tagger):
        assert tagger.detect_locations("Parisian fashion and Romeo") == []

    def test_multi_word_names(self, tagger):
        names = [m.name for m in tagger.detect_locations("Flights from New York to Hong Kong")]
        assert names == ["New York", "Hong Kong"]

    def test_ties_follow_pattern_order_across_groups(self, tagger):
        """Cities come before countries, countries before contested areas."""
        names = [m.name for m in tagger.detect_locations("Hong Kong, Taiwan, Japan and Kyiv")]
        assert names == ["Japan", "Taiwan", "Hong Kong", "Kyiv"]

    def test_empty_text(self, tagger):
        assert tagger.detect_locations("") == []


class TestDetectRegion:
    """Tests for keyword region tagging."""

    def test_first_declared_region_wins(self, tagger):
        assert tagger.detect_region("Talks between Tokyo and Berlin") == "europe"

    def test_region_order_is_respected(self):
        reordered = GeoTagger(regions={"asia": REGIONS["asia"], "europe": REGIONS["europe"]})
        assert reordered.detect_region("Talks between Tokyo and Berlin") == "asia"

    def test_substring_match(self, tagger):
        """Keywords are plain substrings, not whole words."""
        assert tagger.detect_region("Nigerian elections") == "africa"

    def test_no_region(self, tagger):
        assert tagger.detect_region("Quiet day") is None
        assert tagger.detect_region("") is None

    def test_deterministic(self, tagger):
        text = "Sydney and Cairo leaders meet"
        assert len({tagger.detect_region(text) for _ in range(5)}) == 1


class TestTagging:
    """Tests for tagging whole items."""

    def test_tag_sets_locations_and_region(self, tagger):
        item = make_news_item("Rally in Sydney", description="Crowds in Sydney and Melbourne")
        tagged = tagger.tag([item])[0]
        assert tagged.primary_location.name == "Sydney"
        assert tagged.primary_location.count == 2
        assert [loc.name for loc in tagged.locations] == ["Sydney", "Melbourne"]
        assert tagged.region == "oceania"

    def test_tag_does_not_mutate_input(self, tagger):
        item = make_news_item("Rally in Sydney")
        tagger.tag([item])
        assert item.locations == []
        assert item.region is None

    def test_untagged_item(self, tagger):
        tagged = tagger.tag_item(make_news_item("Quiet day"))
        assert tagged.primary_location is None
        assert tagged.region is None

    def test_to_dict_includes_geo(self, tagger):
        data = tagger.tag_item(make_news_item("Floods in Lagos")).to_dict()
        assert data["region"] == "africa"
        assert data["primary_location"]["name"] == "Lagos"
        assert data["locations"][0]["count"] == 1


class TestFilterByRegion:
    """Tests for region filtering."""

    def test_all_returns_everything(self, tagger):
        items = tagger.tag([make_news_item("Rally in Sydney"), make_news_item("Quiet day")])
        assert filter_by_region(items, "all") == items

    def test_specific_region(self, tagger):
        items = tagger.tag([
            make_news_item("Rally in Sydney"),
            make_news_item("Floods in Lagos"),
            make_news_item("Storm nears Sydney"),
        ])
        assert [i.title for i in filter_by_region(items, "oceania")] == [
            "Rally in Sydney", "Storm nears Sydney"]

    def test_unknown_region_is_empty(self, tagger):
        items = tagger.tag([make_news_item("Rally in Sydney")])
        assert filter_by_region(items, "antarctica") == []


class TestGeoStats:
    """Tests for aggregate geo statistics."""

    def test_counts(self, tagger):
        items = tagger.tag([
            make_news_item("Rally in Sydney"),
            make_news_item("Storm nears Sydney"),
            make_news_item("Floods in Lagos"),
            make_news_item("Quiet day"),
        ])
        stats = tagger.geo_stats(items)
        assert stats["total"] == 4
        assert stats["with_location"] == 3
        assert stats["by_location"] == {"Sydney": 2, "Lagos": 1}
        assert stats["by_region"]["oceania"] == 2
        assert stats["by_region"]["africa"] == 1
        assert set(stats["by_region"]) == set(REGIONS)


class TestClustering:
    """Tests for greedy proximity clustering."""

    @pytest.fixture
    def line_tagger(self):
        return GeoTagger(locations=LINE_GAZETTEER)

    def test_distance_measured_to_center(self, line_tagger):
        """A-B and B-C are within range, A-C is not: C starts its own cluster."""
        items = line_tagger.tag([make_news_item(name) for name in ("Alpha", "Bravo", "Charlie")])
        clusters = cluster_by_location(items, max_distance_km=500)
        assert [[i.title for i in c.items] for c in clusters] == [["Alpha", "Bravo"], ["Charlie"]]
        assert clusters[0].location == "Alpha"
        assert clusters[0].center == (0.0, 0.0)

    def test_result_depends_on_order(self, line_tagger):
        items = line_tagger.tag([make_news_item(name) for name in ("Charlie", "Bravo", "Alpha")])
        clusters = cluster_by_location(items, max_distance_km=500)
        assert [[i.title for i in c.items] for c in clusters] == [["Charlie", "Bravo"], ["Alpha"]]

    def test_every_located_item_in_exactly_one_cluster(self, tagger):
        items = tagger.tag([
            make_news_item("London protest"),
            make_news_item("Paris strike"),
            make_news_item("Quiet day"),
            make_news_item("Tokyo quake"),
            make_news_item("Brussels summit"),
        ])
        clusters = cluster_by_location(items, max_distance_km=500)
        ids = [i.id for c in clusters for i in c.items]
        assert len(ids) == len(set(ids)) == 4
        assert [c.location for c in clusters] == ["London", "Tokyo"]

    def test_threshold_is_strict(self, line_tagger):
        items = line_tagger.tag([make_news_item("Alpha"), make_news_item("Bravo")])
        distance = haversine_km(LINE_GAZETTEER["Alpha"], LINE_GAZETTEER["Bravo"])
        assert len(cluster_by_location(items, max_distance_km=distance)) == 2

    def test_cluster_to_dict(self, line_tagger):
        items = line_tagger.tag([make_news_item("Alpha"), make_news_item("Bravo")])
        data = cluster_by_location(items)[0].to_dict()
        assert data["location"] == "Alpha"
        assert data["count"] == 2
        assert data["ids"] == [i.id for i in items]

    def test_no_located_items(self, tagger):
        assert cluster_by_location(tagger.tag([make_news_item("Quiet day")])) == []
