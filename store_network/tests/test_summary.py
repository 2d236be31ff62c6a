"""Tests for sidebar text and selection summaries."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from store_network.aggregator import aggregate
from store_network.selection import NO_SELECTION, AreaSelection, BrowseMode, CitySelection, ZoneSelection
from store_network.summary import (
    describe_item,
    format_number,
    summarize_items_by_mode,
    summarize_selection,
)
from store_network.tests.samples import area_feed, city_feed, zone_feed


def sample_snapshot():
    return aggregate(city_feed(), area_feed(), zone_feed())


class TestFormatNumber:
    """Tests for en-US number formatting."""

    def test_grouping_and_decimals(self):
        """Test thousands separators and trimmed decimals."""
        assert format_number(1200) == "1,200"
        assert format_number(1234567.5) == "1,234,567.5"
        assert format_number(0.1234) == "0.123"
        assert format_number(0) == "0"


class TestDescribeItem:
    """Tests for secondary sidebar text."""

    def test_describe_city(self):
        """Test the city line lists stores, areas, area and coverage."""
        pristina = sample_snapshot().find_city("Pristina")

        assert describe_item(pristina) == "2 stores • 1 area • 1,200 m² • Geo 2/2 (100%)"

    def test_describe_city_without_stores(self):
        """Test empty cities only report the store count."""
        assert describe_item(sample_snapshot().find_city("Peja")) == "0 stores"

    def test_describe_area(self):
        """Test the area line includes its zone."""
        center = sample_snapshot().find_area("Center")

        assert describe_item(center) == "2 stores • 1 city • 1,200 m² • Geo 2/2 (100%) • Zone North"

    def test_describe_zone(self):
        """Test the zone line includes areas, cities and region."""
        south = sample_snapshot().find_zone("South Zone")

        assert describe_item(south) == "1 store • 1 area • 1 city • Geo 0/1 (0%) • Region Kosovo South"

    def test_items_by_mode(self):
        """Test the list headers per browsing mode."""
        snapshot = sample_snapshot()

        assert summarize_items_by_mode(BrowseMode.CITY, snapshot) == "3 cities"
        assert summarize_items_by_mode(BrowseMode.AREA, snapshot) == "2 areas"
        assert summarize_items_by_mode(BrowseMode.ZONE, snapshot) == "2 zones"


class TestSummarizeSelection:
    """Tests for selection summaries."""

    def test_no_selection_summarizes_catalog(self):
        """Test the network-wide summary."""
        summary = summarize_selection(NO_SELECTION, sample_snapshot())

        assert summary.label == "Network"
        assert summary.store_count == 3
        assert summary.total_sqm == 1200
        assert summary.geocoded_count == 2
        assert summary.geo_coverage == 67
        assert summary.top_formats == (("Express", 2), ("Hyper", 1))

    def test_city_selection(self):
        """Test a city summary uses matching catalog stores."""
        summary = summarize_selection(CitySelection("pristina"), sample_snapshot(), top_n=1)

        assert summary.store_count == 2
        assert summary.geo_coverage == 100
        assert summary.top_formats == (("Express", 1),)

    def test_area_and_zone_selection(self):
        """Test area and zone summaries use the entity's own stores."""
        snapshot = sample_snapshot()

        area = summarize_selection(AreaSelection("South", cities=("Prizren",)), snapshot)
        zone = summarize_selection(ZoneSelection("North"), snapshot)

        assert area.store_count == 1
        assert area.geo_coverage == 0
        assert zone.store_count == 2
        assert zone.label == "North"
