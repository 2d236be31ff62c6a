"""Tests for CSV export."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import pandas as pd

from store_network.aggregator import aggregate
from store_network.export import areas_frame, export_snapshot_to_csv, stores_frame
from store_network.tests.samples import area_feed, city_feed, zone_feed


def sample_snapshot():
    return aggregate(city_feed(), area_feed(), zone_feed())


class TestFrames:
    """Tests for the exported tables."""

    def test_stores_frame(self):
        """Test one row per catalog store with zone tags."""
        df = stores_frame(sample_snapshot())

        assert list(df["code"]) == ["D1", "D2", "D3"]
        assert not df["synthesized_code"].any()
        assert df.loc[df["code"] == "D3", "zone_name"].iloc[0] == "South Zone"

    def test_areas_frame(self):
        """Test area rows join their declared cities and zones."""
        df = areas_frame(sample_snapshot())

        center = df[df["name"] == "Center"].iloc[0]
        assert center["store_count"] == 2
        assert center["cities"] == "Pristina"
        assert center["zones"] == "North"


class TestExportSnapshot:
    """Tests for writing the CSV files."""

    def test_writes_all_tables(self, tmp_path):
        """Test every table is written and readable."""
        paths = export_snapshot_to_csv(sample_snapshot(), tmp_path / "out")

        assert set(paths) == {"cities", "areas", "zones", "stores"}
        for path in paths.values():
            assert path.exists()

        cities = pd.read_csv(paths["cities"], encoding="utf-8-sig")
        assert list(cities["name"]) == ["Pristina", "Prizren", "Peja"]
        assert list(cities["store_count"]) == [2, 1, 0]
