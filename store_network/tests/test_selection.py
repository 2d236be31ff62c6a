"""Tests for the selection model and priority matching."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from store_network.aggregator import aggregate
from store_network.selection import (
    NO_SELECTION,
    AreaSelection,
    BrowseMode,
    CitySelection,
    SelectionModel,
    SelectionTargets,
    ZoneSelection,
    build_selection,
    targets_for,
)
from store_network.tests.samples import area_feed, city_feed, zone_feed


class TestSelectionModel:
    """Tests for SelectionModel state transitions."""

    def test_select_clear_select_is_identical(self):
        """Test re-selecting the same city yields an equal selection value."""
        model = SelectionModel()

        first = model.select(BrowseMode.CITY, "Pristina")
        model.clear()
        second = model.select(BrowseMode.CITY, "Pristina")

        assert first == second
        assert second == CitySelection(name="Pristina")

    def test_set_mode_clears_selection(self):
        """Test switching the browsing mode always clears the selection."""
        model = SelectionModel()
        model.select(BrowseMode.CITY, "Pristina")

        model.set_mode(BrowseMode.AREA)

        assert model.mode is BrowseMode.AREA
        assert model.selection == NO_SELECTION
        assert not model.active

    def test_city_chosen_event(self):
        """Test choosing a city notifies listeners with the trimmed name."""
        model = SelectionModel()
        chosen = []
        model.on_city_chosen(chosen.append)

        model.select(BrowseMode.CITY, "  Pristina ")
        model.select(BrowseMode.AREA, "Center")

        assert chosen == ["Pristina"]

    def test_back_clears_area_selection(self):
        """Test the explicit back action clears an area selection."""
        model = SelectionModel(BrowseMode.AREA)
        model.select(BrowseMode.AREA, "Center")
        assert model.active

        model.back()

        assert model.selection == NO_SELECTION

    def test_blank_name_selects_nothing(self):
        """Test a blank name results in no selection."""
        assert build_selection(BrowseMode.CITY, "   ") == NO_SELECTION


class TestBuildSelection:
    """Tests for building selections from entities."""

    def test_area_entity_carries_member_cities(self):
        """Test selecting an Area entity captures its declared cities."""
        snapshot = aggregate(city_feed(), area_feed(), zone_feed())

        selection = build_selection(BrowseMode.AREA, snapshot.find_area("Center"))

        assert selection == AreaSelection(name="Center", cities=("Pristina",))

    def test_zone_entity_carries_cities_and_areas(self):
        """Test selecting a Zone entity captures its derived cities and areas."""
        snapshot = aggregate(city_feed(), area_feed(), zone_feed())

        selection = build_selection(BrowseMode.ZONE, snapshot.find_zone("North"))

        assert selection == ZoneSelection(name="North", cities=("Pristina",), areas=("Center",))
        assert selection.label == "North"


class TestTargets:
    """Tests for normalized targets and priority matching."""

    def test_targets_are_normalized(self):
        """Test target names are trimmed and case-folded."""
        targets = targets_for(CitySelection(name=" PRISTINA "))

        assert targets.cities == frozenset({"pristina"})
        assert targets.matches(city="Pristina")

    def test_zone_match_supersedes_missing_city(self):
        """Test an area match includes an entity whose city tag is empty."""
        targets = targets_for(ZoneSelection(name="North", cities=("Pristina",), areas=("Center",)))

        assert targets.matches(zone=None, area="Center", city="")
        assert targets.matches(zone="north", area=None, city=None)
        assert not targets.matches(zone="South", area="Elsewhere", city="Prizren")

    def test_empty_targets_match_nothing(self):
        """Test no selection matches no entity."""
        targets = targets_for(NO_SELECTION)

        assert targets == SelectionTargets()
        assert targets.empty
        assert not targets.matches(zone="North", area="Center", city="Pristina")
