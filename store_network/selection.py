"""Selection state: browsing mode plus at most one selected city, area or zone."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, FrozenSet, List, Optional, Tuple, Union

from store_network.models import Area, City, Zone
from store_network.normalize import clean_string, normalize_key, normalize_names

logger = logging.getLogger(__name__)


class BrowseMode(str, Enum):
    CITY = "city"
    AREA = "area"
    ZONE = "zone"


@dataclass(frozen=True)
class NoSelection:
    @property
    def active(self) -> bool:
        return False

    @property
    def label(self) -> str:
        return "Network"


@dataclass(frozen=True)
class CitySelection:
    name: str

    @property
    def active(self) -> bool:
        return True

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class AreaSelection:
    name: str
    cities: Tuple[str, ...] = ()

    @property
    def active(self) -> bool:
        return True

    @property
    def label(self) -> str:
        return self.name


@dataclass(frozen=True)
class ZoneSelection:
    name: str
    cities: Tuple[str, ...] = ()
    areas: Tuple[str, ...] = ()

    @property
    def active(self) -> bool:
        return True

    @property
    def label(self) -> str:
        return self.name


Selection = Union[NoSelection, CitySelection, AreaSelection, ZoneSelection]
SelectableItem = Union[City, Area, Zone, str]

NO_SELECTION = NoSelection()


@dataclass(frozen=True)
class SelectionTargets:
    """Normalized names an entity is matched against."""
    zones: FrozenSet[str] = frozenset()
    areas: FrozenSet[str] = frozenset()
    cities: FrozenSet[str] = frozenset()

    @property
    def empty(self) -> bool:
        return not (self.zones or self.areas or self.cities)

    def matches(
        self,
        zone: Optional[str] = None,
        area: Optional[str] = None,
        city: Optional[str] = None,
    ) -> bool:
        """Zone match beats area match beats city match.

        A broader match includes the entity even when its narrower tags are
        missing or stale.
        """
        if self.zones and normalize_key(zone) in self.zones:
            return True
        if self.areas and normalize_key(area) in self.areas:
            return True
        if self.cities and normalize_key(city) in self.cities:
            return True
        return False


def targets_for(selection: Selection) -> SelectionTargets:
    if isinstance(selection, CitySelection):
        return SelectionTargets(cities=normalize_names([selection.name]))
    if isinstance(selection, AreaSelection):
        return SelectionTargets(
            areas=normalize_names([selection.name]),
            cities=normalize_names(selection.cities),
        )
    if isinstance(selection, ZoneSelection):
        return SelectionTargets(
            zones=normalize_names([selection.name]),
            areas=normalize_names(selection.areas),
            cities=normalize_names(selection.cities),
        )
    return SelectionTargets()


def build_selection(mode: BrowseMode, item: SelectableItem) -> Selection:
    """Build the selection value for an entity or a bare name."""
    mode = BrowseMode(mode)
    name = clean_string(item if isinstance(item, str) else item.name)
    if not name:
        return NO_SELECTION

    if mode is BrowseMode.CITY:
        return CitySelection(name=name)
    if mode is BrowseMode.AREA:
        cities = tuple(item.cities) if isinstance(item, Area) else ()
        return AreaSelection(name=name, cities=cities)
    cities = tuple(item.cities) if isinstance(item, Zone) else ()
    areas = tuple(item.areas) if isinstance(item, Zone) else ()
    return ZoneSelection(name=name, cities=cities, areas=areas)


class SelectionModel:
    """Tracks the browsing mode and the current selection.

    Switching the browsing mode always clears the selection. Choosing a city
    notifies ``city chosen`` listeners with the canonical city name; area and
    zone selections stay in the map until ``back()`` is called.
    """

    def __init__(self, mode: BrowseMode = BrowseMode.CITY):
        self.mode = BrowseMode(mode)
        self.selection: Selection = NO_SELECTION
        self._city_listeners: List[Callable[[str], None]] = []

    def on_city_chosen(self, listener: Callable[[str], None]) -> None:
        self._city_listeners.append(listener)

    def set_mode(self, mode: BrowseMode) -> Selection:
        self.mode = BrowseMode(mode)
        return self.clear()

    def select(self, mode: BrowseMode, item: SelectableItem) -> Selection:
        self.selection = build_selection(mode, item)
        logger.debug(f"Selection changed: {self.selection!r}")
        if isinstance(self.selection, CitySelection):
            for listener in self._city_listeners:
                listener(self.selection.name)
        return self.selection

    def clear(self) -> Selection:
        self.selection = NO_SELECTION
        return self.selection

    back = clear

    @property
    def targets(self) -> SelectionTargets:
        return targets_for(self.selection)

    @property
    def active(self) -> bool:
        return self.selection.active

