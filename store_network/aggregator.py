"""Hierarchy aggregation: flat feeds -> cities, areas, zones and a store catalog.

Area-view and zone-view metrics are aggregated independently (areas from the
area feed, zones straight from the zone feed) and may diverge when the two
feeds disagree.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from store_network.catalog import StoreCatalog
from store_network.models import (
    Area,
    City,
    ExternalId,
    NetworkMetrics,
    ProvidedId,
    Store,
    SynthesizedId,
    Zone,
    resolve_id,
)
from store_network.normalize import clean_string, name_sort_key, normalize_key, slugify
from store_network.records import AreaRecord, CityRecord, ZoneRecord
from store_network.selection import BrowseMode

logger = logging.getLogger(__name__)

UNKNOWN_AREA = "Unknown area"
UNASSIGNED_ZONE = "Unassigned zone"
UNNAMED_STORE = "Unnamed store"
UNKNOWN_CITY = "Unknown city"

Item = Union[City, Area, Zone]


@dataclass(frozen=True)
class NetworkSnapshot:
    """Immutable result of one aggregation run."""
    cities: Tuple[City, ...] = ()
    areas: Tuple[Area, ...] = ()
    zones: Tuple[Zone, ...] = ()
    catalog: StoreCatalog = field(default_factory=StoreCatalog)

    def items_for(self, mode: BrowseMode) -> Tuple[Item, ...]:
        mode = BrowseMode(mode)
        if mode is BrowseMode.CITY:
            return self.cities
        if mode is BrowseMode.AREA:
            return self.areas
        return self.zones

    def find_city(self, name: str) -> Optional[City]:
        return _find_by_name(self.cities, name)

    def find_area(self, name: str) -> Optional[Area]:
        return _find_by_name(self.areas, name)

    def find_zone(self, name: str) -> Optional[Zone]:
        return _find_by_name(self.zones, name)


def _find_by_name(items: Iterable[Item], name: str) -> Optional[Item]:
    key = normalize_key(name)
    for item in items:
        if normalize_key(item.name) == key:
            return item
    return None


def _coerce(model: type, records: Iterable[Any]) -> List[Any]:
    return [
        record if isinstance(record, model) else model.model_validate(record)
        for record in records
    ]


def sort_by_store_count(items: Iterable[Item]) -> Tuple[Item, ...]:
    """Descending store count, then name."""
    return tuple(sorted(items, key=lambda item: (-item.store_count, name_sort_key(item.name))))


def _sorted_names(names: Iterable[str]) -> Tuple[str, ...]:
    return tuple(sorted(names, key=name_sort_key))


def zone_key(record: ZoneRecord) -> str:
    """Canonical zone key: provided code, else ``zone-{name}``, else the unassigned label."""
    if record.zone_code:
        return record.zone_code
    if record.zone_name:
        return f"zone-{record.zone_name}"
    return UNASSIGNED_ZONE


def build_zone_index(zone_records: Sequence[ZoneRecord]) -> Dict[str, ZoneRecord]:
    """Index zone records by department code (fallback: zone code, then name).

    The first record written for a key wins.
    """
    index: Dict[str, ZoneRecord] = {}
    for record in zone_records:
        key = clean_string(record.department_code or record.zone_code or record.zone_name)
        if key and key not in index:
            index[key] = record
    return index


def _area_code(record: AreaRecord) -> str:
    name = record.area_name or UNKNOWN_AREA
    return resolve_id(record.area_code, f"area-{slugify(name)}").value


def build_area(record: AreaRecord, zone_index: Dict[str, ZoneRecord]) -> Area:
    """Build one area with zone/region tags resolved through ``zone_index``.

    Departments without a matching zone record get their own code as zone
    code and no zone name.
    """
    area_code = _area_code(record)
    area_name = record.area_name or UNKNOWN_AREA

    stores: List[Store] = []
    for position, department in enumerate(record.departments):
        store_id = resolve_id(department.department_code, f"{area_code}:dept-{position}")
        zone_record = zone_index.get(department.department_code) if department.department_code else None
        if zone_record is not None and zone_record.zone_code:
            zone_code: Optional[str] = zone_record.zone_code
        else:
            zone_code = department.department_code

        stores.append(
            Store(
                id=store_id,
                name=department.department_name or UNNAMED_STORE,
                sqm=department.sqm,
                longitude=department.longitude,
                latitude=department.latitude,
                address=department.address,
                format=department.format,
                city_name=department.city_name,
                area_code=area_code,
                area_name=area_name,
                zone_code=zone_code,
                zone_name=zone_record.zone_name if zone_record else None,
                region_code=zone_record.region_code if zone_record else None,
                region_name=zone_record.region_name if zone_record else None,
            )
        )

    zone_names = {clean_string(store.zone_name) for store in stores}
    zone_names.discard("")

    return Area(
        id=resolve_id(record.area_code, area_code),
        name=area_name,
        stores=tuple(stores),
        cities=_sorted_names(record.cities),
        zone_names=_sorted_names(zone_names),
    )


class _ZoneGroup:
    """Mutable accumulator for the stores of one zone key."""

    def __init__(self, code: str, name: str):
        """
        Args:
            code: Canonical zone key from zone_key().
            name: Display name; the first record of the group decides it.
        """
        self.code = code
        self.name = name
        self.stores: List[Store] = []
        self.cities: Set[str] = set()
        self.areas: Set[str] = set()
        self.region_names: Set[str] = set()

    def add(self, record: ZoneRecord) -> None:
        """Append one zone record as a store and collect its city, area and region.

        Args:
            record: Zone feed record belonging to this group.
        """
        position = len(self.stores)
        store_id = resolve_id(record.department_code, f"{self.code}:dept-{position}")
        self.stores.append(
            Store(
                id=store_id,
                name=record.department_name or record.zone_name or UNNAMED_STORE,
                sqm=record.sqm,
                longitude=record.longitude,
                latitude=record.latitude,
                address=record.address,
                format=record.format,
                city_name=record.city_name,
                area_code=record.area_code,
                area_name=record.area_name,
                zone_code=self.code,
                zone_name=self.name,
                region_code=record.region_code,
                region_name=record.region_name,
            )
        )
        if record.city_name:
            self.cities.add(record.city_name)
        if record.area_name:
            self.areas.add(record.area_name)
        if record.region_name:
            self.region_names.add(record.region_name)

    def to_zone(self, provided: bool) -> Zone:
        """Freeze the group.

        Args:
            provided: True when the key came from an upstream zone code.

        Returns:
            Zone with sorted, de-duplicated name sets.
        """
        zone_id: ExternalId = ProvidedId(self.code) if provided else SynthesizedId(self.code)
        return Zone(
            id=zone_id,
            name=self.name,
            stores=tuple(self.stores),
            cities=_sorted_names(self.cities),
            areas=_sorted_names(self.areas),
            region_names=_sorted_names(self.region_names),
        )


def build_zones(zone_records: Sequence[ZoneRecord]) -> List[Zone]:
    """Group zone records by canonical zone key, one store per record."""
    groups: "OrderedDict[str, _ZoneGroup]" = OrderedDict()
    provided: Dict[str, bool] = {}
    for record in zone_records:
        key = zone_key(record)
        group = groups.get(key)
        if group is None:
            group = _ZoneGroup(code=key, name=record.zone_name or UNASSIGNED_ZONE)
            groups[key] = group
            provided[key] = bool(record.zone_code)
        group.add(record)
    return [group.to_zone(provided[key]) for key, group in groups.items()]


def build_cities(city_records: Sequence[CityRecord], stores: Sequence[Store]) -> List[City]:
    """City metrics from area-derived stores grouped by normalized city name.

    Listed cities without stores get all-zero metrics. A city without a name
    is kept under UNKNOWN_CITY, and a missing code becomes ``city-{position}``.
    """
    grouped: Dict[str, List[Store]] = {}
    area_names: Dict[str, Set[str]] = {}
    for store in stores:
        key = normalize_key(store.city_name)
        if not key:
            continue
        grouped.setdefault(key, []).append(store)
        if store.area_name:
            area_names.setdefault(key, set()).add(store.area_name)

    cities = []
    for position, record in enumerate(city_records):
        key = normalize_key(record.city_name)
        if record.city_name is None:
            logger.warning(f"City record {position} has no name, listed as {UNKNOWN_CITY}")
        cities.append(
            City(
                code=record.city_code if record.city_code is not None else f"city-{position}",
                name=record.city_name or UNKNOWN_CITY,
                metrics=NetworkMetrics.from_stores(grouped.get(key, ())),
                area_count=len(area_names.get(key, ())),
            )
        )
    return cities


def aggregate(
    cities: Iterable[Union[CityRecord, Dict[str, Any]]],
    area_records: Iterable[Union[AreaRecord, Dict[str, Any]]],
    zone_records: Iterable[Union[ZoneRecord, Dict[str, Any]]],
) -> NetworkSnapshot:
    """Build the network snapshot from the three core feeds.

    Pure and deterministic: the same inputs always produce the same snapshot.

    Args:
        cities: City list feed.
        area_records: Area-grouped department feed.
        zone_records: Zone/region-tagged department feed.

    Returns:
        NetworkSnapshot with sorted cities, areas, zones and the store catalog.
    """
    city_list = _coerce(CityRecord, cities)
    area_list = _coerce(AreaRecord, area_records)
    zone_list = _coerce(ZoneRecord, zone_records)

    zone_index = build_zone_index(zone_list)
    areas = [build_area(record, zone_index) for record in area_list]
    zones = build_zones(zone_list)

    area_stores = [store for area in areas for store in area.stores]
    city_items = build_cities(city_list, area_stores)
    catalog = StoreCatalog(area_stores)

    logger.info(
        f"Aggregated {len(city_items)} cities, {len(areas)} areas, "
        f"{len(zones)} zones, {len(catalog)} stores"
    )

    return NetworkSnapshot(
        cities=sort_by_store_count(city_items),
        areas=sort_by_store_count(areas),
        zones=sort_by_store_count(zones),
        catalog=catalog,
    )
