"""Sidebar text and selection summaries."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from store_network.aggregator import Item, NetworkSnapshot
from store_network.models import Area, City, NetworkMetrics, Store, Zone
from store_network.normalize import clean_string
from store_network.selection import (
    AreaSelection,
    BrowseMode,
    Selection,
    ZoneSelection,
    targets_for,
)

SEPARATOR = " • "


@dataclass(frozen=True)
class SelectionSummary:
    label: str
    store_count: int
    total_sqm: float
    geocoded_count: int
    geo_coverage: int
    top_formats: Tuple[Tuple[str, int], ...] = ()


def format_number(value: Union[int, float]) -> str:
    """en-US grouping with at most three decimals: 1200.5 -> '1,200.5'."""
    text = f"{value:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def plural(count: int, singular: str, plural_form: str = "") -> str:
    return f"{count} {singular if count == 1 else (plural_form or singular + 's')}"


def _coverage(item: Item) -> str:
    coverage = round(item.geocoded_count / item.store_count * 100)
    return f"Geo {item.geocoded_count}/{item.store_count} ({coverage}%)"


def describe_item(item: Item) -> str:
    """Secondary sidebar text, e.g. ``2 stores • 1 area • 1,200 m² • Geo 2/2 (100%)``."""
    parts = [plural(item.store_count, "store")]

    if isinstance(item, City):
        if item.area_count > 0:
            parts.append(plural(item.area_count, "area"))
    elif isinstance(item, Area):
        parts.append(plural(len(item.cities), "city", "cities"))
    else:
        parts.append(plural(len(item.areas), "area"))
        if item.cities:
            parts.append(plural(len(item.cities), "city", "cities"))

    if item.total_sqm > 0:
        parts.append(f"{format_number(item.total_sqm)} m²")
    if item.store_count > 0:
        parts.append(_coverage(item))

    if isinstance(item, Area) and item.zone_names:
        parts.append(
            f"Zone {item.zone_names[0]}"
            if len(item.zone_names) == 1
            else f"{len(item.zone_names)} zones"
        )
    elif isinstance(item, Zone) and item.region_names:
        parts.append(
            f"Region {item.region_names[0]}"
            if len(item.region_names) == 1
            else f"{len(item.region_names)} regions"
        )

    return SEPARATOR.join(parts)


def summarize_items_by_mode(mode: BrowseMode, snapshot: NetworkSnapshot) -> str:
    count = len(snapshot.items_for(mode))
    mode = BrowseMode(mode)
    if mode is BrowseMode.CITY:
        return plural(count, "city", "cities")
    if mode is BrowseMode.AREA:
        return plural(count, "area")
    return plural(count, "zone")


def top_formats(stores: Sequence[Store], top_n: int = 3) -> Tuple[Tuple[str, int], ...]:
    """Most frequent store formats, ties broken by name."""
    counts = Counter(clean_string(store.format) for store in stores if clean_string(store.format))
    ranked = sorted(counts.items(), key=lambda pair: (-pair[1], pair[0]))
    return tuple(ranked[:top_n])


def selected_stores(selection: Selection, snapshot: NetworkSnapshot) -> List[Store]:
    """Stores behind a selection; the whole catalog when nothing is selected."""
    if not selection.active:
        return list(snapshot.catalog)
    if isinstance(selection, AreaSelection):
        area = snapshot.find_area(selection.name)
        if area is not None:
            return list(area.stores)
    elif isinstance(selection, ZoneSelection):
        zone = snapshot.find_zone(selection.name)
        if zone is not None:
            return list(zone.stores)
    return snapshot.catalog.matching(targets_for(selection))


def summarize_selection(
    selection: Selection,
    snapshot: NetworkSnapshot,
    top_n: int = 3,
) -> SelectionSummary:
    """Summarize the stores behind the current selection.

    Args:
        selection: Current selection.
        snapshot: Latest network snapshot.
        top_n: Number of formats to report.

    Returns:
        SelectionSummary with counts, area, coverage and top formats.
    """
    stores = selected_stores(selection, snapshot)
    metrics = NetworkMetrics.from_stores(stores)
    return SelectionSummary(
        label=selection.label,
        store_count=metrics.store_count,
        total_sqm=metrics.total_sqm,
        geocoded_count=metrics.geocoded_count,
        geo_coverage=metrics.geo_coverage,
        top_formats=top_formats(stores, top_n),
    )
