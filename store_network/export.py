"""CSV export of an aggregated network snapshot."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

import pandas as pd

from store_network.aggregator import NetworkSnapshot
from store_network.models import SynthesizedId

logger = logging.getLogger(__name__)


def cities_frame(snapshot: NetworkSnapshot) -> pd.DataFrame:
    rows = [
        {
            "code": city.code,
            "name": city.name,
            "store_count": city.store_count,
            "area_count": city.area_count,
            "total_sqm": city.total_sqm,
            "geocoded_count": city.geocoded_count,
            "geo_coverage": city.metrics.geo_coverage,
        }
        for city in snapshot.cities
    ]
    return pd.DataFrame(rows, columns=[
        "code", "name", "store_count", "area_count", "total_sqm", "geocoded_count", "geo_coverage",
    ])


def areas_frame(snapshot: NetworkSnapshot) -> pd.DataFrame:
    rows = [
        {
            "code": area.code,
            "name": area.name,
            "store_count": area.store_count,
            "total_sqm": area.total_sqm,
            "geocoded_count": area.geocoded_count,
            "cities": "; ".join(area.cities),
            "zones": "; ".join(area.zone_names),
        }
        for area in snapshot.areas
    ]
    return pd.DataFrame(rows, columns=[
        "code", "name", "store_count", "total_sqm", "geocoded_count", "cities", "zones",
    ])


def zones_frame(snapshot: NetworkSnapshot) -> pd.DataFrame:
    rows = [
        {
            "code": zone.code,
            "name": zone.name,
            "store_count": zone.store_count,
            "total_sqm": zone.total_sqm,
            "geocoded_count": zone.geocoded_count,
            "cities": "; ".join(zone.cities),
            "areas": "; ".join(zone.areas),
            "regions": "; ".join(zone.region_names),
        }
        for zone in snapshot.zones
    ]
    return pd.DataFrame(rows, columns=[
        "code", "name", "store_count", "total_sqm", "geocoded_count", "cities", "areas", "regions",
    ])


def stores_frame(snapshot: NetworkSnapshot) -> pd.DataFrame:
    rows = [
        {
            "code": store.code,
            "synthesized_code": isinstance(store.id, SynthesizedId),
            "name": store.name,
            "sqm": store.sqm,
            "lon": store.longitude,
            "lat": store.latitude,
            "address": store.address,
            "format": store.format,
            "city_name": store.city_name,
            "area_name": store.area_name,
            "zone_name": store.zone_name,
            "region_name": store.region_name,
        }
        for store in snapshot.catalog
    ]
    return pd.DataFrame(rows, columns=[
        "code", "synthesized_code", "name", "sqm", "lon", "lat", "address", "format",
        "city_name", "area_name", "zone_name", "region_name",
    ])


def export_snapshot_to_csv(snapshot: NetworkSnapshot, output_dir: Path) -> Dict[str, Path]:
    """Write cities.csv, areas.csv, zones.csv and stores.csv.

    Args:
        snapshot: Aggregated network snapshot.
        output_dir: Target directory; created when missing.

    Returns:
        Mapping of table name to written CSV path.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    frames = {
        "cities": cities_frame(snapshot),
        "areas": areas_frame(snapshot),
        "zones": zones_frame(snapshot),
        "stores": stores_frame(snapshot),
    }

    paths: Dict[str, Path] = {}
    for name, df in frames.items():
        path = output_dir / f"{name}.csv"
        df.to_csv(path, index=False, encoding="utf-8-sig")
        logger.info(f"Exported {len(df)} {name} to {path}")
        paths[name] = path
    return paths
