"""Nearby business enrichment: store feed -> business POIs."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Union

from store_network.models import BusinessPoi
from store_network.normalize import humanize_category, normalize_category
from store_network.records import StoreWithBusinessesRecord

logger = logging.getLogger(__name__)

UNKNOWN_BUSINESS = "Unknown"
UNKNOWN_AREA = "Unknown area"


def build_business_pois(
    stores: Iterable[Union[StoreWithBusinessesRecord, Dict[str, Any]]],
) -> List[BusinessPoi]:
    """Flatten each store's nearby businesses into POIs.

    Businesses missing either coordinate are skipped. Area, city and zone
    names are copied from the owning store.

    Args:
        stores: Records from the stores-with-businesses feed.

    Returns:
        List of BusinessPoi objects in feed order.
    """
    pois: List[BusinessPoi] = []
    skipped = 0
    for raw in stores:
        store = (
            raw
            if isinstance(raw, StoreWithBusinessesRecord)
            else StoreWithBusinessesRecord.model_validate(raw)
        )
        for position, business in enumerate(store.nearby_businesses):
            if business.latitude is None or business.longitude is None:
                skipped += 1
                continue
            pois.append(
                BusinessPoi(
                    id=business.osm_id if business.osm_id is not None else f"{store.department_code}:poi-{position}",
                    name=business.name or UNKNOWN_BUSINESS,
                    category=normalize_category(business.category),
                    latitude=business.latitude,
                    longitude=business.longitude,
                    address=business.address,
                    store_code=store.department_code,
                    store_name=store.department_name,
                    area_name=store.area_name or UNKNOWN_AREA,
                    city_name=store.city_name,
                    zone_name=store.zone_name,
                )
            )
    if skipped:
        logger.debug(f"Skipped {skipped} nearby businesses without coordinates")
    return pois


def poi_feature(poi: BusinessPoi) -> Dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [poi.longitude, poi.latitude]},
        "properties": {
            "id": poi.id,
            "name": poi.name,
            "category": poi.category,
            "categoryLabel": humanize_category(poi.category),
            "address": poi.address,
            "storeDepartment": poi.store_name,
            "areaName": poi.area_name,
            "cityName": poi.city_name,
            "zoneName": poi.zone_name,
        },
    }


def to_feature_collection(pois: Iterable[BusinessPoi]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": [poi_feature(poi) for poi in pois]}


def categories_of(pois: Iterable[BusinessPoi]) -> List[str]:
    """Sorted distinct categories."""
    return sorted({poi.category for poi in pois})
