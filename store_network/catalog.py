"""Deduplicated store catalog consumed by the map engine."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from store_network.models import Store
from store_network.normalize import normalize_key
from store_network.selection import SelectionTargets

logger = logging.getLogger(__name__)


class StoreCatalog:
    """Stores keyed by code; only the first occurrence of a code is kept."""

    def __init__(self, stores: Iterable[Store] = ()):
        self._stores: Dict[str, Store] = {}
        duplicates = 0
        for store in stores:
            if store.code in self._stores:
                duplicates += 1
                continue
            self._stores[store.code] = store
        if duplicates:
            logger.debug(f"Skipped {duplicates} duplicate store codes")

    def __len__(self) -> int:
        return len(self._stores)

    def __iter__(self) -> Iterator[Store]:
        return iter(self._stores.values())

    def __contains__(self, code: object) -> bool:
        return code in self._stores

    def __repr__(self) -> str:
        return f"StoreCatalog({len(self)} stores)"

    def get(self, code: str) -> Optional[Store]:
        return self._stores.get(code)

    def geocoded(self) -> List[Store]:
        return [store for store in self if store.is_geocoded]

    def matching(self, targets: SelectionTargets) -> List[Store]:
        """Stores matching a selection by zone, then area, then city."""
        if targets.empty:
            return []
        return [
            store
            for store in self
            if targets.matches(zone=store.zone_name, area=store.area_name, city=store.city_name)
        ]

    def to_feature_collection(self) -> Dict[str, Any]:
        """GeoJSON points for every geocoded store."""
        features = [
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": list(store.coordinates)},
                "properties": {
                    "code": store.code,
                    "name": store.name,
                    "city": store.city_name,
                    "area": store.area_name,
                    "zone": store.zone_name,
                    "cityKey": normalize_key(store.city_name),
                    "sqm": store.sqm,
                    "format": store.format,
                },
            }
            for store in self.geocoded()
        ]
        return {"type": "FeatureCollection", "features": features}
