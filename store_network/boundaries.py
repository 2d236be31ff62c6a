"""City boundary geometry document (GeoJSON FeatureCollection)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from store_network.config import BOUNDARY_NAME_KEYS
from store_network.normalize import clean_string, normalize_key

logger = logging.getLogger(__name__)

Position = Sequence[float]


@dataclass(frozen=True)
class Bounds:
    west: float
    south: float
    east: float
    north: float

    def as_list(self) -> List[List[float]]:
        """``[[west, south], [east, north]]`` as expected by fitBounds."""
        return [[self.west, self.south], [self.east, self.north]]

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.west + self.east) / 2, (self.south + self.north) / 2)


def iter_ring_positions(geometry: Optional[Dict[str, Any]]) -> Iterator[Position]:
    """Yield every ring coordinate of a Polygon or MultiPolygon.

    Other geometry types yield nothing.
    """
    if not geometry:
        return
    geometry_type = geometry.get("type")
    coordinates = geometry.get("coordinates") or []
    if geometry_type == "Polygon":
        polygons = [coordinates]
    elif geometry_type == "MultiPolygon":
        polygons = coordinates
    else:
        return
    for polygon in polygons:
        for ring in polygon:
            for position in ring:
                if len(position) >= 2:
                    yield position


def compute_bounds(geometries: Iterable[Optional[Dict[str, Any]]]) -> Optional[Bounds]:
    """Componentwise min/max over all ring coordinates; None when empty."""
    west = south = float("inf")
    east = north = float("-inf")
    found = False
    for geometry in geometries:
        for position in iter_ring_positions(geometry):
            lon, lat = float(position[0]), float(position[1])
            west, east = min(west, lon), max(east, lon)
            south, north = min(south, lat), max(north, lat)
            found = True
    if not found:
        return None
    return Bounds(west=west, south=south, east=east, north=north)


class BoundaryDocument:
    """Wraps the boundary FeatureCollection and resolves names against it.

    Attributes:
        data: The raw GeoJSON document.
        name_key: Feature property holding the city name.
    """

    def __init__(self, data: Dict[str, Any]):
        self.data = data
        self.features: List[Dict[str, Any]] = list(data.get("features") or [])
        self.name_key = self._detect_name_key()

    def __len__(self) -> int:
        return len(self.features)

    def _detect_name_key(self) -> Optional[str]:
        if not self.features:
            return None
        properties = self.features[0].get("properties") or {}
        for key in BOUNDARY_NAME_KEYS:
            if properties.get(key):
                return key
        keys = list(properties.keys())
        if not keys:
            logger.warning("Boundary features carry no properties")
            return None
        return keys[0]

    def feature_name(self, feature: Dict[str, Any]) -> str:
        if self.name_key is None:
            return ""
        return clean_string((feature.get("properties") or {}).get(self.name_key))

    def names(self) -> List[str]:
        return [name for name in (self.feature_name(f) for f in self.features) if name]

    def matching_features(self, targets: Iterable[str]) -> List[Dict[str, Any]]:
        """Features whose normalized name is in ``targets`` (already normalized)."""
        wanted = frozenset(targets)
        if not wanted:
            return []
        return [f for f in self.features if normalize_key(self.feature_name(f)) in wanted]

    def matching_names(self, targets: Iterable[str]) -> List[str]:
        """Raw document names matching ``targets``, de-duplicated, in document order."""
        seen = []
        for feature in self.matching_features(targets):
            name = self.feature_name(feature)
            if name not in seen:
                seen.append(name)
        return seen

    def bounds_for(self, targets: Iterable[str]) -> Optional[Bounds]:
        return compute_bounds(f.get("geometry") for f in self.matching_features(targets))
