"""Domain entities of the store network.

Entities are immutable snapshots rebuilt wholesale on every data refresh.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cached_property
from typing import Iterable, Optional, Tuple, Union

from store_network.normalize import clean_string


@dataclass(frozen=True)
class ProvidedId:
    """Identifier supplied by the upstream feed."""
    value: str


@dataclass(frozen=True)
class SynthesizedId:
    """Identifier derived locally because the upstream code was missing."""
    value: str


ExternalId = Union[ProvidedId, SynthesizedId]


def resolve_id(raw: object, fallback: str) -> ExternalId:
    """Return the provided code when usable, otherwise a synthesized one.

    Args:
        raw: Code as received from the feed (may be None, blank or numeric).
        fallback: Deterministic key to use when ``raw`` is blank.

    Returns:
        ProvidedId or SynthesizedId.
    """
    code = clean_string(raw)
    if code:
        return ProvidedId(code)
    return SynthesizedId(fallback)


@dataclass(frozen=True)
class NetworkMetrics:
    store_count: int = 0
    total_sqm: float = 0
    geocoded_count: int = 0

    @property
    def geo_coverage(self) -> int:
        """Percentage of geocoded stores, rounded."""
        if self.store_count == 0:
            return 0
        return round(self.geocoded_count / self.store_count * 100)

    @classmethod
    def from_stores(cls, stores: Iterable["Store"]) -> "NetworkMetrics":
        store_count = 0
        total_sqm: float = 0
        geocoded_count = 0
        for store in stores:
            store_count += 1
            total_sqm += store.sqm or 0
            if store.is_geocoded:
                geocoded_count += 1
        return cls(store_count=store_count, total_sqm=total_sqm, geocoded_count=geocoded_count)


@dataclass(frozen=True)
class Store:
    """A retail location (department).

    Attributes:
        id: Typed identifier; ``code`` is its string key.
        name: Display name.
        sqm: Sales area in square meters.
        longitude: Longitude, geocoded only together with latitude.
        latitude: Latitude.
        address: Street address.
        format: Store format (e.g. "Hyper", "Express").
        city_name: City tag.
        area_code: Owning area code.
        area_name: Owning area name.
        zone_code: Zone code; equals the store code when no zone matched.
        zone_name: Zone name; None means explicitly "no zone".
        region_code: Region code from the zone feed.
        region_name: Region name from the zone feed.
    """
    id: ExternalId
    name: str
    sqm: Optional[float] = None
    longitude: Optional[float] = None
    latitude: Optional[float] = None
    address: Optional[str] = None
    format: Optional[str] = None
    city_name: Optional[str] = None
    area_code: Optional[str] = None
    area_name: Optional[str] = None
    zone_code: Optional[str] = None
    zone_name: Optional[str] = None
    region_code: Optional[str] = None
    region_name: Optional[str] = None

    @property
    def code(self) -> str:
        return self.id.value

    @property
    def is_geocoded(self) -> bool:
        return self.longitude is not None and self.latitude is not None

    @property
    def coordinates(self) -> Optional[Tuple[float, float]]:
        if not self.is_geocoded:
            return None
        return (self.longitude, self.latitude)

    def __repr__(self) -> str:
        return f"Store({self.code}, {self.name}, {self.city_name or '-'})"


@dataclass(frozen=True)
class City:
    code: Optional[Union[int, str]]
    name: str
    metrics: NetworkMetrics = field(default_factory=NetworkMetrics)
    area_count: int = 0

    @property
    def store_count(self) -> int:
        return self.metrics.store_count

    @property
    def total_sqm(self) -> float:
        return self.metrics.total_sqm

    @property
    def geocoded_count(self) -> int:
        return self.metrics.geocoded_count


@dataclass(frozen=True)
class _StoreGroup:
    """Shared behaviour of entities whose metrics derive from their stores."""
    id: ExternalId
    name: str
    stores: Tuple[Store, ...] = ()

    @property
    def code(self) -> str:
        return self.id.value

    @cached_property
    def metrics(self) -> NetworkMetrics:
        return NetworkMetrics.from_stores(self.stores)

    @property
    def store_count(self) -> int:
        return self.metrics.store_count

    @property
    def total_sqm(self) -> float:
        return self.metrics.total_sqm

    @property
    def geocoded_count(self) -> int:
        return self.metrics.geocoded_count


@dataclass(frozen=True)
class Area(_StoreGroup):
    """Commercial district; ``cities`` is declared upstream and not reconciled."""
    cities: Tuple[str, ...] = ()
    zone_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Zone(_StoreGroup):
    """Top-level grouping; every name set is derived from its stores."""
    cities: Tuple[str, ...] = ()
    areas: Tuple[str, ...] = ()
    region_names: Tuple[str, ...] = ()


@dataclass(frozen=True)
class BusinessPoi:
    """A nearby third-party business.

    Area/city/zone names are copied from the store the business was found
    near at ingestion time.
    """
    id: Union[int, str]
    name: str
    category: str
    latitude: float
    longitude: float
    address: Optional[str] = None
    store_code: Optional[str] = None
    store_name: Optional[str] = None
    area_name: Optional[str] = None
    city_name: Optional[str] = None
    zone_name: Optional[str] = None

    def __repr__(self) -> str:
        return f"BusinessPoi({self.id}, {self.name}, {self.category})"
