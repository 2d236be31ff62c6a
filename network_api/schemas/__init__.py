from store_network.records import (
    AreaRecord,
    AreaStoreRecord,
    CityRecord,
    DepartmentRecord,
    NearbyBusinessRecord,
    RegionRecord,
    StoreWithBusinessesRecord,
    ZoneRecord,
)

from .network import ModeCount, NetworkOverview
from .osm import OsmSyncResult

__all__ = [
    "AreaRecord",
    "AreaStoreRecord",
    "CityRecord",
    "DepartmentRecord",
    "ModeCount",
    "NearbyBusinessRecord",
    "NetworkOverview",
    "OsmSyncResult",
    "RegionRecord",
    "StoreWithBusinessesRecord",
    "ZoneRecord",
]
