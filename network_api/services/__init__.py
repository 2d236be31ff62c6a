from .feed_service import (
    list_area_filters,
    list_area_stores,
    list_cities,
    list_regions,
    list_stores_with_businesses,
    list_zone_stores,
    list_zones,
)
from .network_service import network_overview
from .osm_service import get_overpass_session, sync_all

__all__ = [
    "get_overpass_session",
    "list_area_filters",
    "list_area_stores",
    "list_cities",
    "list_regions",
    "list_stores_with_businesses",
    "list_zone_stores",
    "list_zones",
    "network_overview",
    "sync_all",
]
