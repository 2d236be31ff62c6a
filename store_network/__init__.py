"""Store network dashboard core.

Aggregates flat store feeds into a city/area/zone hierarchy and keeps map
layers consistent with the current selection and zoom level.
"""

from store_network.aggregator import NetworkSnapshot, aggregate
from store_network.catalog import StoreCatalog
from store_network.client import NetworkApiClient
from store_network.dashboard import Dashboard
from store_network.loader import NetworkLoader, NetworkState
from store_network.map_filters import MapFilterEngine, RenderPlan
from store_network.models import Area, BusinessPoi, City, Store, Zone
from store_network.selection import BrowseMode, SelectionModel
from store_network.viewport import ViewportController

__all__ = [
    "Area",
    "BrowseMode",
    "BusinessPoi",
    "City",
    "Dashboard",
    "MapFilterEngine",
    "NetworkApiClient",
    "NetworkLoader",
    "NetworkSnapshot",
    "NetworkState",
    "RenderPlan",
    "SelectionModel",
    "Store",
    "StoreCatalog",
    "ViewportController",
    "Zone",
    "aggregate",
]
