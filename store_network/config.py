"""Configuration for the store network dashboard core.

Settings can be overridden with ``STORE_NETWORK_*`` environment variables or
a ``.env`` file; map constants live at module level.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Zoom thresholds
LABEL_ZOOM_THRESHOLD = 12.0
CLOSE_ZOOM_THRESHOLD = 14.5

# Home viewport (lon, lat)
HOME_CENTER: Tuple[float, float] = (21.0, 42.6)
HOME_ZOOM = 7.5
FIT_PADDING_PX = 48
CAMERA_DURATION_MS = 1200

# Map sources
BOUNDARY_SOURCE = "city-boundaries"
STORE_SOURCE = "stores"
BUSINESS_SOURCE = "businesses"

# Map layers
BOUNDARY_FILL_LAYER = "city-fill"
BOUNDARY_HIGHLIGHT_LAYER = "city-highlight"
BOUNDARY_LABEL_LAYER = "city-labels"
CLUSTER_LAYER = "clusters"
CLUSTER_COUNT_LAYER = "cluster-count"
STORE_POINT_LAYER = "store-points"
STORE_HIGHLIGHT_LAYER = "store-highlight"
STORE_LABEL_LAYER = "store-labels"
BUSINESS_POINT_LAYER = "business-points"
BUSINESS_LABEL_LAYER = "business-labels"

# Paint
BOUNDARY_BASE_COLOR = "#4b5563"
BOUNDARY_HIGHLIGHT_COLOR = "#facc15"
BOUNDARY_BASE_OPACITY = 0.35
BOUNDARY_SELECTED_OPACITY = 0.6
BOUNDARY_DIMMED_OPACITY = 0.15
STORE_COLOR = "#ef4444"
STORE_HIGHLIGHT_COLOR = "#f97316"
STORE_OPACITY = 1.0
STORE_DIMMED_OPACITY = 0.25

# Business categories
ALL_CATEGORIES = "all"
PREFERRED_CATEGORY = "supermarket"

# Boundary name properties, in detection order
BOUNDARY_NAME_KEYS = ("VARNAME_2", "NAME_2", "NAME")

DATA_ERROR_MESSAGE = "Unable to load network insights. Please retry."


class DashboardSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STORE_NETWORK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_base_url: str = Field(
        default="http://localhost:4000/api",
        description="Base URL of the network API",
    )
    boundaries_url: str = Field(
        default="http://localhost:5173/kosovo-cities.geojson",
        description="Static city boundary GeoJSON document",
    )
    request_timeout: float = 10.0
    label_zoom: float = LABEL_ZOOM_THRESHOLD
    close_zoom: float = CLOSE_ZOOM_THRESHOLD


@lru_cache()
def get_settings() -> DashboardSettings:
    return DashboardSettings()
