from __future__ import annotations

from typing import List

from pydantic import BaseModel


class ModeCount(BaseModel):
    name: str
    store_count: int


class NetworkOverview(BaseModel):
    city_count: int
    area_count: int
    zone_count: int
    store_count: int
    geocoded_count: int
    geo_coverage: int
    total_sqm: float
    top_cities: List[ModeCount]
