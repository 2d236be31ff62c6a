"""Wire records served by the network API.

Field aliases are the upstream column names; snake_case names are accepted
as well so records can be built directly in Python.
"""

from __future__ import annotations

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _code_to_str(value: Any) -> Optional[str]:
    value = _blank_to_none(value)
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip() or None


class FeedRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class CityRecord(FeedRecord):
    city_code: Optional[Union[int, str]] = Field(default=None, alias="City_Code")
    city_name: Optional[str] = Field(default=None, alias="City_Name")

    @field_validator("city_code", "city_name", mode="before")
    @classmethod
    def _blank_fields(cls, value: Any) -> Any:
        return _blank_to_none(value)


class DepartmentRecord(FeedRecord):
    department_code: Optional[str] = Field(default=None, alias="Department_Code")
    department_name: Optional[str] = Field(default=None, alias="Department_Name")
    sqm: Optional[float] = Field(default=None, alias="SQM")
    longitude: Optional[float] = Field(default=None, alias="Longitude")
    latitude: Optional[float] = Field(default=None, alias="Latitude")
    address: Optional[str] = Field(default=None, alias="Adresse")
    format: Optional[str] = Field(default=None, alias="Format")
    city_name: Optional[str] = Field(default=None, alias="City_Name")
    area_code: Optional[str] = Field(default=None, alias="Area_Code")
    area_name: Optional[str] = Field(default=None, alias="Area_Name")

    @field_validator("department_code", "area_code", mode="before")
    @classmethod
    def _coerce_code(cls, value: Any) -> Optional[str]:
        return _code_to_str(value)

    @field_validator("department_name", "address", "format", "city_name", "area_name", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _blank_to_none(value)


class AreaRecord(FeedRecord):
    area_code: Optional[str] = Field(default=None, alias="Area_Code")
    area_name: Optional[str] = Field(default=None, alias="Area_Name")
    cities: List[str] = Field(default_factory=list, alias="Cities")
    departments: List[DepartmentRecord] = Field(default_factory=list, alias="Departments")

    @field_validator("area_code", mode="before")
    @classmethod
    def _coerce_code(cls, value: Any) -> Optional[str]:
        return _code_to_str(value)

    @field_validator("area_name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("cities", mode="before")
    @classmethod
    def _drop_blank_cities(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        return [city.strip() for city in value if isinstance(city, str) and city.strip()]


class AreaStoreRecord(DepartmentRecord):
    """A department row tagged with its area and the region it reports to as zone."""

    zone_code: Optional[str] = Field(default=None, alias="Zone_Code")
    zone_name: Optional[str] = Field(default=None, alias="Zone_Name")

    @field_validator("zone_code", mode="before")
    @classmethod
    def _coerce_zone_code(cls, value: Any) -> Optional[str]:
        return _code_to_str(value)

    @field_validator("zone_name", mode="before")
    @classmethod
    def _coerce_zone_name(cls, value: Any) -> Any:
        return _blank_to_none(value)


class ZoneRecord(FeedRecord):
    zone_code: Optional[str] = Field(default=None, alias="Zone_Code")
    zone_name: Optional[str] = Field(default=None, alias="Zone_Name")
    department_code: Optional[str] = Field(default=None, alias="Department_Code")
    department_name: Optional[str] = Field(default=None, alias="Department_Name")
    area_code: Optional[str] = Field(default=None, alias="Area_Code")
    area_name: Optional[str] = Field(default=None, alias="Area_Name")
    city_name: Optional[str] = Field(default=None, alias="City_Name")
    region_code: Optional[str] = Field(default=None, alias="Region_Code")
    region_name: Optional[str] = Field(default=None, alias="Region_Name")
    sqm: Optional[float] = Field(default=None, alias="SQM")
    longitude: Optional[float] = Field(default=None, alias="Longitude")
    latitude: Optional[float] = Field(default=None, alias="Latitude")
    address: Optional[str] = Field(default=None, alias="Adresse")
    format: Optional[str] = Field(default=None, alias="Format")

    @field_validator("zone_code", "department_code", "area_code", "region_code", mode="before")
    @classmethod
    def _coerce_code(cls, value: Any) -> Optional[str]:
        return _code_to_str(value)

    @field_validator(
        "zone_name",
        "department_name",
        "area_name",
        "city_name",
        "region_name",
        "address",
        "format",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _blank_to_none(value)


class NearbyBusinessRecord(FeedRecord):
    osm_id: Optional[Union[int, str]] = Field(default=None, alias="OSM_Id")
    name: Optional[str] = Field(default=None, alias="Name")
    category: Optional[str] = Field(default=None, alias="Category")
    latitude: Optional[float] = Field(default=None, alias="Latitude")
    longitude: Optional[float] = Field(default=None, alias="Longitude")
    address: Optional[str] = Field(default=None, alias="Address")

    @field_validator("name", "category", "address", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _blank_to_none(value)


class StoreWithBusinessesRecord(DepartmentRecord):
    city_code: Optional[str] = Field(default=None, alias="City_Code")
    zone_code: Optional[str] = Field(default=None, alias="Zone_Code")
    zone_name: Optional[str] = Field(default=None, alias="Zone_Name")
    region_code: Optional[str] = Field(default=None, alias="Region_Code")
    region_name: Optional[str] = Field(default=None, alias="Region_Name")
    nearby_businesses: List[NearbyBusinessRecord] = Field(
        default_factory=list, alias="NearbyBusinesses"
    )

    @field_validator("city_code", "zone_code", "region_code", mode="before")
    @classmethod
    def _coerce_tag_code(cls, value: Any) -> Optional[str]:
        return _code_to_str(value)

    @field_validator("zone_name", "region_name", mode="before")
    @classmethod
    def _coerce_tag_name(cls, value: Any) -> Any:
        return _blank_to_none(value)


class RegionRecord(FeedRecord):
    region_code: Optional[str] = Field(default=None, alias="Region_Code")
    region_name: str = Field(alias="Region_Name")

    @field_validator("region_code", mode="before")
    @classmethod
    def _coerce_code(cls, value: Any) -> Optional[str]:
        return _code_to_str(value)
