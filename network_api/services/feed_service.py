"""Query/reshape services behind the read-only feeds."""

import logging
import re
from collections import OrderedDict
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from store_network.aggregator import UNASSIGNED_ZONE, UNKNOWN_AREA, UNNAMED_STORE
from store_network.normalize import clean_string, strip_area_prefix

from ..config import RETAIL_CATEGORIES
from ..models import OrgUnitArea, StoreNearbyBusiness, StoreSqm
from ..schemas import (
    AreaRecord,
    AreaStoreRecord,
    CityRecord,
    DepartmentRecord,
    NearbyBusinessRecord,
    RegionRecord,
    StoreWithBusinessesRecord,
    ZoneRecord,
)

logger = logging.getLogger(__name__)


def _department_query():
    return (
        select(OrgUnitArea, StoreSqm)
        .join(StoreSqm, StoreSqm.department_code == OrgUnitArea.department_code, isouter=True)
    )


def _store_fields(org: OrgUnitArea, sqm: StoreSqm) -> Dict:
    return {
        "department_code": org.department_code,
        "department_name": org.department_name,
        "city_name": clean_string(org.city_name) or None,
        "area_code": org.area_code,
        "area_name": strip_area_prefix(org.area_name) or None,
        "sqm": sqm.sqm if sqm else None,
        "longitude": sqm.longitude if sqm else None,
        "latitude": sqm.latitude if sqm else None,
        "address": sqm.address if sqm else None,
        "format": sqm.format if sqm else None,
    }


def list_cities(db: Session) -> List[CityRecord]:
    city_name = func.trim(OrgUnitArea.city_name).label("city_name")
    query = (
        select(OrgUnitArea.city_code, city_name)
        .where(OrgUnitArea.city_name.is_not(None))
        .distinct()
        .order_by(city_name)
    )
    cities = []
    seen = set()
    for row in db.execute(query):
        key = (clean_string(row.city_code), row.city_name)
        if not row.city_name or key in seen:
            continue
        seen.add(key)
        cities.append(CityRecord(city_code=row.city_code, city_name=row.city_name))
    return cities


def list_regions(db: Session) -> List[RegionRecord]:
    query = (
        select(OrgUnitArea.region_code, OrgUnitArea.region_name)
        .where(OrgUnitArea.region_name.is_not(None))
        .distinct()
        .order_by(OrgUnitArea.region_name)
    )
    return [
        RegionRecord(region_code=row.region_code, region_name=row.region_name.strip())
        for row in db.execute(query)
    ]


def list_area_filters(db: Session) -> List[AreaRecord]:
    """Departments grouped by area code, with the cities each area declares."""
    query = (
        _department_query()
        .where(OrgUnitArea.area_name.is_not(None))
        .order_by(OrgUnitArea.area_code, OrgUnitArea.department_name)
    )

    grouped: "OrderedDict[str, Dict]" = OrderedDict()
    for org, sqm in db.execute(query):
        group = grouped.setdefault(
            org.area_code,
            {
                "area_code": org.area_code,
                "area_name": strip_area_prefix(org.area_name),
                "cities": [],
                "departments": [],
            },
        )
        city = clean_string(org.city_name)
        if city and city not in group["cities"]:
            group["cities"].append(city)
        group["departments"].append(DepartmentRecord(**_store_fields(org, sqm)))

    return [AreaRecord(**group) for group in grouped.values()]


def _fallback_area_code(area_name: str) -> str:
    return "AREA_" + re.sub(r"\s+", "_", area_name).upper()


def list_area_stores(db: Session) -> List[AreaStoreRecord]:
    """Flat area-tagged department records; the region doubles as zone.

    Blank names and codes are filled in so every row can be keyed: the area
    code falls back to ``AREA_<NAME>`` and the department code to
    ``<area code>-UNKNOWN``.
    """
    query = (
        _department_query()
        .where(OrgUnitArea.area_name.is_not(None), OrgUnitArea.department_name.is_not(None))
        .order_by(OrgUnitArea.region_code, OrgUnitArea.area_code, OrgUnitArea.department_code)
    )
    records = []
    for org, sqm in db.execute(query):
        fields = _store_fields(org, sqm)
        area_name = fields["area_name"] or UNKNOWN_AREA
        area_code = clean_string(org.area_code) or _fallback_area_code(area_name)
        fields.update(
            area_name=area_name,
            area_code=area_code,
            department_code=clean_string(org.department_code) or f"{area_code}-UNKNOWN",
            department_name=clean_string(org.department_name) or UNNAMED_STORE,
        )
        records.append(
            AreaStoreRecord(
                zone_code=clean_string(org.region_code) or None,
                zone_name=clean_string(org.region_name) or UNASSIGNED_ZONE,
                **fields,
            )
        )
    logger.debug(f"Area stores feed: {len(records)} departments")
    return records


def _zone_record(org: OrgUnitArea, sqm: StoreSqm) -> ZoneRecord:
    return ZoneRecord(
        zone_code=org.zone_code,
        zone_name=clean_string(org.zone_name) or None,
        region_code=org.region_code,
        region_name=clean_string(org.region_name) or None,
        **_store_fields(org, sqm),
    )


def list_zones(db: Session) -> List[ZoneRecord]:
    """Flat zone/region-tagged department records."""
    query = (
        _department_query()
        .where(OrgUnitArea.zone_name.is_not(None))
        .order_by(OrgUnitArea.zone_code, OrgUnitArea.department_name)
    )
    return [_zone_record(org, sqm) for org, sqm in db.execute(query)]


def _businesses_by_store(db: Session) -> Dict[str, List[NearbyBusinessRecord]]:
    query = (
        select(StoreNearbyBusiness)
        .where(StoreNearbyBusiness.category.in_(RETAIL_CATEGORIES))
        .order_by(StoreNearbyBusiness.category, StoreNearbyBusiness.name)
    )
    grouped: Dict[str, List[NearbyBusinessRecord]] = {}
    for business in db.scalars(query):
        grouped.setdefault(business.store_department_code, []).append(
            NearbyBusinessRecord(
                osm_id=business.osm_id,
                name=business.name,
                category=business.category,
                latitude=business.latitude,
                longitude=business.longitude,
                address=business.address,
            )
        )
    return grouped


def list_stores_with_businesses(db: Session) -> List[StoreWithBusinessesRecord]:
    """One record per department with its retail-category nearby businesses."""
    query = (
        _department_query()
        .where(OrgUnitArea.area_name.is_not(None))
        .order_by(OrgUnitArea.area_code, OrgUnitArea.department_code)
    )
    businesses = _businesses_by_store(db)
    records = [
        StoreWithBusinessesRecord(
            city_code=org.city_code,
            zone_code=org.zone_code,
            zone_name=clean_string(org.zone_name) or None,
            region_code=org.region_code,
            region_name=clean_string(org.region_name) or None,
            nearby_businesses=businesses.get(org.department_code, []),
            **_store_fields(org, sqm),
        )
        for org, sqm in db.execute(query)
    ]
    logger.info(
        f"Combined feed: {len(records)} stores, "
        f"{sum(len(r.nearby_businesses) for r in records)} nearby businesses"
    )
    return records


def list_zone_stores(db: Session, zone_code: str) -> Optional[List[ZoneRecord]]:
    """Departments of one zone; None when the zone code is unknown."""
    query = (
        _department_query()
        .where(OrgUnitArea.zone_code == zone_code)
        .order_by(OrgUnitArea.department_name)
    )
    rows = db.execute(query).all()
    if not rows:
        return None
    return [_zone_record(org, sqm) for org, sqm in rows]
