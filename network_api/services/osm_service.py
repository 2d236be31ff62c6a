"""OpenStreetMap (Overpass) sync of businesses near each geocoded store."""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List

import requests
from requests.adapters import HTTPAdapter
from sqlalchemy import select
from sqlalchemy.orm import Session
from urllib3.util.retry import Retry

from ..config import Settings
from ..models import StoreNearbyBusiness, StoreSqm
from ..schemas import NearbyBusinessRecord, OsmSyncResult

logger = logging.getLogger(__name__)


def create_overpass_session() -> requests.Session:
    """Requests session with retry logic for the Overpass API.

    Overpass queries are read-only, so POST is retried like GET.
    """
    session = requests.Session()

    retry_strategy = Retry(
        total=3,
        backoff_factor=1,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["GET", "POST"],
    )

    adapter = HTTPAdapter(max_retries=retry_strategy)
    session.mount("https://", adapter)
    session.mount("http://", adapter)

    return session


def get_overpass_session():
    session = create_overpass_session()
    try:
        yield session
    finally:
        session.close()


def build_overpass_query(lat: float, lon: float, radius: int) -> str:
    return (
        "[out:json];\n"
        "(\n"
        f'  node["amenity"](around:{radius},{lat},{lon});\n'
        f'  node["shop"](around:{radius},{lat},{lon});\n'
        ");\n"
        "out body;\n"
    )


def parse_overpass_elements(data: Dict[str, Any]) -> List[NearbyBusinessRecord]:
    """Tagged nodes of an Overpass response as business records."""
    businesses = []
    for element in data.get("elements") or []:
        tags = element.get("tags")
        if element.get("type") != "node" or not tags:
            continue
        businesses.append(
            NearbyBusinessRecord(
                osm_id=element.get("id"),
                name=tags.get("name") or "Unknown",
                category=tags.get("amenity") or tags.get("shop") or "other",
                latitude=element.get("lat"),
                longitude=element.get("lon"),
                address=tags.get("addr:street"),
            )
        )
    return businesses


def fetch_nearby_businesses(
    session: requests.Session,
    settings: Settings,
    lat: float,
    lon: float,
) -> List[NearbyBusinessRecord]:
    """Query Overpass around one point; failures are logged and yield nothing."""
    query = build_overpass_query(lat, lon, settings.nearby_radius_m)
    try:
        response = session.post(settings.overpass_url, data=query, timeout=settings.overpass_timeout_s)
        response.raise_for_status()
        return parse_overpass_elements(response.json())
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Failed fetching OSM data at [{lat},{lon}]: {e}")
        return []


def save_businesses(db: Session, department_code: str, businesses: List[NearbyBusinessRecord]) -> int:
    """Upsert businesses for one store keyed by (store, OSM id)."""
    retrieved_at = datetime.now(timezone.utc)
    saved = 0
    for business in businesses:
        if business.osm_id is None:
            continue
        db.merge(
            StoreNearbyBusiness(
                store_department_code=department_code,
                osm_id=int(business.osm_id),
                name=business.name,
                category=business.category,
                latitude=business.latitude,
                longitude=business.longitude,
                address=business.address,
                retrieved_at=retrieved_at,
            )
        )
        saved += 1
    db.commit()
    return saved


def sync_all(
    db: Session,
    session: requests.Session,
    settings: Settings,
    sleep: Callable[[float], None] = time.sleep,
) -> OsmSyncResult:
    """Refresh nearby businesses for every geocoded store.

    Args:
        db: Database session.
        session: HTTP session used for Overpass queries.
        settings: API settings (Overpass URL, radius, throttle).
        sleep: Throttle function, called between stores.

    Returns:
        OsmSyncResult with the number of updated stores and businesses.
    """
    query = select(StoreSqm.department_code, StoreSqm.latitude, StoreSqm.longitude).where(
        StoreSqm.latitude.is_not(None),
        StoreSqm.longitude.is_not(None),
    )
    stores = db.execute(query).all()
    logger.info(f"Syncing nearby businesses for {len(stores)} geocoded stores")

    updated_stores = 0
    total_businesses = 0
    for index, row in enumerate(stores):
        businesses = fetch_nearby_businesses(session, settings, row.latitude, row.longitude)
        if businesses:
            saved = save_businesses(db, row.department_code, businesses)
            updated_stores += 1
            total_businesses += saved
            logger.info(f"Store {row.department_code}: {saved} businesses updated")

        if index < len(stores) - 1 and settings.overpass_throttle_s > 0:
            sleep(settings.overpass_throttle_s)

    return OsmSyncResult(updated_stores=updated_stores, total_businesses=total_businesses)
