"""Tests for the OpenStreetMap sync."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import requests
from sqlalchemy import func, select

from network_api.config import Settings, get_settings
from network_api.main import app
from network_api.models import StoreNearbyBusiness
from network_api.services.osm_service import (
    build_overpass_query,
    fetch_nearby_businesses,
    get_overpass_session,
    parse_overpass_elements,
)

OVERPASS_RESPONSE = {
    "elements": [
        {"type": "node", "id": 901, "lat": 42.665, "lon": 21.165,
         "tags": {"name": "Maxi", "shop": "supermarket", "addr:street": "Rruga B"}},
        {"type": "node", "id": 902, "lat": 42.666, "lon": 21.166,
         "tags": {"amenity": "cafe"}},
        {"type": "node", "id": 903, "lat": 42.667, "lon": 21.167},
        {"type": "way", "id": 904, "tags": {"shop": "mall"}},
    ]
}


class FakeResponse:
    def __init__(self, data, status_code=200):
        self.data = data
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def json(self):
        return self.data


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.posts = []

    def post(self, url, data=None, timeout=None):
        self.posts.append((url, data))
        if self.error is not None:
            raise self.error
        return self.response


class TestOverpassHelpers:
    """Tests for query building and response parsing."""

    def test_query_covers_amenities_and_shops(self):
        """Test the query asks for both node kinds around the point."""
        query = build_overpass_query(42.66, 21.16, 500)

        assert 'node["amenity"](around:500,42.66,21.16);' in query
        assert 'node["shop"](around:500,42.66,21.16);' in query
        assert query.startswith("[out:json];")

    def test_parse_keeps_tagged_nodes(self):
        """Test untagged nodes and non-nodes are dropped."""
        businesses = parse_overpass_elements(OVERPASS_RESPONSE)

        assert [b.osm_id for b in businesses] == [901, 902]
        assert businesses[0].category == "supermarket"
        assert businesses[0].address == "Rruga B"
        assert businesses[1].name == "Unknown"
        assert businesses[1].category == "cafe"

    def test_fetch_failure_yields_nothing(self):
        """Test transport errors are logged and produce no businesses."""
        session = FakeSession(error=requests.ConnectionError("refused"))

        assert fetch_nearby_businesses(session, Settings(), 42.66, 21.16) == []

    def test_fetch_http_error_yields_nothing(self):
        """Test HTTP errors produce no businesses."""
        session = FakeSession(response=FakeResponse({}, status_code=504))

        assert fetch_nearby_businesses(session, Settings(), 42.66, 21.16) == []


class TestSyncAll:
    """Tests for POST /api/osm/sync-all."""

    def override(self, session):
        def override_session():
            yield session

        app.dependency_overrides[get_overpass_session] = override_session
        app.dependency_overrides[get_settings] = lambda: Settings(overpass_throttle_s=0)

    def test_sync_geocoded_stores(self, client):
        """Test every geocoded store is queried and its businesses saved."""
        session = FakeSession(response=FakeResponse(OVERPASS_RESPONSE))
        self.override(session)

        response = client.post("/api/osm/sync-all")

        assert response.status_code == 200
        assert response.json() == {
            "message": "Sync completed",
            "updatedStores": 2,
            "totalBusinesses": 4,
        }
        assert len(session.posts) == 2

    def test_sync_upserts(self, client, session_factory):
        """Test repeated syncs update rows instead of duplicating them."""
        self.override(FakeSession(response=FakeResponse(OVERPASS_RESPONSE)))

        client.post("/api/osm/sync-all")
        client.post("/api/osm/sync-all")

        with session_factory() as db:
            count = db.scalar(
                select(func.count()).select_from(StoreNearbyBusiness).where(StoreNearbyBusiness.osm_id == 901)
            )
            maxi = db.scalars(
                select(StoreNearbyBusiness).where(
                    StoreNearbyBusiness.store_department_code == "D1",
                    StoreNearbyBusiness.osm_id == 901,
                )
            ).one()
        assert count == 2
        assert maxi.category == "supermarket"
        assert maxi.retrieved_at is not None

    def test_sync_without_results(self, client):
        """Test failed Overpass calls leave every store untouched."""
        self.override(FakeSession(error=requests.Timeout("slow")))

        response = client.post("/api/osm/sync-all")

        assert response.status_code == 200
        assert response.json()["updatedStores"] == 0
        assert response.json()["totalBusinesses"] == 0
