"""Shared fixtures: an in-memory database seeded with a small network."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from network_api.db import Base, get_db
from network_api.main import app
from network_api.models import OrgUnitArea, StoreNearbyBusiness, StoreSqm


def seed(session: Session) -> None:
    session.add_all([
        OrgUnitArea(
            department_code="D1", department_name="Store A",
            region_code="R1", region_name="Kosovo North",
            area_code="A1", area_name="01 - Center",
            zone_code="Z1", zone_name="North",
            city_code="C1", city_name=" Pristina ",
        ),
        OrgUnitArea(
            department_code="D2", department_name="Store B",
            region_code="R1", region_name="Kosovo North",
            area_code="A1", area_name="01 - Center",
            zone_code="Z1", zone_name="North",
            city_code="C1", city_name="Pristina",
        ),
        OrgUnitArea(
            department_code="D3", department_name="Store C",
            region_code="R2", region_name="Kosovo South",
            area_code="A2", area_name="02 - South",
            zone_code="Z2", zone_name="South Zone",
            city_code="C2", city_name="Prizren",
        ),
        StoreSqm(department_code="D1", sqm=500, longitude=21.16, latitude=42.66, address="Rruga A", format="Hyper"),
        StoreSqm(department_code="D2", sqm=700, longitude=21.17, latitude=42.67, format="Express"),
        StoreSqm(department_code="D3", format="Express"),
        StoreNearbyBusiness(store_department_code="D1", osm_id=101, name="Viva Market",
                            category="supermarket", latitude=42.661, longitude=21.161),
        StoreNearbyBusiness(store_department_code="D1", osm_id=102, name="Furra",
                            category="bakery", latitude=42.662, longitude=21.162),
        StoreNearbyBusiness(store_department_code="D1", osm_id=103, name="Hotel Sirius",
                            category="hotel", latitude=42.663, longitude=21.163),
        StoreNearbyBusiness(store_department_code="D3", osm_id=301, name="Barnatore",
                            category="pharmacy", latitude=42.21, longitude=20.74),
    ])
    session.commit()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    with Session(engine) as session:
        seed(session)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
