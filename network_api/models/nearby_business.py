from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, DateTime, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base


class StoreNearbyBusiness(Base):
    """OpenStreetMap business found near a store; keyed by (store, OSM node)."""

    __tablename__ = "StoreNearbyBusiness"
    __table_args__ = (Index("idx_nearby_category", "Category"),)

    store_department_code: Mapped[str] = mapped_column("Store_Department_Code", String, primary_key=True)
    osm_id: Mapped[int] = mapped_column("OSM_Id", BigInteger, primary_key=True, autoincrement=False)
    name: Mapped[Optional[str]] = mapped_column("Name", String, nullable=True)
    category: Mapped[Optional[str]] = mapped_column("Category", String, nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column("Latitude", Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column("Longitude", Float, nullable=True)
    address: Mapped[Optional[str]] = mapped_column("Address", String, nullable=True)
    retrieved_at: Mapped[Optional[datetime]] = mapped_column("RetrievedAt", DateTime(timezone=True), nullable=True)
