from typing import Optional

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base


class OrgUnitArea(Base):
    """Organisation hierarchy: one row per department."""

    __tablename__ = "OrgUnitArea"
    __table_args__ = (
        Index("idx_orgunit_area", "Area_Code"),
        Index("idx_orgunit_zone", "Zone_Code"),
        Index("idx_orgunit_city", "City_Name"),
    )

    department_code: Mapped[str] = mapped_column("Department_Code", String, primary_key=True)
    department_name: Mapped[Optional[str]] = mapped_column("Department_Name", String, nullable=True)
    region_code: Mapped[Optional[str]] = mapped_column("Region_Code", String, nullable=True)
    region_name: Mapped[Optional[str]] = mapped_column("Region_Name", String, nullable=True)
    area_code: Mapped[Optional[str]] = mapped_column("Area_Code", String, nullable=True)
    area_name: Mapped[Optional[str]] = mapped_column("Area_Name", String, nullable=True)
    zone_code: Mapped[Optional[str]] = mapped_column("Zone_Code", String, nullable=True)
    zone_name: Mapped[Optional[str]] = mapped_column("Zone_Name", String, nullable=True)
    city_code: Mapped[Optional[str]] = mapped_column("City_Code", String, nullable=True)
    city_name: Mapped[Optional[str]] = mapped_column("City_Name", String, nullable=True)
