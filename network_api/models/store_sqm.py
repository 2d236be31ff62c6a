from typing import Optional

from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column

from ..db import Base


class StoreSqm(Base):
    __tablename__ = "Storesqm"

    department_code: Mapped[str] = mapped_column("Department_Code", String, primary_key=True)
    sqm: Mapped[Optional[float]] = mapped_column("SQM", Float, nullable=True)
    longitude: Mapped[Optional[float]] = mapped_column("Longitude", Float, nullable=True)
    latitude: Mapped[Optional[float]] = mapped_column("Latitude", Float, nullable=True)
    address: Mapped[Optional[str]] = mapped_column("Adresse", String, nullable=True)
    format: Mapped[Optional[str]] = mapped_column("Format", String, nullable=True)
