"""Load OrgUnitArea.csv and Storesqm.csv exports into a local database.

Usage: python -m network_api.scripts.bootstrap_sample_data --data-dir exports/
"""

import argparse
import csv
from pathlib import Path
from typing import Dict, List, Optional

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from network_api.db import Base, get_engine
from network_api.models import OrgUnitArea, StoreSqm

ORG_UNIT_COLUMNS = {
    "department_code": "Department_Code",
    "department_name": "Department_Name",
    "region_code": "Region_Code",
    "region_name": "Region_Name",
    "area_code": "Area_Code",
    "area_name": "Area_Name",
    "zone_code": "Zone_Code",
    "zone_name": "Zone_Name",
    "city_code": "City_Code",
    "city_name": "City_Name",
}


def load_csv(path: Path) -> List[Dict[str, str]]:
    with path.open(encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        return list(reader)


def to_float(raw: Optional[str]) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    return float(raw.replace(",", "."))


def bootstrap(data_dir: Path, engine: Optional[Engine] = None) -> None:
    engine = engine or get_engine()

    # Drop & recreate tables
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    org_rows = load_csv(data_dir / "OrgUnitArea.csv")
    sqm_rows = load_csv(data_dir / "Storesqm.csv")

    with Session(engine) as session:
        for row in org_rows:
            if not (row.get("Department_Code") or "").strip():
                continue
            session.merge(
                OrgUnitArea(
                    **{
                        attr: (row.get(column) or "").strip() or None
                        for attr, column in ORG_UNIT_COLUMNS.items()
                    }
                )
            )

        for row in sqm_rows:
            code = (row.get("Department_Code") or "").strip()
            if not code:
                continue
            session.merge(
                StoreSqm(
                    department_code=code,
                    sqm=to_float(row.get("SQM")),
                    longitude=to_float(row.get("Longitude")),
                    latitude=to_float(row.get("Latitude")),
                    address=(row.get("Adresse") or "").strip() or None,
                    format=(row.get("Format") or "").strip() or None,
                )
            )

        session.commit()
    print(f"Loaded {len(org_rows)} org units and {len(sqm_rows)} store footprints.")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Bootstrap the store network database from CSV exports")
    parser.add_argument("--data-dir", type=Path, default=Path("."))
    args = parser.parse_args()
    bootstrap(args.data_dir)
