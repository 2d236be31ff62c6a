from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import ZoneRecord
from ..services import list_zone_stores, list_zones

router = APIRouter(prefix="/zones", tags=["zones"])


@router.get("", response_model=List[ZoneRecord])
def get_zones(db: Session = Depends(get_db)):
    return list_zones(db)


@router.get("/{zone_code}/stores", response_model=List[ZoneRecord])
def get_zone_stores(zone_code: str, db: Session = Depends(get_db)):
    stores = list_zone_stores(db, zone_code)
    if stores is None:
        raise HTTPException(status_code=404, detail="Zone not found")
    return stores
