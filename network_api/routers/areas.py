from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import AreaRecord, AreaStoreRecord
from ..services import list_area_filters, list_area_stores

router = APIRouter(prefix="/areas", tags=["areas"])


@router.get("", response_model=List[AreaStoreRecord])
def get_areas(db: Session = Depends(get_db)):
    return list_area_stores(db)


@router.get("/filters", response_model=List[AreaRecord])
def get_area_filters(db: Session = Depends(get_db)):
    return list_area_filters(db)
