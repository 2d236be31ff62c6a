from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import CityRecord
from ..services import list_cities

router = APIRouter(prefix="/cities", tags=["cities"])


@router.get("", response_model=List[CityRecord])
def get_cities(db: Session = Depends(get_db)):
    return list_cities(db)
