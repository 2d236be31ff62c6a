from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import RegionRecord
from ..services import list_regions

router = APIRouter(prefix="/regions", tags=["regions"])


@router.get("", response_model=List[RegionRecord])
def get_regions(db: Session = Depends(get_db)):
    return list_regions(db)
