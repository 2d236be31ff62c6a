from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import StoreWithBusinessesRecord
from ..services import list_stores_with_businesses

router = APIRouter(prefix="/combined", tags=["combined"])


@router.get("/stores-with-businesses", response_model=List[StoreWithBusinessesRecord])
def get_stores_with_businesses(db: Session = Depends(get_db)):
    return list_stores_with_businesses(db)
