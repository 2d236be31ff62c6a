from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import NetworkOverview
from ..services import network_overview

router = APIRouter(prefix="/network", tags=["network"])


@router.get("/overview", response_model=NetworkOverview)
def get_network_overview(
    top: int = Query(5, ge=0, le=100),
    db: Session = Depends(get_db),
):
    return network_overview(db, top=top)
