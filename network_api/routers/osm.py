import logging

import requests
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import Settings, get_settings
from ..db import get_db
from ..schemas import OsmSyncResult
from ..services import get_overpass_session, sync_all

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/osm", tags=["osm"])


@router.post("/sync-all", response_model=OsmSyncResult)
def post_sync_all(
    db: Session = Depends(get_db),
    session: requests.Session = Depends(get_overpass_session),
    settings: Settings = Depends(get_settings),
):
    try:
        return sync_all(db, session, settings)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Sync failed: {e}")
        raise HTTPException(status_code=500, detail={"error": "Sync failed", "details": str(e)})
