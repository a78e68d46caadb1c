from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import Identity, require_admin
from app.core.db import get_db
from app.core.tracking import track_activity
from app.models.entities import utcnow
from app.schemas.stats import AdminStatsResponse
from app.services.stats import admin_stats

router = APIRouter(prefix="/v1/stats", tags=["stats"], dependencies=[Depends(track_activity)])


@router.get("/admin", response_model=AdminStatsResponse)
def get_admin_stats(db: Session = Depends(get_db), _: Identity = Depends(require_admin)):
    return AdminStatsResponse.model_validate(admin_stats(db, utcnow()))
