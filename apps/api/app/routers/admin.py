from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.auth import Identity, require_admin
from app.core.db import get_db
from app.schemas.chat import PurgeResponse
from app.services.chat import purge_expired

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/admin", tags=["admin"])


@router.post("/chat/purge-expired", response_model=PurgeResponse)
def purge_expired_chat(db: Session = Depends(get_db), identity: Identity = Depends(require_admin)):
    """Hard-delete chat messages past their expiry. Called by the worker's beat schedule."""
    deleted = purge_expired(db)
    db.commit()
    logger.info("chat purge requested by %s removed %d messages", identity.email, deleted)
    return PurgeResponse(deleted=deleted)
