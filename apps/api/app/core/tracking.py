from __future__ import annotations

from datetime import timedelta

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from app.core.auth import Identity, get_identity
from app.core.config import settings
from app.core.db import get_db
from app.models.entities import FamilyMember, User, utcnow
from app.services.activity import record_activity
from app.services.members import find_member


def track_activity(
    request: Request,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
    x_current_path: str | None = Header(default=None, alias="X-Current-Path"),
) -> None:
    """
    Roll session time for the caller on every tracked request.

    Best-effort read-modify-write without compare-and-set: concurrent requests
    for one member may overwrite each other's counters.
    """
    if not identity.is_authenticated:
        return

    record: FamilyMember | User | None = None
    if identity.member_id is not None:
        record = find_member(db, identity.member_id)
    elif identity.user_id is not None:
        record = db.get(User, identity.user_id)
    if record is None:
        return

    changed = record_activity(
        record,
        utcnow(),
        x_current_path or request.url.path,
        debounce=timedelta(seconds=settings.activity_debounce_seconds),
        gap_ceiling=timedelta(seconds=settings.activity_gap_seconds),
    )
    if changed:
        db.commit()
