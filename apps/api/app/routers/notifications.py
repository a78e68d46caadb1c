from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import Identity, require_admin, require_auth, require_member
from app.core.config import settings
from app.core.db import get_db
from app.core.tracking import track_activity
from app.models.entities import Notification, NotificationTypeEnum
from app.schemas.notifications import (
    BroadcastCreate,
    BroadcastResponse,
    MarkAllReadResponse,
    NotificationCreate,
    NotificationListResponse,
    NotificationResponse,
)
from app.services.members import require_member_record
from app.services.notifications import (
    broadcast,
    list_for_member,
    mark_all_read,
    mark_read,
    notify,
    require_owned,
    unread_count,
)

router = APIRouter(prefix="/v1/notifications", tags=["notifications"], dependencies=[Depends(track_activity)])


def _notification_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=notification.id,
        recipient_member_id=notification.recipient_member_id,
        sender_member_id=notification.sender_member_id,
        sender_name=notification.sender_name or "System",
        type=notification.type.value,
        message=notification.message,
        is_read=notification.is_read,
        metadata=notification.metadata_json or {},
        created_at=notification.created_at,
    )


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    limit: int | None = Query(default=None, ge=1, le=500),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_member),
):
    items = list_for_member(db, identity.member_id, limit or settings.notification_page_size)
    return NotificationListResponse(
        items=[_notification_response(item) for item in items],
        unread_count=unread_count(db, identity.member_id),
    )


@router.post("", response_model=NotificationResponse, status_code=201)
def create_notification(
    payload: NotificationCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
):
    require_member_record(db, payload.recipient_member_id)
    notification = notify(
        db,
        recipient_member_id=payload.recipient_member_id,
        message=payload.message,
        type=NotificationTypeEnum(payload.type),
        sender=identity,
        metadata=payload.metadata,
    )
    db.commit()
    db.refresh(notification)
    return _notification_response(notification)


@router.post("/broadcast", response_model=BroadcastResponse, status_code=201)
def broadcast_notification(
    payload: BroadcastCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    sent = broadcast(
        db,
        message=payload.message,
        type=NotificationTypeEnum.admin_broadcast,
        sender=identity,
        metadata=payload.metadata,
    )
    db.commit()
    return BroadcastResponse(sent=sent)


@router.post("/read-all", response_model=MarkAllReadResponse)
def read_all(db: Session = Depends(get_db), identity: Identity = Depends(require_member)):
    updated = mark_all_read(db, identity.member_id)
    db.commit()
    return MarkAllReadResponse(updated=updated)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def read_one(notification_id: int, db: Session = Depends(get_db), identity: Identity = Depends(require_auth)):
    notification = mark_read(db, require_owned(db, notification_id, identity))
    db.commit()
    db.refresh(notification)
    return _notification_response(notification)


@router.delete("/{notification_id}", status_code=204)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
):
    db.delete(require_owned(db, notification_id, identity))
    db.commit()
