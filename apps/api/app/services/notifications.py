from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from app.core.auth import Identity
from app.core.errors import NotFoundError, PermissionDenied, ValidationError
from app.models.entities import FamilyMember, MemberId, Notification, NotificationTypeEnum

logger = logging.getLogger(__name__)


def notify(
    db: Session,
    *,
    recipient_member_id: MemberId | int,
    message: str,
    type: NotificationTypeEnum = NotificationTypeEnum.system,
    sender: Identity | None = None,
    metadata: dict[str, Any] | None = None,
) -> Notification:
    if sender is not None and sender.member_id is not None and sender.member_id == recipient_member_id:
        raise ValidationError("you cannot send a notification to yourself")
    notification = Notification(
        recipient_member_id=recipient_member_id,
        sender_member_id=sender.member_id if sender is not None else None,
        sender_name=(sender.name if sender is not None else None) or "System",
        type=type,
        message=message,
        is_read=False,
        metadata_json=metadata or {},
    )
    db.add(notification)
    db.flush()
    return notification


def broadcast(
    db: Session,
    *,
    message: str,
    type: NotificationTypeEnum,
    sender: Identity | None = None,
    metadata: dict[str, Any] | None = None,
) -> int:
    """Fan a notification out to every member with an email, skipping the sender."""
    recipients = db.execute(
        select(FamilyMember.member_id).where(FamilyMember.email.is_not(None), FamilyMember.email != "")
    ).scalars().all()
    sender_member_id = sender.member_id if sender is not None else None
    count = 0
    for member_id in recipients:
        if sender_member_id is not None and member_id == sender_member_id:
            continue
        db.add(
            Notification(
                recipient_member_id=member_id,
                sender_member_id=sender_member_id,
                sender_name=(sender.name if sender is not None else None) or "System",
                type=type,
                message=message,
                is_read=False,
                metadata_json=metadata or {},
            )
        )
        count += 1
    db.flush()
    logger.info("broadcast %s notification to %d members", type.value, count)
    return count


def list_for_member(db: Session, member_id: MemberId, limit: int) -> list[Notification]:
    return list(
        db.execute(
            select(Notification)
            .where(Notification.recipient_member_id == member_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
        ).scalars().all()
    )


def unread_count(db: Session, member_id: MemberId) -> int:
    return db.execute(
        select(func.count(Notification.id)).where(
            Notification.recipient_member_id == member_id,
            Notification.is_read.is_(False),
        )
    ).scalar_one()


def require_owned(db: Session, notification_id: int, identity: Identity) -> Notification:
    notification = db.get(Notification, notification_id)
    if notification is None:
        raise NotFoundError("notification not found")
    if not identity.is_admin and notification.recipient_member_id != identity.member_id:
        raise PermissionDenied("not your notification")
    return notification


def mark_read(db: Session, notification: Notification) -> Notification:
    notification.is_read = True
    db.flush()
    return notification


def mark_all_read(db: Session, member_id: MemberId) -> int:
    result = db.execute(
        update(Notification)
        .where(Notification.recipient_member_id == member_id, Notification.is_read.is_(False))
        .values(is_read=True)
    )
    return result.rowcount or 0
