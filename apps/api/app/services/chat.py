from __future__ import annotations

import logging
from datetime import timedelta

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.orm import Session

from app.core.auth import Identity
from app.core.errors import NotFoundError, PermissionDenied, ValidationError
from app.models.entities import ChatMessage, utcnow
from app.services.members import require_member_record

logger = logging.getLogger(__name__)


def _live():
    return ChatMessage.expires_at > utcnow()


def get_live_message(db: Session, message_id: int) -> ChatMessage | None:
    return db.execute(select(ChatMessage).where(ChatMessage.id == message_id, _live())).scalar_one_or_none()


def list_group_messages(db: Session, limit: int) -> list[ChatMessage]:
    # Latest page, returned oldest first.
    rows = db.execute(
        select(ChatMessage)
        .where(ChatMessage.is_group_chat.is_(True), _live())
        .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        .limit(limit)
    ).scalars().all()
    return list(reversed(rows))


def list_direct_messages(db: Session, member_id: int, other_member_id: int, limit: int) -> list[ChatMessage]:
    rows = db.execute(
        select(ChatMessage)
        .where(
            ChatMessage.is_group_chat.is_(False),
            _live(),
            or_(
                and_(ChatMessage.sender_member_id == member_id, ChatMessage.receiver_member_id == other_member_id),
                and_(ChatMessage.sender_member_id == other_member_id, ChatMessage.receiver_member_id == member_id),
            ),
        )
        .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
        .limit(limit)
    ).scalars().all()
    return list(reversed(rows))


def send_message(
    db: Session,
    *,
    sender: Identity,
    message: str,
    ttl: timedelta,
    receiver_member_id: int | None = None,
    reply_to_id: int | None = None,
) -> ChatMessage:
    text = (message or "").strip()
    if not text:
        raise ValidationError("message is required")
    if receiver_member_id is not None:
        if receiver_member_id == sender.member_id:
            raise ValidationError("you cannot message yourself")
        require_member_record(db, receiver_member_id)
    if reply_to_id is not None and get_live_message(db, reply_to_id) is None:
        raise NotFoundError("reply message not found")

    now = utcnow()
    chat = ChatMessage(
        sender_member_id=sender.member_id,
        receiver_member_id=receiver_member_id,
        reply_to_id=reply_to_id,
        message=text,
        is_group_chat=receiver_member_id is None,
        created_at=now,
        expires_at=now + ttl,
    )
    db.add(chat)
    db.flush()
    return chat


def delete_message(db: Session, message_id: int, identity: Identity) -> None:
    chat = db.get(ChatMessage, message_id)
    if chat is None:
        raise NotFoundError("message not found")
    if not identity.is_admin and chat.sender_member_id != identity.member_id:
        raise PermissionDenied("you can only delete your own messages")
    db.delete(chat)
    db.flush()


def purge_expired(db: Session) -> int:
    expired = select(ChatMessage.id).where(ChatMessage.expires_at <= utcnow())
    # Detach replies first so the self-reference never blocks the delete.
    db.execute(
        update(ChatMessage)
        .where(ChatMessage.reply_to_id.in_(expired))
        .values(reply_to_id=None)
        .execution_options(synchronize_session=False)
    )
    result = db.execute(delete(ChatMessage).where(ChatMessage.expires_at <= utcnow()))
    count = result.rowcount or 0
    logger.info("purged %d expired chat messages", count)
    return count
