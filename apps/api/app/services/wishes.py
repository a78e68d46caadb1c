from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.auth import Identity
from app.core.errors import ConflictError, ValidationError
from app.models.entities import MemberId, NotificationTypeEnum, Wish
from app.services.members import require_member_record
from app.services.notifications import notify

logger = logging.getLogger(__name__)

DEFAULT_WISH_MESSAGE = "Happy Birthday! 🎉"
DUPLICATE_WISH = "you have already sent a wish to this person this year"


def _exists(db: Session, sender_member_id: int, recipient_member_id: int, year: int) -> bool:
    return (
        db.execute(
            select(Wish.id).where(
                Wish.sender_member_id == sender_member_id,
                Wish.recipient_member_id == recipient_member_id,
                Wish.year == year,
            )
        ).first()
        is not None
    )


def send_wish(
    db: Session,
    *,
    sender: Identity,
    recipient_member_id: MemberId | int,
    message: str | None,
    year: int,
) -> Wish:
    """
    Store one birthday wish per (sender, recipient, year).

    The store also carries a unique constraint on the tuple; the router
    maps a racing duplicate's IntegrityError to ConflictError as well.
    """
    recipient = require_member_record(db, recipient_member_id)
    if recipient.member_id == sender.member_id:
        raise ValidationError("you cannot send a birthday wish to yourself")

    if _exists(db, sender.member_id, recipient.member_id, year):
        raise ConflictError(DUPLICATE_WISH)

    wish = Wish(
        sender_member_id=sender.member_id,
        recipient_member_id=recipient.member_id,
        message=(message or "").strip() or DEFAULT_WISH_MESSAGE,
        year=year,
    )
    db.add(wish)
    db.flush()

    notify(
        db,
        recipient_member_id=recipient.member_id,
        message=f"{sender.name or 'Someone'} sent you a birthday wish! 🎂",
        type=NotificationTypeEnum.birthday_wish,
        sender=sender,
        metadata={"wish_id": wish.id, "year": year},
    )
    logger.info("wish %s from %s to %s", wish.id, sender.member_id, recipient.member_id)
    return wish


def received_wishes(db: Session, member_id: MemberId, year: int) -> list[Wish]:
    return list(
        db.execute(
            select(Wish)
            .where(Wish.recipient_member_id == member_id, Wish.year == year)
            .order_by(Wish.created_at.desc(), Wish.id.desc())
        ).scalars().all()
    )


def sent_recipient_ids(db: Session, member_id: MemberId, year: int) -> list[int]:
    return list(
        db.execute(
            select(Wish.recipient_member_id)
            .where(Wish.sender_member_id == member_id, Wish.year == year)
            .order_by(Wish.recipient_member_id.asc())
        ).scalars().all()
    )
