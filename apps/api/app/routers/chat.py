from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import Identity, require_auth, require_member
from app.core.config import settings
from app.core.db import get_db
from app.core.tracking import track_activity
from app.models.entities import ChatMessage
from app.schemas.chat import ChatMessageCreate, ChatMessageListResponse, ChatMessageResponse
from app.services.chat import delete_message, list_direct_messages, list_group_messages, send_message

router = APIRouter(prefix="/v1/chat", tags=["chat"], dependencies=[Depends(track_activity)])


def _message_response(message: ChatMessage) -> ChatMessageResponse:
    return ChatMessageResponse.model_validate(message, from_attributes=True)


@router.get("", response_model=ChatMessageListResponse)
def list_messages(
    with_member_id: int | None = Query(default=None),
    limit: int | None = Query(default=None, ge=1, le=500),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_member),
):
    limit = limit or settings.chat_page_size
    if with_member_id is None:
        messages = list_group_messages(db, limit)
    else:
        messages = list_direct_messages(db, identity.member_id, with_member_id, limit)
    return ChatMessageListResponse(items=[_message_response(item) for item in messages])


@router.post("", response_model=ChatMessageResponse, status_code=201)
def post_message(
    payload: ChatMessageCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_member),
):
    message = send_message(
        db,
        sender=identity,
        message=payload.message,
        ttl=timedelta(days=settings.chat_ttl_days),
        receiver_member_id=payload.receiver_member_id,
        reply_to_id=payload.reply_to_id,
    )
    db.commit()
    db.refresh(message)
    return _message_response(message)


@router.delete("/{message_id}", status_code=204)
def remove_message(message_id: int, db: Session = Depends(get_db), identity: Identity = Depends(require_auth)):
    delete_message(db, message_id, identity)
    db.commit()
