from datetime import datetime

from pydantic import BaseModel, Field


class ChatMessageCreate(BaseModel):
    message: str = Field(min_length=1, max_length=4000)
    receiver_member_id: int | None = None
    reply_to_id: int | None = None


class ChatMessageResponse(BaseModel):
    id: int
    sender_member_id: int
    receiver_member_id: int | None
    reply_to_id: int | None
    message: str
    is_group_chat: bool
    created_at: datetime
    expires_at: datetime


class ChatMessageListResponse(BaseModel):
    items: list[ChatMessageResponse]


class PurgeResponse(BaseModel):
    deleted: int
