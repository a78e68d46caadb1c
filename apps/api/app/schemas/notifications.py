from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class NotificationCreate(BaseModel):
    recipient_member_id: int
    message: str = Field(min_length=1, max_length=2000)
    type: str = Field(default="system", pattern="^(birthday_wish|admin_broadcast|system|event)$")
    metadata: dict[str, Any] = Field(default_factory=dict)


class BroadcastCreate(BaseModel):
    message: str = Field(min_length=1, max_length=2000)
    metadata: dict[str, Any] = Field(default_factory=dict)


class NotificationResponse(BaseModel):
    id: int
    recipient_member_id: int
    sender_member_id: int | None
    sender_name: str
    type: str
    message: str
    is_read: bool
    metadata: dict[str, Any]
    created_at: datetime


class NotificationListResponse(BaseModel):
    items: list[NotificationResponse]
    unread_count: int


class BroadcastResponse(BaseModel):
    sent: int


class MarkAllReadResponse(BaseModel):
    updated: int
