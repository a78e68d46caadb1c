from datetime import datetime

from pydantic import BaseModel, Field


class WishCreate(BaseModel):
    recipient_member_id: int
    message: str | None = Field(default=None, max_length=500)


class WishResponse(BaseModel):
    id: int
    sender_member_id: int
    recipient_member_id: int
    message: str
    year: int
    is_read: bool
    created_at: datetime


class WishListResponse(BaseModel):
    items: list[WishResponse]


class SentWishesResponse(BaseModel):
    year: int
    recipient_ids: list[int]
