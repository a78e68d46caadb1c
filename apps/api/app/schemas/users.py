from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    nickname: str = Field(default="", max_length=255)
    linked_member_id: int | None = None


class UserUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    nickname: str | None = Field(default=None, max_length=255)
    role: str | None = Field(default=None, pattern="^(admin|family_member)$")
    linked_member_id: int | None = None


class UserApprove(BaseModel):
    role: str | None = Field(default=None, pattern="^(admin|family_member)$")


class LinkedMemberSummary(BaseModel):
    id: int
    name: str
    avatar: str
    generation: int


class UserResponse(BaseModel):
    id: int
    email: EmailStr
    name: str
    nickname: str
    role: str
    status: str
    linked_member_id: int | None
    linked_member: LinkedMemberSummary | None = None
    created_at: datetime


class UserListResponse(BaseModel):
    items: list[UserResponse]
