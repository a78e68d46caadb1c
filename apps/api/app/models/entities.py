from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import NewType

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Enum as SqlEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base

# Numeric family id used by every cross-reference; never the storage key.
MemberId = NewType("MemberId", int)

CHAT_TTL = timedelta(days=7)


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class GenderEnum(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class UserRoleEnum(str, Enum):
    admin = "admin"
    family_member = "family_member"


class ModerationStatusEnum(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class EventTypeEnum(str, Enum):
    event = "event"
    holiday = "holiday"
    other = "other"


class NotificationTypeEnum(str, Enum):
    birthday_wish = "birthday_wish"
    admin_broadcast = "admin_broadcast"
    system = "system"
    event = "event"


class ActivityMixin:
    last_active: Mapped[datetime | None] = mapped_column(DateTime)
    current_path: Mapped[str] = mapped_column(String(255), default="/")
    session_time_today: Mapped[int] = mapped_column(Integer, default=0)
    session_time_monthly: Mapped[int] = mapped_column(Integer, default=0)
    session_time_yearly: Mapped[int] = mapped_column(Integer, default=0)


class FamilyMember(ActivityMixin, Base):
    __tablename__ = "family_members"

    record_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    member_id: Mapped[int] = mapped_column(Integer, nullable=False, unique=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    nickname: Mapped[str] = mapped_column(String(255), default="")
    email: Mapped[str | None] = mapped_column(String(255), unique=True)
    gender: Mapped[GenderEnum] = mapped_column(SqlEnum(GenderEnum), nullable=False)
    birth_date: Mapped[date | None] = mapped_column(Date)
    anniversary_date: Mapped[date | None] = mapped_column(Date)
    death_date: Mapped[date | None] = mapped_column(Date)
    # Plain integers: dangling references are legal and resolve to nothing.
    parent_id: Mapped[int | None] = mapped_column(Integer, index=True)
    spouse_id: Mapped[int | None] = mapped_column(Integer, index=True)
    generation: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    avatar: Mapped[str] = mapped_column(String(1024), default="")
    occupation: Mapped[str] = mapped_column(String(255), default="")
    location: Mapped[str] = mapped_column(String(255), default="")
    bio: Mapped[str] = mapped_column(Text, default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def is_deceased(self) -> bool:
        return self.death_date is not None


class User(ActivityMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    nickname: Mapped[str] = mapped_column(String(255), default="")
    role: Mapped[UserRoleEnum] = mapped_column(SqlEnum(UserRoleEnum), nullable=False, default=UserRoleEnum.family_member)
    status: Mapped[ModerationStatusEnum] = mapped_column(
        SqlEnum(ModerationStatusEnum, name="userstatusenum"), nullable=False, default=ModerationStatusEnum.pending
    )
    linked_member_id: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    event_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    location: Mapped[str] = mapped_column(String(255), default="")
    event_type: Mapped[EventTypeEnum] = mapped_column(SqlEnum(EventTypeEnum), nullable=False, default=EventTypeEnum.event)
    created_by_email: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class GalleryImage(Base):
    __tablename__ = "gallery_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    asset_id: Mapped[str] = mapped_column(String(255), nullable=False)
    uploaded_by_member_id: Mapped[int | None] = mapped_column(ForeignKey("family_members.member_id", ondelete="SET NULL"))
    tagged_member_id: Mapped[int | None] = mapped_column(Integer)
    location: Mapped[str] = mapped_column(String(255), default="")
    taken_on: Mapped[date | None] = mapped_column(Date)
    status: Mapped[ModerationStatusEnum] = mapped_column(
        SqlEnum(ModerationStatusEnum, name="gallerystatusenum"), nullable=False, default=ModerationStatusEnum.pending
    )
    batch_id: Mapped[str | None] = mapped_column(String(64))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sender_member_id: Mapped[int] = mapped_column(
        ForeignKey("family_members.member_id", ondelete="CASCADE"), nullable=False, index=True
    )
    receiver_member_id: Mapped[int | None] = mapped_column(
        ForeignKey("family_members.member_id", ondelete="CASCADE"), index=True
    )
    reply_to_id: Mapped[int | None] = mapped_column(ForeignKey("chat_messages.id", ondelete="SET NULL"))
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_group_chat: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: utcnow() + CHAT_TTL, index=True)


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    recipient_member_id: Mapped[int] = mapped_column(
        ForeignKey("family_members.member_id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_member_id: Mapped[int | None] = mapped_column(Integer)
    sender_name: Mapped[str] = mapped_column(String(255), default="System")
    type: Mapped[NotificationTypeEnum] = mapped_column(
        SqlEnum(NotificationTypeEnum), nullable=False, default=NotificationTypeEnum.system
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    metadata_json: Mapped[dict] = mapped_column("metadata", JSON, default=dict)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)


class Wish(Base):
    __tablename__ = "wishes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    sender_member_id: Mapped[int] = mapped_column(
        ForeignKey("family_members.member_id", ondelete="CASCADE"), nullable=False
    )
    recipient_member_id: Mapped[int] = mapped_column(
        ForeignKey("family_members.member_id", ondelete="CASCADE"), nullable=False
    )
    message: Mapped[str] = mapped_column(String(500), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)

    __table_args__ = (
        UniqueConstraint("sender_member_id", "recipient_member_id", "year", name="uq_wish_sender_recipient_year"),
    )


Index("ix_family_members_generation", FamilyMember.generation)
Index("ix_chat_messages_group_created", ChatMessage.is_group_chat, ChatMessage.created_at)
Index("ix_notifications_recipient_read", Notification.recipient_member_id, Notification.is_read)
Index("ix_gallery_images_status_created", GalleryImage.status, GalleryImage.created_at)
