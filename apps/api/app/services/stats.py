from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.models.entities import (
    ChatMessage,
    FamilyMember,
    GalleryImage,
    ModerationStatusEnum,
    User,
    UserRoleEnum,
)
from app.services.occasions import upcoming_anniversaries, upcoming_birthdays

ACTIVE_WINDOW = timedelta(minutes=5)
RECENT_WINDOW = timedelta(hours=24)
GROWTH_DAYS = 7
TOP_N = 5


def dashboard(members: list[FamilyMember], today: date, window_days: int) -> dict[str, Any]:
    birthdays = upcoming_birthdays(members, today, window_days)
    anniversaries = upcoming_anniversaries(members, today, window_days)
    return {
        "total_members": len(members),
        "total_generations": len({member.generation for member in members}),
        "upcoming_birthdays": birthdays[:TOP_N],
        "upcoming_anniversaries": anniversaries[:TOP_N],
    }


def _activity_row(record: FamilyMember | User, kind: str) -> dict[str, Any]:
    return {
        "type": kind,
        "name": record.name,
        "nickname": record.nickname,
        "current_path": record.current_path,
        "last_active": record.last_active,
        "session_time_today": record.session_time_today or 0,
    }


def admin_stats(db: Session, now: datetime) -> dict[str, Any]:
    active_since = now - ACTIVE_WINDOW
    recent_since = now - RECENT_WINDOW
    start_of_day = datetime(now.year, now.month, now.day)

    total_members = db.execute(select(func.count(FamilyMember.record_id))).scalar_one()
    total_users = db.execute(select(func.count(User.id))).scalar_one()
    admin_count = db.execute(select(func.count(User.id)).where(User.role == UserRoleEnum.admin)).scalar_one()

    active_members = db.execute(select(FamilyMember).where(FamilyMember.last_active >= active_since)).scalars().all()
    active_admins = db.execute(
        select(User).where(User.role == UserRoleEnum.admin, User.last_active >= active_since)
    ).scalars().all()
    active = [_activity_row(item, "admin") for item in active_admins] + [
        _activity_row(item, "member") for item in active_members
    ]

    top_pages = db.execute(
        select(FamilyMember.current_path, func.count(FamilyMember.record_id).label("count"))
        .where(FamilyMember.current_path.is_not(None))
        .group_by(FamilyMember.current_path)
        .order_by(func.count(FamilyMember.record_id).desc(), FamilyMember.current_path.asc())
        .limit(TOP_N)
    ).all()

    gender_rows = db.execute(
        select(FamilyMember.gender, func.count(FamilyMember.record_id)).group_by(FamilyMember.gender)
    ).all()
    generation_rows = db.execute(
        select(FamilyMember.generation, func.count(FamilyMember.record_id))
        .group_by(FamilyMember.generation)
        .order_by(FamilyMember.generation.asc())
    ).all()

    messages_24h = db.execute(
        select(func.count(ChatMessage.id)).where(ChatMessage.created_at >= recent_since)
    ).scalar_one()
    uploads_24h = db.execute(
        select(func.count(GalleryImage.id)).where(GalleryImage.created_at >= recent_since)
    ).scalar_one()
    pending_uploads = db.execute(
        select(func.count(GalleryImage.id)).where(GalleryImage.status == ModerationStatusEnum.pending)
    ).scalar_one()

    growth_since = start_of_day - timedelta(days=GROWTH_DAYS - 1)
    created = db.execute(
        select(FamilyMember.created_at).where(FamilyMember.created_at >= growth_since)
    ).scalars().all()
    growth: dict[str, int] = {}
    for stamp in created:
        key = stamp.date().isoformat()
        growth[key] = growth.get(key, 0) + 1

    daily_members = db.execute(
        select(FamilyMember).where(FamilyMember.session_time_today > 0, FamilyMember.last_active >= start_of_day)
    ).scalars().all()
    daily_admins = db.execute(
        select(User).where(
            User.role == UserRoleEnum.admin, User.session_time_today > 0, User.last_active >= start_of_day
        )
    ).scalars().all()
    daily_usage = sorted(
        [_activity_row(item, "admin") for item in daily_admins]
        + [_activity_row(item, "member") for item in daily_members],
        key=lambda row: row["session_time_today"],
        reverse=True,
    )

    return {
        "total_members": total_members,
        "total_users": total_users,
        "active_users_count": len(active),
        "active_users": active,
        "daily_usage": daily_usage,
        "top_pages": [{"path": path, "count": count} for path, count in top_pages],
        "role_stats": [
            {"name": "Admins", "value": admin_count},
            {"name": "Family Members", "value": total_members},
        ],
        "gender_stats": [{"name": gender.value, "value": count} for gender, count in gender_rows],
        "generation_stats": [{"name": f"Gen {generation}", "value": count} for generation, count in generation_rows],
        "recent_activity": {
            "messages_24h": messages_24h,
            "uploads_24h": uploads_24h,
            "pending_uploads": pending_uploads,
        },
        "growth_stats": [{"date": key, "users": growth[key]} for key in sorted(growth)],
    }
