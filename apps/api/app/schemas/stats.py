from datetime import datetime

from pydantic import BaseModel


class ActivityRow(BaseModel):
    type: str
    name: str
    nickname: str
    current_path: str | None
    last_active: datetime | None
    session_time_today: int


class NameValue(BaseModel):
    name: str
    value: int


class PageCount(BaseModel):
    path: str
    count: int


class RecentActivity(BaseModel):
    messages_24h: int
    uploads_24h: int
    pending_uploads: int


class GrowthPoint(BaseModel):
    date: str
    users: int


class AdminStatsResponse(BaseModel):
    total_members: int
    total_users: int
    active_users_count: int
    active_users: list[ActivityRow]
    daily_usage: list[ActivityRow]
    top_pages: list[PageCount]
    role_stats: list[NameValue]
    gender_stats: list[NameValue]
    generation_stats: list[NameValue]
    recent_activity: RecentActivity
    growth_stats: list[GrowthPoint]
