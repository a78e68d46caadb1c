from datetime import date, datetime

from pydantic import BaseModel, EmailStr, Field

from app.models.entities import GenderEnum


class FamilyMemberCreate(BaseModel):
    id: int | None = Field(default=None, ge=1)
    name: str = Field(min_length=1, max_length=255)
    nickname: str = Field(default="", max_length=255)
    email: EmailStr | None = None
    gender: GenderEnum
    birth_date: date | None = None
    anniversary_date: date | None = None
    death_date: date | None = None
    parent_id: int | None = None
    spouse_id: int | None = None
    generation: int = Field(default=0, ge=0)
    avatar: str = ""
    occupation: str = Field(default="", max_length=255)
    location: str = Field(default="", max_length=255)
    bio: str = ""


class FamilyMemberUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    nickname: str | None = Field(default=None, max_length=255)
    email: EmailStr | None = None
    gender: GenderEnum | None = None
    birth_date: date | None = None
    anniversary_date: date | None = None
    death_date: date | None = None
    parent_id: int | None = None
    spouse_id: int | None = None
    generation: int | None = Field(default=None, ge=0)
    avatar: str | None = None
    occupation: str | None = Field(default=None, max_length=255)
    location: str | None = Field(default=None, max_length=255)
    bio: str | None = None


class FamilyMemberResponse(BaseModel):
    id: int
    record_id: int
    name: str
    nickname: str
    email: str | None
    gender: str
    birth_date: date | None
    anniversary_date: date | None
    death_date: date | None
    is_deceased: bool
    parent_id: int | None
    spouse_id: int | None
    generation: int
    avatar: str
    occupation: str
    location: str
    bio: str
    last_active: datetime | None
    current_path: str | None
    session_time_today: int
    session_time_monthly: int
    session_time_yearly: int


class FamilyMemberListResponse(BaseModel):
    items: list[FamilyMemberResponse]


class FamilyMemberDetailResponse(FamilyMemberResponse):
    parents: list[FamilyMemberResponse]
    spouse: FamilyMemberResponse | None
    children: list[FamilyMemberResponse]
    siblings: list[FamilyMemberResponse]


class UpcomingBirthdayResponse(BaseModel):
    member: FamilyMemberResponse
    next_birthday: date
    days_until: int
    turning: int


class UpcomingAnniversaryResponse(BaseModel):
    member1_id: int
    member2_id: int
    member1: str
    member2: str
    anniversary_date: date
    next_anniversary: date
    days_until: int
    years: int


class DashboardStatsResponse(BaseModel):
    total_members: int
    total_generations: int
    upcoming_birthdays: list[UpcomingBirthdayResponse]
    upcoming_anniversaries: list[UpcomingAnniversaryResponse]


def member_response(member) -> FamilyMemberResponse:
    return FamilyMemberResponse(
        id=member.member_id,
        record_id=member.record_id,
        name=member.name,
        nickname=member.nickname or "",
        email=member.email,
        gender=member.gender.value,
        birth_date=member.birth_date,
        anniversary_date=member.anniversary_date,
        death_date=member.death_date,
        is_deceased=member.is_deceased,
        parent_id=member.parent_id,
        spouse_id=member.spouse_id,
        generation=member.generation,
        avatar=member.avatar or "",
        occupation=member.occupation or "",
        location=member.location or "",
        bio=member.bio or "",
        last_active=member.last_active,
        current_path=member.current_path,
        session_time_today=member.session_time_today or 0,
        session_time_monthly=member.session_time_monthly or 0,
        session_time_yearly=member.session_time_yearly or 0,
    )
