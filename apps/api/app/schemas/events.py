import datetime

from pydantic import BaseModel, Field


class EventCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    description: str = ""
    date: datetime.date
    location: str = Field(default="", max_length=255)
    event_type: str = Field(default="event", pattern="^(event|holiday|other)$")


class EventUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    date: datetime.date | None = None
    location: str | None = Field(default=None, max_length=255)
    event_type: str | None = Field(default=None, pattern="^(event|holiday|other)$")


class EventResponse(BaseModel):
    id: int
    title: str
    description: str
    date: datetime.date
    location: str
    event_type: str
    created_by_email: str
    created_at: datetime.datetime


class EventListResponse(BaseModel):
    items: list[EventResponse]


class CalendarEntryResponse(BaseModel):
    type: str
    date: datetime.date
    title: str
    details: dict


class CalendarFeedResponse(BaseModel):
    year: int
    month: int
    count: int
    items: list[CalendarEntryResponse]
