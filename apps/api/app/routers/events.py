from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.auth import Identity, require_admin, require_auth
from app.core.db import get_db
from app.core.errors import NotFoundError
from app.core.tracking import track_activity
from app.models.entities import Event, EventTypeEnum, NotificationTypeEnum, utcnow
from app.schemas.events import (
    CalendarEntryResponse,
    CalendarFeedResponse,
    EventCreate,
    EventListResponse,
    EventResponse,
    EventUpdate,
)
from app.services.members import load_members
from app.services.notifications import broadcast
from app.services.occasions import calendar_feed, month_bounds

router = APIRouter(prefix="/v1", tags=["events"], dependencies=[Depends(track_activity)])


def _event_response(event: Event) -> EventResponse:
    return EventResponse(
        id=event.id,
        title=event.title,
        description=event.description or "",
        date=event.event_date,
        location=event.location or "",
        event_type=event.event_type.value,
        created_by_email=event.created_by_email,
        created_at=event.created_at,
    )


def _require_event(db: Session, event_id: int) -> Event:
    event = db.get(Event, event_id)
    if event is None:
        raise NotFoundError("event not found")
    return event


@router.get("/events", response_model=EventListResponse)
def list_events(
    year: int | None = Query(default=None, ge=1),
    month: int | None = Query(default=None, ge=1, le=12),
    db: Session = Depends(get_db),
    _: Identity = Depends(require_auth),
):
    query = select(Event)
    if year is not None and month is not None:
        start, end = month_bounds(year, month)
        query = query.where(Event.event_date >= start, Event.event_date <= end)
    elif year is not None:
        query = query.where(Event.event_date >= date(year, 1, 1), Event.event_date <= date(year, 12, 31))
    events = db.execute(query.order_by(Event.event_date.asc(), Event.id.asc())).scalars().all()
    return EventListResponse(items=[_event_response(item) for item in events])


@router.get("/events/{event_id}", response_model=EventResponse)
def get_event(event_id: int, db: Session = Depends(get_db), _: Identity = Depends(require_auth)):
    return _event_response(_require_event(db, event_id))


@router.post("/events", response_model=EventResponse, status_code=201)
def create_event(
    payload: EventCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_admin),
):
    event = Event(
        title=payload.title,
        description=payload.description,
        event_date=payload.date,
        location=payload.location,
        event_type=EventTypeEnum(payload.event_type),
        created_by_email=identity.email or "system",
    )
    db.add(event)
    db.flush()
    broadcast(
        db,
        message=f"📅 New event: {event.title} on {event.event_date.isoformat()}",
        type=NotificationTypeEnum.event,
        sender=identity,
        metadata={"event_id": event.id, "redirect_to": "/calendar"},
    )
    db.commit()
    db.refresh(event)
    return _event_response(event)


@router.patch("/events/{event_id}", response_model=EventResponse)
def update_event(
    event_id: int,
    payload: EventUpdate,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    event = _require_event(db, event_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("title") is not None:
        event.title = changes["title"]
    if changes.get("description") is not None:
        event.description = changes["description"]
    if changes.get("date") is not None:
        event.event_date = changes["date"]
    if changes.get("location") is not None:
        event.location = changes["location"]
    if changes.get("event_type") is not None:
        event.event_type = EventTypeEnum(changes["event_type"])
    db.commit()
    db.refresh(event)
    return _event_response(event)


@router.delete("/events/{event_id}", status_code=204)
def delete_event(event_id: int, db: Session = Depends(get_db), _: Identity = Depends(require_admin)):
    event = _require_event(db, event_id)
    db.delete(event)
    db.commit()


@router.get("/calendar", response_model=CalendarFeedResponse)
def get_calendar(
    year: int | None = Query(default=None, ge=1),
    month: int | None = Query(default=None, ge=1, le=12),
    include_birthdays: bool = Query(default=True),
    include_anniversaries: bool = Query(default=True),
    db: Session = Depends(get_db),
    _: Identity = Depends(require_auth),
):
    today = utcnow().date()
    year = year or today.year
    month = month or today.month
    start, end = month_bounds(year, month)
    events = db.execute(
        select(Event).where(Event.event_date >= start, Event.event_date <= end)
    ).scalars().all()
    entries = calendar_feed(
        load_members(db),
        events,
        year,
        month,
        include_birthdays=include_birthdays,
        include_anniversaries=include_anniversaries,
    )
    return CalendarFeedResponse(
        year=year,
        month=month,
        count=len(entries),
        items=[
            CalendarEntryResponse(type=item.type, date=item.date, title=item.title, details=item.details)
            for item in entries
        ],
    )
