from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from app.models.entities import ActivityMixin

logger = logging.getLogger(__name__)

DEBOUNCE = timedelta(seconds=30)
GAP_CEILING = timedelta(minutes=15)


@dataclass(frozen=True)
class SessionCounters:
    today: int = 0
    monthly: int = 0
    yearly: int = 0


@dataclass(frozen=True)
class ActivityUpdate:
    counters: SessionCounters
    added_seconds: int
    last_active: datetime


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def compute_activity(
    counters: SessionCounters,
    last_active: datetime | None,
    now: datetime,
    debounce: timedelta = DEBOUNCE,
    gap_ceiling: timedelta = GAP_CEILING,
) -> ActivityUpdate | None:
    """
    Roll elapsed time since ``last_active`` into the session counters.

    Returns None when the call falls inside the debounce window, meaning
    nothing should be written. Counters reset on day, month and year change
    before anything is added; elapsed time that is negative or beyond the gap
    ceiling adds nothing but still moves ``last_active``.
    """
    now = _naive_utc(now)
    if last_active is None:
        return ActivityUpdate(counters=counters, added_seconds=0, last_active=now)

    last_active = _naive_utc(last_active)
    elapsed = now - last_active
    if timedelta(0) <= elapsed < debounce:
        return None

    today, monthly, yearly = counters.today, counters.monthly, counters.yearly
    if now.date() != last_active.date():
        today = 0
    if (now.year, now.month) != (last_active.year, last_active.month):
        monthly = 0
    if now.year != last_active.year:
        yearly = 0

    added = 0
    if timedelta(0) <= elapsed <= gap_ceiling:
        added = int(elapsed.total_seconds())

    return ActivityUpdate(
        counters=SessionCounters(today=today + added, monthly=monthly + added, yearly=yearly + added),
        added_seconds=added,
        last_active=now,
    )


def record_activity(
    record: ActivityMixin,
    now: datetime,
    path: str,
    debounce: timedelta = DEBOUNCE,
    gap_ceiling: timedelta = GAP_CEILING,
) -> bool:
    """Apply ``compute_activity`` to a member or user row. Returns True when the row changed."""
    update = compute_activity(
        SessionCounters(
            today=record.session_time_today or 0,
            monthly=record.session_time_monthly or 0,
            yearly=record.session_time_yearly or 0,
        ),
        record.last_active,
        now,
        debounce=debounce,
        gap_ceiling=gap_ceiling,
    )
    if update is None:
        return False

    record.session_time_today = update.counters.today
    record.session_time_monthly = update.counters.monthly
    record.session_time_yearly = update.counters.yearly
    record.last_active = update.last_active
    record.current_path = path[:255]
    if update.added_seconds:
        logger.debug("added %ss of session time", update.added_seconds)
    return True
