from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Iterable

from app.models.entities import Event, FamilyMember

# Entries on the same day are listed in this order.
_TYPE_RANK = {"birthday": 0, "anniversary": 1, "event": 2, "holiday": 3, "other": 4}


def anchor(original: date, year: int) -> date:
    """Month/day of ``original`` in ``year``; Feb 29 becomes Feb 28 in non-leap years."""
    if original.month == 2 and original.day == 29 and not calendar.isleap(year):
        return date(year, 2, 28)
    return date(year, original.month, original.day)


def next_occurrence(original: date, today: date) -> date:
    candidate = anchor(original, today.year)
    if candidate < today:
        candidate = anchor(original, today.year + 1)
    return candidate


def days_until(original: date, today: date) -> int:
    return (next_occurrence(original, today) - today).days


@dataclass
class UpcomingBirthday:
    member: FamilyMember
    next_birthday: date
    days_until: int
    turning: int


@dataclass
class UpcomingAnniversary:
    member: FamilyMember
    spouse: FamilyMember
    anniversary_date: date
    next_anniversary: date
    days_until: int
    years: int


@dataclass
class CalendarEntry:
    type: str
    date: date
    title: str
    details: dict[str, Any] = field(default_factory=dict)


def upcoming_birthdays(members: Iterable[FamilyMember], today: date, window_days: int) -> list[UpcomingBirthday]:
    out: list[UpcomingBirthday] = []
    for member in members:
        if member.birth_date is None or member.is_deceased:
            continue
        upcoming = next_occurrence(member.birth_date, today)
        delta = (upcoming - today).days
        if delta <= window_days:
            out.append(
                UpcomingBirthday(
                    member=member,
                    next_birthday=upcoming,
                    days_until=delta,
                    turning=upcoming.year - member.birth_date.year,
                )
            )
    out.sort(key=lambda item: (item.days_until, item.member.name, item.member.member_id))
    return out


def spouse_pairs(members: Iterable[FamilyMember]) -> list[tuple[FamilyMember, FamilyMember, date]]:
    """
    One (member, spouse, anniversary) triple per married couple.

    The couple is listed under whichever spouse has the lower id. Either
    spouse may hold the anniversary date; couples without one, with a dangling
    spouse link, or with a deceased spouse are skipped.
    """
    by_id = {member.member_id: member for member in members}
    seen: set[tuple[int, int]] = set()
    pairs: list[tuple[FamilyMember, FamilyMember, date]] = []
    for member in sorted(by_id.values(), key=lambda item: item.member_id):
        if member.spouse_id is None or member.spouse_id == member.member_id:
            continue
        key = tuple(sorted((member.member_id, member.spouse_id)))
        if key in seen:
            continue
        spouse = by_id.get(member.spouse_id)
        if spouse is None:
            continue
        seen.add(key)
        anniversary = member.anniversary_date or spouse.anniversary_date
        if anniversary is None or member.is_deceased or spouse.is_deceased:
            continue
        pairs.append((member, spouse, anniversary))
    return pairs


def upcoming_anniversaries(
    members: Iterable[FamilyMember], today: date, window_days: int
) -> list[UpcomingAnniversary]:
    out: list[UpcomingAnniversary] = []
    for member, spouse, anniversary in spouse_pairs(members):
        upcoming = next_occurrence(anniversary, today)
        delta = (upcoming - today).days
        if delta <= window_days:
            out.append(
                UpcomingAnniversary(
                    member=member,
                    spouse=spouse,
                    anniversary_date=anniversary,
                    next_anniversary=upcoming,
                    days_until=delta,
                    years=upcoming.year - anniversary.year,
                )
            )
    out.sort(key=lambda item: (item.days_until, item.member.member_id))
    return out


def calendar_feed(
    members: Iterable[FamilyMember],
    events: Iterable[Event],
    year: int,
    month: int,
    include_birthdays: bool = True,
    include_anniversaries: bool = True,
) -> list[CalendarEntry]:
    members = list(members)
    entries: list[CalendarEntry] = []

    if include_birthdays:
        for member in members:
            if member.birth_date is None or member.is_deceased or member.birth_date.month != month:
                continue
            entries.append(
                CalendarEntry(
                    type="birthday",
                    date=anchor(member.birth_date, year),
                    title=f"{member.name}'s Birthday",
                    details={
                        "member_id": member.member_id,
                        "member_name": member.name,
                        "avatar": member.avatar,
                        "birth_date": member.birth_date.isoformat(),
                    },
                )
            )

    if include_anniversaries:
        for member, spouse, anniversary in spouse_pairs(members):
            if anniversary.month != month:
                continue
            entries.append(
                CalendarEntry(
                    type="anniversary",
                    date=anchor(anniversary, year),
                    title=f"{member.name} & {spouse.name}'s Anniversary",
                    details={
                        "member1_id": member.member_id,
                        "member2_id": spouse.member_id,
                        "member1_name": member.name,
                        "member2_name": spouse.name,
                        "anniversary_date": anniversary.isoformat(),
                    },
                )
            )

    for event in events:
        if event.event_date.year != year or event.event_date.month != month:
            continue
        entries.append(
            CalendarEntry(
                type=event.event_type.value,
                date=event.event_date,
                title=event.title,
                details={
                    "event_id": event.id,
                    "description": event.description,
                    "location": event.location,
                },
            )
        )

    entries.sort(key=lambda item: (item.date, _TYPE_RANK.get(item.type, len(_TYPE_RANK)), item.title))
    return entries


def month_bounds(year: int, month: int) -> tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)
