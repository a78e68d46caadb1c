from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.auth import Identity, require_admin, require_auth
from app.core.config import settings
from app.core.db import get_db
from app.core.errors import ConflictError, PermissionDenied
from app.core.tracking import track_activity
from app.models.entities import utcnow
from app.schemas.members import (
    DashboardStatsResponse,
    FamilyMemberCreate,
    FamilyMemberDetailResponse,
    FamilyMemberListResponse,
    FamilyMemberResponse,
    FamilyMemberUpdate,
    UpcomingAnniversaryResponse,
    UpcomingBirthdayResponse,
    member_response,
)
from app.services.members import (
    SELF_EDITABLE_FIELDS,
    create_member,
    delete_member,
    list_members,
    load_graph,
    load_members,
    require_member_record,
    update_member,
)
from app.services.stats import dashboard

router = APIRouter(prefix="/v1/members", tags=["members"], dependencies=[Depends(track_activity)])


@router.get("", response_model=FamilyMemberListResponse)
def list_family_members(
    search: str | None = Query(default=None, max_length=255),
    generation: int | None = Query(default=None, ge=0),
    db: Session = Depends(get_db),
    _: Identity = Depends(require_auth),
):
    members = list_members(db, search=search, generation=generation)
    return FamilyMemberListResponse(items=[member_response(item) for item in members])


@router.get("/stats", response_model=DashboardStatsResponse)
def dashboard_stats(
    db: Session = Depends(get_db),
    _: Identity = Depends(require_auth),
):
    stats = dashboard(load_members(db), utcnow().date(), settings.upcoming_window_days)
    return DashboardStatsResponse(
        total_members=stats["total_members"],
        total_generations=stats["total_generations"],
        upcoming_birthdays=[
            UpcomingBirthdayResponse(
                member=member_response(item.member),
                next_birthday=item.next_birthday,
                days_until=item.days_until,
                turning=item.turning,
            )
            for item in stats["upcoming_birthdays"]
        ],
        upcoming_anniversaries=[
            UpcomingAnniversaryResponse(
                member1_id=item.member.member_id,
                member2_id=item.spouse.member_id,
                member1=item.member.name,
                member2=item.spouse.name,
                anniversary_date=item.anniversary_date,
                next_anniversary=item.next_anniversary,
                days_until=item.days_until,
                years=item.years,
            )
            for item in stats["upcoming_anniversaries"]
        ],
    )


@router.get("/generation/{generation}", response_model=FamilyMemberListResponse)
def list_generation(
    generation: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_auth),
):
    members = list_members(db, generation=generation)
    return FamilyMemberListResponse(items=[member_response(item) for item in members])


@router.get("/{member_id}", response_model=FamilyMemberDetailResponse)
def get_family_member(
    member_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_auth),
):
    member = require_member_record(db, member_id)
    relations = load_graph(db).resolve(member.member_id)
    return FamilyMemberDetailResponse(
        **member_response(member).model_dump(),
        parents=[member_response(item) for item in relations.parents],
        spouse=member_response(relations.spouse) if relations.spouse is not None else None,
        children=[member_response(item) for item in relations.children],
        siblings=[member_response(item) for item in relations.siblings],
    )


@router.post("", response_model=FamilyMemberResponse, status_code=201)
def create_family_member(
    payload: FamilyMemberCreate,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    try:
        member = create_member(db, payload.model_dump())
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("family id or email already exists") from exc
    db.refresh(member)
    return member_response(member)


@router.patch("/{member_id}", response_model=FamilyMemberResponse)
def update_family_member(
    member_id: int,
    payload: FamilyMemberUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
):
    member = require_member_record(db, member_id)
    if identity.is_admin:
        allowed = None
    elif identity.member_id == member.member_id:
        # Members may edit their own profile but not its place in the tree.
        allowed = SELF_EDITABLE_FIELDS
    else:
        raise PermissionDenied("you can only edit your own profile")

    try:
        update_member(db, member, payload.model_dump(exclude_unset=True), allowed=allowed)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("email already exists") from exc
    db.refresh(member)
    return member_response(member)


@router.delete("/{member_id}", status_code=204)
def delete_family_member(
    member_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    member = require_member_record(db, member_id)
    delete_member(db, member)
    db.commit()
