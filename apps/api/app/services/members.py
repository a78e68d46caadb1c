from __future__ import annotations

import logging
from datetime import date
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.entities import FamilyMember, MemberId
from app.services.relations import FamilyGraph

logger = logging.getLogger(__name__)

SELF_EDITABLE_FIELDS = frozenset(
    {"name", "nickname", "email", "avatar", "bio", "location", "occupation", "anniversary_date"}
)
REQUIRED_FIELDS = frozenset({"name", "nickname", "gender", "generation", "avatar", "occupation", "location", "bio"})


def load_members(db: Session) -> list[FamilyMember]:
    return list(db.execute(select(FamilyMember)).scalars().all())


def load_graph(db: Session) -> FamilyGraph:
    return FamilyGraph(load_members(db))


def find_member(db: Session, member_id: MemberId | int) -> FamilyMember | None:
    return db.execute(select(FamilyMember).where(FamilyMember.member_id == member_id)).scalar_one_or_none()


def require_member_record(db: Session, member_id: MemberId | int) -> FamilyMember:
    member = find_member(db, member_id)
    if member is None:
        raise NotFoundError("family member not found")
    return member


def list_members(db: Session, search: str | None = None, generation: int | None = None) -> list[FamilyMember]:
    query = select(FamilyMember)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.where(or_(FamilyMember.name.ilike(pattern), FamilyMember.email.ilike(pattern)))
    if generation is not None:
        query = query.where(FamilyMember.generation == generation)
    return list(db.execute(query.order_by(FamilyMember.generation.asc(), FamilyMember.member_id.asc())).scalars().all())


def next_member_id(db: Session) -> MemberId:
    current = db.execute(select(func.max(FamilyMember.member_id))).scalar_one_or_none()
    return MemberId((current or 0) + 1)


def _check_dates(birth_date: date | None, death_date: date | None) -> None:
    if birth_date is not None and death_date is not None and death_date < birth_date:
        raise ValidationError("death date must be on or after birth date")


def _check_parent(db: Session, member_id: int, parent_id: int | None, generation: int) -> None:
    if parent_id is None:
        return
    if parent_id == member_id:
        raise ValidationError("a member cannot be their own parent")
    parent = find_member(db, parent_id)
    if parent is None:
        raise ValidationError(f"parent {parent_id} does not exist")
    if generation <= parent.generation:
        raise ValidationError(
            f"generation {generation} must be greater than parent generation {parent.generation}"
        )


def _check_children(db: Session, member_id: int, generation: int) -> None:
    youngest = db.execute(
        select(func.min(FamilyMember.generation)).where(FamilyMember.parent_id == member_id)
    ).scalar_one_or_none()
    if youngest is not None and generation >= youngest:
        raise ValidationError(f"generation {generation} must be less than child generation {youngest}")


def _check_email(db: Session, email: str | None, record_id: int | None = None) -> None:
    if not email:
        return
    query = select(FamilyMember.record_id).where(FamilyMember.email == email)
    if record_id is not None:
        query = query.where(FamilyMember.record_id != record_id)
    if db.execute(query).first() is not None:
        raise ConflictError("email already exists")


def set_spouse(db: Session, member: FamilyMember, spouse_id: int | None) -> None:
    """
    Point ``member`` at ``spouse_id`` and keep the link symmetric.

    The previous spouse's back-link is cleared. Linking to someone who is
    married to a third member is refused rather than silently re-pairing.
    """
    previous = member.spouse_id
    if spouse_id == previous:
        return

    partner: FamilyMember | None = None
    if spouse_id is not None:
        if spouse_id == member.member_id:
            raise ValidationError("a member cannot be their own spouse")
        partner = find_member(db, spouse_id)
        if partner is None:
            raise ValidationError(f"spouse {spouse_id} does not exist")
        if partner.spouse_id is not None and partner.spouse_id != member.member_id:
            raise ConflictError(f"member {spouse_id} is already married to member {partner.spouse_id}")

    if previous is not None:
        former = find_member(db, previous)
        if former is not None and former.spouse_id == member.member_id:
            former.spouse_id = None

    member.spouse_id = spouse_id
    if partner is not None:
        partner.spouse_id = member.member_id


def create_member(db: Session, data: dict[str, Any]) -> FamilyMember:
    data = dict(data)
    member_id = data.pop("id", None)
    if member_id is None:
        member_id = next_member_id(db)
    elif find_member(db, member_id) is not None:
        raise ConflictError("family id already exists")

    spouse_id = data.pop("spouse_id", None)
    if data.get("email"):
        data["email"] = data["email"].lower()
    _check_email(db, data.get("email"))
    _check_dates(data.get("birth_date"), data.get("death_date"))
    _check_parent(db, member_id, data.get("parent_id"), data.get("generation", 0))

    member = FamilyMember(member_id=member_id, **data)
    db.add(member)
    set_spouse(db, member, spouse_id)
    db.flush()
    logger.info("created family member %s (%s)", member.member_id, member.name)
    return member


def update_member(
    db: Session, member: FamilyMember, changes: dict[str, Any], allowed: frozenset[str] | None = None
) -> FamilyMember:
    if allowed is not None:
        changes = {key: value for key, value in changes.items() if key in allowed}

    for key in sorted(REQUIRED_FIELDS.intersection(changes)):
        if changes[key] is None:
            raise ValidationError(f"{key} cannot be null")

    if "email" in changes and changes["email"]:
        changes["email"] = changes["email"].lower()
        _check_email(db, changes["email"], record_id=member.record_id)

    _check_dates(changes.get("birth_date", member.birth_date), changes.get("death_date", member.death_date))
    if "parent_id" in changes or "generation" in changes:
        _check_parent(
            db,
            member.member_id,
            changes.get("parent_id", member.parent_id),
            changes.get("generation", member.generation),
        )
    if "generation" in changes:
        _check_children(db, member.member_id, changes["generation"])

    if "spouse_id" in changes:
        set_spouse(db, member, changes.pop("spouse_id"))
    for key, value in changes.items():
        setattr(member, key, value)
    db.flush()
    return member


def delete_member(db: Session, member: FamilyMember) -> None:
    # Children keep their parent_id; it resolves to nothing once the row is gone.
    set_spouse(db, member, None)
    db.delete(member)
    db.flush()
    logger.info("deleted family member %s", member.member_id)
