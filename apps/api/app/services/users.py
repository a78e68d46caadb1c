from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.entities import ModerationStatusEnum, User, UserRoleEnum
from app.services.members import find_member
from app.services.moderation import transition

logger = logging.getLogger(__name__)


def require_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("user not found")
    return user


def list_users(db: Session, status: ModerationStatusEnum | None = None) -> list[User]:
    query = select(User)
    if status is not None:
        query = query.where(User.status == status)
    return list(db.execute(query.order_by(User.created_at.desc(), User.id.desc())).scalars().all())


def _check_link(db: Session, linked_member_id: int | None) -> None:
    if linked_member_id is not None and find_member(db, linked_member_id) is None:
        raise ValidationError(f"family member {linked_member_id} does not exist")


def register_user(db: Session, data: dict[str, Any]) -> User:
    email = str(data["email"]).strip().lower()
    if db.execute(select(User.id).where(User.email == email)).first() is not None:
        raise ConflictError("email already exists")
    _check_link(db, data.get("linked_member_id"))
    user = User(
        email=email,
        name=data["name"],
        nickname=data.get("nickname") or "",
        linked_member_id=data.get("linked_member_id"),
        role=UserRoleEnum.family_member,
        status=ModerationStatusEnum.pending,
    )
    db.add(user)
    db.flush()
    logger.info("registered user %s pending approval", email)
    return user


def approve_user(db: Session, user: User, role: UserRoleEnum | None = None) -> User:
    if user.linked_member_id is None:
        raise ValidationError("user must be linked to a family member before approval")
    if transition(user.status, ModerationStatusEnum.approved, subject=f"user {user.id}"):
        user.status = ModerationStatusEnum.approved
    if role is not None:
        user.role = role
    db.flush()
    return user


def reject_user(db: Session, user: User) -> User:
    if transition(user.status, ModerationStatusEnum.rejected, subject=f"user {user.id}"):
        user.status = ModerationStatusEnum.rejected
        db.flush()
    return user


def update_user(db: Session, user: User, changes: dict[str, Any]) -> User:
    for key in ("name", "nickname", "role"):
        if key in changes and changes[key] is None:
            raise ValidationError(f"{key} cannot be null")
    if "linked_member_id" in changes:
        _check_link(db, changes["linked_member_id"])
    for key, value in changes.items():
        setattr(user, key, value)
    db.flush()
    return user
