from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.auth import Identity, require_admin
from app.core.db import get_db
from app.core.errors import ConflictError
from app.models.entities import ModerationStatusEnum, User, UserRoleEnum
from app.schemas.users import (
    LinkedMemberSummary,
    UserApprove,
    UserCreate,
    UserListResponse,
    UserResponse,
    UserUpdate,
)
from app.services.members import find_member
from app.services.users import approve_user, list_users, register_user, reject_user, require_user, update_user

router = APIRouter(prefix="/v1/users", tags=["users"])


def _user_response(db: Session, user: User) -> UserResponse:
    linked = find_member(db, user.linked_member_id) if user.linked_member_id is not None else None
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        nickname=user.nickname or "",
        role=user.role.value,
        status=user.status.value,
        linked_member_id=user.linked_member_id,
        linked_member=(
            LinkedMemberSummary(
                id=linked.member_id,
                name=linked.name,
                avatar=linked.avatar or "",
                generation=linked.generation,
            )
            if linked is not None
            else None
        ),
        created_at=user.created_at,
    )


@router.post("/register", response_model=UserResponse, status_code=201)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    try:
        user = register_user(db, payload.model_dump())
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("email already exists") from exc
    db.refresh(user)
    return _user_response(db, user)


@router.get("", response_model=UserListResponse)
def list_accounts(
    status: ModerationStatusEnum | None = Query(default=None),
    db: Session = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    return UserListResponse(items=[_user_response(db, item) for item in list_users(db, status)])


@router.get("/{user_id}", response_model=UserResponse)
def get_account(user_id: int, db: Session = Depends(get_db), _: Identity = Depends(require_admin)):
    return _user_response(db, require_user(db, user_id))


@router.post("/{user_id}/approve", response_model=UserResponse)
def approve_account(
    user_id: int,
    payload: UserApprove | None = None,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    user = require_user(db, user_id)
    role = UserRoleEnum(payload.role) if payload is not None and payload.role else None
    approve_user(db, user, role)
    db.commit()
    db.refresh(user)
    return _user_response(db, user)


@router.post("/{user_id}/reject", response_model=UserResponse)
def reject_account(user_id: int, db: Session = Depends(get_db), _: Identity = Depends(require_admin)):
    user = require_user(db, user_id)
    reject_user(db, user)
    db.commit()
    db.refresh(user)
    return _user_response(db, user)


@router.patch("/{user_id}", response_model=UserResponse)
def update_account(
    user_id: int,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    user = require_user(db, user_id)
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("role") is not None:
        changes["role"] = UserRoleEnum(changes["role"])
    try:
        update_user(db, user, changes)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError("user update conflicts with an existing record") from exc
    db.refresh(user)
    return _user_response(db, user)


@router.delete("/{user_id}", status_code=204)
def delete_account(user_id: int, db: Session = Depends(get_db), _: Identity = Depends(require_admin)):
    user = require_user(db, user_id)
    db.delete(user)
    db.commit()
