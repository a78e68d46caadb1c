from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from fastapi import Depends, Header, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.db import get_db
from app.models.entities import FamilyMember, MemberId, ModerationStatusEnum, User, UserRoleEnum

logger = logging.getLogger(__name__)


class IdentityKind(str, Enum):
    anonymous = "anonymous"
    user = "user"
    admin = "admin"


@dataclass(frozen=True)
class Identity:
    kind: IdentityKind
    email: str | None = None
    name: str | None = None
    user_id: int | None = None
    member_id: MemberId | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.kind != IdentityKind.anonymous

    @property
    def is_admin(self) -> bool:
        return self.kind == IdentityKind.admin


ANONYMOUS = Identity(kind=IdentityKind.anonymous)
INTERNAL_ADMIN = Identity(kind=IdentityKind.admin, email="system", name="System")


def resolve_identity(db: Session, email: str) -> Identity:
    email = email.strip().lower()
    user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if user is not None:
        if user.status != ModerationStatusEnum.approved:
            raise HTTPException(status_code=403, detail=f"account is {user.status.value}")
        kind = IdentityKind.admin if user.role == UserRoleEnum.admin else IdentityKind.user
        return Identity(
            kind=kind,
            email=email,
            name=user.name,
            user_id=user.id,
            member_id=MemberId(user.linked_member_id) if user.linked_member_id is not None else None,
        )

    member = db.execute(select(FamilyMember).where(FamilyMember.email == email)).scalar_one_or_none()
    if email in settings.admin_email_set:
        return Identity(
            kind=IdentityKind.admin,
            email=email,
            name=member.name if member is not None else "Admin",
            member_id=MemberId(member.member_id) if member is not None else None,
        )
    if member is not None:
        return Identity(kind=IdentityKind.user, email=email, name=member.name, member_id=MemberId(member.member_id))

    logger.info("rejecting unregistered account %s", email)
    raise HTTPException(status_code=403, detail="account not registered")


def get_identity(
    db: Session = Depends(get_db),
    x_forwarded_user: str | None = Header(default=None, alias="X-Forwarded-User"),
    x_dev_user: str | None = Header(default=None, alias="X-Dev-User"),
    x_internal_admin_token: str | None = Header(default=None, alias="X-Internal-Admin-Token"),
) -> Identity:
    """
    Auth boundary.

    In prod, requests are expected to be behind Traefik Forward Auth, which injects
    X-Forwarded-User (email). X-Dev-User is honoured only with AUTH_MODE=dev.
    Requests without either header are anonymous.
    """
    if x_internal_admin_token:
        if x_internal_admin_token != settings.internal_admin_token:
            raise HTTPException(status_code=401, detail="invalid internal admin token")
        return INTERNAL_ADMIN

    email = x_forwarded_user
    if not email and settings.auth_mode == "dev":
        email = x_dev_user
    if not email:
        return ANONYMOUS
    return resolve_identity(db, email)


def require_auth(identity: Identity = Depends(get_identity)) -> Identity:
    if not identity.is_authenticated:
        raise HTTPException(status_code=401, detail="authentication required")
    return identity


def require_admin(identity: Identity = Depends(require_auth)) -> Identity:
    if not identity.is_admin:
        raise HTTPException(status_code=403, detail="admin role required")
    return identity


def require_member(identity: Identity = Depends(require_auth)) -> Identity:
    if identity.member_id is None:
        raise HTTPException(status_code=403, detail="no linked family member")
    return identity
