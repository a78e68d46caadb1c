from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.auth import Identity, get_identity, require_auth
from app.core.tracking import track_activity
from app.schemas.auth import MeResponse

router = APIRouter(prefix="/v1", tags=["auth"])


@router.get("/me", response_model=MeResponse, dependencies=[Depends(track_activity)])
def get_me(identity: Identity = Depends(get_identity)):
    """
    Returns the caller's resolved identity.

    Requests without a forward-auth header come back as ``anonymous`` rather than 401
    so the frontend can decide whether to redirect to login.
    """
    return MeResponse(
        kind=identity.kind.value,
        email=identity.email,
        name=identity.name,
        is_admin=identity.is_admin,
        user_id=identity.user_id,
        member_id=identity.member_id,
    )


@router.post("/logout")
def logout(_: Identity = Depends(require_auth)):
    # With forward-auth, logout is handled by the IdP/proxy; the app doesn't hold a session.
    return {"ok": True}
