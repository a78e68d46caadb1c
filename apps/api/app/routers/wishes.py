from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.auth import Identity, require_member
from app.core.db import get_db
from app.core.errors import ConflictError
from app.core.tracking import track_activity
from app.models.entities import utcnow
from app.schemas.wishes import SentWishesResponse, WishCreate, WishListResponse, WishResponse
from app.services.wishes import DUPLICATE_WISH, received_wishes, send_wish, sent_recipient_ids

router = APIRouter(prefix="/v1/wishes", tags=["wishes"], dependencies=[Depends(track_activity)])


@router.post("", response_model=WishResponse, status_code=201)
def create_wish(
    payload: WishCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_member),
):
    try:
        wish = send_wish(
            db,
            sender=identity,
            recipient_member_id=payload.recipient_member_id,
            message=payload.message,
            year=utcnow().year,
        )
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConflictError(DUPLICATE_WISH) from exc
    db.refresh(wish)
    return WishResponse.model_validate(wish, from_attributes=True)


@router.get("/received", response_model=WishListResponse)
def list_received(
    year: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_member),
):
    wishes = received_wishes(db, identity.member_id, year or utcnow().year)
    return WishListResponse(items=[WishResponse.model_validate(item, from_attributes=True) for item in wishes])


@router.get("/sent", response_model=SentWishesResponse)
def list_sent(
    year: int | None = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_member),
):
    year = year or utcnow().year
    return SentWishesResponse(year=year, recipient_ids=sent_recipient_ids(db, identity.member_id, year))
