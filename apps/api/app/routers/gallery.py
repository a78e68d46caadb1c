from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.auth import Identity, get_identity, require_admin, require_auth
from app.core.config import settings
from app.core.db import get_db
from app.core.errors import NotFoundError, PermissionDenied
from app.core.tracking import track_activity
from app.models.entities import GalleryImage, ModerationStatusEnum
from app.schemas.gallery import (
    GalleryImageListResponse,
    GalleryImageResponse,
    GalleryImageUpdate,
    GalleryUpload,
)
from app.services.gallery import delete_image, list_images, moderate, require_image, update_image, upload_images

router = APIRouter(prefix="/v1/gallery", tags=["gallery"], dependencies=[Depends(track_activity)])


def _image_response(image: GalleryImage) -> GalleryImageResponse:
    return GalleryImageResponse(
        id=image.id,
        title=image.title,
        description=image.description or "",
        image_url=image.image_url,
        asset_id=image.asset_id,
        uploaded_by_member_id=image.uploaded_by_member_id,
        tagged_member_id=image.tagged_member_id,
        location=image.location or "",
        taken_on=image.taken_on,
        status=image.status.value,
        batch_id=image.batch_id,
        created_at=image.created_at,
    )


@router.get("", response_model=GalleryImageListResponse)
def list_gallery(
    status: ModerationStatusEnum | None = Query(default=None),
    search: str | None = Query(default=None, max_length=255),
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=1),
    sort: str | None = Query(default=None, pattern="^(newest|oldest)$"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_identity),
):
    """
    Public listing shows approved images only; admins may filter by any status.
    """
    images = list_images(
        db,
        include_unapproved=identity.is_admin,
        status=status,
        search=search,
        month=month,
        year=year,
        sort=sort,
    )
    return GalleryImageListResponse(items=[_image_response(item) for item in images])


@router.get("/{image_id}", response_model=GalleryImageResponse)
def get_gallery_image(image_id: int, db: Session = Depends(get_db), identity: Identity = Depends(require_auth)):
    image = require_image(db, image_id)
    if image.status != ModerationStatusEnum.approved and not identity.is_admin:
        if image.uploaded_by_member_id is None or image.uploaded_by_member_id != identity.member_id:
            # Unmoderated images are visible to their uploader and admins only.
            raise NotFoundError("gallery image not found")
    return _image_response(image)


@router.post("", response_model=GalleryImageListResponse, status_code=201)
def upload(
    payload: GalleryUpload,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_auth),
):
    if identity.member_id is None and not identity.is_admin:
        raise PermissionDenied("no linked family member")
    images = upload_images(
        db,
        uploader=identity,
        images=[item.model_dump() for item in payload.images],
        tagged_member_id=payload.tagged_member_id,
        batch_limit=settings.gallery_batch_limit,
        monthly_limit=settings.gallery_monthly_limit,
    )
    db.commit()
    for image in images:
        db.refresh(image)
    return GalleryImageListResponse(items=[_image_response(item) for item in images])


@router.post("/{image_id}/approve", response_model=GalleryImageResponse)
def approve(image_id: int, db: Session = Depends(get_db), _: Identity = Depends(require_admin)):
    image = moderate(db, require_image(db, image_id), ModerationStatusEnum.approved)
    db.commit()
    db.refresh(image)
    return _image_response(image)


@router.post("/{image_id}/reject", response_model=GalleryImageResponse)
def reject(image_id: int, db: Session = Depends(get_db), _: Identity = Depends(require_admin)):
    image = moderate(db, require_image(db, image_id), ModerationStatusEnum.rejected)
    db.commit()
    db.refresh(image)
    return _image_response(image)


@router.patch("/{image_id}", response_model=GalleryImageResponse)
def update(
    image_id: int,
    payload: GalleryImageUpdate,
    db: Session = Depends(get_db),
    _: Identity = Depends(require_admin),
):
    changes = payload.model_dump(exclude_unset=True)
    if changes.get("title") is None:
        changes.pop("title", None)
    image = update_image(db, require_image(db, image_id), changes)
    db.commit()
    db.refresh(image)
    return _image_response(image)


@router.delete("/{image_id}", status_code=204)
def delete(image_id: int, db: Session = Depends(get_db), identity: Identity = Depends(require_auth)):
    delete_image(db, require_image(db, image_id), identity)
    db.commit()
