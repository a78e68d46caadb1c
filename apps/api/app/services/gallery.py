from __future__ import annotations

import logging
import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from app.core.auth import Identity
from app.core.errors import NotFoundError, PermissionDenied, ValidationError
from app.models.entities import GalleryImage, ModerationStatusEnum, NotificationTypeEnum, utcnow
from app.services.moderation import transition
from app.services.notifications import broadcast
from app.services.occasions import month_bounds

logger = logging.getLogger(__name__)


def require_image(db: Session, image_id: int) -> GalleryImage:
    image = db.get(GalleryImage, image_id)
    if image is None:
        raise NotFoundError("gallery image not found")
    return image


def list_images(
    db: Session,
    *,
    include_unapproved: bool,
    status: ModerationStatusEnum | None = None,
    search: str | None = None,
    month: int | None = None,
    year: int | None = None,
    sort: str | None = None,
) -> list[GalleryImage]:
    query = select(GalleryImage)
    if not include_unapproved:
        query = query.where(GalleryImage.status == ModerationStatusEnum.approved)
    elif status is not None:
        query = query.where(GalleryImage.status == status)

    if search and search.strip():
        pattern = f"%{search.strip()}%"
        query = query.where(
            or_(
                GalleryImage.title.ilike(pattern),
                GalleryImage.description.ilike(pattern),
                GalleryImage.location.ilike(pattern),
            )
        )

    if month is not None and year is not None:
        start, end = month_bounds(year, month)
        created_start = datetime(start.year, start.month, start.day)
        created_end = datetime(end.year, end.month, end.day, 23, 59, 59)
        query = query.where(
            or_(
                and_(GalleryImage.taken_on >= start, GalleryImage.taken_on <= end),
                and_(
                    GalleryImage.taken_on.is_(None),
                    GalleryImage.created_at >= created_start,
                    GalleryImage.created_at <= created_end,
                ),
            )
        )

    if sort == "oldest":
        query = query.order_by(GalleryImage.taken_on.asc(), GalleryImage.created_at.asc(), GalleryImage.id.asc())
    elif sort == "newest":
        query = query.order_by(GalleryImage.taken_on.desc(), GalleryImage.created_at.desc(), GalleryImage.id.desc())
    else:
        query = query.order_by(GalleryImage.created_at.desc(), GalleryImage.id.desc())
    return list(db.execute(query).scalars().all())


def uploads_this_month(db: Session, member_id: int, now: datetime) -> int:
    start = datetime(now.year, now.month, 1)
    return db.execute(
        select(func.count(GalleryImage.id)).where(
            GalleryImage.uploaded_by_member_id == member_id,
            GalleryImage.created_at >= start,
        )
    ).scalar_one()


def upload_images(
    db: Session,
    *,
    uploader: Identity,
    images: list[dict[str, Any]],
    tagged_member_id: int | None,
    batch_limit: int,
    monthly_limit: int,
) -> list[GalleryImage]:
    """
    Store a batch of already-uploaded assets as pending gallery items.

    Each image dict carries ``image_url`` and ``asset_id`` plus optional
    descriptive fields. Non-admin uploaders are capped per calendar month.
    """
    if not images:
        raise ValidationError("provide at least one image")
    if len(images) > batch_limit:
        raise ValidationError(f"maximum {batch_limit} images allowed at one time")

    if not uploader.is_admin:
        used = uploads_this_month(db, uploader.member_id, utcnow())
        if used + len(images) > monthly_limit:
            raise PermissionDenied(
                f"monthly upload limit would be exceeded: {used} uploaded this month, limit is {monthly_limit}"
            )

    batch_id = uuid.uuid4().hex if len(images) > 1 else None
    created: list[GalleryImage] = []
    for item in images:
        image = GalleryImage(
            title=item.get("title") or "Untitled",
            description=item.get("description") or "",
            location=item.get("location") or "",
            taken_on=item.get("taken_on"),
            image_url=item["image_url"],
            asset_id=item["asset_id"],
            uploaded_by_member_id=uploader.member_id,
            tagged_member_id=tagged_member_id if tagged_member_id is not None else uploader.member_id,
            status=ModerationStatusEnum.pending,
            batch_id=batch_id,
        )
        db.add(image)
        created.append(image)
    db.flush()

    who = uploader.name or "Someone"
    message = (
        f"📸 {who} shared a new memory: \"{created[0].title}\""
        if len(created) == 1
        else f"📸 {who} added {len(created)} new memories to the gallery!"
    )
    broadcast(
        db,
        message=message,
        type=NotificationTypeEnum.system,
        sender=uploader,
        metadata={"redirect_to": "/gallery", "image_ids": [image.id for image in created]},
    )
    logger.info("stored %d gallery image(s) for member %s", len(created), uploader.member_id)
    return created


def moderate(db: Session, image: GalleryImage, target: ModerationStatusEnum) -> GalleryImage:
    if transition(image.status, target, subject=f"gallery image {image.id}"):
        image.status = target
        db.flush()
        logger.info("gallery image %s %s", image.id, target.value)
    return image


def update_image(db: Session, image: GalleryImage, changes: dict[str, Any]) -> GalleryImage:
    for key, value in changes.items():
        setattr(image, key, value)
    db.flush()
    return image


def delete_image(db: Session, image: GalleryImage, identity: Identity) -> None:
    if not identity.is_admin and (identity.member_id is None or image.uploaded_by_member_id != identity.member_id):
        raise PermissionDenied("you are not authorized to delete this image")
    db.delete(image)
    db.flush()
