from datetime import date, datetime

from pydantic import BaseModel, Field


class GalleryImageInput(BaseModel):
    image_url: str = Field(min_length=1, max_length=1024)
    asset_id: str = Field(min_length=1, max_length=255)
    title: str | None = Field(default=None, max_length=255)
    description: str | None = None
    location: str | None = Field(default=None, max_length=255)
    taken_on: date | None = None


class GalleryUpload(BaseModel):
    images: list[GalleryImageInput] = Field(min_length=1)
    tagged_member_id: int | None = None


class GalleryImageUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    location: str | None = Field(default=None, max_length=255)
    taken_on: date | None = None
    tagged_member_id: int | None = None


class GalleryImageResponse(BaseModel):
    id: int
    title: str
    description: str
    image_url: str
    asset_id: str
    uploaded_by_member_id: int | None
    tagged_member_id: int | None
    location: str
    taken_on: date | None
    status: str
    batch_id: str | None
    created_at: datetime


class GalleryImageListResponse(BaseModel):
    items: list[GalleryImageResponse]
