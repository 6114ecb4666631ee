from __future__ import annotations

from insforge.models.base import APIModel
from insforge.utils.dates import Timestamp


class StoredFile(APIModel):
    bucket: str
    key: str
    size: int
    mime_type: str | None = None
    uploaded_at: Timestamp
    url: str


class Pagination(APIModel):
    offset: int
    limit: int
    total: int


class ListResponse(APIModel):
    data: list[StoredFile]
    pagination: Pagination | None = None


class BucketInfo(APIModel):
    name: str
    public: bool
    created_at: str


class UploadStrategy(APIModel):
    method: str  # "presigned" or "direct"
    upload_url: str
    fields: dict[str, str] | None = None
    key: str
    confirm_required: bool = False
    confirm_url: str | None = None
    expires_at: str | None = None


class DownloadStrategy(APIModel):
    method: str  # "presigned" or "direct"
    url: str
    expires_at: str | None = None
