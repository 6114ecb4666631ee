"""/api/storage endpoints."""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from insforge.exceptions import NotFoundError
from insforge.models.storage import BucketInfo, DownloadStrategy, ListResponse, StoredFile, UploadStrategy
from insforge.resources.base import BaseAsyncResource
from insforge.resources.storage.storage_core import _StorageCore
from insforge.transport.base import Transport
from insforge.utils.logging import logger

if TYPE_CHECKING:
    from insforge.client import AsyncClient


class StorageClient(BaseAsyncResource, _StorageCore):
    """
    Buckets and files.

    Example usage::

        async with insforge.AsyncClient() as client:
            await client.storage.create_bucket("avatars")
            stored = await client.storage.from_("avatars").upload("me.png", data)
    """

    def __init__(
        self,
        transport: Transport,
        client: "AsyncClient | None" = None,
        *,
        raw_transport: Transport | None = None,
        base_url: str = "",
    ):
        super().__init__(transport, client)
        self._raw = raw_transport or transport
        self.base_url = base_url.rstrip("/")

    def from_(self, bucket: str) -> "StorageFileApi":
        """File operations scoped to ``bucket``."""
        return StorageFileApi(bucket, self)

    # -------------- buckets -------------- #
    async def list_buckets(self) -> list[str]:
        return [b.name for b in await self.list_buckets_with_info()]

    async def list_buckets_with_info(self) -> list[BucketInfo]:
        resp = await self._t.arequest("GET", self.buckets_url)
        buckets = self._decode(resp, list[BucketInfo])
        logger.debug(f"Listed {len(buckets)} bucket(s)")
        return buckets

    async def create_bucket(self, name: str, is_public: bool = True) -> None:
        """Create a bucket. Names allow letters, digits, ``_`` and ``-``."""
        resp = await self._t.arequest(
            "POST", self.buckets_url, json={"bucketName": name, "isPublic": is_public}
        )
        resp.raise_for_status()
        logger.debug(f"Bucket '{name}' created")

    async def update_bucket(self, name: str, is_public: bool) -> None:
        resp = await self._t.arequest("PATCH", self.bucket_url(name), json={"isPublic": is_public})
        resp.raise_for_status()
        logger.debug(f"Bucket '{name}' updated")

    async def delete_bucket(self, name: str) -> None:
        resp = await self._t.arequest("DELETE", self.bucket_url(name))
        resp.raise_for_status()
        logger.debug(f"Bucket '{name}' deleted")


class StorageFileApi(BaseAsyncResource):
    """File operations inside one bucket. Obtain via ``client.storage.from_(bucket)``."""

    def __init__(self, bucket: str, storage: StorageClient):
        super().__init__(storage._t, storage._client)
        self.bucket = bucket
        self._storage = storage
        self._raw = storage._raw

    # -------------- upload -------------- #
    async def upload(self, path: str, data: bytes, content_type: str | None = None) -> StoredFile:
        """
        Upload ``data`` under the key ``path``.

        The backend decides between a presigned upload and a direct one; the
        upload is confirmed afterwards when the backend asks for it.

        :param path: object key, may contain ``/`` for pseudo-folders.
        :param data: file content.
        :param content_type: MIME type, inferred from ``path`` when omitted.
        :return: the stored file.
        """
        content_type = content_type or self._storage.infer_content_type(path)
        strategy = await self.get_upload_strategy(path, content_type=content_type, size=len(data))
        return await self._upload_with_strategy(strategy, data, content_type)

    async def upload_file(self, path: str, file_path: str | Path, content_type: str | None = None) -> StoredFile:
        """Upload a local file under the key ``path``."""
        file_path = Path(file_path)
        return await self.upload(
            path,
            file_path.read_bytes(),
            content_type or self._storage.infer_content_type(file_path.name),
        )

    async def upload_auto(self, data: bytes, file_name: str, content_type: str | None = None) -> StoredFile:
        """Upload with a server-generated key derived from ``file_name``."""
        content_type = content_type or self._storage.infer_content_type(file_name)
        strategy = await self.get_upload_strategy(file_name, content_type=content_type, size=len(data))
        return await self._upload_with_strategy(strategy, data, content_type)

    async def _upload_with_strategy(self, strategy: UploadStrategy, data: bytes, content_type: str) -> StoredFile:
        if strategy.method == "presigned" and strategy.fields:
            # S3 presigned POST: policy fields first, file last, no SDK headers
            logger.debug(f"[UPLOAD-PRESIGNED] {strategy.upload_url}")
            resp = await self._raw.arequest(
                "POST",
                strategy.upload_url,
                data=strategy.fields,
                files={"file": ("file", data, content_type)},
            )
        else:
            logger.debug(f"[UPLOAD-POST] {strategy.upload_url}")
            resp = await self._t.arequest(
                "POST",
                strategy.upload_url,
                files={"file": (strategy.key, data, content_type)},
            )
        resp.raise_for_status()

        if strategy.confirm_required:
            stored = await self.confirm_upload(strategy.key, size=len(data), content_type=content_type)
            logger.debug(f"File uploaded to '{strategy.key}' via presigned URL")
            return stored

        files = await self.list(prefix=strategy.key, limit=1)
        if not files:
            raise NotFoundError(404, "Uploaded file not found")
        logger.debug(f"File uploaded to '{strategy.key}'")
        return files[0]

    async def get_upload_strategy(
        self, filename: str, content_type: str | None = None, size: int | None = None
    ) -> UploadStrategy:
        body: dict[str, object] = {"filename": filename}
        if content_type is not None:
            body["contentType"] = content_type
        if size is not None:
            body["size"] = size
        resp = await self._t.arequest(
            "POST", f"{self._storage.bucket_url(self.bucket)}/upload-strategy", json=body
        )
        strategy = self._decode(resp, UploadStrategy)
        logger.debug(f"Got upload strategy: {strategy.method} for '{filename}'")
        return strategy

    async def confirm_upload(
        self, path: str, size: int, content_type: str | None = None, etag: str | None = None
    ) -> StoredFile:
        """Confirm a presigned upload. Slashes in ``path`` are percent-encoded."""
        body: dict[str, object] = {"size": size}
        if content_type is not None:
            body["contentType"] = content_type
        if etag is not None:
            body["etag"] = etag
        url = f"{self._storage.object_url(self.bucket, path, encode_slashes=True)}/confirm-upload"
        resp = await self._t.arequest("POST", url, json=body)
        stored = self._decode(resp, StoredFile)
        logger.debug(f"Upload confirmed for '{path}'")
        return stored

    # -------------- download -------------- #
    async def download(self, path: str) -> bytes:
        strategy = await self.get_download_strategy(path)
        # presigned links carry their own signature
        transport = self._raw if strategy.method == "presigned" else self._t
        logger.debug(f"[DOWNLOAD] {strategy.url}")
        resp = await transport.arequest("GET", strategy.url)
        return resp.raise_for_status().content

    async def get_download_strategy(self, path: str, expires_in: int = 3600) -> DownloadStrategy:
        url = f"{self._storage.object_url(self.bucket, path)}/download-strategy"
        resp = await self._t.arequest("POST", url, json={"expiresIn": expires_in})
        strategy = self._decode(resp, DownloadStrategy)
        logger.debug(f"Got download strategy: {strategy.method} for '{path}'")
        return strategy

    # -------------- listing & removal -------------- #
    async def list(self, prefix: str | None = None, limit: int = 100, offset: int = 0) -> list[StoredFile]:
        params: dict[str, object] = {"limit": limit, "offset": offset}
        if prefix is not None:
            params["prefix"] = prefix
        resp = await self._t.arequest(
            "GET", f"{self._storage.bucket_url(self.bucket)}/objects", params=params
        )
        listing = self._decode(resp, ListResponse)
        logger.debug(f"Listed {len(listing.data)} file(s) in bucket '{self.bucket}'")
        return listing.data

    async def delete(self, path: str) -> None:
        resp = await self._t.arequest("DELETE", self._storage.object_url(self.bucket, path))
        resp.raise_for_status()
        logger.debug(f"File '{path}' deleted from bucket '{self.bucket}'")

    def get_public_url(self, path: str) -> str:
        """Public URL of an object in a public bucket. No request is made."""
        return f"{self._storage.base_url}{self._storage.object_url(self.bucket, path)}"
