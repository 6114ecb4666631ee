import mimetypes
from urllib.parse import quote


class _StorageCore:
    ENDPOINT = "/api/storage"
    DEFAULT_CONTENT_TYPE = "application/octet-stream"

    @property
    def buckets_url(self) -> str:
        return f"{self.ENDPOINT}/buckets"

    def bucket_url(self, bucket: str) -> str:
        return f"{self.buckets_url}/{quote(bucket, safe='')}"

    def object_url(self, bucket: str, path: str, *, encode_slashes: bool = False) -> str:
        key = quote(path, safe="" if encode_slashes else "/")
        return f"{self.bucket_url(bucket)}/objects/{key}"

    @classmethod
    def infer_content_type(cls, path: str) -> str:
        content_type, _ = mimetypes.guess_type(path)
        return content_type or cls.DEFAULT_CONTENT_TYPE
