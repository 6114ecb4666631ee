from .storage import StorageClient, StorageFileApi

__all__ = ["StorageClient", "StorageFileApi"]
