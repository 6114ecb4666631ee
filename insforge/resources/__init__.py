from .ai import AIClient
from .database import DatabaseClient, QueryBuilder
from .functions import FunctionsClient
from .realtime import RealtimeChannel, RealtimeClient
from .storage import StorageClient, StorageFileApi

__all__ = [
    "AIClient",
    "DatabaseClient",
    "FunctionsClient",
    "QueryBuilder",
    "RealtimeChannel",
    "RealtimeClient",
    "StorageClient",
    "StorageFileApi",
]
