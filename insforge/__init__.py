"""Entrypoint for the InsForge SDK.

Exposes AsyncClient and __version__
"""

from .client import AsyncClient
from .config import ClientOptions, Config
from .exceptions import (
    AuthenticationError,
    AuthSessionMissingError,
    ConfigurationError,
    ConflictError,
    DecodingError,
    EmptyResultError,
    HTTPError,
    InsForgeError,
    InvalidURLError,
    NotFoundError,
    RateLimitError,
    RealtimeError,
    ServerError,
    TransportError,
    TransportTimeoutError,
    ValidationError,
)
from .auth.storage import AuthStorage, FileAuthStorage, InMemoryAuthStorage
from .models.base import Record
from .resources.database.query import QueryBuilder
from .utils.logging import set_log_level
from .version import VERSION as __version__


__all__ = [
    "AsyncClient",
    "AuthSessionMissingError",
    "AuthStorage",
    "AuthenticationError",
    "ClientOptions",
    "Config",
    "ConfigurationError",
    "ConflictError",
    "DecodingError",
    "EmptyResultError",
    "FileAuthStorage",
    "HTTPError",
    "InMemoryAuthStorage",
    "InsForgeError",
    "InvalidURLError",
    "NotFoundError",
    "QueryBuilder",
    "RateLimitError",
    "RealtimeError",
    "Record",
    "ServerError",
    "TransportError",
    "TransportTimeoutError",
    "ValidationError",
    "__version__",
    "set_log_level",
]
