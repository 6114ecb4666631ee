from .client import AuthClient
from .headers import AuthenticatedTransport, HeaderAuth, SharedHeaders
from .storage import AuthStorage, FileAuthStorage, InMemoryAuthStorage

__all__ = [
    "AuthClient",
    "AuthStorage",
    "AuthenticatedTransport",
    "FileAuthStorage",
    "HeaderAuth",
    "InMemoryAuthStorage",
    "SharedHeaders",
]
