"""Exceptions raised by the InsForge SDK."""
from __future__ import annotations

from typing import Any


class InsForgeError(Exception):
    """Base exception for every SDK error."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidURLError(InsForgeError):
    """A request URL could not be built from the given path and query."""


class TransportError(InsForgeError):
    """Network or connectivity failure; the request may be retried by the caller."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class TransportTimeoutError(TransportError):
    """The request did not complete within the configured timeout."""


class HTTPError(InsForgeError):
    """The server answered with a non-2xx status.

    Branch on ``status_code`` or ``code``; ``message`` is meant for humans.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        code: str | None = None,
        hint: str | None = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.hint = hint
        self.body = body

    def __str__(self) -> str:
        if self.code:
            return f"HTTP {self.status_code}: {self.code} - {self.message}"
        return f"HTTP {self.status_code}: {self.message}"

    @classmethod
    def for_status(cls, status_code: int) -> type["HTTPError"]:
        """Pick the most specific subclass for a status code."""
        if status_code in (401, 403):
            return AuthenticationError
        if status_code == 404:
            return NotFoundError
        if status_code == 409:
            return ConflictError
        if status_code == 429:
            return RateLimitError
        if 500 <= status_code < 600:
            return ServerError
        return HTTPError


class AuthenticationError(HTTPError):
    """401/403: credentials are missing, invalid or insufficient."""


class NotFoundError(HTTPError):
    """404: the resource does not exist."""


class ConflictError(HTTPError):
    """409: the request conflicts with the current state of the resource."""


class RateLimitError(HTTPError):
    """429: too many requests."""


class ServerError(HTTPError):
    """5xx: the backend failed."""


class DecodingError(InsForgeError):
    """A successful response body did not match the expected shape."""

    def __init__(self, message: str, cause: BaseException | None = None, body: str | None = None):
        super().__init__(message)
        self.cause = cause
        self.body = body


class EmptyResultError(InsForgeError):
    """A single-row insert returned no rows."""


class ValidationError(InsForgeError):
    """Invalid arguments were passed to an SDK method."""


class ConfigurationError(InsForgeError):
    """A required configuration value is missing."""


class AuthSessionMissingError(InsForgeError):
    """The operation needs a signed-in user and there is no session."""


class RealtimeError(InsForgeError):
    """Realtime connection or messaging failure."""
