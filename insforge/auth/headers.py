"""Shared outgoing headers and the transport decorator that applies them."""
from __future__ import annotations

import threading
from typing import Any, Mapping

from insforge.transport.base import QueryParams, Transport
from insforge.transport.response import Response

AUTHORIZATION = "Authorization"


class SharedHeaders:
    """Header map shared by every resource client.

    Reads return a copy taken under the lock. Writes build a new dict and swap
    it in under the same lock, so a reader sees either the old or the new map,
    never a mix.
    """

    def __init__(self, initial: Mapping[str, str] | None = None):
        self._lock = threading.Lock()
        self._headers: dict[str, str] = dict(initial or {})

    def snapshot(self) -> dict[str, str]:
        with self._lock:
            return dict(self._headers)

    def get(self, name: str) -> str | None:
        with self._lock:
            return self._headers.get(name)

    def update(self, values: Mapping[str, str]) -> None:
        with self._lock:
            self._headers = {**self._headers, **values}

    def set_authorization(self, token: str) -> None:
        self.update({AUTHORIZATION: f"Bearer {token}"})

    def __repr__(self) -> str:
        return f"SharedHeaders({sorted(self.snapshot())})"


class AuthenticatedTransport(Transport):
    """Transport that adds the current shared headers to each request.

    Per-request headers win over shared ones.
    """

    def __init__(self, inner: Transport, headers: SharedHeaders):
        self.inner = inner
        self.headers = headers

    async def arequest(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        params: QueryParams | None = None,
        json: Any = None,
        content: bytes | None = None,
        data: Mapping[str, Any] | None = None,
        files: Any = None,
    ) -> Response:
        merged = {**self.headers.snapshot(), **(headers or {})}
        return await self.inner.arequest(
            method,
            url,
            headers=merged,
            params=params,
            json=json,
            content=content,
            data=data,
            files=files,
        )

    async def aclose(self) -> None:
        await self.inner.aclose()


class HeaderAuth:
    """Binds a :class:`SharedHeaders` to transports."""

    def __init__(self, headers: SharedHeaders):
        self.headers = headers

    def decorate(self, transport: Transport) -> Transport:
        return AuthenticatedTransport(transport, self.headers)
