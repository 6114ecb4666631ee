"""Pytest configuration and fixtures for InsForge SDK tests."""

import json
import logging
from typing import Any, Callable

import httpx
import pytest

from insforge import AsyncClient
from insforge.transport import HttpxAsyncTransport

BASE_URL = "https://test.insforge.app"
API_KEY = "anon-key"

# Keep SDK debug output in captured logs
logging.getLogger("insforge").setLevel(logging.DEBUG)


class Router:
    """httpx.MockTransport handler that records requests and replays canned responses.

    Routes are keyed by ``(method, path)``. A route may hold one response, a
    list of responses (consumed in order) or a callable taking the request.
    Unknown routes answer 404 with an API-shaped error body.
    """

    def __init__(self):
        self.routes: dict[tuple[str, str], Any] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        content: bytes | None = None,
    ) -> None:
        response = (status, json, content)
        existing = self.routes.get((method, path))
        if isinstance(existing, list):
            existing.append(response)
        else:
            self.routes[(method, path)] = [response]

    def on(self, method: str, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": "NOT_FOUND", "message": "No route"})
        if callable(route):
            return route(request)
        status, body, content = route.pop(0) if len(route) > 1 else route[0]
        if body is not None:
            return httpx.Response(status, json=body)
        return httpx.Response(status, content=content or b"")

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def find(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]


def body_of(request: httpx.Request) -> Any:
    """Decoded JSON body of a recorded request."""
    return json.loads(request.content)


@pytest.fixture
def router() -> Router:
    return Router()


@pytest.fixture
def transport(router: Router) -> HttpxAsyncTransport:
    """Real transport whose network layer is the in-memory router."""
    return HttpxAsyncTransport(
        BASE_URL,
        client=httpx.AsyncClient(transport=httpx.MockTransport(router)),
    )


@pytest.fixture
def client(transport: HttpxAsyncTransport) -> AsyncClient:
    """Facade wired to the router with in-memory session storage."""
    return AsyncClient(base_url=BASE_URL, api_key=API_KEY, transport=transport)


@pytest.fixture
def sample_user() -> dict:
    return {
        "id": "user-123",
        "email": "pierre@example.com",
        "emailVerified": True,
        "providers": ["email"],
        "createdAt": "2025-01-15T10:30:00.123Z",
        "updatedAt": "2025-01-15T10:30:00Z",
    }


@pytest.fixture
def sample_stored_file() -> dict:
    return {
        "bucket": "avatars",
        "key": "me.png",
        "size": 4,
        "mimeType": "image/png",
        "uploadedAt": "2025-01-15T10:30:00.123456Z",
        "url": "/api/storage/buckets/avatars/objects/me.png",
    }
