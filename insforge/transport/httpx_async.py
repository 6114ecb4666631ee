"""httpx-backed async transport."""
from __future__ import annotations

from typing import Any, Mapping

import httpx

from insforge.exceptions import InvalidURLError, TransportError, TransportTimeoutError
from insforge.transport.base import QueryParams, Transport
from insforge.transport.response import Response
from insforge.utils.logging import TRACE, logger

_REDACTED = {"authorization", "apikey"}
_SECRET_FIELDS = {"password", "newPassword"}


def _safe_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() not in _REDACTED}


def _safe_body(body: Any) -> Any:
    if isinstance(body, Mapping):
        return {k: "***" if k in _SECRET_FIELDS else v for k, v in body.items()}
    return body


class HttpxAsyncTransport(Transport):
    """Async transport on top of one shared ``httpx.AsyncClient``.

    Relative URLs are resolved against ``base_url``; absolute URLs (presigned
    storage links) are requested as given.
    """

    def __init__(
        self,
        base_url: str,
        default_headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(
            headers=dict(default_headers or {}),
            timeout=timeout,
        )

    def build_url(self, url: str, params: QueryParams | None = None) -> httpx.URL:
        try:
            if not url.startswith(("http://", "https://")):
                url = f"{self.base_url}/{url.lstrip('/')}"
            return httpx.URL(url, params=params) if params else httpx.URL(url)
        except (httpx.InvalidURL, TypeError, ValueError) as e:
            raise InvalidURLError(f"Invalid URL: {url}") from e

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
        full_url = self.build_url(url, params)
        headers = dict(headers or {})

        logger.debug(f"[{method}] {full_url}")
        if headers:
            logger.log(TRACE, f"Request headers: {_safe_headers(headers)}")
        if json is not None:
            logger.log(TRACE, f"Request body: {_safe_body(json)}")

        try:
            resp = await self._client.request(
                method,
                full_url,
                headers=headers,
                json=json,
                content=content,
                data=data,
                files=files,
            )
        except httpx.TimeoutException as e:
            logger.error(f"Request timed out: {method} {full_url}")
            raise TransportTimeoutError(f"Request timed out: {e}", cause=e) from e
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise InvalidURLError(f"Invalid URL: {full_url}") from e
        except httpx.TransportError as e:
            logger.error(f"Network error: {e}")
            raise TransportError(f"Network error: {e}", cause=e) from e

        logger.debug(f"Response status: {resp.status_code}")
        logger.log(TRACE, f"Response body: {resp.text}")
        return Response(
            status_code=resp.status_code,
            content=resp.content,
            headers=dict(resp.headers),
            url=str(resp.url),
        )

    async def aclose(self) -> None:
        await self._client.aclose()
