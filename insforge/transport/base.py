"""Transport interface used by every resource."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Sequence

from insforge.transport.response import Response

QueryParams = Sequence[tuple[str, str]] | Mapping[str, Any]


class Transport(ABC):
    """Executes one HTTP request and returns the raw :class:`Response`.

    Implementations never retry and never interpret the payload; status
    classification is left to ``Response.raise_for_status``.
    """

    @abstractmethod
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
        ...

    async def aclose(self) -> None:
        return None
