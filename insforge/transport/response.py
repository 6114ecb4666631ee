"""Response envelope: raw status and body plus decoding and error classification."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Mapping, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from insforge.exceptions import DecodingError, HTTPError
from insforge.utils.dates import apply_date_strategy
from insforge.utils.logging import logger

T = TypeVar("T")


class ErrorBody(BaseModel):
    """Error payload returned by the API on non-2xx responses."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    message: str
    error: str | None = None
    next_actions: str | None = Field(default=None, alias="nextActions")
    status_code: int | None = Field(default=None, alias="statusCode")


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Request failed"


@dataclass(frozen=True)
class Response:
    status_code: int
    content: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse the body as JSON; an empty body is ``None``."""
        if not self.content.strip():
            return None
        try:
            return json.loads(self.content)
        except ValueError as e:
            raise DecodingError(f"Invalid JSON response: {e}", cause=e, body=self.text) from e

    def error(self) -> HTTPError:
        """Build the classified error for a non-2xx response."""
        body: Any = None
        try:
            parsed = ErrorBody.model_validate_json(self.content)
        except (pydantic.ValidationError, ValueError):
            parsed = None
            body = self.text or None

        error_cls = HTTPError.for_status(self.status_code)
        if parsed is None:
            return error_cls(
                self.status_code,
                f"HTTP {self.status_code}: {_reason(self.status_code)}",
                body=body,
            )
        return error_cls(
            self.status_code,
            parsed.message,
            code=parsed.error,
            hint=parsed.next_actions,
            body=parsed.model_dump(by_alias=True, exclude_none=True),
        )

    def raise_for_status(self) -> "Response":
        if not self.ok:
            err = self.error()
            logger.error(f"HTTP Error: status={err.status_code}, message={err.message}")
            raise err
        return self

    def decode(self, tp: Any) -> Any:
        """Validate the JSON body against ``tp`` (a model, ``list[Model]``, ...).

        Date strings are parsed with the SDK's date strategy wherever ``tp``
        expects a ``datetime``, plain pydantic models included.

        :raises DecodingError: the body is not JSON or does not fit ``tp``.
        """
        adapter = TypeAdapter(tp)
        data = apply_date_strategy(tp, self.json())
        try:
            return adapter.validate_python(data)
        except pydantic.ValidationError as e:
            logger.error(f"Failed to decode {tp}: {e}")
            logger.debug(f"Response data: {self.text}")
            raise DecodingError(f"Failed to decode response: {e}", cause=e, body=self.text) from e
