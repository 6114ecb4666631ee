from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, TypeAdapter

from insforge.transport.base import Transport
from insforge.transport.response import Response

if TYPE_CHECKING:
    from insforge.client import AsyncClient

_JSON = TypeAdapter(Any)


def to_json_body(value: Any) -> Any:
    """Turn models, dicts and lists of either into JSON-ready data.

    Pydantic models only send the fields that were set, so server-populated
    columns (``id``, timestamps) are left out of inserts.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if isinstance(value, (list, tuple)):
        return [to_json_body(v) for v in value]
    return _JSON.dump_python(value, mode="json")


class BaseAsyncResource:
    """Common plumbing for resource clients.

    :param transport: authenticated transport used for every call.
    :param client: owning facade, for resources that need their siblings.
    """

    def __init__(self, transport: Transport, client: "AsyncClient | None" = None):
        self._t = transport
        self._client = client

    @staticmethod
    def _decode(resp: Response, tp: Any) -> Any:
        return resp.raise_for_status().decode(tp)
