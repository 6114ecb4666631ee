from __future__ import annotations

from typing import Any

from pydantic import TypeAdapter

from insforge.models.base import APIModel
from insforge.utils.dates import Timestamp


class RealtimeMessage(APIModel):
    """A message delivered over the realtime socket."""

    id: str | None = None
    event_name: str | None = None
    channel_name: str | None = None
    payload: dict[str, Any] | None = None
    sender_type: str | None = None
    sender_id: str | None = None
    created_at: Timestamp | None = None


class Channel(APIModel):
    id: str
    pattern: str
    description: str | None = None
    webhook_urls: list[str] | None = None
    enabled: bool = True
    created_at: Timestamp
    updated_at: Timestamp


class BroadcastMessage(APIModel):
    """A broadcast received on a :class:`~insforge.resources.realtime.RealtimeChannel`."""

    event: str
    payload: dict[str, Any] = {}
    sender_id: str | None = None

    def decode(self, tp: Any) -> Any:
        """Validate ``payload`` against ``tp``."""
        return TypeAdapter(tp).validate_python(self.payload)
