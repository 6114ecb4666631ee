"""Realtime pub/sub over a websocket at /api/realtime."""
from __future__ import annotations

import asyncio
import json
import threading
from typing import Any, AsyncIterator, Callable

import pydantic
import websockets

from insforge.auth.headers import SharedHeaders
from insforge.exceptions import RealtimeError
from insforge.models.realtime import BroadcastMessage, RealtimeMessage
from insforge.resources.base import to_json_body
from insforge.resources.realtime.realtime_core import _RealtimeCore
from insforge.utils.logging import logger

MessageHandler = Callable[[RealtimeMessage], None]
WILDCARD = "*"


class RealtimeClient(_RealtimeCore):
    """
    Channel subscriptions and publishing over one websocket.

    The socket is opened with the current shared headers, so a signed-in user
    connects with their own token. Dropped connections are not re-established.

    Example usage::

        await client.realtime.connect()
        chat = client.realtime.channel("chat")
        await chat.subscribe()
        async for message in chat.broadcast("new_message"):
            print(message.payload)
    """

    def __init__(self, url: str, headers: SharedHeaders, open_timeout: float | None = 10.0):
        self.url = url
        self.headers = headers
        self.open_timeout = open_timeout
        self._ws: Any = None
        self._reader: asyncio.Task | None = None
        self._subscriptions: dict[str, list[MessageHandler]] = {}
        self._channels: dict[str, RealtimeChannel] = {}
        self._lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        return self._ws is not None

    # -------------- connection -------------- #
    async def connect(self) -> None:
        if self._ws is not None:
            logger.debug("Already connected to realtime server")
            return
        logger.debug(f"Connecting to realtime server at {self.url}")
        try:
            ws = await websockets.connect(
                self.url,
                additional_headers=self.headers.snapshot(),
                open_timeout=self.open_timeout,
            )
        except (OSError, TimeoutError, websockets.InvalidURI, websockets.InvalidHandshake) as e:
            raise RealtimeError(f"Failed to connect to realtime server: {e}") from e
        self._ws = ws
        self._reader = asyncio.create_task(self._read_loop(ws))
        logger.info("Connected to realtime server")

    async def disconnect(self) -> None:
        ws, self._ws = self._ws, None
        reader, self._reader = self._reader, None
        if ws is not None:
            await ws.close()
        if reader is not None:
            await reader
        logger.debug("Disconnected from realtime server")

    async def _read_loop(self, ws: Any) -> None:
        try:
            async for raw in ws:
                self._handle_message(raw)
        except websockets.ConnectionClosed as e:
            logger.warning(f"WebSocket disconnected: {e}")
        finally:
            if self._ws is ws:
                self._ws = None

    # -------------- channels -------------- #
    def channel(self, name: str) -> "RealtimeChannel":
        """Get or create the channel ``name``."""
        with self._lock:
            if name not in self._channels:
                self._channels[name] = RealtimeChannel(name, self)
            return self._channels[name]

    def remove_channel(self, name: str) -> None:
        with self._lock:
            self._channels.pop(name, None)

    def subscribe(self, channel: str, callback: MessageHandler) -> None:
        """Call ``callback(message)`` for every message on ``channel``."""
        self._subscriptions.setdefault(channel, []).append(callback)
        logger.debug(f"Subscribed to channel: {channel}")

    def unsubscribe(self, channel: str) -> None:
        self._subscriptions.pop(channel, None)
        logger.debug(f"Unsubscribed from channel: {channel}")

    async def publish(self, channel: str, event: str, payload: Any) -> None:
        """
        Send ``payload`` as ``event`` on ``channel``.

        :raises RealtimeError: not connected.
        """
        if self._ws is None:
            raise RealtimeError("Not connected to realtime server")
        message = {
            "type": "publish",
            "channel": channel,
            "event": event,
            "payload": to_json_body(payload),
        }
        await self._ws.send(json.dumps(message))
        logger.debug(f"Published to channel '{channel}': {event}")

    def _handle_message(self, raw: str | bytes) -> None:
        try:
            message = RealtimeMessage.model_validate_json(raw)
        except pydantic.ValidationError as e:
            logger.error(f"Failed to decode realtime message: {e}")
            return
        if message.channel_name is None:
            return
        for callback in list(self._subscriptions.get(message.channel_name, ())):
            try:
                callback(message)
            except Exception:
                logger.exception(f"Realtime callback failed on channel '{message.channel_name}'")


class RealtimeChannel:
    """Broadcast stream for one channel. Obtain via ``RealtimeClient.channel``."""

    def __init__(self, name: str, client: RealtimeClient):
        self.name = name
        self._client = client
        self._subscribed = False
        self._queues: dict[str, list[asyncio.Queue]] = {}

    @property
    def is_subscribed(self) -> bool:
        return self._subscribed

    async def subscribe(self) -> None:
        """Start routing channel messages to :meth:`broadcast` streams."""
        if self._subscribed:
            return
        self._client.subscribe(self.name, self._handle_message)
        self._subscribed = True

    async def unsubscribe(self) -> None:
        """Stop receiving and end every open :meth:`broadcast` stream."""
        self._client.unsubscribe(self.name)
        self._subscribed = False
        for queues in self._queues.values():
            for queue in queues:
                queue.put_nowait(None)
        self._queues.clear()

    def broadcast(self, event: str = WILDCARD) -> AsyncIterator[BroadcastMessage]:
        """
        Messages for ``event`` (``"*"`` for all events) as an async iterator.

        The listener is registered immediately, so messages arriving before
        iteration starts are buffered.
        """
        queue: asyncio.Queue = asyncio.Queue()
        self._queues.setdefault(event, []).append(queue)
        return self._drain(event, queue)

    async def _drain(self, event: str, queue: asyncio.Queue) -> AsyncIterator[BroadcastMessage]:
        try:
            while True:
                message = await queue.get()
                if message is None:
                    return
                yield message
        finally:
            listeners = self._queues.get(event)
            if listeners and queue in listeners:
                listeners.remove(queue)
                if not listeners:
                    del self._queues[event]

    async def send(self, event: str, payload: Any) -> None:
        """Broadcast ``payload`` (dict or pydantic model) as ``event``."""
        await self._client.publish(self.name, event, payload)

    def _handle_message(self, message: RealtimeMessage) -> None:
        if message.event_name is None:
            return
        broadcast = BroadcastMessage(
            event=message.event_name,
            payload=message.payload or {},
            sender_id=message.sender_id,
        )
        targets = list(self._queues.get(message.event_name, ()))
        if message.event_name != WILDCARD:
            targets += self._queues.get(WILDCARD, ())
        for queue in targets:
            queue.put_nowait(broadcast)
