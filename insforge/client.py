"""Async client façade."""
from __future__ import annotations

import threading

from insforge.auth.client import AuthClient
from insforge.auth.headers import AUTHORIZATION, HeaderAuth, SharedHeaders
from insforge.auth.storage import InMemoryAuthStorage
from insforge.config import ClientOptions, Config
from insforge.exceptions import ConfigurationError
from insforge.models.auth import Session
from insforge.resources.ai import AIClient
from insforge.resources.database import DatabaseClient
from insforge.resources.functions import FunctionsClient
from insforge.resources.realtime import RealtimeClient
from insforge.resources.storage import StorageClient
from insforge.transport.base import Transport
from insforge.transport.httpx_async import HttpxAsyncTransport
from insforge.utils.logging import logger, set_log_level
from insforge.version import VERSION


class AsyncClient:
    """
    Single public entry-point.

    Every resource client shares one header map. Signing in swaps the
    ``Authorization`` header to the user's token; signing out puts the API key
    back. A session persisted in ``options.auth_storage`` is restored before
    the constructor returns.

    Example usage::

        async with AsyncClient(base_url="https://app.insforge.app", api_key=KEY) as client:
            await client.auth.sign_in("me@example.com", "secret")
            todos = await client.database.from_("todos").execute()
    """

    auth: AuthClient

    def __init__(
        self,
        *,
        base_url: str | None = None,
        api_key: str | None = None,
        options: ClientOptions | None = None,
        transport: Transport | None = None,
    ):
        self.options = options or ClientOptions()
        if self.options.log_level is not None:
            set_log_level(self.options.log_level)

        self._config = Config()
        if base_url:
            object.__setattr__(self._config, "base_url", base_url)
        if api_key:
            object.__setattr__(self._config, "api_key", api_key)
        if self.options.timeout:
            object.__setattr__(self._config, "timeout", self.options.timeout)

        self.base_url = (self._config.base_url or "").rstrip("/")
        self.api_key = self._config.api_key or ""
        if not self.base_url:
            raise ConfigurationError("No base URL found. Pass base_url or set INSFORGE_URL")
        if not self.api_key:
            raise ConfigurationError("No API key found. Pass api_key or set INSFORGE_API_KEY")

        # -------------- core plumbing -------------- #
        self._transport = transport or HttpxAsyncTransport(
            base_url=self.base_url,
            timeout=self._config.timeout,
        )
        defaults = {
            **self.options.headers,
            "apikey": self.api_key,
            AUTHORIZATION: f"Bearer {self.api_key}",
            "X-Client-Info": f"insforge-python/{VERSION}",
        }
        self.headers = SharedHeaders(defaults)
        self._secured = HeaderAuth(self.headers).decorate(self._transport)

        self._lock = threading.Lock()
        self._database: DatabaseClient | None = None
        self._storage: StorageClient | None = None
        self._functions: FunctionsClient | None = None
        self._ai: AIClient | None = None
        self._realtime: RealtimeClient | None = None

        # -------------- auth -------------- #
        # auth requests keep the API key even while a user is signed in
        static = HeaderAuth(SharedHeaders(defaults)).decorate(self._transport)
        self.auth = AuthClient(static, self.options.auth_storage or InMemoryAuthStorage())
        self.auth.on_auth_state_change(self._on_auth_state_change)
        self._on_auth_state_change(self.auth.restore_session())
        logger.debug(f"InsForge client initialized for {self.base_url}")

    def _on_auth_state_change(self, session: Session | None) -> None:
        if session is not None:
            self.headers.set_authorization(session.access_token)
            logger.debug("Auth headers updated with user token")
        else:
            self.headers.set_authorization(self.api_key)
            logger.debug("Auth headers reset to API key")

    # -------------- resources -------------- #
    @property
    def database(self) -> DatabaseClient:
        with self._lock:
            if self._database is None:
                self._database = DatabaseClient(self._secured, self)
            return self._database

    @property
    def storage(self) -> StorageClient:
        with self._lock:
            if self._storage is None:
                self._storage = StorageClient(
                    self._secured, self, raw_transport=self._transport, base_url=self.base_url
                )
            return self._storage

    @property
    def functions(self) -> FunctionsClient:
        with self._lock:
            if self._functions is None:
                self._functions = FunctionsClient(self._secured, self)
            return self._functions

    @property
    def ai(self) -> AIClient:
        with self._lock:
            if self._ai is None:
                self._ai = AIClient(self._secured, self)
            return self._ai

    @property
    def realtime(self) -> RealtimeClient:
        with self._lock:
            if self._realtime is None:
                self._realtime = RealtimeClient(RealtimeClient.socket_url(self.base_url), self.headers)
            return self._realtime

    # -------------- context mgr -------------- #
    async def aclose(self) -> None:
        if self._realtime is not None:
            await self._realtime.disconnect()
        await self._transport.aclose()

    async def __aenter__(self) -> AsyncClient:
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()
