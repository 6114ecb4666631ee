"""Configuration loaded from the environment (and ``.env``)."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from dotenv import load_dotenv

load_dotenv()

DEFAULT_TIMEOUT = 30.0


def _env_timeout() -> float:
    raw = os.getenv("INSFORGE_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        return DEFAULT_TIMEOUT


@dataclass(frozen=True)
class Config:
    """Connection settings. Explicit client arguments override these."""

    base_url: str | None = field(default_factory=lambda: os.getenv("INSFORGE_URL"))
    api_key: str | None = field(default_factory=lambda: os.getenv("INSFORGE_API_KEY"))
    timeout: float = field(default_factory=_env_timeout)


@dataclass(frozen=True)
class ClientOptions:
    """Optional behaviour for :class:`insforge.AsyncClient`.

    :param headers: extra headers sent with every request.
    :param timeout: per-request timeout in seconds, overrides ``Config.timeout``.
    :param auth_storage: where sessions are persisted between runs. Defaults
        to in-memory storage.
    :param auto_refresh_token: reserved; token refresh is handled server side.
    :param log_level: if set, applied to the ``insforge`` logger.
    """

    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None
    auth_storage: Any = None
    auto_refresh_token: bool = True
    log_level: int | str | None = None
