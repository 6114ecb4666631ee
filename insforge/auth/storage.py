"""Session persistence backends."""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from pathlib import Path

from insforge.models.auth import Session
from insforge.utils.logging import logger


class AuthStorage(ABC):
    """Where the current session lives between calls (and runs).

    Methods are synchronous so the client can restore a session while it is
    being constructed.
    """

    @abstractmethod
    def save_session(self, session: Session) -> None: ...

    @abstractmethod
    def get_session(self) -> Session | None: ...

    @abstractmethod
    def delete_session(self) -> None: ...


class InMemoryAuthStorage(AuthStorage):
    """Keeps the session for the lifetime of the process only."""

    def __init__(self, session: Session | None = None):
        self._lock = threading.Lock()
        self._session = session

    def save_session(self, session: Session) -> None:
        with self._lock:
            self._session = session

    def get_session(self) -> Session | None:
        with self._lock:
            return self._session

    def delete_session(self) -> None:
        with self._lock:
            self._session = None


class FileAuthStorage(AuthStorage):
    """JSON file storage, ``~/.insforge/session.json`` by default."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else Path.home() / ".insforge" / "session.json"
        self._lock = threading.Lock()

    def save_session(self, session: Session) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(session.model_dump_json(by_alias=True))

    def get_session(self) -> Session | None:
        with self._lock:
            if not self.path.exists():
                return None
            raw = self.path.read_text()
        try:
            return Session.model_validate_json(raw)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None

    def delete_session(self) -> None:
        with self._lock:
            self.path.unlink(missing_ok=True)
