"""/api/auth endpoints and session tracking."""
from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel

from insforge.auth.headers import AUTHORIZATION
from insforge.auth.storage import AuthStorage, InMemoryAuthStorage
from insforge.exceptions import AuthSessionMissingError
from insforge.models.auth import AuthResponse, Profile, Session, User
from insforge.resources.base import BaseAsyncResource
from insforge.transport.base import Transport
from insforge.utils.logging import logger

AuthStateHandler = Callable[[Session | None], None]


class _CurrentUser(BaseModel):
    user: User


class AuthClient(BaseAsyncResource):
    """
    Email/password authentication.

    Session changes (sign-up with a token, sign-in, email verification with a
    token, sign-out and :meth:`get_session`) are reported to every handler
    registered with :meth:`on_auth_state_change` before the call returns.

    :param transport: transport carrying the API key headers. Auth requests
        never pick up a user token from shared state.
    :param storage: session persistence, in-memory by default.
    """

    ENDPOINT = "/api/auth"

    def __init__(self, transport: Transport, storage: AuthStorage | None = None):
        super().__init__(transport)
        self.storage = storage or InMemoryAuthStorage()
        self._handlers: list[AuthStateHandler] = []

    # -------------- session state -------------- #
    def on_auth_state_change(self, handler: AuthStateHandler) -> Callable[[], None]:
        """Register ``handler(session_or_none)``. Returns a function that removes it."""
        self._handlers.append(handler)

        def remove() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return remove

    def _notify(self, session: Session | None) -> None:
        for handler in list(self._handlers):
            handler(session)

    def _store(self, response: AuthResponse) -> None:
        if response.access_token is None:
            return
        session = Session(access_token=response.access_token, user=response.user)
        self.storage.save_session(session)
        self._notify(session)

    def current_session(self) -> Session | None:
        """The stored session, without notifying handlers."""
        return self.storage.get_session()

    def restore_session(self) -> Session | None:
        """Read a persisted session. Callers apply it themselves."""
        session = self.storage.get_session()
        if session is not None:
            logger.debug(f"[Auth] Restored session for {session.user.email}")
        return session

    # -------------- sign up / in / out -------------- #
    async def sign_up(self, email: str, password: str, name: str | None = None) -> AuthResponse:
        """
        Register a new user.

        When the backend requires email verification no token is returned and
        no session is stored; see ``require_email_verification``.
        """
        body: dict[str, Any] = {"email": email, "password": password}
        if name is not None:
            body["name"] = name
        resp = await self._t.arequest("POST", f"{self.ENDPOINT}/users", json=body)
        result = self._decode(resp, AuthResponse)
        self._store(result)
        logger.debug(f"[Auth] Sign up successful for: {email}")
        return result

    async def sign_in(self, email: str, password: str) -> AuthResponse:
        resp = await self._t.arequest(
            "POST", f"{self.ENDPOINT}/sessions", json={"email": email, "password": password}
        )
        result = self._decode(resp, AuthResponse)
        self._store(result)
        logger.debug(f"[Auth] Sign in successful for: {email}")
        return result

    async def sign_out(self) -> None:
        """Forget the local session. No request is made."""
        self.storage.delete_session()
        logger.debug("[Auth] User signed out")
        self._notify(None)

    async def get_session(self) -> Session | None:
        """Stored session; handlers are told about it so headers catch up."""
        session = self.storage.get_session()
        if session is not None:
            self._notify(session)
        return session

    async def get_current_user(self) -> User:
        """
        Fetch the signed-in user.

        :raises AuthSessionMissingError: nobody is signed in.
        """
        resp = await self._t.arequest(
            "GET", f"{self.ENDPOINT}/sessions/current", headers=self._session_headers()
        )
        user = self._decode(resp, _CurrentUser).user
        logger.debug(f"[Auth] Got current user: {user.email}")
        return user

    # -------------- email -------------- #
    async def send_email_verification(self, email: str) -> None:
        resp = await self._t.arequest(
            "POST", f"{self.ENDPOINT}/email/send-verification", json={"email": email}
        )
        resp.raise_for_status()
        logger.debug(f"[Auth] Verification email sent to: {email}")

    async def verify_email(self, otp: str, email: str | None = None) -> AuthResponse:
        body = {"otp": otp}
        if email is not None:
            body["email"] = email
        resp = await self._t.arequest("POST", f"{self.ENDPOINT}/email/verify", json=body)
        result = self._decode(resp, AuthResponse)
        self._store(result)
        logger.debug("[Auth] Email verified successfully")
        return result

    async def send_password_reset(self, email: str) -> None:
        resp = await self._t.arequest(
            "POST", f"{self.ENDPOINT}/email/send-reset-password", json={"email": email}
        )
        resp.raise_for_status()
        logger.debug(f"[Auth] Password reset email sent to: {email}")

    async def reset_password(self, otp: str, new_password: str) -> None:
        resp = await self._t.arequest(
            "POST",
            f"{self.ENDPOINT}/email/reset-password",
            json={"otp": otp, "newPassword": new_password},
        )
        resp.raise_for_status()
        logger.debug("[Auth] Password reset successful")

    # -------------- profiles -------------- #
    async def get_profile(self, user_id: str) -> Profile:
        resp = await self._t.arequest("GET", f"{self.ENDPOINT}/profiles/{user_id}")
        profile = self._decode(resp, Profile)
        logger.debug(f"[Auth] Fetched profile for user: {user_id}")
        return profile

    async def update_profile(self, profile: dict[str, Any]) -> Profile:
        """Merge ``profile`` fields into the signed-in user's profile."""
        resp = await self._t.arequest(
            "PATCH",
            f"{self.ENDPOINT}/profiles/current",
            json={"profile": profile},
            headers=self._session_headers(),
        )
        updated = self._decode(resp, Profile)
        logger.debug("[Auth] Updated current user's profile")
        return updated

    def _session_headers(self) -> dict[str, str]:
        session = self.storage.get_session()
        if session is None:
            raise AuthSessionMissingError("Authentication required: no active session")
        return {AUTHORIZATION: f"Bearer {session.access_token}"}
