from __future__ import annotations

from typing import Any

from pydantic import Field

from insforge.models.base import APIModel
from insforge.utils.dates import Timestamp


class User(APIModel):
    id: str
    email: str
    email_verified: bool = False
    metadata: dict[str, Any] | None = None
    providers: list[str] | None = None
    created_at: Timestamp | None = None
    updated_at: Timestamp | None = None


class Session(APIModel):
    """An active login. Only ``access_token`` matters to request signing."""

    access_token: str
    user: User


class AuthResponse(APIModel):
    user: User
    access_token: str | None = None
    require_email_verification: bool | None = None
    redirect_to: str | None = None


class Profile(APIModel):
    id: str
    profile: dict[str, Any] | None = Field(default=None)
