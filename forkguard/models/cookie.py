"""Cookie directive models.

A :class:`CookieDirective` tells the calling application what to put in its
``Set-Cookie`` header.  Serializing it into header syntax is the host
framework's job; every directive is ``HttpOnly`` and ``Secure``.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class SameSite(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Allowed ``SameSite`` attribute values."""

    STRICT = "strict"
    LAX = "lax"


class CookieOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    http_only: bool = True
    secure: bool = True
    same_site: SameSite = SameSite.STRICT
    path: str = "/"
    # Set to 0 on logout so the browser drops the cookie immediately.
    max_age: int | None = None
    # Set to the session expiry on login and rotation.
    expires: datetime | None = None


class CookieDirective(BaseModel):
    """A cookie to send back to the browser."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    options: CookieOptions

    @property
    def is_logout(self) -> bool:
        """``True`` when this directive clears the cookie."""
        return self.value == "" and self.options.max_age == 0
