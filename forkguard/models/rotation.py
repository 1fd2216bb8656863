"""Rotation policy configuration.

:class:`RotationConfig` is the only configuration the state machine reads.
Applications normally build it from environment settings via
``Settings.rotation_config()``, but it can be constructed directly.
"""

from __future__ import annotations

from datetime import timedelta

from pydantic import BaseModel, ConfigDict, model_validator

from forkguard.models.cookie import SameSite

DEFAULT_SESSION_TTL = timedelta(days=7)
DEFAULT_TOKEN_TTL = timedelta(minutes=2)
DEFAULT_COOKIE_NAME = "session_id"


class RotationConfig(BaseModel):
    """Session and token lifetimes plus cookie attributes.

    ``token_ttl`` should exceed the longest expected in-flight request so
    that the two-slot window absorbs concurrent requests, and must be
    shorter than ``session_ttl``.
    """

    model_config = ConfigDict(frozen=True)

    session_ttl: timedelta = DEFAULT_SESSION_TTL
    token_ttl: timedelta = DEFAULT_TOKEN_TTL
    cookie_name: str = DEFAULT_COOKIE_NAME
    same_site: SameSite = SameSite.STRICT
    cookie_path: str = "/"

    @model_validator(mode="after")
    def _check_ttls(self) -> RotationConfig:
        if self.token_ttl <= timedelta(0):
            msg = "token_ttl must be positive"
            raise ValueError(msg)
        if self.token_ttl >= self.session_ttl:
            msg = "token_ttl must be less than session_ttl"
            raise ValueError(msg)
        if not self.cookie_name:
            msg = "cookie_name must not be empty"
            raise ValueError(msg)
        return self
