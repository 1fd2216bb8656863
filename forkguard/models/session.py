"""Session persistence models.

Defines the per-request :class:`Credential`, the persisted
:class:`SessionRecord`, and :class:`SessionUpdate`, the partial-update
struct handed to ``ISessionStore.replace()``.

All models use frozen config.  A rotation never mutates the record it was
given; it builds a new one via ``model_copy(update={...})``.

Slot layout:
    ``latest_token_hash``   -- digest of the most recently issued token.
    ``previous_token_hash`` -- digest of the token issued just before it,
                               ``None`` until the first rotation.

Only these two generations are ever live.  A rotation shifts latest into
previous and drops whatever previous held.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken to already be UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)  # noqa: UP017
    return value.astimezone(timezone.utc)  # noqa: UP017


class Credential(BaseModel):
    """A decoded session cookie.

    Rebuilt from the cookie value on every request and never persisted.
    ``session_id_hash`` is the storage lookup key.
    """

    model_config = ConfigDict(frozen=True)

    session_id: str
    token: str
    session_id_hash: str


class SessionRecord(BaseModel):
    """One logical login, as stored by an ``ISessionStore``."""

    model_config = ConfigDict(frozen=True)

    session_id_hash: str
    latest_token_hash: str
    previous_token_hash: str | None = None
    # The session is invalid at or after this instant.
    session_expires_at: datetime
    # The latest token must be rotated at or after this instant.
    token_expires_at: datetime
    # Opaque caller payload (e.g. a user id), returned verbatim.
    application_data: Any = None

    @field_validator("session_expires_at", "token_expires_at")
    @classmethod
    def _normalize_timezone(cls, value: datetime) -> datetime:
        return _as_utc(value)

    def token_slots(self) -> tuple[str, str | None]:
        """Return ``(latest, previous)`` token hashes."""
        return self.latest_token_hash, self.previous_token_hash

    def apply(self, update: SessionUpdate) -> SessionRecord:
        """Return a copy of this record with *update* applied.

        Token slots left as ``None`` in *update* keep their current value.
        This is the reference semantics every store adapter must reproduce.
        """
        changes: dict[str, Any] = {
            "session_expires_at": update.session_expires_at,
            "token_expires_at": update.token_expires_at,
        }
        if update.latest_token_hash is not None:
            changes["latest_token_hash"] = update.latest_token_hash
        if update.previous_token_hash is not None:
            changes["previous_token_hash"] = update.previous_token_hash
        return self.model_copy(update=changes)


class SessionUpdate(BaseModel):
    """Partial update of a :class:`SessionRecord`.

    Expiry fields are always written.  Token slots are written only when
    set; ``None`` means "leave the stored slot unchanged", never "clear it".
    """

    model_config = ConfigDict(frozen=True)

    latest_token_hash: str | None = None
    previous_token_hash: str | None = None
    session_expires_at: datetime
    token_expires_at: datetime

    @field_validator("session_expires_at", "token_expires_at")
    @classmethod
    def _normalize_timezone(cls, value: datetime) -> datetime:
        return _as_utc(value)
