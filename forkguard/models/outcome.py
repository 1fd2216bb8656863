"""Decision outputs of the session state machine.

Every operation returns a result holding up to three things:

    state   -- what happened (:class:`SessionState`)
    cookie  -- a :class:`CookieDirective` to send, or ``None`` to leave the
               browser's cookie alone
    action  -- one persistence action to apply to the store, or ``None``

Actions are plain data.  They are computed completely before anything
touches the store, and ``apply_action()`` turns each one into exactly one
store call, so a request that dies halfway never leaves a partial write.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from forkguard.models.cookie import CookieDirective
from forkguard.models.session import SessionRecord, SessionUpdate


class SessionState(str, Enum):  # noqa: UP042 — StrEnum requires Python 3.11+
    """Classification of a request's session cookie.

    Only ``ACTIVE`` means the request is authenticated.  ``FORKED`` is the
    security-relevant terminal state and should be alerted on separately.
    """

    COOKIE_MISSING = "CookieMissing"      # No cookie on the request
    COOKIE_MALFORMED = "CookieMalformed"  # Cookie value failed to decode
    NOT_FOUND = "NotFound"                # No record for the session id
    FORKED = "Forked"                     # Token in neither slot
    EXPIRED = "Expired"                   # Session lifetime elapsed
    ACTIVE = "Active"                     # Valid, possibly rotated


# ---------------------------------------------------------------------------
# Persistence actions
# ---------------------------------------------------------------------------

class CreateAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["create"] = "create"
    record: SessionRecord


class ReplaceAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["replace"] = "replace"
    session_id_hash: str
    update: SessionUpdate


class DeleteAction(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["delete"] = "delete"
    session_id_hash: str


Action = Annotated[
    Union[CreateAction, ReplaceAction, DeleteAction],  # noqa: UP007
    Field(discriminator="type"),
]


# ---------------------------------------------------------------------------
# Operation results
# ---------------------------------------------------------------------------

class ConsumeResult(BaseModel):
    """Outcome of evaluating one request's cookie.

    ``record`` is the session as it stands after the decision: the rotated
    record when a rotation happened, the stored record otherwise.  For
    ``FORKED`` and ``EXPIRED`` it is the record that was just deleted, so
    callers can tell which login was compromised.
    """

    model_config = ConfigDict(frozen=True)

    state: SessionState
    cookie: CookieDirective | None = None
    action: Action | None = None
    rotated: bool = False
    record: SessionRecord | None = None
    now: datetime | None = None
    request_token_hash: str | None = None

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.ACTIVE

    @property
    def application_data(self) -> Any:
        """Caller payload of an active session, else ``None``."""
        if not self.is_active or self.record is None:
            return None
        return self.record.application_data


class LoginResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    cookie: CookieDirective
    action: CreateAction


class LogoutResult(BaseModel):
    """Outcome of a logout.

    ``cookie`` is ``None`` only when the request carried no cookie at all;
    ``action`` is ``None`` when there was nothing decodable to delete.
    """

    model_config = ConfigDict(frozen=True)

    cookie: CookieDirective | None = None
    action: DeleteAction | None = None
