"""Packing and unpacking of the session cookie value.

The cookie value is ``"{session_id}:{token}"``.  Both halves come from
:func:`forkguard.utils.entropy.generate_token` (lowercase hex), so the
colon can never appear inside either of them.

Only structure is checked here.  Whether the session exists or the token
is current is the state machine's decision.
"""

from __future__ import annotations

from forkguard.models.session import Credential
from forkguard.utils.entropy import digest

DELIMITER = ":"


def encode(session_id: str, token: str) -> str:
    """Join *session_id* and *token* into a cookie value."""
    return f"{session_id}{DELIMITER}{token}"


def decode(cookie_value: str) -> Credential | None:
    """Split a cookie value into a :class:`Credential`.

    Returns ``None`` for a malformed value: no delimiter, more than one
    delimiter, or an empty half.
    """
    parts = cookie_value.split(DELIMITER)
    if len(parts) != 2:
        return None

    session_id, token = parts
    if not session_id or not token:
        return None

    return Credential(
        session_id=session_id,
        token=token,
        session_id_hash=digest(session_id),
    )
