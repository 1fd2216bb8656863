"""Token-rotation state machine.

# ─── HOW ROTATION WORKS ──────────────────────────────────────────────
#
# A session keeps two token digests: the latest one issued and the one
# issued just before it.  A presented token is classified in this order:
#
#   1. no record                  → NotFound  (clear cookie)
#   2. token in neither slot      → Forked    (delete record, clear cookie)
#   3. session lifetime elapsed   → Expired   (delete record, clear cookie)
#   4. token in previous slot     → Active    (nothing to do)
#   5. latest token, still fresh  → Active    (nothing to do)
#   6. latest token, stale        → Active    (rotate, send new cookie)
#
# Forking is checked before expiry, so an expired session presented with
# an unknown token is reported as Forked.
#
# Step 4 is the race absorber: two requests that both left the browser
# before it saw a rotated cookie arrive with the old token, which by then
# sits in the previous slot.  Only the latest slot can trigger a rotation,
# so those stragglers never rotate again.
#
# A token that has fallen out of both slots can only be presented by a
# party that did not receive the last two rotations.  When two parties
# hold the same session and both rotate it independently, one of them
# inevitably ends up there.  That is the forking signal.
# ──────────────────────────────────────────────────────────────────────

Every function here is pure: time comes in as ``now``, the record comes in
already read, and persistence happens afterwards by applying the returned
action.  Nothing is cached between calls.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from forkguard.models.cookie import CookieDirective, CookieOptions
from forkguard.models.outcome import (
    ConsumeResult,
    CreateAction,
    DeleteAction,
    LoginResult,
    LogoutResult,
    ReplaceAction,
    SessionState,
)
from forkguard.models.rotation import RotationConfig
from forkguard.models.session import Credential, SessionRecord, SessionUpdate
from forkguard.services.credential_codec import encode
from forkguard.utils.entropy import digest, generate_token

_DEFAULT_CONFIG = RotationConfig()


def logout_cookie(config: RotationConfig | None = None) -> CookieDirective:
    """Return the directive that makes the browser drop the session cookie."""
    config = config or _DEFAULT_CONFIG
    return CookieDirective(
        name=config.cookie_name,
        value="",
        options=CookieOptions(
            same_site=config.same_site,
            path=config.cookie_path,
            max_age=0,
        ),
    )


# Shared by every terminal path under the default configuration.
LOGOUT_COOKIE = logout_cookie(_DEFAULT_CONFIG)


def _session_cookie(
    config: RotationConfig,
    session_id: str,
    token: str,
    expires: datetime,
) -> CookieDirective:
    return CookieDirective(
        name=config.cookie_name,
        value=encode(session_id, token),
        options=CookieOptions(
            same_site=config.same_site,
            path=config.cookie_path,
            expires=expires,
        ),
    )


def login(
    application_data: Any,
    now: datetime,
    config: RotationConfig | None = None,
) -> LoginResult:
    """Start a new session for *application_data*.

    Allocates a fresh session id and token, and returns the cookie to set
    together with the create action for the store.  Only the latest token
    slot is filled.
    """
    config = config or _DEFAULT_CONFIG
    session_id = generate_token()
    token = generate_token()

    record = SessionRecord(
        session_id_hash=digest(session_id),
        latest_token_hash=digest(token),
        previous_token_hash=None,
        session_expires_at=now + config.session_ttl,
        token_expires_at=now + config.token_ttl,
        application_data=application_data,
    )
    cookie = _session_cookie(config, session_id, token, record.session_expires_at)
    return LoginResult(cookie=cookie, action=CreateAction(record=record))


def logout(
    credential: Credential,
    config: RotationConfig | None = None,
) -> LogoutResult:
    """End the session named by *credential*.

    The token is deliberately not checked.  Logging out is always allowed,
    even with a stale or forked token.
    """
    return LogoutResult(
        cookie=logout_cookie(config),
        action=DeleteAction(session_id_hash=credential.session_id_hash),
    )


def consume(
    credential: Credential,
    record: SessionRecord | None,
    now: datetime,
    config: RotationConfig | None = None,
) -> ConsumeResult:
    """Classify *credential* against the stored *record*.

    Parameters
    ----------
    credential:
        The decoded request cookie.
    record:
        The record read with ``credential.session_id_hash``, or ``None``
        if the store had none.
    now:
        The current instant (timezone-aware).
    config:
        Rotation policy; library defaults when omitted.

    Returns
    -------
    ConsumeResult
        The state, an optional cookie directive and an optional action.
        The caller applies the action exactly once.
    """
    config = config or _DEFAULT_CONFIG
    token_hash = digest(credential.token)

    if record is None:
        return ConsumeResult(
            state=SessionState.NOT_FOUND,
            cookie=logout_cookie(config),
            now=now,
            request_token_hash=token_hash,
        )

    is_latest = token_hash == record.latest_token_hash
    is_previous = (
        record.previous_token_hash is not None
        and token_hash == record.previous_token_hash
    )

    if not is_latest and not is_previous:
        return ConsumeResult(
            state=SessionState.FORKED,
            cookie=logout_cookie(config),
            action=DeleteAction(session_id_hash=record.session_id_hash),
            record=record,
            now=now,
            request_token_hash=token_hash,
        )

    if now >= record.session_expires_at:
        return ConsumeResult(
            state=SessionState.EXPIRED,
            cookie=logout_cookie(config),
            action=DeleteAction(session_id_hash=record.session_id_hash),
            record=record,
            now=now,
            request_token_hash=token_hash,
        )

    # A request sent before the browser stored the rotated cookie.
    if is_previous:
        return ConsumeResult(
            state=SessionState.ACTIVE,
            record=record,
            now=now,
            request_token_hash=token_hash,
        )

    if now < record.token_expires_at:
        return ConsumeResult(
            state=SessionState.ACTIVE,
            record=record,
            now=now,
            request_token_hash=token_hash,
        )

    return _rotate(credential, record, now, config, token_hash)


def _rotate(
    credential: Credential,
    record: SessionRecord,
    now: datetime,
    config: RotationConfig,
    request_token_hash: str,
) -> ConsumeResult:
    next_token = generate_token()
    update = SessionUpdate(
        latest_token_hash=digest(next_token),
        # Shifting latest into previous evicts the older generation.
        previous_token_hash=record.latest_token_hash,
        session_expires_at=max(now + config.session_ttl, record.session_expires_at),
        token_expires_at=now + config.token_ttl,
    )
    rotated = record.apply(update)

    return ConsumeResult(
        state=SessionState.ACTIVE,
        rotated=True,
        cookie=_session_cookie(
            config, credential.session_id, next_token, rotated.session_expires_at
        ),
        action=ReplaceAction(session_id_hash=record.session_id_hash, update=update),
        record=rotated,
        now=now,
        request_token_hash=request_token_hash,
    )
