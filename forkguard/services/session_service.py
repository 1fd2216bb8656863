"""Session lifecycle orchestrator — login, consume, logout against a store.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Services (orchestration over the pure rotation engine).
# Depends on: ISessionStore, RotationConfig, a Clock.
#
# For one request the flow is always:
#
#   cookie value → decode → store.read → engine.consume → apply_action
#
# The engine makes every decision; this class only moves data between the
# codec, the store and the engine, and logs the outcome.  It never retries
# and never swallows store errors: a failing backend fails the request.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Any

import structlog

from forkguard.engine import state_machine
from forkguard.engine.actions import apply_action
from forkguard.interfaces.session_store import ISessionStore
from forkguard.models.outcome import ConsumeResult, LoginResult, LogoutResult, SessionState
from forkguard.models.rotation import RotationConfig
from forkguard.services.credential_codec import decode
from forkguard.utils.clock import Clock, utc_now
from forkguard.utils.logging import get_logger, hash_prefix


class SessionService:
    """Runs session operations end to end against an injected store.

    Holds no per-session state, so a single instance can serve any number
    of concurrent requests.
    """

    def __init__(
        self,
        store: ISessionStore,
        config: RotationConfig | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._store = store
        self._config = config or RotationConfig()
        self._clock = clock
        self._logger: structlog.BoundLogger = get_logger(__name__)

    @property
    def config(self) -> RotationConfig:
        return self._config

    # ── Public API ─────────────────────────────────────────────────────

    async def login(self, application_data: Any) -> LoginResult:
        """Create a session and return the cookie for it."""
        result = state_machine.login(application_data, self._clock(), self._config)
        await apply_action(self._store, result.action)

        record = result.action.record
        self._logger.info(
            "session_created",
            session=hash_prefix(record.session_id_hash),
            session_expires_at=record.session_expires_at.isoformat(),
        )
        return result

    async def consume(self, cookie_value: str | None) -> ConsumeResult:
        """Authenticate a request by its session cookie value.

        ``cookie_value`` is ``None`` when the request carried no session
        cookie.  The returned action has already been applied.
        """
        now = self._clock()

        if cookie_value is None:
            return ConsumeResult(state=SessionState.COOKIE_MISSING, now=now)

        credential = decode(cookie_value)
        if credential is None:
            self._logger.info("session_cookie_malformed")
            return ConsumeResult(
                state=SessionState.COOKIE_MALFORMED,
                cookie=state_machine.logout_cookie(self._config),
                now=now,
            )

        record = await self._store.read(credential.session_id_hash)
        result = state_machine.consume(credential, record, now, self._config)
        if not await apply_action(self._store, result.action):
            # Deleted (logout, or forking seen by another request) between
            # our read and the rotation's write.
            self._logger.info(
                "rotation_lost_to_delete",
                session=hash_prefix(credential.session_id_hash),
            )
            result = ConsumeResult(
                state=SessionState.NOT_FOUND,
                cookie=state_machine.logout_cookie(self._config),
                now=now,
                request_token_hash=result.request_token_hash,
            )

        self._log_outcome(credential.session_id_hash, result)
        return result

    async def logout(self, cookie_value: str | None) -> LogoutResult:
        """Delete the session named by the cookie, whatever its token."""
        if cookie_value is None:
            return LogoutResult()

        credential = decode(cookie_value)
        if credential is None:
            return LogoutResult(cookie=state_machine.logout_cookie(self._config))

        result = state_machine.logout(credential, self._config)
        await apply_action(self._store, result.action)
        self._logger.info(
            "session_deleted",
            session=hash_prefix(credential.session_id_hash),
            reason="logout",
        )
        return result

    # ── Internal helpers ───────────────────────────────────────────────

    def _log_outcome(self, session_id_hash: str, result: ConsumeResult) -> None:
        session = hash_prefix(session_id_hash)

        if result.state is SessionState.FORKED:
            # Possible cookie theft; kept distinct so it can be alerted on.
            self._logger.warning(
                "session_forked",
                session=session,
                token=hash_prefix(result.request_token_hash),
            )
        elif result.state is SessionState.EXPIRED:
            self._logger.info("session_expired", session=session)
        elif result.state is SessionState.NOT_FOUND:
            self._logger.debug("session_not_found", session=session)
        elif result.rotated and result.record is not None:
            self._logger.info(
                "token_rotated",
                session=session,
                token_expires_at=result.record.token_expires_at.isoformat(),
            )
