"""SQLite-backed session store.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Providers (concrete adapter implementing ISessionStore).
# Database: ``data/sessions.db`` by default, one row per login.
#
# The partial-update contract is implemented in SQL: token slots are
# written with ``COALESCE(?, column)`` so a ``None`` parameter keeps the
# stored digest instead of nulling it.
#
# Timestamps are stored as ISO-8601 UTC strings, application data as
# JSON text.  Uses ``aiosqlite`` for async I/O and
# ``PRAGMA journal_mode=WAL`` for concurrent read safety.
#
# Expired rows are NOT removed automatically; call
# :meth:`SQLiteSessionStore.delete_expired` from a scheduled job if the
# table should be kept small.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import aiosqlite

from forkguard.interfaces.session_store import ISessionStore
from forkguard.models.session import SessionRecord, SessionUpdate
from forkguard.utils.errors import (
    SessionExistsError,
    SessionStoreError,
)
from forkguard.utils.logging import get_logger, hash_prefix

logger = get_logger(__name__)

_DEFAULT_DB_PATH = Path("data/sessions.db")
_PROVIDER_NAME = "sqlite_session_store"

# ── Schema DDL ────────────────────────────────────────────────────────

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS {table} (
    session_id_hash     TEXT PRIMARY KEY,
    latest_token_hash   TEXT NOT NULL,
    previous_token_hash TEXT,
    session_expires_at  TEXT NOT NULL,
    token_expires_at    TEXT NOT NULL,
    application_data    TEXT NOT NULL,
    created_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    updated_at          TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_INDEX_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_{table}_expires ON {table}(session_expires_at);"
)

# ── DML ───────────────────────────────────────────────────────────────

_INSERT_SQL = """\
INSERT INTO {table} (session_id_hash, latest_token_hash, previous_token_hash,
                     session_expires_at, token_expires_at, application_data)
VALUES (?, ?, ?, ?, ?, ?);
"""

_SELECT_SQL = """\
SELECT session_id_hash, latest_token_hash, previous_token_hash,
       session_expires_at, token_expires_at, application_data
FROM {table}
WHERE session_id_hash = ?;
"""

_UPDATE_SQL = """\
UPDATE {table}
SET latest_token_hash   = COALESCE(?, latest_token_hash),
    previous_token_hash = COALESCE(?, previous_token_hash),
    session_expires_at  = ?,
    token_expires_at    = ?,
    updated_at          = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')
WHERE session_id_hash = ?;
"""

_DELETE_SQL = "DELETE FROM {table} WHERE session_id_hash = ?;"

_DELETE_EXPIRED_SQL = "DELETE FROM {table} WHERE session_expires_at <= ?;"

_COUNT_SQL = "SELECT COUNT(*) FROM {table};"


class SQLiteSessionStore(ISessionStore):
    """Session records persisted in a SQLite table.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.  Parent directories are created
        on :meth:`initialize`.
    table_name:
        Table to use, so several stores can share one database file.
    """

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        table_name: str = "sessions",
    ) -> None:
        self._db_path = Path(db_path)
        self._table = table_name

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Create the table and expiry index if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute("PRAGMA journal_mode=WAL;")
                await db.execute(_CREATE_TABLE_SQL.format(table=self._table))
                await db.execute(_CREATE_INDEX_SQL.format(table=self._table))
                await db.commit()
        except aiosqlite.Error as exc:
            raise SessionStoreError(
                f"Failed to initialize session table: {exc}", provider_name=_PROVIDER_NAME
            ) from exc
        logger.info("session_db_initialized", path=str(self._db_path), table=self._table)

    # ------------------------------------------------------------------
    # ISessionStore implementation
    # ------------------------------------------------------------------

    async def read(self, session_id_hash: str) -> SessionRecord | None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(
                    _SELECT_SQL.format(table=self._table), (session_id_hash,)
                )
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise SessionStoreError(
                f"Failed to read session: {exc}", provider_name=_PROVIDER_NAME
            ) from exc

        if row is None:
            return None
        return self._row_to_record(dict(row))

    async def create(self, record: SessionRecord) -> None:
        try:
            application_data = json.dumps(record.application_data)
        except (TypeError, ValueError) as exc:
            raise SessionStoreError(
                f"Application data is not JSON-serializable: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(
                    _INSERT_SQL.format(table=self._table),
                    (
                        record.session_id_hash,
                        record.latest_token_hash,
                        record.previous_token_hash,
                        _to_iso(record.session_expires_at),
                        _to_iso(record.token_expires_at),
                        application_data,
                    ),
                )
                await db.commit()
        except aiosqlite.IntegrityError as exc:
            raise SessionExistsError(provider_name=_PROVIDER_NAME) from exc
        except aiosqlite.Error as exc:
            raise SessionStoreError(
                f"Failed to create session: {exc}", provider_name=_PROVIDER_NAME
            ) from exc

        logger.debug("session_record_created", session=hash_prefix(record.session_id_hash))

    async def replace(self, session_id_hash: str, update: SessionUpdate) -> bool:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(
                    _UPDATE_SQL.format(table=self._table),
                    (
                        update.latest_token_hash,
                        update.previous_token_hash,
                        _to_iso(update.session_expires_at),
                        _to_iso(update.token_expires_at),
                        session_id_hash,
                    ),
                )
                updated = cursor.rowcount
                await db.commit()
        except aiosqlite.Error as exc:
            raise SessionStoreError(
                f"Failed to update session: {exc}", provider_name=_PROVIDER_NAME
            ) from exc

        # Zero rows means the session was deleted after it was read.
        return updated > 0

    async def delete(self, session_id_hash: str) -> None:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_DELETE_SQL.format(table=self._table), (session_id_hash,))
                await db.commit()
        except aiosqlite.Error as exc:
            raise SessionStoreError(
                f"Failed to delete session: {exc}", provider_name=_PROVIDER_NAME
            ) from exc

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def delete_expired(self, now: datetime) -> int:
        """Delete every session whose lifetime ended at or before *now*.

        Returns the number of rows removed.
        """
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(
                    _DELETE_EXPIRED_SQL.format(table=self._table),
                    (_to_iso(now),),
                )
                pruned = cursor.rowcount
                await db.commit()
        except aiosqlite.Error as exc:
            raise SessionStoreError(
                f"Failed to prune sessions: {exc}", provider_name=_PROVIDER_NAME
            ) from exc

        if pruned:
            logger.info("sessions_pruned", table=self._table, pruned=pruned)
        return pruned

    async def count(self) -> int:
        """Return the number of stored sessions."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_COUNT_SQL.format(table=self._table))
                row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise SessionStoreError(
                f"Failed to count sessions: {exc}", provider_name=_PROVIDER_NAME
            ) from exc
        return row[0] if row else 0

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return f"{_PROVIDER_NAME}:{self._table}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_record(row: dict[str, Any]) -> SessionRecord:
        return SessionRecord(
            session_id_hash=row["session_id_hash"],
            latest_token_hash=row["latest_token_hash"],
            previous_token_hash=row["previous_token_hash"],
            session_expires_at=datetime.fromisoformat(row["session_expires_at"]),
            token_expires_at=datetime.fromisoformat(row["token_expires_at"]),
            application_data=json.loads(row["application_data"]),
        )


def _to_iso(value: datetime) -> str:
    # Fixed offset and precision keep stored strings comparable in SQL.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)  # noqa: UP017
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")  # noqa: UP017
