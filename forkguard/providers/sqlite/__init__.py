"""SQLite session persistence.

SQLiteSessionStore stores one row per login in data/sessions.db and
implements the partial slot update with COALESCE.
"""

from forkguard.providers.sqlite.sqlite_session_store import SQLiteSessionStore

__all__ = ["SQLiteSessionStore"]
