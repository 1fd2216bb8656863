"""Concrete ``ISessionStore`` adapters."""

from forkguard.providers.cache.cached_session_store import CachedSessionStore
from forkguard.providers.memory.memory_session_store import MemorySessionStore
from forkguard.providers.sqlite.sqlite_session_store import SQLiteSessionStore

__all__ = [
    "CachedSessionStore",
    "MemorySessionStore",
    "SQLiteSessionStore",
]
