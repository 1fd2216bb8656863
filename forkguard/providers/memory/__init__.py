"""In-process dict-backed session store for tests and single-worker apps."""

from forkguard.providers.memory.memory_session_store import MemorySessionStore

__all__ = ["MemorySessionStore"]
