"""Read-through caching decorator for any session store.

Wraps another :class:`ISessionStore` and keeps recently read records in a
``cachetools.TTLCache``.  Every write for a key goes to the wrapped store
first and then evicts that key, so this process always reads its own
writes.

A read that is still waiting on the wrapped store when a write for the
same key completes does not fill the cache: the record it brings back may
predate the write.  Otherwise a session deleted by logout could be put
back into the cache and stay usable for a whole ``ttl``.

Only use this when the wrapped store has no other writers, or keep
``ttl`` well below the token TTL: a record cached here can miss a rotation
made by another process, and a token issued by that rotation would then
look forked.
"""

from __future__ import annotations

from cachetools import TTLCache

from forkguard.interfaces.session_store import ISessionStore
from forkguard.models.session import SessionRecord, SessionUpdate
from forkguard.utils.logging import get_logger, hash_prefix

logger = get_logger(__name__)


class CachedSessionStore(ISessionStore):
    """In-memory TTL cache in front of another ``ISessionStore``.

    Parameters
    ----------
    inner:
        The store that owns the data.
    max_size:
        Maximum number of cached records before the least-recently-used
        entry is evicted.
    ttl:
        Seconds a cached record may be served without re-reading.
    """

    def __init__(self, inner: ISessionStore, max_size: int = 1000, ttl: float = 5.0) -> None:
        self._inner = inner
        self._cache: TTLCache[str, SessionRecord] = TTLCache(maxsize=max_size, ttl=ttl)
        # Both keyed by session id hash, and only populated while a read
        # for that key is waiting on the wrapped store.
        self._reads_in_flight: dict[str, int] = {}
        self._write_generation: dict[str, int] = {}

    # ------------------------------------------------------------------
    # ISessionStore implementation
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        await self._inner.initialize()

    async def read(self, session_id_hash: str) -> SessionRecord | None:
        """Serve from cache, falling back to the wrapped store."""
        record = self._cache.get(session_id_hash)
        if record is not None:
            logger.debug("cache_hit", session=hash_prefix(session_id_hash))
            return record

        logger.debug("cache_miss", session=hash_prefix(session_id_hash))
        generation = self._write_generation.get(session_id_hash, 0)
        self._reads_in_flight[session_id_hash] = self._reads_in_flight.get(session_id_hash, 0) + 1
        try:
            record = await self._inner.read(session_id_hash)
        finally:
            written = self._write_generation.get(session_id_hash, 0) != generation
            self._release(session_id_hash)

        if record is not None and not written:
            self._cache[session_id_hash] = record
        elif written:
            logger.debug("cache_fill_skipped", session=hash_prefix(session_id_hash))
        return record

    async def create(self, record: SessionRecord) -> None:
        try:
            await self._inner.create(record)
        finally:
            self._invalidate(record.session_id_hash)

    async def replace(self, session_id_hash: str, update: SessionUpdate) -> bool:
        try:
            return await self._inner.replace(session_id_hash, update)
        finally:
            # Evict even on failure; the stored row may have changed anyway.
            self._invalidate(session_id_hash)

    async def delete(self, session_id_hash: str) -> None:
        try:
            await self._inner.delete(session_id_hash)
        finally:
            self._invalidate(session_id_hash)

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return f"cached:{self._inner.get_provider_name()}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _invalidate(self, session_id_hash: str) -> None:
        # Runs after the wrapped write has finished.
        self._cache.pop(session_id_hash, None)
        if session_id_hash in self._reads_in_flight:
            self._write_generation[session_id_hash] = (
                self._write_generation.get(session_id_hash, 0) + 1
            )

    def _release(self, session_id_hash: str) -> None:
        remaining = self._reads_in_flight[session_id_hash] - 1
        if remaining:
            self._reads_in_flight[session_id_hash] = remaining
        else:
            del self._reads_in_flight[session_id_hash]
            self._write_generation.pop(session_id_hash, None)
