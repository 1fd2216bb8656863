"""In-memory session store.

Dict-backed, for tests, demos, and single-process deployments.  Records
are immutable pydantic models, so handing them out by reference is safe.
"""

from __future__ import annotations

from forkguard.interfaces.session_store import ISessionStore
from forkguard.models.session import SessionRecord, SessionUpdate
from forkguard.utils.errors import SessionExistsError
from forkguard.utils.logging import get_logger, hash_prefix

logger = get_logger(__name__)

_PROVIDER_NAME = "memory_session_store"


class MemorySessionStore(ISessionStore):
    """Session records held in a plain dict keyed by session id hash."""

    def __init__(self) -> None:
        self._records: dict[str, SessionRecord] = {}

    async def initialize(self) -> None:
        """Nothing to prepare."""

    async def read(self, session_id_hash: str) -> SessionRecord | None:
        return self._records.get(session_id_hash)

    async def create(self, record: SessionRecord) -> None:
        if record.session_id_hash in self._records:
            raise SessionExistsError(provider_name=_PROVIDER_NAME)
        self._records[record.session_id_hash] = record
        logger.debug("session_record_created", session=hash_prefix(record.session_id_hash))

    async def replace(self, session_id_hash: str, update: SessionUpdate) -> bool:
        current = self._records.get(session_id_hash)
        if current is None:
            return False
        self._records[session_id_hash] = current.apply(update)
        return True

    async def delete(self, session_id_hash: str) -> None:
        self._records.pop(session_id_hash, None)

    def __len__(self) -> int:
        return len(self._records)

    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
        return _PROVIDER_NAME
