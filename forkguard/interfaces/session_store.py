"""Abstract base class for session record persistence.

Defines the contract the state machine's callers use to read and mutate
:class:`~forkguard.models.session.SessionRecord` rows.  Implementations may
use an in-memory dict, SQLite, PostgreSQL, Redis, or any other backend; the
adapter pattern lets the backend be swapped without touching the rotation
logic.

Consistency obligations
-----------------------
- Each operation is atomic with respect to the single record it touches.
- Reads observe the caller's own earlier writes to the same key.
- Serializability across a read-decide-write sequence is *not* required.
  The two-slot token window absorbs ordinary request races without locks.

Run :func:`forkguard.testing.conformance.check_store_conformance` against
any new adapter; overwriting a slot instead of shifting it is the classic
bug it catches.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from forkguard.models.session import SessionRecord, SessionUpdate


class ISessionStore(ABC):
    """Contract for session record storage.

    All operations are async to allow for network-backed stores without
    blocking the event loop.
    """

    @abstractmethod
    async def read(self, session_id_hash: str) -> SessionRecord | None:
        """Return the record stored under *session_id_hash*.

        Parameters
        ----------
        session_id_hash:
            Digest of the session identifier (the primary key).

        Returns
        -------
        SessionRecord or None
            The stored record, or ``None`` if no such session exists.
        """

    @abstractmethod
    async def create(self, record: SessionRecord) -> None:
        """Insert a brand-new record.

        Parameters
        ----------
        record:
            The record to insert.  Only ``latest_token_hash`` is set for a
            fresh login.

        Raises
        ------
        SessionExistsError
            If a record with the same ``session_id_hash`` already exists.
        """

    @abstractmethod
    async def replace(self, session_id_hash: str, update: SessionUpdate) -> bool:
        """Apply a partial update to an existing record.

        Both expiry fields are always overwritten.  Each token slot is
        written only if the corresponding field of *update* is set; a
        ``None`` slot must leave the stored value untouched.  Application
        data is never modified.

        Parameters
        ----------
        session_id_hash:
            Key of the record to update.
        update:
            The fields to write.

        Returns
        -------
        bool
            ``True`` if a record was updated, ``False`` if none exists for
            *session_id_hash*.  A missing key is not an error: another
            request may have deleted the session since it was read, and an
            update must never recreate it.
        """

    @abstractmethod
    async def delete(self, session_id_hash: str) -> None:
        """Remove the record stored under *session_id_hash*.

        This is a no-op if the key does not exist.
        """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (tables, indices).  Safe to call twice."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
