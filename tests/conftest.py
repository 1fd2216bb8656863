"""Shared pytest fixtures for the forkguard test suite."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from forkguard.models.rotation import RotationConfig
from forkguard.models.session import SessionRecord
from forkguard.providers.memory.memory_session_store import MemorySessionStore
from forkguard.services.session_service import SessionService
from forkguard.utils.entropy import digest

T0 = datetime(2023, 10, 1, tzinfo=timezone.utc)  # noqa: UP017


class FakeClock:
    """A settable clock; call it to get the current instant."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def set(self, **offset: float) -> datetime:
        """Move to ``T0 + timedelta(**offset)`` and return the new instant."""
        self.now = T0 + timedelta(**offset)
        return self.now


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_record(
    latest_token: str = "latest-token",
    previous_token: str | None = None,
    session_expires_at: datetime = T0 + timedelta(hours=5),
    token_expires_at: datetime = T0 + timedelta(minutes=10),
    session_id: str = "session-id",
    application_data: object = None,
) -> SessionRecord:
    """Build a record whose slots hold the digests of the given raw tokens."""
    return SessionRecord(
        session_id_hash=digest(session_id),
        latest_token_hash=digest(latest_token),
        previous_token_hash=digest(previous_token) if previous_token else None,
        session_expires_at=session_expires_at,
        token_expires_at=token_expires_at,
        application_data=application_data if application_data is not None else {"user_id": "u-1"},
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def config() -> RotationConfig:
    """10-minute tokens inside 5-hour sessions."""
    return RotationConfig(
        session_ttl=timedelta(hours=5),
        token_ttl=timedelta(minutes=10),
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture
def service(store: MemorySessionStore, config: RotationConfig, clock: FakeClock) -> SessionService:
    return SessionService(store, config=config, clock=clock)


class SlowReadStore(MemorySessionStore):
    """Memory store whose reads return the record, then yield for a while.

    Lets another request's write land between a read and whatever the
    reader does with the (by then stale) record.
    """

    def __init__(self, delay: float = 0.01) -> None:
        super().__init__()
        self._delay = delay

    async def read(self, session_id_hash: str) -> SessionRecord | None:
        record = await super().read(session_id_hash)
        await asyncio.sleep(self._delay)
        return record
