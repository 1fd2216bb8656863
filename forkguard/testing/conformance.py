"""Conformance check for ``ISessionStore`` implementations.

The two-slot rotation only detects forking if the store shifts token
digests correctly, and a store that overwrites instead of shifting, or
nulls a slot it was told to leave alone, silently turns every benign
request race into a false "forked" verdict.  Run this against any adapter
before trusting it::

    await check_store_conformance(MyPostgresStore(dsn))

The check walks one throwaway session through:

    create → replace (rotation 1) → replace (rotation 2) → verify slots
    → replace with no slots (expiry only) → verify slots untouched
    → duplicate create rejected → delete → verify absent → delete again
    → replace of the deleted key returns False without recreating it

Any deviation raises :class:`ConformanceError` naming the failed step.
The store is left exactly as it was at that moment so the record can be
inspected; nothing is cleaned up on failure.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from forkguard.interfaces.session_store import ISessionStore
from forkguard.models.rotation import RotationConfig
from forkguard.models.session import SessionRecord, SessionUpdate
from forkguard.utils.clock import utc_now
from forkguard.utils.entropy import digest, generate_token
from forkguard.utils.errors import (
    ConformanceError,
    SessionExistsError,
    SessionStoreError,
)
from forkguard.utils.logging import get_logger, hash_prefix

logger = get_logger(__name__)


async def check_store_conformance(
    store: ISessionStore,
    config: RotationConfig | None = None,
    application_data: Any = None,
    now: datetime | None = None,
) -> None:
    """Exercise *store* through a full rotation lifecycle.

    Parameters
    ----------
    store:
        The adapter under test.  It must already be initialized.
    config:
        TTLs used to build the expiry timestamps.
    application_data:
        Payload stored with the throwaway session; must survive a round
        trip unchanged.  Defaults to a small JSON object.
    now:
        Start instant; defaults to the current UTC time.

    Raises
    ------
    ConformanceError
        On the first step where the store deviates from the contract.
    """
    config = config or RotationConfig()
    start = now or utc_now()
    if application_data is None:
        application_data = {"user_id": "conformance-check"}
    provider = store.get_provider_name()

    session_id_hash = digest(generate_token())
    first_hash = digest(generate_token())
    second_hash = digest(generate_token())
    third_hash = digest(generate_token())

    def fail(step: str, detail: str) -> ConformanceError:
        logger.error(
            "store_conformance_failed",
            provider=provider,
            step=step,
            detail=detail,
            session=hash_prefix(session_id_hash),
        )
        return ConformanceError(f"{step}: {detail}", provider_name=provider)

    await store.create(
        SessionRecord(
            session_id_hash=session_id_hash,
            latest_token_hash=first_hash,
            session_expires_at=start + config.session_ttl,
            token_expires_at=start + config.token_ttl,
            application_data=application_data,
        )
    )

    record = await store.read(session_id_hash)
    if record is None:
        raise fail("create", "record not readable after create")
    if record.latest_token_hash != first_hash or record.previous_token_hash is not None:
        raise fail("create", "fresh record must hold only the latest token slot")

    # Two rotations, each shifting latest into previous.
    second_session_exp = start + timedelta(seconds=10) + config.session_ttl
    second_token_exp = start + timedelta(seconds=1) + config.token_ttl
    updated = await store.replace(
        session_id_hash,
        SessionUpdate(
            latest_token_hash=second_hash,
            previous_token_hash=first_hash,
            session_expires_at=second_session_exp,
            token_expires_at=second_token_exp,
        ),
    )
    if updated is not True:
        raise fail("rotate", "replace() of an existing record did not return True")

    third_session_exp = start + timedelta(seconds=20) + config.session_ttl
    third_token_exp = start + timedelta(seconds=2) + config.token_ttl
    await store.replace(
        session_id_hash,
        SessionUpdate(
            latest_token_hash=third_hash,
            previous_token_hash=second_hash,
            session_expires_at=third_session_exp,
            token_expires_at=third_token_exp,
        ),
    )

    record = await store.read(session_id_hash)
    if record is None:
        raise fail("rotate", "record disappeared after replace")
    if record.latest_token_hash != third_hash:
        raise fail("rotate", "latest slot does not hold the newest token hash")
    if record.previous_token_hash != second_hash:
        raise fail("rotate", "previous slot does not hold the second-newest token hash")
    if first_hash in record.token_slots():
        raise fail("rotate", "evicted token hash is still present in a slot")
    if record.session_expires_at != third_session_exp:
        raise fail("rotate", "session expiry was not updated")
    if record.token_expires_at != third_token_exp:
        raise fail("rotate", "token expiry was not updated")
    if record.application_data != application_data:
        raise fail("rotate", "application data changed across replace")

    # An update without slots must leave both digests alone.
    extended_exp = third_session_exp + timedelta(seconds=30)
    await store.replace(
        session_id_hash,
        SessionUpdate(session_expires_at=extended_exp, token_expires_at=third_token_exp),
    )
    record = await store.read(session_id_hash)
    if record is None:
        raise fail("partial_update", "record disappeared after replace")
    if record.token_slots() != (third_hash, second_hash):
        raise fail("partial_update", "unset token slot was overwritten")
    if record.session_expires_at != extended_exp:
        raise fail("partial_update", "session expiry was not updated")

    try:
        await store.create(
            SessionRecord(
                session_id_hash=session_id_hash,
                latest_token_hash=first_hash,
                session_expires_at=start + config.session_ttl,
                token_expires_at=start + config.token_ttl,
            )
        )
    except SessionExistsError:
        pass
    else:
        raise fail("duplicate_create", "create() accepted an existing key")

    await store.delete(session_id_hash)
    if await store.read(session_id_hash) is not None:
        raise fail("delete", "record still readable after delete")

    # Deleting a missing key is not an error.
    await store.delete(session_id_hash)

    # A rotation racing a delete must lose quietly.
    try:
        updated = await store.replace(
            session_id_hash,
            SessionUpdate(session_expires_at=extended_exp, token_expires_at=third_token_exp),
        )
    except SessionStoreError as exc:
        raise fail("replace_missing", f"replace() on a deleted key raised {exc!r}") from exc
    if updated is not False:
        raise fail("replace_missing", "replace() on a deleted key did not return False")

    if await store.read(session_id_hash) is not None:
        raise fail("replace_missing", "replace() resurrected a deleted record")

    logger.info("store_conformance_passed", provider=provider)
