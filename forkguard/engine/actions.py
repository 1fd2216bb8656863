"""Execution of persistence actions against an ``ISessionStore``."""

from __future__ import annotations

from forkguard.interfaces.session_store import ISessionStore
from forkguard.models.outcome import Action, CreateAction, DeleteAction, ReplaceAction


async def apply_action(store: ISessionStore, action: Action | None) -> bool:
    """Run *action* as a single store call.  ``None`` is a no-op.

    Returns ``False`` only when a replace found no record to update, i.e.
    the session was deleted after it was read.  Store exceptions propagate
    unchanged; nothing is retried here.
    """
    if action is None:
        return True
    if isinstance(action, CreateAction):
        await store.create(action.record)
        return True
    if isinstance(action, ReplaceAction):
        return await store.replace(action.session_id_hash, action.update)
    if isinstance(action, DeleteAction):
        await store.delete(action.session_id_hash)
        return True
    msg = f"Unknown session action: {action!r}"
    raise TypeError(msg)
