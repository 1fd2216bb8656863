"""Public interface definitions for forkguard's external collaborators.

The rotation engine never talks to a database directly.  Storage is reached
exclusively through the abstract base class defined in this package, and
concrete adapters are injected at runtime.

CONCRETE PROVIDER MAP:
    Interface        →  Concrete implementations (in forkguard/providers/)
    ─────────────────────────────────────────────────────────────────────
    ISessionStore    →  MemorySessionStore, SQLiteSessionStore,
                        CachedSessionStore (decorates any other store)
"""

from forkguard.interfaces.session_store import ISessionStore

__all__ = [
    "ISessionStore",
]
