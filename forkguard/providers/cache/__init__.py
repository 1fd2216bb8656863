"""Cache providers.

CachedSessionStore wraps any other ISessionStore with a per-process
cachetools TTL cache.  It is not shared across processes, so keep its TTL
short in multi-worker deployments.
"""

from forkguard.providers.cache.cached_session_store import CachedSessionStore

__all__ = ["CachedSessionStore"]
