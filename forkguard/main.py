"""Factories that wire settings, store adapters and the session service.

Host applications that are happy with the bundled SQLite store can do::

    settings = load_settings()
    service = await build_session_service(settings)

and then call ``service.login`` / ``service.consume`` / ``service.logout``
from their request handlers.  Applications with their own database
implement ``ISessionStore`` and construct ``SessionService`` directly.
"""

from __future__ import annotations

from forkguard.config.settings import Settings
from forkguard.interfaces.session_store import ISessionStore
from forkguard.providers.cache.cached_session_store import CachedSessionStore
from forkguard.providers.sqlite.sqlite_session_store import SQLiteSessionStore
from forkguard.services.session_service import SessionService
from forkguard.utils.clock import Clock, utc_now
from forkguard.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def build_session_store(settings: Settings) -> ISessionStore:
    """Return the configured store (not yet initialized)."""
    store: ISessionStore = SQLiteSessionStore(
        db_path=settings.session_db_path,
        table_name=settings.session_table,
    )
    if settings.session_cache_enabled:
        store = CachedSessionStore(
            store,
            max_size=settings.session_cache_size,
            ttl=settings.session_cache_ttl,
        )
    return store


async def build_session_service(
    settings: Settings,
    clock: Clock = utc_now,
) -> SessionService:
    """Configure logging, validate settings, initialize the store and return
    a ready service.

    Logging follows ``settings.log_level`` and ``settings.app_env``.

    Raises
    ------
    ConfigurationError
        If the log level is unknown or the rotation settings are inconsistent.
    """
    configure_logging(settings.log_level, app_env=settings.app_env)
    config = settings.rotation_config()
    store = build_session_store(settings)
    await store.initialize()

    logger.info(
        "session_service_ready",
        store=store.get_provider_name(),
        session_ttl_seconds=config.session_ttl.total_seconds(),
        token_ttl_seconds=config.token_ttl.total_seconds(),
    )
    return SessionService(store, config=config, clock=clock)
