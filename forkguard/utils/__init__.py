"""Utility modules for forkguard.

- **clock** -- the injectable ``Clock`` type and the default ``utc_now``.
- **entropy** -- CSPRNG token generation and SHA-256 digests.
- **errors** -- exception hierarchy rooted at ForkGuardError.  Session
  outcomes (forked, expired, ...) are results, not exceptions.
- **logging** -- structlog setup.  Console output in development, JSON lines
  when the caller passes a production or staging ``app_env``.
"""

from forkguard.utils.clock import Clock, utc_now
from forkguard.utils.entropy import digest, generate_token
from forkguard.utils.errors import (
    ConfigurationError,
    ConformanceError,
    ForkGuardError,
    SessionExistsError,
    SessionStoreError,
)
from forkguard.utils.logging import configure_logging, get_logger, hash_prefix

__all__ = [
    "Clock",
    "ConfigurationError",
    "ConformanceError",
    "ForkGuardError",
    "SessionExistsError",
    "SessionStoreError",
    "configure_logging",
    "digest",
    "generate_token",
    "get_logger",
    "hash_prefix",
    "utc_now",
]
