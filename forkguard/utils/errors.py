"""Custom exception hierarchy for forkguard.

All library exceptions inherit from :class:`ForkGuardError`, which carries
an optional ``provider_name`` so error handlers can identify which session
store (e.g. "sqlite_session_store", "memory_session_store") caused the
failure.

The hierarchy is organized by concern:

    ForkGuardError  (base -- catch-all for any forkguard error)
    +-- ConfigurationError       (invalid TTLs / cookie settings)
    +-- SessionStoreError        (backend failure inside a store adapter)
    |   +-- SessionExistsError   (create() on a key that already exists)
    +-- ConformanceError         (store adapter violates the port contract)

Note that none of the session *states* (forked, expired, not found,
malformed cookie) are exceptions.  Those are ordinary outcomes returned by
the state machine; only programming and backend errors raise.
"""


class ForkGuardError(Exception):
    """Base exception for all forkguard errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which store adapter triggered the error.
    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[sqlite_session_store] disk I/O error``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class ConfigurationError(ForkGuardError):
    """Raised when rotation or cookie configuration is invalid."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------

class SessionStoreError(ForkGuardError):
    """Raised when a session store backend fails.

    The state machine never catches this: a failing store is fatal for the
    request that hit it.  Retrying is the adapter's business, and must not
    apply the same rotation twice.
    """

    def __init__(
        self,
        message: str = "Session store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class SessionExistsError(SessionStoreError):
    """Raised by ``create()`` when a record with the same key already exists."""

    def __init__(
        self,
        message: str = "Session record already exists",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Conformance checking
# ---------------------------------------------------------------------------

class ConformanceError(ForkGuardError):
    """Raised when a store adapter fails the persistence-port conformance check.

    The message names the step that deviated.  The store is left as it was
    at the moment of failure so the offending record can be inspected.
    """

    def __init__(
        self,
        message: str = "Session store does not conform to the port contract",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
