"""forkguard — rotating session cookies with fork (theft) detection.

Typical use::

    from forkguard import MemorySessionStore, SessionService, SessionState

    service = SessionService(MemorySessionStore())
    login = await service.login({"user_id": 42})
    result = await service.consume(login.cookie.value)
    if result.state is SessionState.FORKED:
        ...  # alert: the cookie was probably stolen
"""

from forkguard.engine import LOGOUT_COOKIE, apply_action, consume, login, logout, logout_cookie
from forkguard.interfaces import ISessionStore
from forkguard.models import (
    ConsumeResult,
    CookieDirective,
    CookieOptions,
    Credential,
    LoginResult,
    LogoutResult,
    RotationConfig,
    SameSite,
    SessionRecord,
    SessionState,
    SessionUpdate,
)
from forkguard.providers import CachedSessionStore, MemorySessionStore, SQLiteSessionStore
from forkguard.services.credential_codec import decode, encode
from forkguard.services.session_service import SessionService
from forkguard.testing import check_store_conformance

__version__ = "0.1.0"

__all__ = [
    "LOGOUT_COOKIE",
    "CachedSessionStore",
    "ConsumeResult",
    "CookieDirective",
    "CookieOptions",
    "Credential",
    "ISessionStore",
    "LoginResult",
    "LogoutResult",
    "MemorySessionStore",
    "RotationConfig",
    "SQLiteSessionStore",
    "SameSite",
    "SessionRecord",
    "SessionService",
    "SessionState",
    "SessionUpdate",
    "apply_action",
    "check_store_conformance",
    "consume",
    "decode",
    "encode",
    "login",
    "logout",
    "logout_cookie",
]
