"""forkguard domain models — re-exports all public model classes.

The models are organized across four submodules by concern:
    - cookie.py   — Cookie directives handed back to the web framework
    - outcome.py  — State machine results and persistence actions
    - rotation.py — Rotation policy configuration (TTLs, cookie attributes)
    - session.py  — Credential, persisted SessionRecord, partial SessionUpdate

If you add a new model class, remember to add it to ``__all__`` too.
"""

from __future__ import annotations

from forkguard.models.cookie import CookieDirective, CookieOptions, SameSite
from forkguard.models.outcome import (
    Action,
    ConsumeResult,
    CreateAction,
    DeleteAction,
    LoginResult,
    LogoutResult,
    ReplaceAction,
    SessionState,
)
from forkguard.models.rotation import RotationConfig
from forkguard.models.session import Credential, SessionRecord, SessionUpdate

__all__ = [
    # cookie
    "CookieDirective",
    "CookieOptions",
    "SameSite",
    # outcome
    "Action",
    "ConsumeResult",
    "CreateAction",
    "DeleteAction",
    "LoginResult",
    "LogoutResult",
    "ReplaceAction",
    "SessionState",
    # rotation
    "RotationConfig",
    # session
    "Credential",
    "SessionRecord",
    "SessionUpdate",
]
