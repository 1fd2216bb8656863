"""The rotation engine: pure decision functions plus action execution."""

from forkguard.engine.actions import apply_action
from forkguard.engine.state_machine import (
    LOGOUT_COOKIE,
    consume,
    login,
    logout,
    logout_cookie,
)

__all__ = [
    "LOGOUT_COOKIE",
    "apply_action",
    "consume",
    "login",
    "logout",
    "logout_cookie",
]
