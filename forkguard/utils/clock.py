"""Injectable clock.

The state machine never reads the system clock itself.  Services take a
``Clock`` so tests can pin time to any instant.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current instant as a timezone-aware UTC datetime."""
    return datetime.now(tz=timezone.utc)  # noqa: UP017
