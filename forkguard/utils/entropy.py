"""Token generation and one-way digests.

Session identifiers and rotation tokens are both 32 bytes (256 bits) drawn
from the operating system CSPRNG via :mod:`secrets`, hex-encoded so they
never contain the ``:`` cookie delimiter.

Digests are plain SHA-256 with no salt or pepper.  Every input already
carries 256 bits of entropy, so a stolen table of hashes cannot be reversed
or brute-forced back into usable cookies.
"""

from __future__ import annotations

import hashlib
import secrets

TOKEN_BYTES = 32
TOKEN_LENGTH = TOKEN_BYTES * 2
DIGEST_LENGTH = 64


def generate_token() -> str:
    """Return 64 lowercase hex characters of fresh CSPRNG output."""
    return secrets.token_hex(TOKEN_BYTES)


def digest(value: str) -> str:
    """Return the SHA-256 hex digest of *value* encoded as UTF-8."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
