"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads configuration from (in priority order):
#
#   1. **Environment variables** — e.g., TOKEN_TTL=300
#   2. **.env file** — key=value lines in the project root .env file
#
# Field name `session_ttl` maps to env var `SESSION_TTL`.  Durations
# accept either seconds (`TOKEN_TTL=120`) or ISO-8601 (`TOKEN_TTL=PT2M`).
#
# `config/config.yaml` can supply defaults too; see
# forkguard/config/loader.py for how the two layers are merged.
# ──────────────────────────────────────────────────────────────────────
"""

from datetime import timedelta

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from forkguard.models.cookie import SameSite
from forkguard.models.rotation import (
    DEFAULT_COOKIE_NAME,
    DEFAULT_SESSION_TTL,
    DEFAULT_TOKEN_TTL,
    RotationConfig,
)
from forkguard.utils.errors import ConfigurationError


class Settings(BaseSettings):
    """forkguard settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Rotation policy ===
    session_ttl: timedelta = DEFAULT_SESSION_TTL
    # Must cover the slowest in-flight request and stay below session_ttl.
    token_ttl: timedelta = DEFAULT_TOKEN_TTL

    # === Cookie attributes ===
    cookie_name: str = DEFAULT_COOKIE_NAME
    cookie_same_site: SameSite = SameSite.STRICT
    cookie_path: str = "/"

    # === Session Persistence ===
    session_db_path: str = "data/sessions.db"
    session_table: str = "sessions"
    session_cache_enabled: bool = False
    session_cache_size: int = 1000
    session_cache_ttl: float = 5.0

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"

    def rotation_config(self) -> RotationConfig:
        """Build the validated rotation policy.

        Raises
        ------
        ConfigurationError
            If the TTLs or cookie attributes are inconsistent, e.g.
            ``token_ttl >= session_ttl``.
        """
        try:
            return RotationConfig(
                session_ttl=self.session_ttl,
                token_ttl=self.token_ttl,
                cookie_name=self.cookie_name,
                same_site=self.cookie_same_site,
                cookie_path=self.cookie_path,
            )
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid session rotation settings: {exc.errors()[0]['msg']}"
            ) from exc
