"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. Built-in defaults   — field defaults on Settings
#   2. config/config.yaml  — static defaults checked into the repo
#   3. .env file           — local developer overrides (not committed)
#   4. Environment vars    — set at deploy time
#
# Only env/.env values that were actually provided override the YAML;
# a Settings default never masks a YAML value.
#
# The YAML file is grouped into sections, e.g.
#   rotation: {session_ttl: 604800, token_ttl: 120}
#   cookie:   {name: session_id, same_site: strict, path: /}
# and _SECTION_FIELDS maps each (section, key) to a Settings field.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path
from typing import Any

import yaml

from forkguard.config.settings import Settings
from forkguard.utils.errors import ConfigurationError

_SECTION_FIELDS: dict[str, dict[str, str]] = {
    "rotation": {
        "session_ttl": "session_ttl",
        "token_ttl": "token_ttl",
    },
    "cookie": {
        "name": "cookie_name",
        "same_site": "cookie_same_site",
        "path": "cookie_path",
    },
    "store": {
        "db_path": "session_db_path",
        "table": "session_table",
        "cache_enabled": "session_cache_enabled",
        "cache_size": "session_cache_size",
        "cache_ttl": "session_cache_ttl",
    },
    "app": {
        "env": "app_env",
    },
    "logging": {
        "level": "log_level",
    },
}


def load_config(path: str = "config/config.yaml") -> dict[str, Any]:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.  A missing file is
              treated as empty.

    Returns:
        Fully resolved configuration dictionary, grouped by section.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            try:
                yaml_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Cannot parse {config_path}: {exc}") from exc
    else:
        yaml_config = {}

    if not isinstance(yaml_config, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")

    settings = Settings()
    env_overrides: dict[str, dict[str, Any]] = {}
    for section, fields in _SECTION_FIELDS.items():
        for key, field_name in fields.items():
            if field_name in settings.model_fields_set:
                env_overrides.setdefault(section, {})[key] = getattr(settings, field_name)

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def load_settings(path: str = "config/config.yaml") -> Settings:
    """Return a :class:`Settings` built from YAML plus environment overrides."""
    config = load_config(path)
    values: dict[str, Any] = {}
    for section, fields in _SECTION_FIELDS.items():
        section_values = config.get(section) or {}
        for key, field_name in fields.items():
            if key in section_values:
                values[field_name] = section_values[key]
    return Settings(**values)


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
