"""structlog configuration for forkguard.

Every log line, whether emitted through structlog or through a stdlib
``logging`` logger (aiosqlite, the host framework), passes through one
processor chain and ends in one renderer:

* ``JSONRenderer`` in deployed environments (``app_env`` of
  ``production`` or ``staging``), one JSON object per line;
* ``ConsoleRenderer`` everywhere else.

The environment is passed in by the caller, normally from
``Settings.app_env``; this module never reads the process environment.

Session identifiers and tokens are secrets.  Pass them through
:func:`hash_prefix` before they reach a logger.
"""

import logging
import sys

import structlog

from forkguard.utils.errors import ConfigurationError

_HASH_PREFIX_LEN = 12
_JSON_ENVIRONMENTS = frozenset({"production", "staging"})
_HANDLER_NAME = "forkguard"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]


def select_renderer(app_env: str, json_output: bool = False) -> structlog.types.Processor:
    """Return the final processor for *app_env*; ``json_output`` forces JSON."""
    if json_output or app_env.strip().lower() in _JSON_ENVIRONMENTS:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def _resolve_level(log_level: str) -> int:
    level = logging.getLevelName(log_level.strip().upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {log_level!r}")
    return level


def configure_logging(
    log_level: str = "INFO",
    app_env: str = "development",
    json_output: bool = False,
) -> structlog.BoundLogger:
    """Configure structlog and route stdlib logging through it.

    Safe to call more than once; the last call wins.  Call it before the
    first log line, since loggers cache their configuration on first use.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive).
        app_env: Deployment environment, usually ``Settings.app_env``.
        json_output: Render JSON regardless of *app_env*.

    Raises:
        ConfigurationError: If *log_level* is not a logging level name.
    """
    level = _resolve_level(log_level)
    renderer = select_renderer(app_env, json_output)
    shared = _shared_processors()

    structlog.configure(
        processors=[*shared, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.name = _HANDLER_NAME
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    # Replace only our own handler; anything the host installed stays.
    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.name == _HANDLER_NAME:
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound to *name*.

    Falls back to :func:`configure_logging` defaults if nothing has
    configured structlog yet.
    """
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(logger_name=name)


def hash_prefix(value: str | None) -> str | None:
    """Shorten a digest for log output (``None`` passes through)."""
    if value is None:
        return None
    return value[:_HASH_PREFIX_LEN]
