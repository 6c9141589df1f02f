"""Logging setup for a regctl process.

All records go to stderr so stdout stays reserved for command results.
``--log-json`` switches the renderer to one JSON object per line; every
line carries the ``register`` name taken from ``[register] name``.
"""

from __future__ import annotations

import logging
import sys

import structlog

# Library loggers kept at WARNING even under --verbose.
QUIET_LOGGERS: tuple[str, ...] = ("sqlalchemy.engine", "sqlalchemy.pool")


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    register_name: str | None = None,
) -> None:
    """Route regctl and library logging through one stderr handler.

    Args:
        verbose: Let ``regctl.*`` loggers emit DEBUG (telemetry spans, store
            events). Otherwise only warnings surface.
        log_json: Render JSON lines instead of console text.
        register_name: Bound as ``register`` on every event. Context left by
            a previous configuration is dropped.
    """
    structlog.contextvars.clear_contextvars()
    if register_name:
        structlog.contextvars.bind_contextvars(register=register_name)

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("regctl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
