"""
Logging setup: rich console output for humans, JSON lines for machines.

Modules log through stdlib ``logging.getLogger(__name__)``. The JSON format
renders those records with structlog's ``ProcessorFormatter``, one object per
line with ``timestamp``, ``level``, ``logger`` and ``event`` keys (plus
``exception`` when a traceback is attached).
"""

from __future__ import annotations

import logging

import structlog
from rich.logging import RichHandler

from chatscreen.core.config import LoggingConfig

# Applied to every stdlib record before rendering.
_PRE_CHAIN = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def _json_formatter() -> structlog.stdlib.ProcessorFormatter:
    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_PRE_CHAIN,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
    )


def configure_logging(config: LoggingConfig) -> None:
    """Install a single handler on the root logger according to ``config``."""
    handler: logging.Handler
    if config.format == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(_json_formatter())
    else:
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(config.level)
    # httpx logs every request at INFO; keep it quiet unless debugging.
    logging.getLogger("httpx").setLevel(
        logging.DEBUG if config.level == "DEBUG" else logging.WARNING
    )
