"""structlog setup for the slanger CLI.

Everything goes to stderr so stdout stays clean for ``--json`` output.
Records from stdlib loggers (the cache layer, the pipeline) and from
structlog loggers (orchestrator, telemetry) share one processor chain and
come out either as console lines or, with ``--log-json``, as JSON lines.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

# Third-party loggers kept at WARNING even under --verbose.
QUIET_LOGGERS = ("redis",)

_URL_CREDENTIALS = re.compile(r"(?P<scheme>\w+://)(?P<user>[^:/@\s]*):[^@/\s]+@")


def mask_url_credentials(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Replace passwords embedded in URLs (``redis://:pw@host``) with ``***``."""
    for key, value in event_dict.items():
        if isinstance(value, str) and "@" in value:
            event_dict[key] = _URL_CREDENTIALS.sub(r"\g<scheme>\g<user>:***@", value)
    return event_dict


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        mask_url_credentials,
    ]


def _stderr_handler(*, log_json: bool) -> logging.Handler:
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_pre_chain(),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    return handler


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route all logging through structlog onto stderr.

    Args:
        verbose: DEBUG for ``slanger.*`` loggers instead of WARNING.
        log_json: One JSON object per line instead of console output.
    """
    structlog.configure(
        processors=[*_pre_chain(), structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(_stderr_handler(log_json=log_json))
    root.setLevel(logging.WARNING)

    logging.getLogger("slanger").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
