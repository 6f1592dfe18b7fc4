"""Route pageable's structlog events to a stdlib handler."""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

import structlog

_ENV_LOG_LEVEL = "PAGEABLE_LOG_LEVEL"
_ENV_LOG_FORMAT = "PAGEABLE_LOG_FORMAT"

_RENDERERS = {
    "console": structlog.dev.ConsoleRenderer,
    "json": structlog.processors.JSONRenderer,
}


def setup_logging(
    level: str | None = None,
    fmt: str | None = None,
    *,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Attach a structlog-formatted handler to the ``pageable`` logger.

    The library itself never calls this.  Only the ``pageable`` logger tree
    is touched, so an application's own logging setup is left alone; calling
    it again replaces the previous handler.  Arguments override:
        PAGEABLE_LOG_LEVEL   log level (default: INFO)
        PAGEABLE_LOG_FORMAT  console | json (default: console)
    """
    log_level = (level or os.environ.get(_ENV_LOG_LEVEL, "INFO")).upper()
    log_format = (fmt or os.environ.get(_ENV_LOG_FORMAT, "console")).lower()
    if log_format not in _RENDERERS:
        raise ValueError(f"{_ENV_LOG_FORMAT} must be 'console' or 'json', got {log_format!r}")

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _RENDERERS[log_format](),
            ],
        )
    )

    logger = logging.getLogger("pageable")
    logger.handlers = [handler]
    logger.setLevel(log_level)
    logger.propagate = False
    return handler
