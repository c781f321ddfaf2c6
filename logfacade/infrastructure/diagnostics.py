'''
Diagnostic channel for the package's own errors.

Write failures and lifecycle events are reported through stdlib logging
under the `logfacade` logger. Without configuration they reach stderr via
logging's last-resort handler. configure_diagnostics() gives them a
dedicated stderr handler that renders JSON lines through structlog and
orjson, so they stay machine-readable next to the application's own logs.
'''

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

from logfacade.infrastructure.render import orjson_dumps_str


__all__ = ['DIAGNOSTIC_LOGGER', 'configure_diagnostics']

DIAGNOSTIC_LOGGER = 'logfacade'


def configure_diagnostics(log_level: str = 'WARNING', stream: TextIO | None = None) -> logging.Handler:

    '''
    Route the package's diagnostic records to a JSON stream handler.

    Replaces any handler installed by a previous call. The root logger is
    left alone and records do not propagate to it.

    Args:
        log_level (str): Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream (TextIO | None): Target stream, stderr by default

    Returns:
        logging.Handler: The installed handler
    '''

    numeric_level = getattr(logging, log_level.upper(), logging.WARNING)

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.JSONRenderer(serializer=orjson_dumps_str),
        ],
        foreign_pre_chain=[
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt='iso', utc=True),
            structlog.processors.format_exc_info,
        ],
    )

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(formatter)

    package_logger = logging.getLogger(DIAGNOSTIC_LOGGER)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(numeric_level)
    package_logger.propagate = False

    return handler
