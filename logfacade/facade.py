'''
Package-level logging functions.

Each function forwards to the globally registered logger when there is
one. Otherwise it writes `[TAG] message` to a minimal fallback stream
(stderr by default) with no filtering and no color, so existing call sites
keep working before any logger is configured.

New code should inject a Logger instead of calling these functions.
'''

from __future__ import annotations

import logging
import sys
import threading
from typing import Any, TextIO

from logfacade.core.interface import Context, Logger
from logfacade.core.levels import Severity, classify_status
from logfacade.infrastructure import process
from logfacade.infrastructure.logger import NoOpLogger, format_message, join_message
from logfacade.infrastructure.registry import REGISTRY
from logfacade.infrastructure.render import format_fields


__all__ = [
    'FALLBACK',
    'FallbackWriter',
    'api',
    'api_context',
    'apif',
    'apif_context',
    'debug',
    'debug_context',
    'debugf',
    'debugf_context',
    'error',
    'error_context',
    'errorf',
    'errorf_context',
    'fatal',
    'fatal_context',
    'fatalf',
    'fatalf_context',
    'info',
    'info_context',
    'infof',
    'infof_context',
    'warning',
    'warning_context',
    'warningf',
    'warningf_context',
    'with_attrs',
    'with_group',
]

_log = logging.getLogger(__name__)

_FALLBACK_TAGS: dict[Severity, str] = {
    Severity.DEBUG: '[DEBUG]',
    Severity.INFO: '[INFO]',
    Severity.WARNING: '[WARN ]',
    Severity.ERROR: '[ERROR]',
    Severity.FATAL: '[FATAL]',
}


class FallbackWriter:

    '''
    Unfiltered `[TAG] message` writer used while no logger is registered.

    Args:
        stream (TextIO | None): Target stream, None for stderr resolved at
            write time
    '''

    def __init__(self, stream: TextIO | None = None) -> None:

        self._stream = stream
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:

        '''Return the current stream, stderr when none was set.'''

        return self._stream if self._stream is not None else sys.stderr

    def redirect(self, stream: TextIO | None) -> None:

        '''Write to another stream; None restores stderr.'''

        with self._lock:
            self._stream = stream

    def write(self, severity: Severity, message: str, fields: dict[str, Any] | None = None) -> None:

        '''
        Write one line, then terminate the process if severity is FATAL.

        Args:
            severity (Severity): Severity of the call
            message (str): Rendered message
            fields (dict[str, Any] | None): Keyword fields appended as key=value
        '''

        extra = format_fields(fields) if fields else ''
        body = f'{message} {extra}' if extra else message
        try:
            with self._lock:
                stream = self.stream
                stream.write(f'{_FALLBACK_TAGS[severity]} {body}\n')
                stream.flush()
        except (OSError, ValueError) as exc:
            _log.error('failed to log message %r: %s', message, exc)

        if severity is Severity.FATAL:
            process.exit_process(process.FATAL_EXIT_CODE)


FALLBACK = FallbackWriter()


def _emit(severity: Severity, args: tuple[Any, ...], fields: dict[str, Any]) -> None:

    message = join_message(args[0], args[1:]) if args else ''
    logger = REGISTRY.get()
    if logger is not None:
        logger.log_tagged(severity, message, **fields)
    else:
        FALLBACK.write(severity, message, fields)


def debug(*args: Any, **fields: Any) -> None:

    '''Log space-joined args at DEBUG.'''

    _emit(Severity.DEBUG, args, fields)


def info(*args: Any, **fields: Any) -> None:

    '''Log space-joined args at INFO.'''

    _emit(Severity.INFO, args, fields)


def warning(*args: Any, **fields: Any) -> None:

    '''Log space-joined args at WARNING.'''

    _emit(Severity.WARNING, args, fields)


def error(*args: Any, **fields: Any) -> None:

    '''Log space-joined args at ERROR.'''

    _emit(Severity.ERROR, args, fields)


def fatal(*args: Any, **fields: Any) -> None:

    '''Log space-joined args at FATAL, then terminate the process.'''

    _emit(Severity.FATAL, args, fields)


def debugf(fmt: str, /, *args: Any, **fields: Any) -> None:

    '''Format printf-style and log at DEBUG.'''

    logger = REGISTRY.get()
    if logger is not None:
        logger.debugf(fmt, *args, **fields)
    else:
        FALLBACK.write(Severity.DEBUG, format_message(fmt, args), fields)


def infof(fmt: str, /, *args: Any, **fields: Any) -> None:

    '''Format printf-style and log at INFO.'''

    logger = REGISTRY.get()
    if logger is not None:
        logger.infof(fmt, *args, **fields)
    else:
        FALLBACK.write(Severity.INFO, format_message(fmt, args), fields)


def warningf(fmt: str, /, *args: Any, **fields: Any) -> None:

    '''Format printf-style and log at WARNING.'''

    logger = REGISTRY.get()
    if logger is not None:
        logger.warningf(fmt, *args, **fields)
    else:
        FALLBACK.write(Severity.WARNING, format_message(fmt, args), fields)


def errorf(fmt: str, /, *args: Any, **fields: Any) -> None:

    '''Format printf-style and log at ERROR.'''

    logger = REGISTRY.get()
    if logger is not None:
        logger.errorf(fmt, *args, **fields)
    else:
        FALLBACK.write(Severity.ERROR, format_message(fmt, args), fields)


def fatalf(fmt: str, /, *args: Any, **fields: Any) -> None:

    '''Format printf-style, log at FATAL, then terminate the process.'''

    logger = REGISTRY.get()
    if logger is not None:
        logger.fatalf(fmt, *args, **fields)
    else:
        FALLBACK.write(Severity.FATAL, format_message(fmt, args), fields)


def api(status_code: int, /, *args: Any, **fields: Any) -> None:

    '''
    Log space-joined args as an API entry for an HTTP status.

    Args:
        status_code (int): HTTP status of the handled request
        *args (Any): Message parts
        **fields (Any): Structured fields
    '''

    message = join_message(args[0], args[1:]) if args else ''
    logger = REGISTRY.get()
    if logger is not None:
        logger.api(status_code, message, **fields)
    else:
        FALLBACK.write(classify_status(status_code), message, fields)


def apif(status_code: int, fmt: str, /, *args: Any, **fields: Any) -> None:

    '''Format printf-style and log an API entry for an HTTP status.'''

    logger = REGISTRY.get()
    if logger is not None:
        logger.apif(status_code, fmt, *args, **fields)
    else:
        FALLBACK.write(classify_status(status_code), format_message(fmt, args), fields)


def _context_call(
    severity: Severity,
    method: str,
    ctx: Context,
    msg: Any,
    args: tuple[Any, ...],
    fields: dict[str, Any],
    *,
    formatted: bool,
) -> None:

    '''
    Forward a context-aware call, or write it through the fallback.

    The fallback has no structured output, so positional args are joined
    (or formatted) into the message and the context mapping is dropped.
    '''

    logger = REGISTRY.get()
    if logger is not None:
        getattr(logger, method)(ctx, msg, *args, **fields)
    elif formatted:
        FALLBACK.write(severity, format_message(msg, args), fields)
    else:
        FALLBACK.write(severity, join_message(msg, args), fields)


def debug_context(ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

    '''Log at DEBUG with contextual fields.'''

    _context_call(Severity.DEBUG, 'debug_context', ctx, msg, args, fields, formatted=False)


def info_context(ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

    '''Log at INFO with contextual fields.'''

    _context_call(Severity.INFO, 'info_context', ctx, msg, args, fields, formatted=False)


def warning_context(ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

    '''Log at WARNING with contextual fields.'''

    _context_call(Severity.WARNING, 'warning_context', ctx, msg, args, fields, formatted=False)


def error_context(ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

    '''Log at ERROR with contextual fields.'''

    _context_call(Severity.ERROR, 'error_context', ctx, msg, args, fields, formatted=False)


def fatal_context(ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

    '''Log at FATAL with contextual fields, then terminate the process.'''

    _context_call(Severity.FATAL, 'fatal_context', ctx, msg, args, fields, formatted=False)


def debugf_context(ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

    '''Format printf-style and log at DEBUG with contextual fields.'''

    _context_call(Severity.DEBUG, 'debugf_context', ctx, fmt, args, fields, formatted=True)


def infof_context(ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

    '''Format printf-style and log at INFO with contextual fields.'''

    _context_call(Severity.INFO, 'infof_context', ctx, fmt, args, fields, formatted=True)


def warningf_context(ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

    '''Format printf-style and log at WARNING with contextual fields.'''

    _context_call(Severity.WARNING, 'warningf_context', ctx, fmt, args, fields, formatted=True)


def errorf_context(ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

    '''Format printf-style and log at ERROR with contextual fields.'''

    _context_call(Severity.ERROR, 'errorf_context', ctx, fmt, args, fields, formatted=True)


def fatalf_context(ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

    '''Format printf-style and log at FATAL with contextual fields, then terminate.'''

    _context_call(Severity.FATAL, 'fatalf_context', ctx, fmt, args, fields, formatted=True)


def api_context(ctx: Context, status_code: int, msg: Any, /, *args: Any, **fields: Any) -> None:

    '''Log space-joined args as an API entry with contextual fields.'''

    logger = REGISTRY.get()
    if logger is not None:
        logger.api_context(ctx, status_code, msg, *args, **fields)
    else:
        FALLBACK.write(classify_status(status_code), join_message(msg, args), fields)


def apif_context(ctx: Context, status_code: int, fmt: str, /, *args: Any, **fields: Any) -> None:

    '''Format printf-style and log an API entry with contextual fields.'''

    logger = REGISTRY.get()
    if logger is not None:
        logger.apif_context(ctx, status_code, fmt, *args, **fields)
    else:
        FALLBACK.write(classify_status(status_code), format_message(fmt, args), fields)


def with_attrs(*args: Any, **fields: Any) -> Logger:

    '''Derive from the registered logger, or return a NoOpLogger when none is registered.'''

    logger = REGISTRY.get()
    if logger is None:
        return NoOpLogger()
    return logger.with_attrs(*args, **fields)


def with_group(name: str) -> Logger:

    '''Derive a grouped logger from the registered one, or return a NoOpLogger.'''

    logger = REGISTRY.get()
    if logger is None:
        return NoOpLogger()
    return logger.with_group(name)
