'''
Logger instances and their dispatch loop.

LeveledLogger owns an ordered set of destinations (stdout, files) and
dispatches every call to each of them independently. Derived loggers from
with_attrs() and with_group() share the same destination set by reference
and only add fields. NoOpLogger is the safe stand-in used when no logger
has been registered.
'''

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from types import TracebackType
from typing import Any, TextIO

import structlog

from logfacade.core.config import LogConfig, translate
from logfacade.core.interface import Context
from logfacade.core.levels import Severity, classify_status
from logfacade.infrastructure import process
from logfacade.infrastructure.output import Destination, bind_output
from logfacade.infrastructure.render import Group, capture_callsite


__all__ = [
    'LeveledLogger',
    'NoOpLogger',
    'bind_context',
    'bound_context',
    'clear_context',
    'format_message',
    'join_message',
    'new_logger',
    'unbind_context',
]

_log = logging.getLogger(__name__)

_LOGGABLE = frozenset({
    Severity.DEBUG,
    Severity.INFO,
    Severity.WARNING,
    Severity.ERROR,
    Severity.FATAL,
})

_Attr = tuple[tuple[str, ...], str, Any]


def bind_context(**fields: Any) -> None:

    '''
    Bind fields that every *_context call in this context will carry.

    Backed by structlog contextvars, so bindings follow threads and asyncio
    tasks the same way structlog's own do.

    Args:
        **fields (Any): Fields to bind
    '''

    structlog.contextvars.bind_contextvars(**fields)


def unbind_context(*keys: str) -> None:

    '''Remove previously bound context fields.'''

    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:

    '''Remove all bound context fields.'''

    structlog.contextvars.clear_contextvars()


@contextmanager
def bound_context(**fields: Any) -> Iterator[None]:

    '''Bind context fields for the duration of a with block.'''

    with structlog.contextvars.bound_contextvars(**fields):
        yield


def join_message(msg: Any, args: tuple[Any, ...]) -> str:

    '''Space-join a message and free-form args.'''

    return ' '.join(str(part) for part in (msg, *args))


def format_message(fmt: str, args: tuple[Any, ...]) -> str:

    '''
    Apply printf-style formatting the way stdlib LogRecord does.

    A single mapping argument is used for named placeholders. A format that
    does not match its arguments falls back to space-joining them.
    '''

    if not args:
        return fmt
    if len(args) == 1 and isinstance(args[0], Mapping):
        values: Any = args[0]
    else:
        values = args
    try:
        return fmt % values
    except (TypeError, ValueError, KeyError):
        return join_message(fmt, args)


def _pairs(args: tuple[Any, ...]) -> list[tuple[str, Any]]:

    '''Pair positional args two at a time; an odd trailing value is dropped.'''

    return [(str(args[i]), args[i + 1]) for i in range(0, len(args) - 1, 2)]


def _insert(fields: dict[str, Any], path: tuple[str, ...], key: str, value: Any) -> None:

    target = fields
    for name in path:
        group = target.get(name)
        if not isinstance(group, Group):
            group = Group()
            target[name] = group
        target = group
    target[key] = value


def _context_fields(ctx: Context) -> dict[str, Any]:

    merged = dict(structlog.contextvars.get_contextvars())
    if ctx:
        merged.update(ctx)
    return merged


class _DestinationSet:

    '''
    Ordered, copy-on-write collection of destinations.

    Readers take a snapshot without locking; the lock only serializes
    writers, and is never held across a write to a stream.
    '''

    def __init__(self, destinations: Iterable[Destination]) -> None:

        self._lock = threading.Lock()
        self._items: tuple[Destination, ...] = tuple(destinations)

    def snapshot(self) -> tuple[Destination, ...]:
        return self._items

    def append(self, destination: Destination) -> None:

        with self._lock:
            self._items = (*self._items, destination)

    def close(self) -> None:

        with self._lock:
            items = self._items
        for destination in items:
            destination.close()


class LeveledLogger:

    '''
    Leveled logger writing to one or more destinations.

    Plain methods take a message followed by free-form args: text output
    space-joins them, structured output pairs them as key/value. Keyword
    arguments are always fields. The f-variants format printf-style and
    always show the level tag in text output.

    Args:
        config (LogConfig): Configuration for the first destination
        stream (TextIO | None): Write the first destination to this stream
            instead of stdout or the configured file

    Raises:
        InvalidLevelError: If a level token cannot be parsed
        OutputOpenError: If the configured file cannot be opened
    '''

    def __init__(self, config: LogConfig, *, stream: TextIO | None = None) -> None:

        destination = bind_output(translate(config), stream=stream)
        self._outputs = _DestinationSet([destination])
        self._attrs: tuple[_Attr, ...] = ()
        self._groups: tuple[str, ...] = ()

    def __enter__(self) -> LeveledLogger:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:

        self.close()

    @classmethod
    def _derive(
        cls,
        parent: LeveledLogger,
        attrs: tuple[_Attr, ...],
        groups: tuple[str, ...],
    ) -> LeveledLogger:

        child = cls.__new__(cls)
        child._outputs = parent._outputs
        child._attrs = attrs
        child._groups = groups
        return child

    @property
    def destinations(self) -> tuple[Destination, ...]:

        '''Return the destinations in insertion order.'''

        return self._outputs.snapshot()

    def add_output(self, config: LogConfig, *, stream: TextIO | None = None) -> Destination:

        '''
        Attach another destination with its own configuration.

        Derived loggers sharing this logger's destinations see it too.

        Args:
            config (LogConfig): Configuration for the new destination
            stream (TextIO | None): Explicit stream for the destination

        Returns:
            Destination: The attached destination
        '''

        destination = bind_output(translate(config), stream=stream)
        self._outputs.append(destination)
        _log.debug('added log destination %r', destination)
        return destination

    def close(self) -> None:

        '''Close every file this logger opened. Standard output is left open.'''

        self._outputs.close()

    def _fields(
        self,
        pairs: Iterable[tuple[str, Any]],
        context: Mapping[str, Any] | None,
    ) -> dict[str, Any]:

        fields: dict[str, Any] = {}
        if context:
            for key, value in context.items():
                _insert(fields, (), str(key), value)
        for path, key, value in self._attrs:
            _insert(fields, path, key, value)
        for key, value in pairs:
            _insert(fields, self._groups, key, value)
        return fields

    def _dispatch(
        self,
        severity: Severity,
        msg: Any,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        *,
        formatted: bool = False,
        api: bool = False,
        context: Mapping[str, Any] | None = None,
    ) -> None:

        destinations = self._outputs.snapshot()
        message = str(msg)
        event: dict[str, Any] = {
            'event': message,
            'text': join_message(message, args),
            'severity': severity,
            'api': api,
            'formatted': formatted,
            'fields': self._fields([*_pairs(args), *kwargs.items()], context),
            'text_fields': self._fields(kwargs.items(), context),
        }
        if any(destination.capture_source for destination in destinations):
            event.update(capture_callsite())

        for destination in destinations:
            if destination.accepts(severity, api=api):
                destination.emit(event)

        if severity is Severity.FATAL and not api:
            process.exit_process(process.FATAL_EXIT_CODE)

    def log(self, severity: Severity, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''
        Log at an explicit severity.

        Args:
            severity (Severity): One of DEBUG, INFO, WARNING, ERROR, FATAL
            msg (Any): Message
            *args (Any): Free-form args or key/value pairs
            **fields (Any): Structured fields, any name allowed

        Raises:
            ValueError: If severity is DISABLED or API
        '''

        self._log_at(severity, msg, args, fields, tagged=False)

    def log_tagged(self, severity: Severity, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''
        Log at an explicit severity, always showing the level tag.

        Package-level functions use this to keep the `[TAG]` prefix of
        older call sites in plain text output.
        '''

        self._log_at(severity, msg, args, fields, tagged=True)

    def _log_at(
        self,
        severity: Severity,
        msg: Any,
        args: tuple[Any, ...],
        fields: dict[str, Any],
        *,
        tagged: bool,
    ) -> None:

        if severity not in _LOGGABLE:
            error = f'cannot log at severity {severity.name}'
            raise ValueError(error)
        self._dispatch(severity, msg, args, fields, formatted=tagged)

    def debug(self, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Log at DEBUG.'''

        self._dispatch(Severity.DEBUG, msg, args, fields)

    def info(self, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''
        Log at INFO.

        Args:
            msg (Any): Message
            *args (Any): Space-joined into plain text, paired as key/value
                in structured output
            **fields (Any): Structured fields
        '''

        self._dispatch(Severity.INFO, msg, args, fields)

    def warning(self, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Log at WARNING.'''

        self._dispatch(Severity.WARNING, msg, args, fields)

    def error(self, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Log at ERROR.'''

        self._dispatch(Severity.ERROR, msg, args, fields)

    def fatal(self, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Log at FATAL on every destination, then terminate the process.'''

        self._dispatch(Severity.FATAL, msg, args, fields)

    def debugf(self, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Format printf-style and log at DEBUG.'''

        self._dispatch(Severity.DEBUG, format_message(fmt, args), (), fields, formatted=True)

    def infof(self, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''
        Format printf-style and log at INFO.

        Plain text output always shows the level tag for formatted calls.

        Args:
            fmt (str): %-style format
            *args (Any): Format arguments
            **fields (Any): Structured fields
        '''

        self._dispatch(Severity.INFO, format_message(fmt, args), (), fields, formatted=True)

    def warningf(self, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Format printf-style and log at WARNING.'''

        self._dispatch(Severity.WARNING, format_message(fmt, args), (), fields, formatted=True)

    def errorf(self, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Format printf-style and log at ERROR.'''

        self._dispatch(Severity.ERROR, format_message(fmt, args), (), fields, formatted=True)

    def fatalf(self, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Format printf-style, log at FATAL, then terminate the process.'''

        self._dispatch(Severity.FATAL, format_message(fmt, args), (), fields, formatted=True)

    def debug_context(self, ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Log at DEBUG with fields from ctx and bound context.'''

        self._dispatch(Severity.DEBUG, msg, args, fields, context=_context_fields(ctx))

    def info_context(self, ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''
        Log at INFO with contextual fields.

        Args:
            ctx (Context): Mapping of contextual fields, or None; merged over
                fields bound with bind_context()
            msg (Any): Message
            *args (Any): Free-form args or key/value pairs
            **fields (Any): Structured fields
        '''

        self._dispatch(Severity.INFO, msg, args, fields, context=_context_fields(ctx))

    def warning_context(self, ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Log at WARNING with fields from ctx and bound context.'''

        self._dispatch(Severity.WARNING, msg, args, fields, context=_context_fields(ctx))

    def error_context(self, ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Log at ERROR with fields from ctx and bound context.'''

        self._dispatch(Severity.ERROR, msg, args, fields, context=_context_fields(ctx))

    def fatal_context(self, ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Log at FATAL with contextual fields, then terminate the process.'''

        self._dispatch(Severity.FATAL, msg, args, fields, context=_context_fields(ctx))

    def debugf_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Format printf-style and log at DEBUG with contextual fields.'''

        self._dispatch(
            Severity.DEBUG, format_message(fmt, args), (), fields,
            formatted=True, context=_context_fields(ctx),
        )

    def infof_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Format printf-style and log at INFO with contextual fields.'''

        self._dispatch(
            Severity.INFO, format_message(fmt, args), (), fields,
            formatted=True, context=_context_fields(ctx),
        )

    def warningf_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Format printf-style and log at WARNING with contextual fields.'''

        self._dispatch(
            Severity.WARNING, format_message(fmt, args), (), fields,
            formatted=True, context=_context_fields(ctx),
        )

    def errorf_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Format printf-style and log at ERROR with contextual fields.'''

        self._dispatch(
            Severity.ERROR, format_message(fmt, args), (), fields,
            formatted=True, context=_context_fields(ctx),
        )

    def fatalf_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Format printf-style, log at FATAL with contextual fields, then terminate.'''

        self._dispatch(
            Severity.FATAL, format_message(fmt, args), (), fields,
            formatted=True, context=_context_fields(ctx),
        )

    def api(self, status_code: int, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''
        Log an API entry whose severity is derived from an HTTP status.

        Filtered against the API level set. Plain text output never shows
        a level tag unless the destination has DEBUG enabled.

        Args:
            status_code (int): HTTP status of the handled request
            msg (Any): Message
            *args (Any): Free-form args or key/value pairs
            **fields (Any): Structured fields
        '''

        self._dispatch(classify_status(status_code), msg, args, fields, api=True)

    def apif(self, status_code: int, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Format printf-style and log an API entry for an HTTP status.'''

        self._dispatch(
            classify_status(status_code), format_message(fmt, args), (), fields,
            formatted=True, api=True,
        )

    def api_context(self, ctx: Context, status_code: int, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Log an API entry with contextual fields.'''

        self._dispatch(
            classify_status(status_code), msg, args, fields,
            api=True, context=_context_fields(ctx),
        )

    def apif_context(self, ctx: Context, status_code: int, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Format printf-style and log an API entry with contextual fields.'''

        self._dispatch(
            classify_status(status_code), format_message(fmt, args), (), fields,
            formatted=True, api=True, context=_context_fields(ctx),
        )

    def with_attrs(self, /, *args: Any, **fields: Any) -> LeveledLogger:

        '''
        Return a logger that adds these fields to every call.

        Fields attach under the current group, if any. The parent logger
        is unchanged.

        Args:
            *args (Any): Key/value pairs
            **fields (Any): Fields by keyword

        Returns:
            LeveledLogger: Derived logger sharing this logger's destinations
        '''

        added = tuple((self._groups, key, value) for key, value in [*_pairs(args), *fields.items()])
        return self._derive(self, self._attrs + added, self._groups)

    def with_group(self, name: str) -> LeveledLogger:

        '''
        Return a logger that nests subsequent fields under a group.

        An empty name adds no group.

        Args:
            name (str): Group name

        Returns:
            LeveledLogger: Derived logger sharing this logger's destinations
        '''

        groups = (*self._groups, name) if name else self._groups
        return self._derive(self, self._attrs, groups)


def new_logger(config: LogConfig) -> LeveledLogger:

    '''
    Create a logger for dependency injection.

    Args:
        config (LogConfig): Configuration for the first destination

    Returns:
        LeveledLogger: New logger, not registered globally
    '''

    return LeveledLogger(config)


class NoOpLogger:

    '''
    Logger whose every method does nothing.

    Returned by the package-level with_attrs() and with_group() while no
    logger is registered. with_attrs and with_group return the same
    instance, and fatal variants do not terminate the process.
    '''

    def debug(self, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Discard a DEBUG call.'''

    def info(self, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Discard an INFO call.'''

    def warning(self, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Discard a WARNING call.'''

    def error(self, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Discard an ERROR call.'''

    def fatal(self, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Discard a FATAL call without terminating.'''

    def debugf(self, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Discard a formatted DEBUG call.'''

    def infof(self, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Discard a formatted INFO call.'''

    def warningf(self, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Discard a formatted WARNING call.'''

    def errorf(self, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Discard a formatted ERROR call.'''

    def fatalf(self, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Discard a formatted FATAL call without terminating.'''

    def debug_context(self, ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Discard a context-aware DEBUG call.'''

    def info_context(self, ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Discard a context-aware INFO call.'''

    def warning_context(self, ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Discard a context-aware WARNING call.'''

    def error_context(self, ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Discard a context-aware ERROR call.'''

    def fatal_context(self, ctx: Context, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Discard a context-aware FATAL call without terminating.'''

    def debugf_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Discard a formatted context-aware DEBUG call.'''

    def infof_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Discard a formatted context-aware INFO call.'''

    def warningf_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Discard a formatted context-aware WARNING call.'''

    def errorf_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Discard a formatted context-aware ERROR call.'''

    def fatalf_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Discard a formatted context-aware FATAL call without terminating.'''

    def api(self, status_code: int, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Discard an API entry.'''

    def apif(self, status_code: int, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Discard a formatted API entry.'''

    def api_context(self, ctx: Context, status_code: int, msg: Any, /, *args: Any, **fields: Any) -> None:

        '''Discard a context-aware API entry.'''

    def apif_context(self, ctx: Context, status_code: int, fmt: str, /, *args: Any, **fields: Any) -> None:

        '''Discard a formatted context-aware API entry.'''

    def with_attrs(self, /, *args: Any, **fields: Any) -> NoOpLogger:

        '''Return this logger unchanged.'''

        return self

    def with_group(self, name: str) -> NoOpLogger:

        '''Return this logger unchanged.'''

        return self
