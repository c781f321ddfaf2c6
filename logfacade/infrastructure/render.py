'''
Render pipeline for log lines.

Each destination owns a chain of structlog processors that turns one event
dict into one output line: plain text, key=value text, or JSON serialized
with orjson. The event dict is built once per call by the logger and
carries the severity, message, fields, and optional call site.

Event dict keys:
    event: message as given (format already applied for f-variants)
    text: message space-joined with the positional args
    fields: structured fields, positional pairs included
    text_fields: fields without the positional pairs
    severity, api, formatted: dispatch flags
    pathname, filename, func_name, lineno: call site, when captured
'''

from __future__ import annotations

import datetime
from collections.abc import Iterator, Mapping
from typing import Any

import orjson
import structlog

from logfacade.core.config import LoggerConfiguration
from logfacade.core.levels import RESET, Severity, color_for


__all__ = [
    'Group',
    'JSONRecord',
    'LocalTimeStamper',
    'PlainRenderer',
    'StructuredTextRenderer',
    'build_processors',
    'capture_callsite',
    'format_fields',
    'orjson_dumps_str',
    'render',
    'strip_function',
    'strip_path',
]

_TEXT_TIME_FORMAT = '%Y/%m/%d %H:%M:%S'
_RESERVED = frozenset({'time', 'level', 'source', 'msg'})
_PACKAGE = __name__.split('.')[0]

_CALLSITE = structlog.processors.CallsiteParameterAdder(
    parameters=[
        structlog.processors.CallsiteParameter.PATHNAME,
        structlog.processors.CallsiteParameter.FILENAME,
        structlog.processors.CallsiteParameter.FUNC_NAME,
        structlog.processors.CallsiteParameter.LINENO,
    ],
    additional_ignores=[f'{_PACKAGE}.'],
)


class Group(dict[str, Any]):

    '''Fields nested under a with_group() name: an object in JSON, a dotted prefix in text.'''


def orjson_dumps_str(*args: Any, **kwargs: Any) -> str:

    '''
    Serialize to JSON string via orjson for JSONRenderer.

    Returns:
        str: JSON-encoded string
    '''

    return orjson.dumps(*args, **kwargs).decode()


def _serialize_default(obj: Any) -> Any:

    '''
    Render values orjson cannot serialize natively.

    Decimal, timedelta, exceptions, and arbitrary objects all fall back to
    str() so a log call never fails on an unusual field value.

    Args:
        obj (Any): Object that orjson cannot serialize natively

    Returns:
        Any: JSON-serializable representation
    '''

    return str(obj)


def strip_path(path: str) -> str:

    '''Return the final segment of a slash-separated path.'''

    return path.rsplit('/', 1)[-1]


def strip_function(name: str) -> str:

    '''Return the final segment of a dotted function name.'''

    return name.rsplit('.', 1)[-1]


def capture_callsite() -> dict[str, Any]:

    '''
    Locate the first caller frame outside this package and structlog.

    Returns:
        dict[str, Any]: pathname, filename, func_name, and lineno of the call
    '''

    return _CALLSITE(None, 'callsite', {})


def _iter_pairs(fields: Mapping[str, Any], prefix: str = '') -> Iterator[tuple[str, Any]]:

    for key, value in fields.items():
        if isinstance(value, Group):
            yield from _iter_pairs(value, f'{prefix}{key}.')
        else:
            yield f'{prefix}{key}', value


def format_fields(fields: Mapping[str, Any]) -> str:

    '''
    Render fields as space-separated key=value pairs.

    Groups flatten to dotted keys, so {'api': Group(path='/x')} renders
    as api.path=/x.

    Args:
        fields (Mapping[str, Any]): Ordered fields, possibly containing groups

    Returns:
        str: Rendered pairs, empty when there are no fields
    '''

    return ' '.join(f'{key}={value}' for key, value in _iter_pairs(fields))


def _source(event_dict: Mapping[str, Any]) -> str:

    filename = event_dict.get('filename')
    if not filename:
        return ''
    return f'{filename}:{event_dict["lineno"]}: '


class _TextRenderer:

    '''
    Shared prefix and color handling for the two text styles.

    Args:
        colors (bool): Emit ANSI colors
        show_source (bool): Insert file:line after the level tag
    '''

    def __init__(self, *, colors: bool, show_source: bool) -> None:

        self._colors = colors
        self._show_source = show_source

    def _paint(self, event_dict: Mapping[str, Any], body: str) -> tuple[str, str]:

        stamp = event_dict['timestamp']
        if not self._colors:
            return stamp, body
        color = color_for(event_dict['severity'], api=event_dict['api'])
        if not color:
            return stamp, body
        return stamp + color, body + RESET

    def _tagged(self, stamp: str, severity: Severity, event_dict: Mapping[str, Any], body: str) -> str:

        source = _source(event_dict) if self._show_source else ''
        return f'{stamp} [{severity.tag}] {source}{body}'


class PlainRenderer(_TextRenderer):

    '''
    Render `TIMESTAMP [TAG] message` or `TIMESTAMP message`.

    The level tag appears for formatted non-API calls and whenever the
    destination has DEBUG enabled; in that case file:line follows the tag.
    Positional args are already joined into the text, so only keyword,
    bound, and context fields are appended.
    '''

    def __call__(self, logger: Any, method_name: str, event_dict: Mapping[str, Any]) -> str:

        body = event_dict['text']
        extra = format_fields(event_dict['text_fields'])
        if extra:
            body = f'{body} {extra}' if body else extra

        stamp, body = self._paint(event_dict, body)
        tagged = event_dict['formatted'] and not event_dict['api']
        if tagged or self._show_source:
            return self._tagged(stamp, event_dict['severity'], event_dict, body)
        return f'{stamp} {body}'


class StructuredTextRenderer(_TextRenderer):

    '''Render `TIMESTAMP [TAG] message key=value ...`.'''

    def __call__(self, logger: Any, method_name: str, event_dict: Mapping[str, Any]) -> str:

        body = event_dict['event']
        extra = format_fields(event_dict['fields'])
        if extra:
            body = f'{body} {extra}' if body else extra

        stamp, body = self._paint(event_dict, body)
        return self._tagged(stamp, event_dict['severity'], event_dict, body)


class LocalTimeStamper:

    '''
    Add an ISO-8601 local timestamp that carries its UTC offset.

    Used for JSON records in local time; structlog's TimeStamper omits
    the offset there.

    Args:
        key (str): Event dict key to set
    '''

    def __init__(self, key: str = 'time') -> None:

        self._key = key

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:

        event_dict[self._key] = datetime.datetime.now().astimezone().isoformat()
        return event_dict


class JSONRecord:

    '''
    Reshape an event dict into the JSON record layout.

    Keys are ordered time, level, source, msg, then fields. A field that
    would overwrite one of those keys is emitted as fields.<name>.

    Args:
        show_source (bool): Include the source object
    '''

    def __init__(self, *, show_source: bool) -> None:

        self._show_source = show_source

    def __call__(self, logger: Any, method_name: str, event_dict: Mapping[str, Any]) -> dict[str, Any]:

        record: dict[str, Any] = {
            'time': event_dict['time'],
            'level': event_dict['severity'].label,
        }
        if self._show_source and 'lineno' in event_dict:
            record['source'] = {
                'function': strip_function(event_dict['func_name']),
                'file': strip_path(event_dict['pathname']),
                'line': event_dict['lineno'],
            }
        record['msg'] = event_dict['event']

        for key, value in event_dict['fields'].items():
            record[f'fields.{key}' if key in _RESERVED else key] = value

        return record


def build_processors(configuration: LoggerConfiguration, *, show_source: bool) -> list[Any]:

    '''
    Build the processor chain for a destination.

    Args:
        configuration (LoggerConfiguration): Destination configuration
        show_source (bool): Whether call-site location is rendered

    Returns:
        list[Any]: structlog processors ending in a renderer that returns str
    '''

    if configuration.json:
        stamper: Any = (
            structlog.processors.TimeStamper(fmt='iso', utc=True, key='time')
            if configuration.utc
            else LocalTimeStamper(key='time')
        )
        return [
            stamper,
            JSONRecord(show_source=show_source),
            structlog.processors.JSONRenderer(
                serializer=orjson_dumps_str,
                default=_serialize_default,
                option=orjson.OPT_NON_STR_KEYS,
            ),
        ]

    stamper = structlog.processors.TimeStamper(
        fmt=_TEXT_TIME_FORMAT, utc=configuration.utc, key='timestamp',
    )
    renderer_cls = StructuredTextRenderer if configuration.structured else PlainRenderer
    return [stamper, renderer_cls(colors=configuration.colors, show_source=show_source)]


def render(processors: list[Any], method_name: str, event_dict: Mapping[str, Any]) -> str:

    '''
    Run an event through a processor chain.

    Args:
        processors (list[Any]): Chain from build_processors
        method_name (str): Lower-case severity name
        event_dict (Mapping[str, Any]): Event built by the logger, not mutated

    Returns:
        str: Rendered line without trailing newline
    '''

    result: Any = dict(event_dict)
    for processor in processors:
        result = processor(None, method_name, result)
    return result  # type: ignore[no-any-return]
