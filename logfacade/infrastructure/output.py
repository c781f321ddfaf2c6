'''
Output binding for log destinations.

A Destination pairs a LoggerConfiguration with a writable stream, its
render chain, and the lock that keeps each line atomic. Destinations are
independent: a failure on one is reported and never reaches the caller or
the other destinations.
'''

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Mapping
from typing import Any, TextIO

from logfacade.core.config import LoggerConfiguration
from logfacade.core.errors import OutputOpenError
from logfacade.core.levels import Severity
from logfacade.infrastructure.render import build_processors, render


__all__ = ['Destination', 'bind_output']

_log = logging.getLogger(__name__)


class Destination:

    '''
    One output sink with its own configuration and render chain.

    Args:
        configuration (LoggerConfiguration): Destination configuration
        stream (TextIO | None): Stream to write to, None for standard output
            resolved at write time
        owns_stream (bool): Close the stream on close()
    '''

    def __init__(
        self,
        configuration: LoggerConfiguration,
        stream: TextIO | None = None,
        *,
        owns_stream: bool = False,
    ) -> None:

        self.configuration = configuration
        self.capture_source = configuration.debug_enabled
        self._stream = stream
        self._owns_stream = owns_stream
        self._processors = build_processors(configuration, show_source=self.capture_source)
        self._lock = threading.Lock()

    def __repr__(self) -> str:

        target = self.configuration.file_path or 'stdout'
        return f'Destination({target!r}, json={self.configuration.json})'

    @property
    def stream(self) -> TextIO:

        '''Return the current stream, standard output when none was bound.'''

        return self._stream if self._stream is not None else sys.stdout

    def redirect(self, stream: TextIO) -> None:

        '''
        Send subsequent lines to another stream.

        The previous stream is not closed.

        Args:
            stream (TextIO): New target stream
        '''

        with self._lock:
            self._stream = stream
            self._owns_stream = False

    def accepts(self, severity: Severity, *, api: bool) -> bool:

        '''
        Decide whether a call at this severity is rendered here.

        DISABLED in a set suppresses everything for that kind of call,
        FATAL included. FATAL passes otherwise even when not listed.

        Args:
            severity (Severity): Resolved severity of the call
            api (bool): Whether the call is an API entry

        Returns:
            bool: True when the line should be written
        '''

        configuration = self.configuration
        if api:
            return not configuration.api_disabled and severity in configuration.api_levels
        if configuration.disabled:
            return False
        return severity is Severity.FATAL or severity in configuration.levels

    def emit(self, event_dict: Mapping[str, Any]) -> None:

        '''
        Render and write one line.

        Failures are reported through the module logger, never raised.

        Args:
            event_dict (Mapping[str, Any]): Event built by the logger
        '''

        severity: Severity = event_dict['severity']
        try:
            line = render(self._processors, severity.name.lower(), event_dict)
            with self._lock:
                stream = self.stream
                stream.write(line + '\n')
                stream.flush()
        except Exception as exc:  # noqa: BLE001
            _log.error(
                'failed to log message %r to %r: %s',
                event_dict.get('event'),
                self,
                exc,
            )

    def close(self) -> None:

        '''Close the stream if this destination opened it.'''

        with self._lock:
            if self._owns_stream and self._stream is not None:
                self._stream.close()
            self._owns_stream = False


def bind_output(configuration: LoggerConfiguration, *, stream: TextIO | None = None) -> Destination:

    '''
    Resolve a configuration into a writable Destination.

    Args:
        configuration (LoggerConfiguration): Destination configuration
        stream (TextIO | None): Explicit stream, overrides stdout and file path

    Returns:
        Destination: Bound destination

    Raises:
        OutputOpenError: If the log file cannot be opened for appending
    '''

    if stream is not None or configuration.stdout:
        return Destination(configuration, stream)

    try:
        handle = open(configuration.file_path, 'a', encoding='utf-8')  # noqa: SIM115
    except OSError as exc:
        raise OutputOpenError(configuration.file_path, str(exc)) from exc

    _log.debug('opened log file %s', configuration.file_path)
    return Destination(configuration, handle, owns_stream=True)
