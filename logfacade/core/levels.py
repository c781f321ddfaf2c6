'''
Severity levels and HTTP status classification.

Defines the Severity enum shared by configuration, rendering, and dispatch,
along with the status-code mapping used by API log entries and the ANSI
colors attached to each severity in text output.
'''

from __future__ import annotations

from enum import Enum


__all__ = [
    'DEFAULT_SEVERITIES',
    'GRAY',
    'GREEN',
    'RED',
    'RESET',
    'Severity',
    'YELLOW',
    'classify_status',
    'color_for',
    'parse_severity',
]

RED = '\033[31m'
GREEN = '\033[32m'
YELLOW = '\033[33m'
GRAY = '\033[2;37m'
RESET = '\033[0m'

_HTTP_NOT_MODIFIED = 304
_HTTP_SERVER_ERROR = 500


class Severity(Enum):

    '''
    Log severities.

    Values are kept for compatibility with older numeric configurations
    only. Severity deliberately has no ordering: filtering is done by set
    membership, so {INFO, ERROR} suppresses WARNING.
    API is an out-of-band marker and never an enabled level.
    '''

    DISABLED = 0
    ERROR = 1
    FATAL = 2
    WARNING = 3
    INFO = 4
    DEBUG = 5
    API = 10

    @property
    def tag(self) -> str:

        '''Return the fixed-width tag shown between brackets in text output.'''

        return _TAGS[self]

    @property
    def label(self) -> str:

        '''Return the tag without padding, as used in JSON records.'''

        return _TAGS[self].strip()


_TAGS: dict[Severity, str] = {
    Severity.DISABLED: 'DISABLED',
    Severity.ERROR: 'ERROR',
    Severity.FATAL: 'FATAL',
    Severity.WARNING: 'WARN ',
    Severity.INFO: 'INFO ',
    Severity.DEBUG: 'DEBUG',
    Severity.API: 'API',
}

_NAMES: dict[str, Severity] = {
    'DEBUG': Severity.DEBUG,
    'INFO': Severity.INFO,
    'WARNING': Severity.WARNING,
    'WARN': Severity.WARNING,
    'ERROR': Severity.ERROR,
    'DISABLED': Severity.DISABLED,
}

DEFAULT_SEVERITIES: frozenset[Severity] = frozenset({
    Severity.INFO,
    Severity.ERROR,
    Severity.WARNING,
})


def parse_severity(name: str) -> Severity | None:

    '''
    Parse a configured severity name.

    Args:
        name (str): Case-insensitive name, one of DEBUG, INFO, WARNING, WARN,
            ERROR, DISABLED

    Returns:
        Severity | None: Matching severity, or None if the name is unknown
    '''

    return _NAMES.get(name.strip().upper())


def classify_status(status_code: int) -> Severity:

    '''
    Map an HTTP status code to the severity of its API log entry.

    Codes above 304 and below 500 are warnings, 500 and above are errors,
    everything else (304 included) is informational.

    Args:
        status_code (int): HTTP-like status code

    Returns:
        Severity: WARNING, ERROR, or INFO
    '''

    if _HTTP_NOT_MODIFIED < status_code < _HTTP_SERVER_ERROR:
        return Severity.WARNING
    if status_code >= _HTTP_SERVER_ERROR:
        return Severity.ERROR
    return Severity.INFO


def color_for(severity: Severity, *, api: bool = False) -> str:

    '''
    Return the ANSI color escape for a severity, or an empty string.

    Args:
        severity (Severity): Severity being rendered
        api (bool): Whether the entry came from an API call

    Returns:
        str: Escape sequence, empty when the severity is uncolored
    '''

    if severity is Severity.DEBUG:
        return GRAY
    if severity is Severity.WARNING:
        return YELLOW
    if severity in (Severity.ERROR, Severity.FATAL):
        return RED
    if severity is Severity.INFO and api:
        return GREEN
    return ''
