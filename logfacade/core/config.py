'''
User-facing logger configuration and its translation to internal form.

LogConfig mirrors what users write in YAML or JSON documents. translate()
validates it into an immutable LoggerConfiguration holding severity sets
and rendering flags for a single output destination.
'''

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from logfacade.core.errors import InvalidLevelError, LoggerConfigError
from logfacade.core.levels import DEFAULT_SEVERITIES, Severity, parse_severity


__all__ = ['LogConfig', 'LoggerConfiguration', 'split_levels', 'translate']

_STDOUT = 'STDOUT'
_DELIMITERS = re.compile(r'[,| ]+')

_WIRE_KEYS: dict[str, str] = {
    'levels': 'levels',
    'apiLevels': 'api_levels',
    'output': 'output',
    'noColors': 'no_colors',
    'json': 'json',
    'structured': 'structured',
    'utc': 'utc',
}


@dataclass(frozen=True)
class LogConfig:

    '''
    User-facing configuration for one output destination.

    Args:
        levels (str): Delimited severities for normal calls, e.g. 'info|warning'.
            Empty means INFO, ERROR, WARNING.
        api_levels (str): Delimited severities for API calls, same default.
        output (str): '' or 'stdout' for standard output, otherwise a file path.
        no_colors (bool): Disable ANSI colors.
        json (bool): Render JSON lines. Implies structured.
        structured (bool): Render key=value text.
        utc (bool): Use UTC timestamps instead of local time.
    '''

    levels: str = ''
    api_levels: str = ''
    output: str = ''
    no_colors: bool = False
    json: bool = False
    structured: bool = False
    utc: bool = False

    def __post_init__(self) -> None:

        '''Validate field types at construction time.'''

        for field in ('levels', 'api_levels', 'output'):
            if not isinstance(getattr(self, field), str):
                msg = f'LogConfig.{field} must be a string'
                raise LoggerConfigError(msg)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LogConfig:

        '''
        Build a LogConfig from a decoded YAML or JSON document.

        Accepts the camelCase wire keys (apiLevels, noColors) as well as the
        attribute names.

        Args:
            data (Mapping[str, Any]): Decoded configuration mapping

        Returns:
            LogConfig: Validated configuration
        '''

        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _WIRE_KEYS.get(key, key)
            if name not in known:
                msg = f'unknown logger config key: {key}'
                raise LoggerConfigError(msg)
            kwargs[name] = value
        return cls(**kwargs)


@dataclass(frozen=True)
class LoggerConfiguration:

    '''
    Validated configuration for a single destination.

    Args:
        levels (frozenset[Severity]): Severities enabled for normal calls
        api_levels (frozenset[Severity]): Severities enabled for API calls
        stdout (bool): Write to standard output when True
        file_path (str): Log file path, empty for standard output
        colors (bool): Emit ANSI colors in text output
        utc (bool): Use UTC timestamps
        structured (bool): Render key=value text or JSON
        json (bool): Render JSON lines
    '''

    levels: frozenset[Severity]
    api_levels: frozenset[Severity]
    stdout: bool = True
    file_path: str = ''
    colors: bool = True
    utc: bool = False
    structured: bool = False
    json: bool = False

    def __post_init__(self) -> None:

        '''Validate invariants at construction time.'''

        if not self.stdout and not self.file_path:
            msg = 'LoggerConfiguration.file_path must be set when stdout is False'
            raise LoggerConfigError(msg)
        if self.json and not self.structured:
            msg = 'LoggerConfiguration.json requires structured'
            raise LoggerConfigError(msg)

    @property
    def disabled(self) -> bool:

        '''Return True when DISABLED suppresses every normal call.'''

        return Severity.DISABLED in self.levels

    @property
    def api_disabled(self) -> bool:

        '''Return True when DISABLED suppresses every API call.'''

        return Severity.DISABLED in self.api_levels

    @property
    def debug_enabled(self) -> bool:

        '''Return True when DEBUG is enabled, which turns on call-site capture.'''

        return Severity.DEBUG in self.levels


def split_levels(text: str) -> list[str]:

    '''
    Split a level list on commas, pipes, and spaces.

    Args:
        text (str): Delimited severity names

    Returns:
        list[str]: Non-empty tokens in order
    '''

    return [token for token in _DELIMITERS.split(text) if token]


def _parse_levels(text: str, *, api: bool) -> frozenset[Severity]:

    parsed: set[Severity] = set()
    for token in split_levels(text):
        severity = parse_severity(token)
        if severity is None:
            raise InvalidLevelError(token, api=api)
        parsed.add(severity)

    return frozenset(parsed) if parsed else DEFAULT_SEVERITIES


def translate(config: LogConfig) -> LoggerConfiguration:

    '''
    Translate a user-facing config into a LoggerConfiguration.

    Args:
        config (LogConfig): User-facing configuration

    Returns:
        LoggerConfiguration: Validated destination configuration
    '''

    levels = _parse_levels(config.levels, api=False)
    api_levels = _parse_levels(config.api_levels, api=True)

    output = config.output
    if output.upper() == _STDOUT:
        output = ''

    return LoggerConfiguration(
        levels=levels,
        api_levels=api_levels,
        stdout=output == '',
        file_path=output,
        colors=not config.no_colors,
        utc=config.utc,
        structured=config.structured or config.json,
        json=config.json,
    )
