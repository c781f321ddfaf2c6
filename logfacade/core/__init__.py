'''
Severity model, configuration, and the logger protocol.

Re-exports the types needed to configure a logger without touching the
rendering or output machinery.
'''

from __future__ import annotations

from logfacade.core.config import LogConfig, LoggerConfiguration, split_levels, translate
from logfacade.core.errors import InvalidLevelError, LoggerConfigError, OutputOpenError
from logfacade.core.interface import Context, Logger
from logfacade.core.levels import Severity, classify_status, color_for, parse_severity

__all__ = [
    'Context',
    'InvalidLevelError',
    'LogConfig',
    'Logger',
    'LoggerConfigError',
    'LoggerConfiguration',
    'OutputOpenError',
    'Severity',
    'classify_status',
    'color_for',
    'parse_severity',
    'split_levels',
    'translate',
]
