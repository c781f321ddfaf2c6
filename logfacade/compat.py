'''
Compatibility bridge between package-level functions and logger instances.

Registers a LeveledLogger as the process-wide logger read by
logfacade.facade. This is global state; prefer passing a Logger to the
code that needs one.
'''

from __future__ import annotations

import logging
import threading

from logfacade.core.config import LogConfig
from logfacade.infrastructure.logger import LeveledLogger
from logfacade.infrastructure.registry import REGISTRY


__all__ = [
    'disable_compatibility_mode',
    'enable_compatibility_mode',
    'get_compatibility_logger',
    'get_global_logger',
    'is_compatibility_mode_enabled',
    'set_global_logger',
    'setup_logger',
]

_log = logging.getLogger(__name__)

_bridge_lock = threading.Lock()


def set_global_logger(logger: LeveledLogger | None) -> None:

    '''Register a logger for the package-level functions; None clears it.'''

    REGISTRY.attach(logger)


def get_global_logger() -> LeveledLogger | None:

    '''Return the registered logger, or None.'''

    return REGISTRY.get()


def enable_compatibility_mode(config: LogConfig) -> LeveledLogger:

    '''
    Route package-level functions through a logger built from config.

    When a logger is already registered, config becomes an additional
    destination on it, so calling this once for stdout and once for a file
    gives dual output.

    Args:
        config (LogConfig): Configuration for the new destination

    Returns:
        LeveledLogger: The registered logger

    Raises:
        LoggerConfigError: If config is invalid or its file cannot be opened
    '''

    with _bridge_lock:
        logger = REGISTRY.get()
        if logger is not None:
            logger.add_output(config)
            return logger

        logger = LeveledLogger(config)
        REGISTRY.attach(logger)
        _log.debug('compatibility mode enabled')
        return logger


def disable_compatibility_mode() -> None:

    '''
    Unregister the global logger.

    The logger is not closed; files it opened stay open until the caller
    closes it.
    '''

    with _bridge_lock:
        REGISTRY.detach()
    _log.debug('compatibility mode disabled')


def is_compatibility_mode_enabled() -> bool:

    '''Return True while a global logger is registered.'''

    return REGISTRY.get() is not None


def get_compatibility_logger() -> LeveledLogger | None:

    '''Return the logger package-level functions currently use, or None.'''

    return REGISTRY.get()


def setup_logger(config: LogConfig) -> LeveledLogger:

    '''
    Create a logger and register it, replacing any registered one.

    Args:
        config (LogConfig): Configuration for the logger

    Returns:
        LeveledLogger: The newly registered logger
    '''

    logger = LeveledLogger(config)
    with _bridge_lock:
        REGISTRY.attach(logger)
    return logger
