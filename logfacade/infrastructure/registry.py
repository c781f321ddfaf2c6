'''
Process-wide registration slot for the global logger.

Package-level logging functions read the slot on every call; the
compatibility bridge attaches and detaches loggers. All access goes
through one lock.
'''

from __future__ import annotations

import threading

from logfacade.infrastructure.logger import LeveledLogger


__all__ = ['GlobalRegistry', 'REGISTRY']


class GlobalRegistry:

    '''Hold at most one globally registered LeveledLogger.'''

    def __init__(self) -> None:

        self._lock = threading.Lock()
        self._logger: LeveledLogger | None = None

    def get(self) -> LeveledLogger | None:

        '''Return the registered logger, or None.'''

        with self._lock:
            return self._logger

    def attach(self, logger: LeveledLogger | None) -> LeveledLogger | None:

        '''
        Register a logger, replacing any previous one.

        Args:
            logger (LeveledLogger | None): Logger to register, None to clear

        Returns:
            LeveledLogger | None: The previously registered logger
        '''

        with self._lock:
            previous, self._logger = self._logger, logger
        return previous

    def detach(self) -> LeveledLogger | None:

        '''Clear the slot and return what it held.'''

        return self.attach(None)


REGISTRY = GlobalRegistry()
