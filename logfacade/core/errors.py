'''
Configuration errors raised while building a logger.

These are the only exceptions the package raises to callers. Once a logger
exists, logging calls never raise; write failures go to the diagnostic
channel instead.
'''

from __future__ import annotations


__all__ = ['InvalidLevelError', 'LoggerConfigError', 'OutputOpenError']


class LoggerConfigError(ValueError):

    '''
    Base exception for invalid logger configuration.

    Args:
        message (str): Human-readable error description
    '''

    def __init__(self, message: str) -> None:

        '''
        Store the error message.

        Args:
            message (str): Human-readable error description
        '''

        self.message = message
        super().__init__(message)


class InvalidLevelError(LoggerConfigError):

    '''
    Raised when a severity token in a level list cannot be parsed.

    Args:
        token (str): The offending token
        api (bool): Whether the token came from the API level list
    '''

    def __init__(self, token: str, *, api: bool = False) -> None:

        '''
        Store the offending token and build the message.

        Args:
            token (str): The offending token
            api (bool): Whether the token came from the API level list
        '''

        self.token = token
        self.api = api
        kind = 'api log level' if api else 'log level'
        super().__init__(f'invalid {kind}: {token.upper()}')


class OutputOpenError(LoggerConfigError):

    '''
    Raised when a log file cannot be opened for appending.

    Args:
        path (str): Path that failed to open
        reason (str): Underlying OS error text
    '''

    def __init__(self, path: str, reason: str) -> None:

        '''
        Store the path and build the message.

        Args:
            path (str): Path that failed to open
            reason (str): Underlying OS error text
        '''

        self.path = path
        super().__init__(f'failed to open log file: {reason}')
