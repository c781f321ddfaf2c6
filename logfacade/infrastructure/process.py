'''
Process termination for FATAL log calls.
'''

from __future__ import annotations

import os
import sys


__all__ = ['FATAL_EXIT_CODE', 'exit_process']

FATAL_EXIT_CODE = 1


def exit_process(code: int = FATAL_EXIT_CODE) -> None:

    '''
    Flush standard streams and terminate immediately.

    Uses os._exit so the process ends even when called from a worker
    thread; atexit handlers and finally blocks do not run.

    Args:
        code (int): Exit status
    '''

    for stream in (sys.stdout, sys.stderr):
        try:
            stream.flush()
        except (OSError, ValueError):
            pass
    os._exit(code)
