'''
Output binding, rendering, logger instances, and the global registry.
'''

from __future__ import annotations

from logfacade.infrastructure.diagnostics import configure_diagnostics
from logfacade.infrastructure.logger import (
    LeveledLogger,
    NoOpLogger,
    bind_context,
    bound_context,
    clear_context,
    new_logger,
    unbind_context,
)
from logfacade.infrastructure.output import Destination, bind_output
from logfacade.infrastructure.registry import REGISTRY, GlobalRegistry

__all__ = [
    'REGISTRY',
    'Destination',
    'GlobalRegistry',
    'LeveledLogger',
    'NoOpLogger',
    'bind_context',
    'bind_output',
    'bound_context',
    'clear_context',
    'configure_diagnostics',
    'new_logger',
    'unbind_context',
]
