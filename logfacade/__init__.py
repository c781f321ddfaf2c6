'''
Leveled logging facade with plain, key=value, and JSON output.

Inject a Logger built with new_logger() where possible. The package-level
functions (info, errorf, api, ...) remain for existing call sites and reach
whichever logger the compatibility bridge has registered.
'''

from __future__ import annotations

from logfacade.compat import (
    disable_compatibility_mode,
    enable_compatibility_mode,
    get_compatibility_logger,
    get_global_logger,
    is_compatibility_mode_enabled,
    set_global_logger,
    setup_logger,
)
from logfacade.core import (
    Context,
    InvalidLevelError,
    LogConfig,
    Logger,
    LoggerConfigError,
    OutputOpenError,
    Severity,
    classify_status,
    parse_severity,
)
from logfacade.facade import (
    api,
    api_context,
    apif,
    apif_context,
    debug,
    debug_context,
    debugf,
    debugf_context,
    error,
    error_context,
    errorf,
    errorf_context,
    fatal,
    fatal_context,
    fatalf,
    fatalf_context,
    info,
    info_context,
    infof,
    infof_context,
    warning,
    warning_context,
    warningf,
    warningf_context,
    with_attrs,
    with_group,
)
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

__version__ = '1.0.0'

__all__ = [
    'Context',
    'InvalidLevelError',
    'LeveledLogger',
    'LogConfig',
    'Logger',
    'LoggerConfigError',
    'NoOpLogger',
    'OutputOpenError',
    'Severity',
    'api',
    'api_context',
    'apif',
    'apif_context',
    'bind_context',
    'bound_context',
    'classify_status',
    'clear_context',
    'configure_diagnostics',
    'debug',
    'debug_context',
    'debugf',
    'debugf_context',
    'disable_compatibility_mode',
    'enable_compatibility_mode',
    'error',
    'error_context',
    'errorf',
    'errorf_context',
    'fatal',
    'fatal_context',
    'fatalf',
    'fatalf_context',
    'get_compatibility_logger',
    'get_global_logger',
    'info',
    'info_context',
    'infof',
    'infof_context',
    'is_compatibility_mode_enabled',
    'new_logger',
    'parse_severity',
    'set_global_logger',
    'setup_logger',
    'unbind_context',
    'warning',
    'warning_context',
    'warningf',
    'warningf_context',
    'with_attrs',
    'with_group',
]
