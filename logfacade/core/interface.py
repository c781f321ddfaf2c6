'''
Logger protocol for dependency injection.

Library code should accept a Logger rather than calling the package-level
functions. Both LeveledLogger and NoOpLogger satisfy this protocol.
'''

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, TypeAlias, runtime_checkable


__all__ = ['Context', 'Logger']

Context: TypeAlias = Mapping[str, Any] | None


@runtime_checkable
class Logger(Protocol):

    '''
    Full logging contract.

    Plain methods take a message followed by free-form args. Text output
    space-joins them into the message; structured output reads them as
    key/value pairs. Keyword arguments are always structured fields.
    The f-variants format printf-style and always show the level tag.
    Context variants additionally merge fields from a context mapping.
    '''

    def debug(self, msg: str, /, *args: Any, **fields: Any) -> None: ...

    def info(self, msg: str, /, *args: Any, **fields: Any) -> None: ...

    def warning(self, msg: str, /, *args: Any, **fields: Any) -> None: ...

    def error(self, msg: str, /, *args: Any, **fields: Any) -> None: ...

    def fatal(self, msg: str, /, *args: Any, **fields: Any) -> None: ...

    def debugf(self, fmt: str, /, *args: Any, **fields: Any) -> None: ...

    def infof(self, fmt: str, /, *args: Any, **fields: Any) -> None: ...

    def warningf(self, fmt: str, /, *args: Any, **fields: Any) -> None: ...

    def errorf(self, fmt: str, /, *args: Any, **fields: Any) -> None: ...

    def fatalf(self, fmt: str, /, *args: Any, **fields: Any) -> None: ...

    def debug_context(self, ctx: Context, msg: str, /, *args: Any, **fields: Any) -> None: ...

    def info_context(self, ctx: Context, msg: str, /, *args: Any, **fields: Any) -> None: ...

    def warning_context(self, ctx: Context, msg: str, /, *args: Any, **fields: Any) -> None: ...

    def error_context(self, ctx: Context, msg: str, /, *args: Any, **fields: Any) -> None: ...

    def fatal_context(self, ctx: Context, msg: str, /, *args: Any, **fields: Any) -> None: ...

    def debugf_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None: ...

    def infof_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None: ...

    def warningf_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None: ...

    def errorf_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None: ...

    def fatalf_context(self, ctx: Context, fmt: str, /, *args: Any, **fields: Any) -> None: ...

    def api(self, status_code: int, msg: str, /, *args: Any, **fields: Any) -> None: ...

    def apif(self, status_code: int, fmt: str, /, *args: Any, **fields: Any) -> None: ...

    def api_context(
        self, ctx: Context, status_code: int, msg: str, /, *args: Any, **fields: Any,
    ) -> None: ...

    def apif_context(
        self, ctx: Context, status_code: int, fmt: str, /, *args: Any, **fields: Any,
    ) -> None: ...

    def with_attrs(self, /, *args: Any, **fields: Any) -> Logger: ...

    def with_group(self, name: str) -> Logger: ...
