'''Shared fixtures: isolate global logger state between tests.'''

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from logfacade.facade import FALLBACK
from logfacade.infrastructure.logger import clear_context
from logfacade.infrastructure.registry import REGISTRY


@pytest.fixture(autouse=True)
def _isolate_globals() -> Iterator[None]:

    REGISTRY.detach()
    FALLBACK.redirect(None)
    clear_context()

    yield

    previous = REGISTRY.detach()
    if previous is not None:
        previous.close()
    FALLBACK.redirect(None)
    clear_context()

    package_logger = logging.getLogger('logfacade')
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def exits(monkeypatch: pytest.MonkeyPatch) -> list[int]:

    '''
    Replace process termination with a recorder.

    Returns:
        list[int]: Exit codes requested during the test
    '''

    codes: list[int] = []
    monkeypatch.setattr(
        'logfacade.infrastructure.process.exit_process',
        codes.append,
    )
    return codes
