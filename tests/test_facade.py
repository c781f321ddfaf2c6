'''Verify package-level functions with and without a registered logger.'''

from __future__ import annotations

import io
import logging
import re

import pytest

import logfacade
from logfacade import facade
from logfacade.core.config import LogConfig
from logfacade.infrastructure.logger import LeveledLogger, NoOpLogger
from logfacade.infrastructure.registry import REGISTRY

TS = r'\d{4}/\d{2}/\d{2} \d{2}:\d{2}:\d{2}'


class BrokenStream(io.StringIO):

    def write(self, s: str) -> int:
        raise OSError('closed pipe')


@pytest.fixture
def fallback() -> io.StringIO:

    buf = io.StringIO()
    facade.FALLBACK.redirect(buf)
    return buf


@pytest.fixture
def registered() -> io.StringIO:

    buf = io.StringIO()
    REGISTRY.attach(LeveledLogger(LogConfig(no_colors=True), stream=buf))
    return buf


def test_fallback_default_is_stderr(capsys: pytest.CaptureFixture[str]) -> None:

    facade.info('server', 'started')

    captured = capsys.readouterr()
    assert captured.err == '[INFO] server started\n'
    assert captured.out == ''


def test_fallback_tags(fallback: io.StringIO) -> None:

    '''Verify the fixed [TAG] message form, unfiltered and uncolored.'''

    facade.debug('d')
    facade.info('i')
    facade.warning('w')
    facade.error('e')

    assert fallback.getvalue() == '[DEBUG] d\n[INFO] i\n[WARN ] w\n[ERROR] e\n'


def test_fallback_formatted(fallback: io.StringIO) -> None:

    facade.debugf('%d retries', 3)
    facade.infof('Hello %s, number %d', 'Alice', 100)
    facade.warningf('%s', 'w')
    facade.errorf('plain')

    assert fallback.getvalue() == '[DEBUG] 3 retries\n[INFO] Hello Alice, number 100\n[WARN ] w\n[ERROR] plain\n'


def test_fallback_api_uses_classified_tag(fallback: io.StringIO) -> None:

    facade.api(200, 'ok')
    facade.api(404, 'Resource not found:', '/users/123')
    facade.apif(503, 'upstream %s', 'down')

    assert fallback.getvalue() == (
        '[INFO] ok\n'
        '[WARN ] Resource not found: /users/123\n'
        '[ERROR] upstream down\n'
    )


def test_fallback_context_variants(fallback: io.StringIO) -> None:

    facade.info_context({'trace_id': 't'}, 'joined', 'args')
    facade.errorf_context(None, 'code %d', 9)
    facade.api_context(None, 500, 'api', 'down')
    facade.apif_context(None, 201, 'created %s', 'x')

    assert fallback.getvalue() == (
        '[INFO] joined args\n'
        '[ERROR] code 9\n'
        '[ERROR] api down\n'
        '[INFO] created x\n'
    )


def test_fallback_appends_keyword_fields(fallback: io.StringIO) -> None:

    facade.info('login', user='alice')

    assert fallback.getvalue() == '[INFO] login user=alice\n'


def test_fallback_fatal_exits(fallback: io.StringIO, exits: list[int]) -> None:

    facade.fatal('bye')
    facade.fatalf('bye %d', 2)
    facade.fatal_context(None, 'ctx')

    assert fallback.getvalue() == '[FATAL] bye\n[FATAL] bye 2\n[FATAL] ctx\n'
    assert exits == [1, 1, 1]


def test_fallback_write_failure_is_reported(caplog: pytest.LogCaptureFixture) -> None:

    facade.FALLBACK.redirect(BrokenStream())

    with caplog.at_level(logging.ERROR, logger='logfacade.facade'):
        facade.error('lost')

    assert "failed to log message 'lost'" in caplog.text
    assert 'closed pipe' in caplog.text


def test_with_attrs_without_logger_is_noop(fallback: io.StringIO) -> None:

    child = facade.with_attrs('k', 'v')
    grouped = facade.with_group('g')

    child.info('dropped')
    grouped.errorf('dropped %d', 1)

    assert isinstance(child, NoOpLogger)
    assert isinstance(grouped, NoOpLogger)
    assert child.with_group('x') is child
    assert fallback.getvalue() == ''


def test_registered_info_is_tagged(registered: io.StringIO, fallback: io.StringIO) -> None:

    '''Verify legacy message calls keep the [INFO ] tag through a logger.'''

    facade.info('Hello', 'World')

    assert re.match(rf'^{TS} \[INFO \] Hello World\n$', registered.getvalue())
    assert fallback.getvalue() == ''


def test_registered_infof(registered: io.StringIO) -> None:

    facade.infof('Hello %s, number %d', 'Alice', 100)

    assert re.match(rf'^{TS} \[INFO \] Hello Alice, number 100\n$', registered.getvalue())


def test_registered_api_has_bare_prefix(registered: io.StringIO) -> None:

    facade.api(404, 'Resource not found:', '/users/123')

    assert re.match(rf'^{TS} Resource not found: /users/123\n$', registered.getvalue())


def test_registered_logger_filters(registered: io.StringIO) -> None:

    facade.debug('hidden')
    facade.debugf('hidden')
    facade.warning('shown')

    assert 'hidden' not in registered.getvalue()
    assert 'shown' in registered.getvalue()


def test_registered_context_and_derivations() -> None:

    buf = io.StringIO()
    REGISTRY.attach(LeveledLogger(LogConfig(structured=True, no_colors=True), stream=buf))

    facade.warning_context({'trace_id': 't-1'}, 'slow', 'ms', 900)
    facade.with_group('db').with_attrs(table='users').info('query')

    first, second = buf.getvalue().splitlines()
    assert first.endswith('[WARN ] slow trace_id=t-1 ms=900')
    assert second.endswith('[INFO ] query db.table=users')


def test_registered_fatal_exits_once(registered: io.StringIO, exits: list[int]) -> None:

    facade.fatal('stop')

    assert exits == [1]
    assert '[FATAL] stop' in registered.getvalue()


def test_fallback_keyword_named_like_parameter(fallback: io.StringIO) -> None:

    facade.info('disk', severity='high')
    facade.api(200, 'ok', status_code=200)
    facade.infof('%s', 'x', fmt='raw')
    facade.info_context(None, 'ctx', ctx='c', msg='m')

    assert fallback.getvalue() == (
        '[INFO] disk severity=high\n'
        '[INFO] ok status_code=200\n'
        '[INFO] x fmt=raw\n'
        '[INFO] ctx ctx=c msg=m\n'
    )


def test_registered_keyword_named_like_parameter(registered: io.StringIO) -> None:

    '''Verify a registered logger accepts the same fields the fallback does.'''

    facade.info('disk', severity='high')
    facade.api(200, 'ok', status_code=200)
    facade.warningf('%s', 'x', fmt='raw', tagged=False)
    facade.error_context(None, 'ctx', ctx='c', msg='m')

    lines = registered.getvalue().splitlines()
    assert len(lines) == 4
    assert re.match(rf'^{TS} \[INFO \] disk severity=high$', lines[0])
    assert re.match(rf'^{TS} ok status_code=200$', lines[1])
    assert re.match(rf'^{TS} \[WARN \] x fmt=raw tagged=False$', lines[2])
    assert re.match(rf'^{TS} ctx ctx=c msg=m$', lines[3])


def test_functions_reexported_at_package_root(fallback: io.StringIO) -> None:

    logfacade.warningf('%s', 'root')

    assert fallback.getvalue() == '[WARN ] root\n'
