'''Verify destination binding, filtering, and failure isolation.'''

from __future__ import annotations

import io
import logging
import sys
from pathlib import Path
from typing import Any

import pytest

from logfacade.core.config import LogConfig, translate
from logfacade.core.errors import LoggerConfigError, OutputOpenError
from logfacade.core.levels import Severity
from logfacade.infrastructure.output import Destination, bind_output


class BrokenStream(io.StringIO):

    def write(self, s: str) -> int:
        raise OSError('disk full')


def _event(severity: Severity = Severity.INFO, **overrides: Any) -> dict[str, Any]:

    event: dict[str, Any] = {
        'event': 'hello',
        'text': 'hello',
        'severity': severity,
        'api': False,
        'formatted': False,
        'fields': {},
        'text_fields': {},
    }
    event.update(overrides)
    return event


def test_bind_output_stdout_resolves_at_write_time(capsys: pytest.CaptureFixture[str]) -> None:

    destination = bind_output(translate(LogConfig(no_colors=True)))

    assert destination.stream is sys.stdout
    destination.emit(_event())

    assert capsys.readouterr().out.endswith(' hello\n')


def test_bind_output_explicit_stream_wins_over_file(tmp_path: Path) -> None:

    buf = io.StringIO()
    destination = bind_output(translate(LogConfig(output=str(tmp_path / 'x.log'))), stream=buf)

    assert destination.stream is buf
    assert not (tmp_path / 'x.log').exists()


def test_bind_output_appends_to_file(tmp_path: Path) -> None:

    '''Verify existing content is kept and lines are appended.'''

    path = tmp_path / 'app.log'
    path.write_text('existing\n', encoding='utf-8')

    destination = bind_output(translate(LogConfig(output=str(path), no_colors=True)))
    destination.emit(_event())
    destination.close()

    lines = path.read_text(encoding='utf-8').splitlines()
    assert lines[0] == 'existing'
    assert lines[1].endswith(' hello')
    assert len(lines) == 2


def test_bind_output_open_failure(tmp_path: Path) -> None:

    with pytest.raises(OutputOpenError) as exc_info:
        bind_output(translate(LogConfig(output=str(tmp_path))))

    assert str(exc_info.value).startswith('failed to open log file: ')
    assert exc_info.value.path == str(tmp_path)
    assert isinstance(exc_info.value.__cause__, OSError)
    assert isinstance(exc_info.value, LoggerConfigError)


def test_capture_source_follows_debug() -> None:

    assert bind_output(translate(LogConfig(levels='debug')), stream=io.StringIO()).capture_source is True
    assert bind_output(translate(LogConfig(levels='info')), stream=io.StringIO()).capture_source is False


def test_accepts_by_membership() -> None:

    '''Verify a WARNING-only set rejects INFO, DEBUG, and ERROR.'''

    destination = Destination(translate(LogConfig(levels='warning')), io.StringIO())

    assert destination.accepts(Severity.WARNING, api=False)
    assert not destination.accepts(Severity.INFO, api=False)
    assert not destination.accepts(Severity.DEBUG, api=False)
    assert not destination.accepts(Severity.ERROR, api=False)


def test_accepts_fatal_without_listing() -> None:

    destination = Destination(translate(LogConfig(levels='error')), io.StringIO())

    assert destination.accepts(Severity.FATAL, api=False)


def test_disabled_suppresses_fatal() -> None:

    destination = Destination(translate(LogConfig(levels='disabled')), io.StringIO())

    assert not destination.accepts(Severity.FATAL, api=False)
    assert not destination.accepts(Severity.ERROR, api=False)
    assert destination.accepts(Severity.ERROR, api=True)


def test_accepts_api_uses_api_levels() -> None:

    destination = Destination(translate(LogConfig(levels='info', api_levels='error')), io.StringIO())

    assert destination.accepts(Severity.ERROR, api=True)
    assert not destination.accepts(Severity.INFO, api=True)
    assert not destination.accepts(Severity.WARNING, api=True)


def test_api_disabled() -> None:

    destination = Destination(translate(LogConfig(api_levels='disabled|error')), io.StringIO())

    assert not destination.accepts(Severity.ERROR, api=True)
    assert destination.accepts(Severity.ERROR, api=False)


def test_emit_failure_is_reported_not_raised(caplog: pytest.LogCaptureFixture) -> None:

    destination = Destination(translate(LogConfig()), BrokenStream())

    with caplog.at_level(logging.ERROR, logger='logfacade.infrastructure.output'):
        destination.emit(_event(event='payment failed'))

    assert "failed to log message 'payment failed'" in caplog.text
    assert 'disk full' in caplog.text


def test_redirect() -> None:

    first = io.StringIO()
    second = io.StringIO()
    destination = Destination(translate(LogConfig(no_colors=True)), first)

    destination.redirect(second)
    destination.emit(_event())

    assert first.getvalue() == ''
    assert second.getvalue().endswith(' hello\n')


def test_close_leaves_borrowed_stream_open() -> None:

    buf = io.StringIO()
    destination = bind_output(translate(LogConfig()), stream=buf)

    destination.close()

    assert not buf.closed


def test_close_closes_owned_file(tmp_path: Path) -> None:

    destination = bind_output(translate(LogConfig(output=str(tmp_path / 'app.log'))))
    stream = destination.stream

    destination.close()
    destination.close()

    assert stream.closed


def test_repr_names_target() -> None:

    destination = Destination(translate(LogConfig()), io.StringIO())

    assert repr(destination) == "Destination('stdout', json=False)"
