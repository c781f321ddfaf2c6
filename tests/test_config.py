'''Verify LogConfig validation and translation to LoggerConfiguration.'''

from __future__ import annotations

import pytest

from logfacade.core.config import LogConfig, LoggerConfiguration, split_levels, translate
from logfacade.core.errors import InvalidLevelError, LoggerConfigError
from logfacade.core.levels import DEFAULT_SEVERITIES, Severity


def test_split_levels_accepts_all_delimiters() -> None:
    assert split_levels('debug,info|warn error') == ['debug', 'info', 'warn', 'error']


def test_split_levels_ignores_empty_tokens() -> None:
    assert split_levels('info,') == ['info']
    assert split_levels('info, |error') == ['info', 'error']
    assert split_levels('') == []


def test_translate_defaults() -> None:

    '''Verify an empty config means stdout, colors, and INFO/ERROR/WARNING.'''

    configuration = translate(LogConfig())

    assert configuration.levels == DEFAULT_SEVERITIES
    assert configuration.api_levels == DEFAULT_SEVERITIES
    assert Severity.DEBUG not in configuration.levels
    assert configuration.stdout is True
    assert configuration.file_path == ''
    assert configuration.colors is True
    assert configuration.structured is False
    assert configuration.json is False
    assert configuration.utc is False


def test_translate_parses_levels_independently() -> None:

    configuration = translate(LogConfig(levels='debug|info', api_levels='error'))

    assert configuration.levels == {Severity.DEBUG, Severity.INFO}
    assert configuration.api_levels == {Severity.ERROR}
    assert configuration.debug_enabled is True


def test_translate_trailing_delimiter() -> None:
    assert translate(LogConfig(levels='warning,')).levels == {Severity.WARNING}


def test_translate_invalid_level() -> None:

    '''Verify the offending token is reported in upper case.'''

    with pytest.raises(InvalidLevelError) as exc_info:
        translate(LogConfig(levels='info,loud'))

    assert str(exc_info.value) == 'invalid log level: LOUD'
    assert exc_info.value.token == 'loud'
    assert exc_info.value.api is False


def test_translate_invalid_api_level() -> None:

    with pytest.raises(InvalidLevelError, match='invalid api log level: NOPE'):
        translate(LogConfig(api_levels='nope'))


def test_invalid_level_is_value_error() -> None:

    with pytest.raises(ValueError):
        translate(LogConfig(levels='fatal'))


@pytest.mark.parametrize('output', ['', 'stdout', 'STDOUT', 'StdOut'])
def test_translate_stdout_spellings(output: str) -> None:

    configuration = translate(LogConfig(output=output))

    assert configuration.stdout is True
    assert configuration.file_path == ''


def test_translate_file_output() -> None:

    configuration = translate(LogConfig(output='/var/log/app.log'))

    assert configuration.stdout is False
    assert configuration.file_path == '/var/log/app.log'


def test_json_implies_structured() -> None:

    configuration = translate(LogConfig(json=True, structured=False))

    assert configuration.json is True
    assert configuration.structured is True


def test_no_colors_and_utc() -> None:

    configuration = translate(LogConfig(no_colors=True, utc=True))

    assert configuration.colors is False
    assert configuration.utc is True


def test_disabled_flags() -> None:

    configuration = translate(LogConfig(levels='disabled', api_levels='DISABLED'))

    assert configuration.disabled is True
    assert configuration.api_disabled is True


def test_log_config_rejects_non_string_levels() -> None:

    with pytest.raises(LoggerConfigError, match='LogConfig.levels must be a string'):
        LogConfig(levels=5)  # type: ignore[arg-type]


def test_log_config_is_frozen() -> None:

    config = LogConfig()
    with pytest.raises(AttributeError):
        config.levels = 'debug'  # type: ignore[misc]


def test_from_mapping_accepts_wire_keys() -> None:

    '''Verify camelCase keys from YAML or JSON documents map onto fields.'''

    config = LogConfig.from_mapping({
        'levels': 'debug,info',
        'apiLevels': 'error',
        'output': 'stdout',
        'noColors': True,
        'json': False,
        'structured': True,
        'utc': True,
    })

    assert config == LogConfig(
        levels='debug,info',
        api_levels='error',
        output='stdout',
        no_colors=True,
        json=False,
        structured=True,
        utc=True,
    )


def test_from_mapping_accepts_attribute_names() -> None:
    assert LogConfig.from_mapping({'api_levels': 'info', 'no_colors': True}) == LogConfig(
        api_levels='info', no_colors=True,
    )


def test_from_mapping_rejects_unknown_keys() -> None:

    with pytest.raises(LoggerConfigError, match='unknown logger config key: colour'):
        LogConfig.from_mapping({'colour': False})


def test_logger_configuration_requires_file_without_stdout() -> None:

    with pytest.raises(LoggerConfigError):
        LoggerConfiguration(levels=DEFAULT_SEVERITIES, api_levels=DEFAULT_SEVERITIES, stdout=False)


def test_logger_configuration_json_requires_structured() -> None:

    with pytest.raises(LoggerConfigError):
        LoggerConfiguration(
            levels=DEFAULT_SEVERITIES,
            api_levels=DEFAULT_SEVERITIES,
            json=True,
            structured=False,
        )
