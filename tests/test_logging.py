"""Tests for logging setup and level resolution."""

from unittest.mock import Mock, patch

import pytest
from click.testing import CliRunner
from loguru import logger

from github_branch_migrate.cli.main import _setup_logging_with_config, cli
from github_branch_migrate.config.config import Config
from github_branch_migrate.utils.logging import (
    default_level,
    resolve_level,
    setup_logging,
)

CLI = 'github_branch_migrate.cli.main'


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger.remove()


@pytest.fixture
def sink_levels():
    """Levels passed to ``logger.add`` by ``setup_logging``."""
    with patch.object(logger, 'add') as mock_add:
        yield lambda: [call.kwargs['level'] for call in mock_add.call_args_list]


class TestResolveLevel:
    """Test mapping of level names onto loguru levels."""

    def test_known_levels(self):
        assert resolve_level('debug') == 'DEBUG'
        assert resolve_level(' Warning ') == 'WARNING'
        assert resolve_level('TRACE') == 'TRACE'

    def test_aliases(self):
        assert resolve_level('notice') == 'SUCCESS'
        assert resolve_level('warn') == 'WARNING'

    def test_unknown_falls_back_to_info(self):
        assert resolve_level('verbose') == 'INFO'
        assert resolve_level('') == 'INFO'
        assert resolve_level(None) == 'INFO'

    def test_default_level_from_env(self, monkeypatch):
        monkeypatch.setenv('LOG_LEVEL', 'error')
        assert default_level() == 'ERROR'

        monkeypatch.setenv('LOG_LEVEL', 'loud')
        assert default_level() == 'INFO'

        monkeypatch.delenv('LOG_LEVEL')
        assert default_level() == 'INFO'


class TestSetupLogging:
    """Test the level applied to the loguru sinks."""

    def test_env_level(self, monkeypatch, sink_levels):
        monkeypatch.setenv('LOG_LEVEL', 'debug')

        setup_logging()

        assert sink_levels() == ['DEBUG']

    def test_explicit_level_wins_over_env(self, monkeypatch, sink_levels):
        monkeypatch.setenv('LOG_LEVEL', 'debug')

        setup_logging('WARNING')

        assert sink_levels() == ['WARNING']

    def test_file_sink_uses_same_level(self, monkeypatch, tmp_path, sink_levels):
        monkeypatch.setenv('LOG_LEVEL', 'notice')

        setup_logging(log_file=str(tmp_path / 'logs' / 'migration.log'))

        assert sink_levels() == ['SUCCESS', 'SUCCESS']
        assert (tmp_path / 'logs').is_dir()

    def test_invalid_env_level_falls_back(self, monkeypatch, sink_levels):
        monkeypatch.setenv('LOG_LEVEL', 'chatty')

        with patch.object(logger, 'warning') as mock_warning:
            setup_logging()

        assert sink_levels() == ['INFO']
        assert "'chatty'" in mock_warning.call_args.args[0]

    def test_alias_is_not_reported_as_unknown(self, monkeypatch, sink_levels):
        monkeypatch.setenv('LOG_LEVEL', 'notice')

        with patch.object(logger, 'warning') as mock_warning:
            setup_logging()

        mock_warning.assert_not_called()


class TestSetupLoggingWithConfig:
    """Test how the CLI combines config, --verbose and LOG_LEVEL."""

    def make_ctx(self, verbose=False):
        return Mock(obj={'verbose': verbose})

    @patch(f'{CLI}.setup_logging')
    def test_config_level_wins_over_env(self, mock_setup, monkeypatch):
        monkeypatch.setenv('LOG_LEVEL', 'debug')
        config = Config(logging={'level': 'warning'})

        _setup_logging_with_config(self.make_ctx(), config)

        assert mock_setup.call_args.kwargs['level'] == 'WARNING'

    @patch(f'{CLI}.setup_logging')
    def test_verbose_wins_over_config(self, mock_setup):
        config = Config(logging={'level': 'error'})

        _setup_logging_with_config(self.make_ctx(verbose=True), config)

        assert mock_setup.call_args.kwargs['level'] == 'DEBUG'

    def test_config_without_level_defers_to_env(self, monkeypatch, sink_levels):
        monkeypatch.setenv('LOG_LEVEL', 'debug')
        config = Config(migration={'organization': 'acme'})

        _setup_logging_with_config(self.make_ctx(), config)

        assert sink_levels() == ['DEBUG']


class TestCLILogLevel:
    """Test the CLI under unusual LOG_LEVEL values."""

    @pytest.mark.parametrize('value', ['notice', 'nonsense'])
    @patch(f'{CLI}._load_config')
    def test_status_runs(self, mock_load_config, value):
        mock_load_config.return_value = Config(migration={'organization': 'acme'})

        result = CliRunner().invoke(cli, ['status'], env={'LOG_LEVEL': value})

        assert result.exit_code == 0
        assert 'acme' in result.output
