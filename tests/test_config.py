"""Tests for configuration management."""

import pytest
import tempfile
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from github_branch_migrate.config.config import (
    Config,
    GitHubConfig,
    LoggingConfig,
    MigrationConfig,
)

ENV_VARS = [
    'GITHUB_URL',
    'GITHUB_USERNAME',
    'GITHUB_PASSWORD',
    'GITHUB_TIMEOUT',
    'GITHUB_ORG',
    'LEGACY_BRANCH',
    'NEW_BRANCH',
    'LOG_LEVEL',
    'LOG_FILE',
]


class TestGitHubConfig:
    """Test GitHub API configuration."""

    def test_defaults(self):
        config = GitHubConfig()

        assert config.url == 'https://api.github.com'
        assert config.username is None
        assert config.password is None
        assert config.timeout == 60.0
        assert config.max_credential_refreshes == 1

    def test_url_validation(self):
        """Test URL validation."""
        # Valid URLs should work; trailing slashes are dropped
        assert GitHubConfig(url='https://github.example.com/api/v3/').url == (
            'https://github.example.com/api/v3'
        )
        assert GitHubConfig(url='http://localhost:8080').url == 'http://localhost:8080'

        with pytest.raises(ValidationError):
            GitHubConfig(url='api.github.com')

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            GitHubConfig(timeout=0)

    def test_refreshes_must_not_be_negative(self):
        with pytest.raises(ValidationError):
            GitHubConfig(max_credential_refreshes=-1)


class TestMigrationConfig:
    """Test migration settings."""

    def test_defaults(self):
        config = MigrationConfig()

        assert config.organization == 'vapor'
        assert config.legacy_branch == 'master'
        assert config.new_branch == 'main'
        assert config.repo_type == 'public'
        assert config.per_page == 100
        assert config.fail_fast is True
        assert config.dry_run is False

    def test_branches_must_differ(self):
        with pytest.raises(ValidationError):
            MigrationConfig(legacy_branch='main', new_branch=' main ')

    def test_empty_branch_rejected(self):
        with pytest.raises(ValidationError):
            MigrationConfig(new_branch='  ')

    def test_invalid_repo_type(self):
        with pytest.raises(ValidationError):
            MigrationConfig(repo_type='secret')

    def test_per_page_bounds(self):
        with pytest.raises(ValidationError):
            MigrationConfig(per_page=0)
        with pytest.raises(ValidationError):
            MigrationConfig(per_page=101)


class TestLoggingConfig:
    """Test logging settings."""

    def test_level_is_normalized(self):
        assert LoggingConfig(level='debug').level == 'DEBUG'

    def test_level_alias(self):
        assert LoggingConfig(level='notice').level == 'SUCCESS'

    def test_default_level_is_unset(self):
        assert LoggingConfig().level is None

    def test_invalid_level(self):
        with pytest.raises(ValidationError):
            LoggingConfig(level='VERBOSE')


class TestConfig:
    """Test main configuration class."""

    def test_config_from_dict(self):
        """Test configuration creation from dictionary."""
        config_dict = {
            'github': {'username': 'octocat', 'password': 'secret'},
            'migration': {'organization': 'acme', 'fail_fast': False},
        }

        config = Config(**config_dict)
        assert config.github.username == 'octocat'
        assert config.migration.organization == 'acme'
        assert config.migration.fail_fast is False
        # Unset so LOG_LEVEL still applies
        assert config.logging.level is None

    def test_unknown_section_rejected(self):
        with pytest.raises(ValidationError):
            Config(server={'url': 'https://api.github.com'})

    def test_config_from_file(self):
        """Test configuration loading from YAML file."""
        config_content = """
github:
  url: https://github.example.com/api/v3
  username: octocat
  password: secret

migration:
  organization: acme
  legacy_branch: master
  new_branch: trunk
  per_page: 50
"""

        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write(config_content)
            f.flush()

        try:
            config = Config.from_file(f.name)
            assert config.github.url == 'https://github.example.com/api/v3'
            assert config.github.password == 'secret'
            assert config.migration.organization == 'acme'
            assert config.migration.new_branch == 'trunk'
            assert config.migration.per_page == 50
        finally:
            os.unlink(f.name)

    def test_empty_file_uses_defaults(self, tmp_path):
        config_file = tmp_path / 'config.yaml'
        config_file.write_text('')

        config = Config.from_file(str(config_file))

        assert config.migration.organization == 'vapor'

    def test_config_from_env(self, monkeypatch):
        """Test configuration loading from environment variables."""
        for name in ENV_VARS:
            monkeypatch.delenv(name, raising=False)

        monkeypatch.setenv('GITHUB_USERNAME', 'octocat')
        monkeypatch.setenv('GITHUB_PASSWORD', 'secret')
        monkeypatch.setenv('GITHUB_TIMEOUT', '15')
        monkeypatch.setenv('GITHUB_ORG', 'acme')
        monkeypatch.setenv('NEW_BRANCH', 'trunk')
        monkeypatch.setenv('LOG_LEVEL', 'debug')

        config = Config.from_env()

        assert config.github.url == 'https://api.github.com'
        assert config.github.username == 'octocat'
        assert config.github.timeout == 15.0
        assert config.migration.organization == 'acme'
        assert config.migration.legacy_branch == 'master'
        assert config.migration.new_branch == 'trunk'
        # LOG_LEVEL is resolved when logging is set up
        assert config.logging.level is None

    def test_invalid_env_level_does_not_fail(self, monkeypatch):
        for name in ENV_VARS:
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv('LOG_LEVEL', 'chatty')

        assert Config.from_env().logging.level is None

    def test_invalid_config_file(self):
        """Test handling of invalid configuration file."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            f.write('invalid: yaml: content:')
            f.flush()

        try:
            with pytest.raises(yaml.YAMLError):
                Config.from_file(f.name)
        finally:
            os.unlink(f.name)

    def test_missing_config_file(self):
        """Test handling of missing configuration file."""
        with pytest.raises(FileNotFoundError):
            Config.from_file('/nonexistent/config.yaml')

    def test_to_file_round_trip(self, tmp_path):
        config = Config(migration={'organization': 'acme', 'dry_run': True})
        config_file = tmp_path / 'nested' / 'config.yaml'

        config.to_file(str(config_file))

        assert Config.from_file(str(config_file)) == config

    def test_template_is_loadable(self, tmp_path):
        template = tmp_path / 'config.yaml'

        Config.create_template(str(template))

        config = Config.from_file(str(template))
        assert config.migration.organization == 'your-organization'
        assert config.migration.legacy_branch == 'master'
        assert config.logging.file == 'migration.log'
        assert Path(template).read_text().startswith('github:')
