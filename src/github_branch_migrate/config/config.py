"""Configuration management for the GitHub branch migration tool."""

from typing import Optional, Dict, Any
from pathlib import Path
import os

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
import yaml
from dotenv import load_dotenv

from ..utils.logging import normalize_level


class GitHubConfig(BaseModel):
    """Configuration for the GitHub API endpoint."""

    url: str = Field(default='https://api.github.com', description='API base URL')
    username: Optional[str] = Field(default=None, description='Basic auth username')
    password: Optional[str] = Field(
        default=None, description='Password or personal access token'
    )
    timeout: float = Field(default=60.0, description='Request timeout in seconds')
    accept: str = Field(
        default='application/vnd.github.v3+json',
        description='Accept header sent with every request',
    )
    protection_accept: Optional[str] = Field(
        default='application/vnd.github.luke-cage-preview+json',
        description='Accept header for branch protection endpoints; empty to disable',
    )
    user_agent: str = Field(
        default='github-branch-migrate/0.1.0', description='User-Agent header'
    )
    max_credential_refreshes: int = Field(
        default=1, description='Credential refreshes allowed per request after a 401'
    )

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        """Validate API URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')

    @field_validator('timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError('Timeout must be positive')
        return v

    @field_validator('max_credential_refreshes')
    @classmethod
    def validate_max_refreshes(cls, v):
        if v < 0:
            raise ValueError('max_credential_refreshes must not be negative')
        return v


class MigrationConfig(BaseModel):
    """Migration-specific configuration."""

    organization: str = Field(default='vapor', description='Organization to process')
    legacy_branch: str = Field(default='master', description='Branch being replaced')
    new_branch: str = Field(default='main', description='Replacement branch name')
    repo_type: str = Field(default='public', description='Repository listing filter')
    per_page: int = Field(default=100, description='Repositories per listing page')

    fail_fast: bool = Field(
        default=True, description='Abort the whole run on the first failed repository'
    )
    dry_run: bool = Field(default=False, description='Perform dry run without changes')

    @field_validator('per_page')
    @classmethod
    def validate_per_page(cls, v):
        """Validate page size is within the API limits."""
        if not 1 <= v <= 100:
            raise ValueError('per_page must be between 1 and 100')
        return v

    @field_validator('repo_type')
    @classmethod
    def validate_repo_type(cls, v):
        valid_types = ['all', 'public', 'private', 'forks', 'sources', 'member', 'internal']
        if v not in valid_types:
            raise ValueError(f'repo_type must be one of: {valid_types}')
        return v

    @field_validator('legacy_branch', 'new_branch')
    @classmethod
    def validate_branch_name(cls, v):
        if not v or not v.strip():
            raise ValueError('Branch names must not be empty')
        return v.strip()

    @model_validator(mode='after')
    def validate_distinct_branches(self):
        if self.legacy_branch == self.new_branch:
            raise ValueError('legacy_branch and new_branch must differ')
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Optional[str] = Field(
        default=None, description='Log level; unset defers to LOG_LEVEL'
    )
    file: Optional[str] = Field(default=None, description='Log file path')
    format: Optional[str] = Field(default=None, description='Log format')

    @field_validator('level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        if v is None:
            return v
        valid_levels = [
            'TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL'
        ]
        level = normalize_level(v)
        if level not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return level


class Config(BaseModel):
    """Main configuration class for the branch migration tool."""

    model_config = ConfigDict(extra='forbid')

    github: GitHubConfig = Field(
        default_factory=GitHubConfig, description='GitHub API settings'
    )
    migration: MigrationConfig = Field(
        default_factory=MigrationConfig, description='Migration settings'
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description='Logging settings'
    )

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Load configuration from YAML file."""
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        # Load .env file if it exists
        load_dotenv()

        config_data = {
            'github': {
                'url': os.getenv('GITHUB_URL'),
                'username': os.getenv('GITHUB_USERNAME'),
                'password': os.getenv('GITHUB_PASSWORD'),
                'timeout': os.getenv('GITHUB_TIMEOUT'),
            },
            'migration': {
                'organization': os.getenv('GITHUB_ORG'),
                'legacy_branch': os.getenv('LEGACY_BRANCH'),
                'new_branch': os.getenv('NEW_BRANCH'),
            },
            # LOG_LEVEL is read by setup_logging so an unknown name falls back
            'logging': {
                'file': os.getenv('LOG_FILE'),
            },
        }

        # Remove None values
        config_data = cls._remove_none_values(config_data)

        return cls(**config_data)

    @staticmethod
    def _remove_none_values(data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively remove None values from dictionary."""
        if isinstance(data, dict):
            return {
                k: Config._remove_none_values(v)
                for k, v in data.items()
                if v is not None
            }
        return data

    def to_file(self, config_path: str) -> None:
        """Save configuration to YAML file."""
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(
                self.model_dump(), f, default_flow_style=False, indent=2, sort_keys=False
            )

    @staticmethod
    def create_template(output_path: str) -> None:
        """Create a configuration template file."""
        template_config = {
            'github': {
                'url': 'https://api.github.com',
                'username': 'your-github-username',
                'password': 'your-personal-access-token',
                'timeout': 60,
            },
            'migration': {
                'organization': 'your-organization',
                'legacy_branch': 'master',
                'new_branch': 'main',
                'repo_type': 'public',
                'per_page': 100,
                'fail_fast': True,
                'dry_run': False,
            },
            'logging': {
                'level': 'INFO',
                'file': 'migration.log',
            },
        }

        config_file = Path(output_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w', encoding='utf-8') as f:
            yaml.dump(
                template_config, f, default_flow_style=False, indent=2, sort_keys=False
            )
