"""Configuration loading and validation."""

from .config import Config, GitHubConfig, LoggingConfig, MigrationConfig

__all__ = ['Config', 'GitHubConfig', 'LoggingConfig', 'MigrationConfig']
