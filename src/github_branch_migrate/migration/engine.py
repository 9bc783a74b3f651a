"""Migration engine - main entry point for migration operations."""

from typing import Optional

from loguru import logger

from ..api.client import GitHubClientFactory
from ..api.endpoints import RepoType
from ..api.lister import RepositoryLister
from ..config.config import Config
from .orchestrator import MigrationOrchestrator, MigrationSummary
from .state_machine import BranchMigrationStateMachine


class MigrationEngine:
    """Wires the client stack together and runs one organization."""

    def __init__(self, config: Config):
        """Initialize migration engine.

        Args:
            config: Migration configuration
        """
        self.config = config
        self.logger = logger.bind(component='MigrationEngine')

        self.client = GitHubClientFactory.create_client(config.github)

        self.state_machine = BranchMigrationStateMachine(
            self.client,
            legacy_branch=config.migration.legacy_branch,
            new_branch=config.migration.new_branch,
        )
        self.orchestrator = MigrationOrchestrator(
            RepositoryLister(self.client),
            self.state_machine,
            repo_type=RepoType(config.migration.repo_type),
            per_page=config.migration.per_page,
            fail_fast=config.migration.fail_fast,
            dry_run=config.migration.dry_run,
        )

    async def migrate(self, organization: Optional[str] = None) -> MigrationSummary:
        """Execute the migration for an organization.

        Args:
            organization: Organization login (defaults to the configured one)

        Returns:
            Migration summary
        """
        organization = organization or self.config.migration.organization
        mode = 'dry run' if self.config.migration.dry_run else 'migration'
        self.logger.info(
            f"Starting {mode} of '{self.config.migration.legacy_branch}' -> "
            f"'{self.config.migration.new_branch}' for '{organization}'"
        )

        try:
            summary = await self.orchestrator.run(organization)
            self.logger.info('Done.')
            return summary
        except Exception as e:
            self.logger.error(f'Migration failed: {e}')
            raise
        finally:
            # The connection pool is shared by every call of the run.
            await self.client.close()
