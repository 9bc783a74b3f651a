"""Per-repository branch migration.

Stages run strictly in order and each one starts only after the previous
response has been observed:

1.  rename the legacy branch to the new name
1b. if the legacy branch is gone, fetch the new branch instead (a previous
    run already renamed it)
2.  read the legacy branch protection (unprotected means empty rules)
3.  protect the new branch with rules derived from step 2
4.  lock the legacy branch
5.  make the new branch the default and normalize merge settings

The first failing stage ends the repository's migration. Completed stages are
not rolled back; re-running the tool is the recovery path.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from ..api.client import GitHubClient
from ..api.exceptions import GitHubAPIError, GitHubNotFoundError
from ..models.protection import BranchProtection
from ..models.repository import Repository
from .rules import (
    derive_new_branch_protection,
    locked_branch_protection,
    promoted_repository_settings,
)


class MigrationStage(str, Enum):
    """Stages of a repository migration."""

    RENAME_LEGACY_BRANCH = 'rename_legacy_branch'
    VERIFY_RENAME_TARGET = 'verify_rename_target'
    READ_LEGACY_PROTECTION = 'read_legacy_protection'
    APPLY_NEW_PROTECTION = 'apply_new_protection'
    LOCK_LEGACY_BRANCH = 'lock_legacy_branch'
    PROMOTE_DEFAULT_BRANCH = 'promote_default_branch'


class MigrationStatus(str, Enum):
    """Migration status enumeration."""

    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'
    SKIPPED = 'skipped'


class MigrationOutcome(BaseModel):
    """Result of migrating one repository."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    repository: str = Field(..., description='Repository full name')
    status: MigrationStatus = Field(..., description='Migration status')

    # Timing information
    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: Optional[datetime] = Field(default=None)

    # Error information
    stage: Optional[MigrationStage] = Field(
        default=None, description='Stage that failed'
    )
    error_message: Optional[str] = Field(default=None)
    detail: Optional[str] = Field(default=None, description='Why nothing was done')
    status_code: Optional[int] = Field(default=None, description='HTTP status, if any')
    response_body: Optional[str] = Field(default=None, description='Raw API response')
    error: Optional[GitHubAPIError] = Field(default=None, exclude=True, repr=False)

    @property
    def success(self) -> bool:
        return self.status != MigrationStatus.FAILED


class BranchMigrationStateMachine:
    """Runs the migration stages for one repository at a time."""

    def __init__(
        self,
        client: GitHubClient,
        legacy_branch: str = 'master',
        new_branch: str = 'main',
    ):
        """Initialize the state machine.

        Args:
            client: GitHub API client
            legacy_branch: Name of the branch being replaced
            new_branch: Name it is renamed to
        """
        self.client = client
        self.legacy_branch = legacy_branch
        self.new_branch = new_branch

    async def migrate(self, repository: Repository) -> MigrationOutcome:
        """Migrate one repository.

        Args:
            repository: Repository whose default branch is the legacy branch

        Returns:
            Completed outcome, or a failed outcome naming the stage and cause
        """
        log = logger.bind(component='BranchMigration', repo=repository.full_name)
        started_at = datetime.now()
        legacy, new = self.legacy_branch, self.new_branch

        stage = MigrationStage.RENAME_LEGACY_BRANCH
        try:
            try:
                log.info(f"Renaming branch '{legacy}' to '{new}'")
                branch = await self.client.rename_branch(repository, legacy, new)
            except GitHubNotFoundError:
                stage = MigrationStage.VERIFY_RENAME_TARGET
                log.info(f"No such branch '{legacy}', checking if '{new}' already exists")
                branch = await self.client.get_branch(repository, new)
            log.debug(f"Branch '{branch.name}' is at {branch.commit.sha}")

            stage = MigrationStage.READ_LEGACY_PROTECTION
            log.info(f"Getting branch protection for '{legacy}'")
            protection = await self._read_protection(repository, legacy, log)
            log.trace(f"'{legacy}' branch protection: {protection!r}")

            stage = MigrationStage.APPLY_NEW_PROTECTION
            log.info(f"Applying branch protections to new '{new}' branch")
            await self.client.update_branch_protection(
                repository, new, derive_new_branch_protection(protection)
            )

            stage = MigrationStage.LOCK_LEGACY_BRANCH
            log.info(f"Resetting '{legacy}' branch protections and locking it")
            await self.client.update_branch_protection(
                repository, legacy, locked_branch_protection()
            )

            stage = MigrationStage.PROMOTE_DEFAULT_BRANCH
            log.info(f"Updating default branch to '{new}' and normalizing settings")
            await self.client.update_repository(
                repository, promoted_repository_settings(new)
            )
        except GitHubAPIError as e:
            log.error(f'Migration failed at stage {stage.value}: {e}')
            return MigrationOutcome(
                repository=repository.full_name,
                status=MigrationStatus.FAILED,
                started_at=started_at,
                completed_at=datetime.now(),
                stage=stage,
                error_message=str(e),
                status_code=e.status_code,
                response_body=e.response_text or None,
                error=e,
            )

        log.success(f"Default branch is now '{new}'")
        return MigrationOutcome(
            repository=repository.full_name,
            status=MigrationStatus.COMPLETED,
            started_at=started_at,
            completed_at=datetime.now(),
        )

    async def _read_protection(
        self, repository: Repository, branch: str, log
    ) -> BranchProtection:
        try:
            return await self.client.get_branch_protection(repository, branch)
        except GitHubNotFoundError:
            log.info(f"Branch '{branch}' has no protection rules")
            return BranchProtection()
