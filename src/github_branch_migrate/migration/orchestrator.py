"""Migration orchestrator for driving repository migrations."""

from datetime import datetime
from typing import Dict, List, Optional, Set

from loguru import logger
from pydantic import BaseModel, Field

from ..api.endpoints import RepoType
from ..api.exceptions import GitHubAPIError
from ..api.lister import RepositoryLister
from ..models.repository import Repository
from .state_machine import (
    BranchMigrationStateMachine,
    MigrationOutcome,
    MigrationStage,
    MigrationStatus,
)


class RepositoryMigrationError(Exception):
    """A repository migration failed and the run was aborted."""

    def __init__(
        self, outcome: MigrationOutcome, summary: Optional['MigrationSummary'] = None
    ):
        self.outcome = outcome
        self.summary = summary
        self.repository = outcome.repository
        self.stage: Optional[MigrationStage] = outcome.stage
        self.cause: Optional[GitHubAPIError] = outcome.error
        stage = self.stage.value if self.stage else 'unknown'
        super().__init__(
            f'Migration of {self.repository} failed at stage {stage}: '
            f'{outcome.error_message}'
        )

    @property
    def status_code(self) -> Optional[int]:
        return self.outcome.status_code

    @property
    def response_body(self) -> Optional[str]:
        return self.outcome.response_body


class MigrationSummary(BaseModel):
    """Summary of migration results."""

    organization: str = Field(..., description='Processed organization')
    total_repositories: int = Field(default=0, description='Repositories listed')
    active_repositories: int = Field(default=0, description='Active repositories')

    started_at: datetime = Field(..., description='Migration start time')
    completed_at: Optional[datetime] = Field(default=None)

    outcomes: List[MigrationOutcome] = Field(default_factory=list)

    def count(self, status: MigrationStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def counts(self) -> Dict[str, int]:
        return {status.value: self.count(status) for status in MigrationStatus}

    @property
    def failed(self) -> List[MigrationOutcome]:
        return [o for o in self.outcomes if o.status == MigrationStatus.FAILED]


class MigrationOrchestrator:
    """Selects the repositories to migrate and migrates them one at a time."""

    def __init__(
        self,
        lister: RepositoryLister,
        state_machine: BranchMigrationStateMachine,
        repo_type: Optional[RepoType] = RepoType.PUBLIC,
        per_page: int = 100,
        fail_fast: bool = True,
        dry_run: bool = False,
    ):
        """Initialize migration orchestrator.

        Args:
            lister: Organization repository lister
            state_machine: Per-repository migration
            repo_type: Visibility filter used when listing
            per_page: Listing page size
            fail_fast: Abort the run on the first failed repository
            dry_run: Select repositories without changing anything
        """
        self.lister = lister
        self.state_machine = state_machine
        self.repo_type = repo_type
        self.per_page = per_page
        self.fail_fast = fail_fast
        self.dry_run = dry_run
        self.logger = logger.bind(component='MigrationOrchestrator')

    @property
    def legacy_branch(self) -> str:
        return self.state_machine.legacy_branch

    def select(self, repositories: List[Repository]) -> List[Repository]:
        """Active repositories whose default branch is the legacy branch."""
        return [
            repo
            for repo in repositories
            if repo.is_active and repo.default_branch == self.legacy_branch
        ]

    async def run(self, organization: str) -> MigrationSummary:
        """Migrate every eligible repository of ``organization``.

        Args:
            organization: Organization login

        Returns:
            Summary with one outcome per active repository, in listing order

        Raises:
            RepositoryMigrationError: On the first failed repository when
                ``fail_fast`` is set
            GitHubAPIError: If listing the repositories fails
        """
        summary = MigrationSummary(organization=organization, started_at=datetime.now())

        self.logger.info(f"Listing repos owned by '{organization}'")
        repositories = await self.lister.list(
            organization, repo_type=self.repo_type, per_page=self.per_page
        )
        active = [repo for repo in repositories if repo.is_active]
        candidates = self.select(repositories)

        summary.total_repositories = len(repositories)
        summary.active_repositories = len(active)

        self.logger.info(f'Listed {len(repositories)} repositories.')
        self.logger.trace(
            'All repositories:\n\t' + '\n\t'.join(r.name for r in repositories)
        )
        self.logger.info(
            f'{len(active)} repositories are active '
            '(public, not archived, not a fork, and not disabled).'
        )
        self.logger.info(
            f'There are {len(candidates)} active repositories whose default '
            f"branch is '{self.legacy_branch}'"
        )
        self.logger.debug('\n\t' + '\n\t'.join(r.name for r in candidates))

        migrated: Set[str] = set()
        for repo in active:
            if repo.full_name in migrated:
                continue
            migrated.add(repo.full_name)

            if repo.default_branch != self.legacy_branch:
                summary.outcomes.append(self._skipped(repo))
                continue

            if self.dry_run:
                self.logger.info(f"Would migrate '{repo.full_name}'")
                summary.outcomes.append(
                    MigrationOutcome(
                        repository=repo.full_name, status=MigrationStatus.PENDING
                    )
                )
                continue

            self.logger.info(f"Working on repo '{repo.full_name}'")
            outcome = await self.state_machine.migrate(repo)
            summary.outcomes.append(outcome)

            if outcome.status == MigrationStatus.FAILED and self.fail_fast:
                summary.completed_at = datetime.now()
                raise RepositoryMigrationError(outcome, summary)

        summary.completed_at = datetime.now()
        self.logger.info(
            'Migration finished: '
            + ', '.join(f'{count} {status}' for status, count in summary.counts.items())
        )
        return summary

    def _skipped(self, repo: Repository) -> MigrationOutcome:
        self.logger.debug(
            f"Skipping '{repo.full_name}': default branch is '{repo.default_branch}'"
        )
        now = datetime.now()
        return MigrationOutcome(
            repository=repo.full_name,
            status=MigrationStatus.SKIPPED,
            started_at=now,
            completed_at=now,
            detail=f"default branch is '{repo.default_branch}'",
        )
