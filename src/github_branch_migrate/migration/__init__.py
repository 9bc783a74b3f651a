"""Migration engine, orchestrator and per-repository state machine."""

from .engine import MigrationEngine
from .orchestrator import (
    MigrationOrchestrator,
    MigrationSummary,
    RepositoryMigrationError,
)
from .rules import (
    derive_new_branch_protection,
    locked_branch_protection,
    promoted_repository_settings,
)
from .state_machine import (
    BranchMigrationStateMachine,
    MigrationOutcome,
    MigrationStage,
    MigrationStatus,
)

__all__ = [
    'BranchMigrationStateMachine',
    'MigrationEngine',
    'MigrationOrchestrator',
    'MigrationOutcome',
    'MigrationStage',
    'MigrationStatus',
    'MigrationSummary',
    'RepositoryMigrationError',
    'derive_new_branch_protection',
    'locked_branch_protection',
    'promoted_repository_settings',
]
