"""Data models for GitHub entities."""

from .branch import Branch, CommitRef, GitObject, GitRef, RefType
from .protection import (
    BranchProtection,
    BranchProtectionUpdate,
    DismissalRestrictionsUpdate,
    PullRequestReviewsUpdate,
    PushRestrictionsUpdate,
    StatusChecksUpdate,
)
from .repository import Account, Repository, RepositoryUpdate

__all__ = [
    'Account',
    'Branch',
    'BranchProtection',
    'BranchProtectionUpdate',
    'CommitRef',
    'DismissalRestrictionsUpdate',
    'GitObject',
    'GitRef',
    'PullRequestReviewsUpdate',
    'PushRestrictionsUpdate',
    'RefType',
    'Repository',
    'RepositoryUpdate',
    'StatusChecksUpdate',
]
