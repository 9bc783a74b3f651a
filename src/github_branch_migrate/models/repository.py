"""Repository entity models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Account(BaseModel):
    """User or organization account, as embedded in other resources."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    login: str = Field(..., description='Account login')
    id: Optional[int] = Field(default=None, description='Account ID')
    type: Optional[str] = Field(default=None, description='User or Organization')


class Repository(BaseModel):
    """GitHub repository snapshot, fetched once per run and never mutated."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    id: Optional[int] = Field(default=None, description='Repository ID')
    name: str = Field(..., description='Repository name')
    full_name: str = Field(..., description='owner/name')
    owner: Account = Field(..., description='Owning account')

    default_branch: str = Field(..., description='Default branch name')

    # Flags
    archived: bool = Field(default=False, description='Repository is archived')
    private: bool = Field(default=False, description='Repository is private')
    fork: bool = Field(default=False, description='Repository is a fork')
    disabled: bool = Field(default=False, description='Repository is disabled')

    # Merge settings
    allow_merge_commit: Optional[bool] = Field(default=None)
    allow_rebase_merge: Optional[bool] = Field(default=None)
    allow_squash_merge: Optional[bool] = Field(default=None)
    delete_branch_on_merge: Optional[bool] = Field(default=None)

    @property
    def is_active(self) -> bool:
        """Public, not archived, not a fork and not disabled."""
        return not (self.archived or self.private or self.fork or self.disabled)


class RepositoryUpdate(BaseModel):
    """Partial repository settings for ``PATCH /repos/{owner}/{repo}``.

    Fields left as ``None`` are not sent.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    homepage: Optional[str] = None
    private: Optional[bool] = None
    has_issues: Optional[bool] = None
    has_projects: Optional[bool] = None
    has_wiki: Optional[bool] = None
    is_template: Optional[bool] = None
    default_branch: Optional[str] = None
    allow_squash_merge: Optional[bool] = None
    allow_merge_commit: Optional[bool] = None
    allow_rebase_merge: Optional[bool] = None
    delete_branch_on_merge: Optional[bool] = None
    archived: Optional[bool] = None
