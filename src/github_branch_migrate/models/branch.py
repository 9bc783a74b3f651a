"""Branch and git reference models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .protection import BranchProtection


class CommitRef(BaseModel):
    """Head commit of a branch."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    sha: str = Field(..., description='Commit SHA')
    url: Optional[str] = Field(default=None, description='Commit API URL')


class Branch(BaseModel):
    """GitHub branch."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    name: str = Field(..., description='Branch name')
    commit: CommitRef = Field(..., description='Head commit')
    protected: Optional[bool] = Field(default=None, description='Branch is protected')
    protection: Optional[BranchProtection] = Field(
        default=None, description='Embedded protection summary'
    )
    protection_url: Optional[str] = Field(default=None)


class RefType(str, Enum):
    """Namespace of a git reference."""

    BRANCH = 'heads'
    TAG = 'tags'


class GitObject(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')

    type: str
    sha: str
    url: Optional[str] = None


class GitRef(BaseModel):
    """Named pointer to a git object."""

    model_config = ConfigDict(frozen=True, extra='ignore')

    ref: str = Field(..., description='Full ref name, e.g. refs/heads/main')
    node_id: Optional[str] = None
    url: Optional[str] = None
    object: GitObject
