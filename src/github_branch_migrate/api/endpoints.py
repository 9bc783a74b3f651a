"""Request descriptors, one per consumed GitHub endpoint.

Each descriptor knows its HTTP method, path segments, query, JSON payload and
the type its response decodes to. ``GitHubClient.load`` turns a descriptor into
an ``HTTPRequest`` and the response body into ``response_type``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Tuple

from ..models.branch import Branch, GitRef, RefType
from ..models.protection import BranchProtection, BranchProtectionUpdate
from ..models.repository import Repository, RepositoryUpdate


class APIRequest:
    """Base class for endpoint descriptors."""

    method: ClassVar[str] = 'GET'
    response_type: ClassVar[Any] = None
    # Protection endpoints need a preview media type on some API versions.
    protection_endpoint: ClassVar[bool] = False

    def path(self) -> Sequence[str]:
        raise NotImplementedError

    def query(self) -> Sequence[Tuple[str, Any]]:
        return ()

    def payload(self) -> Optional[Dict[str, Any]]:
        return None


class RepoType(str, Enum):
    ALL = 'all'
    PUBLIC = 'public'
    PRIVATE = 'private'
    FORKS = 'forks'
    SOURCES = 'sources'
    MEMBER = 'member'
    INTERNAL = 'internal'


class RepoSort(str, Enum):
    CREATED = 'created'
    UPDATED = 'updated'
    PUSHED = 'pushed'
    FULL_NAME = 'full_name'


@dataclass(frozen=True)
class ListOrgRepositories(APIRequest):
    """GET /orgs/{org}/repos"""

    response_type: ClassVar[Any] = List[Repository]

    organization: str
    repo_type: Optional[RepoType] = None
    sort: Optional[RepoSort] = None
    ascending: Optional[bool] = None
    per_page: Optional[int] = None
    page: Optional[int] = None

    def path(self) -> Sequence[str]:
        return ('orgs', self.organization, 'repos')

    def query(self) -> Sequence[Tuple[str, Any]]:
        direction = None
        if self.ascending is not None:
            direction = 'asc' if self.ascending else 'desc'
        return (
            ('type', self.repo_type.value if self.repo_type else None),
            ('sort', self.sort.value if self.sort else None),
            ('direction', direction),
            ('per_page', self.per_page),
            ('page', self.page),
        )


@dataclass(frozen=True)
class UpdateRepository(APIRequest):
    """PATCH /repos/{owner}/{repo}"""

    method: ClassVar[str] = 'PATCH'
    response_type: ClassVar[Any] = Repository

    owner: str
    repo: str
    update: RepositoryUpdate

    def path(self) -> Sequence[str]:
        return ('repos', self.owner, self.repo)

    def payload(self) -> Optional[Dict[str, Any]]:
        return self.update.model_dump(mode='json', exclude_none=True)


@dataclass(frozen=True)
class GetBranch(APIRequest):
    """GET /repos/{owner}/{repo}/branches/{branch}"""

    response_type: ClassVar[Any] = Branch

    owner: str
    repo: str
    branch: str

    def path(self) -> Sequence[str]:
        return ('repos', self.owner, self.repo, 'branches', self.branch)


@dataclass(frozen=True)
class GetBranchProtection(APIRequest):
    """GET /repos/{owner}/{repo}/branches/{branch}/protection"""

    response_type: ClassVar[Any] = BranchProtection
    protection_endpoint: ClassVar[bool] = True

    owner: str
    repo: str
    branch: str

    def path(self) -> Sequence[str]:
        return ('repos', self.owner, self.repo, 'branches', self.branch, 'protection')


@dataclass(frozen=True)
class UpdateBranchProtection(APIRequest):
    """PUT /repos/{owner}/{repo}/branches/{branch}/protection"""

    method: ClassVar[str] = 'PUT'
    protection_endpoint: ClassVar[bool] = True

    owner: str
    repo: str
    branch: str
    update: BranchProtectionUpdate

    def path(self) -> Sequence[str]:
        return ('repos', self.owner, self.repo, 'branches', self.branch, 'protection')

    def payload(self) -> Optional[Dict[str, Any]]:
        return self.update.model_dump(mode='json')


@dataclass(frozen=True)
class DeleteBranchProtection(APIRequest):
    """DELETE /repos/{owner}/{repo}/branches/{branch}/protection"""

    method: ClassVar[str] = 'DELETE'
    protection_endpoint: ClassVar[bool] = True

    owner: str
    repo: str
    branch: str

    def path(self) -> Sequence[str]:
        return ('repos', self.owner, self.repo, 'branches', self.branch, 'protection')


@dataclass(frozen=True)
class RenameBranch(APIRequest):
    """POST /repos/{owner}/{repo}/branches/{branch}/rename"""

    method: ClassVar[str] = 'POST'
    response_type: ClassVar[Any] = Branch

    owner: str
    repo: str
    branch: str
    new_name: str

    def path(self) -> Sequence[str]:
        return ('repos', self.owner, self.repo, 'branches', self.branch, 'rename')

    def payload(self) -> Optional[Dict[str, Any]]:
        return {'new_name': self.new_name}


@dataclass(frozen=True)
class GetRef(APIRequest):
    """GET /repos/{owner}/{repo}/git/ref/{heads|tags}/{name}"""

    response_type: ClassVar[Any] = GitRef

    owner: str
    repo: str
    ref_type: RefType
    name: str

    def path(self) -> Sequence[str]:
        # Ref names may contain slashes, which stay path separators here.
        return ('repos', self.owner, self.repo, 'git', 'ref', self.ref_type.value) + tuple(
            self.name.split('/')
        )


@dataclass(frozen=True)
class CreateRef(APIRequest):
    """POST /repos/{owner}/{repo}/git/refs"""

    method: ClassVar[str] = 'POST'
    response_type: ClassVar[Any] = GitRef

    owner: str
    repo: str
    ref_type: RefType
    name: str
    sha: str

    def path(self) -> Sequence[str]:
        return ('repos', self.owner, self.repo, 'git', 'refs')

    def payload(self) -> Optional[Dict[str, Any]]:
        return {'ref': f'refs/{self.ref_type.value}/{self.name}', 'sha': self.sha}
