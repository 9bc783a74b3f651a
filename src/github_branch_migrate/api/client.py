"""GitHub API client implementation."""

import json
from http import HTTPStatus
from typing import Any, Dict, List, Optional, TypeVar
from urllib.parse import quote

from aiohttp import hdrs
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from ..config.config import GitHubConfig
from ..models.branch import Branch, GitRef, RefType
from ..models.protection import BranchProtection, BranchProtectionUpdate
from ..models.repository import Repository, RepositoryUpdate
from .auth import AuthorizationProvider, Credentials
from .endpoints import (
    APIRequest,
    CreateRef,
    DeleteBranchProtection,
    GetBranch,
    GetBranchProtection,
    GetRef,
    ListOrgRepositories,
    RenameBranch,
    RepoSort,
    RepoType,
    UpdateBranchProtection,
    UpdateRepository,
)
from .exceptions import (
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubDecodeError,
    GitHubNotFoundError,
    GitHubStatusError,
    GitHubTransportError,
)
from .transport import (
    AiohttpTransport,
    HTTPFailure,
    HTTPRequest,
    Success,
    Transport,
    TransportError,
)

DEFAULT_PROTECTION_ACCEPT = 'application/vnd.github.luke-cage-preview+json'

T = TypeVar('T')


def classify_failure(failure: HTTPFailure) -> GitHubAPIError:
    """Map a non-2xx outcome to the matching exception.

    Args:
        failure: Failed transport outcome

    Returns:
        Exception carrying the status code and raw body
    """
    message = _error_message(failure)
    kwargs = {'status_code': int(failure.status), 'response_body': failure.body}

    if failure.status == HTTPStatus.UNAUTHORIZED:
        return GitHubAuthenticationError(f'Authentication failed: {message}', **kwargs)
    if failure.status == HTTPStatus.NOT_FOUND:
        return GitHubNotFoundError(f'Resource not found: {message}', **kwargs)
    return GitHubStatusError(f'API request failed: {message}', **kwargs)


def _error_message(failure: HTTPFailure) -> str:
    try:
        data = json.loads(failure.body)
        if isinstance(data, dict) and data.get('message'):
            return f'HTTP {int(failure.status)}: {data["message"]}'
    except ValueError:
        pass
    return f'HTTP {int(failure.status)} {failure.status.phrase}'


class GitHubClient:
    """Typed GitHub REST client.

    Every call goes through ``load``, which builds the HTTP request from an
    endpoint descriptor, sends it via the configured transport and decodes the
    response body into the descriptor's ``response_type``.
    """

    def __init__(
        self,
        base_url: str,
        transport: Transport,
        protection_accept: Optional[str] = DEFAULT_PROTECTION_ACCEPT,
    ):
        """Initialize GitHub client.

        Args:
            base_url: API root, e.g. ``https://api.github.com``
            transport: Transport used for every call (usually an
                ``AuthorizationProvider``)
            protection_accept: Accept header for branch protection endpoints,
                or None to use the transport default
        """
        self.base_url = base_url.rstrip('/')
        self.transport = transport
        self.protection_accept = protection_accept
        self._adapters: Dict[Any, TypeAdapter] = {}

    def build_request(self, request: APIRequest) -> HTTPRequest:
        """Serialize an endpoint descriptor into an ``HTTPRequest``.

        Args:
            request: Endpoint descriptor

        Returns:
            Request ready for the transport
        """
        path = '/'.join(quote(str(segment), safe='') for segment in request.path())
        params = tuple(
            (name, _query_value(value))
            for name, value in request.query()
            if value is not None
        )

        headers: Dict[str, str] = {}
        if request.protection_endpoint and self.protection_accept:
            headers[hdrs.ACCEPT] = self.protection_accept

        payload = request.payload()
        body = json.dumps(payload).encode('utf-8') if payload is not None else None
        if body is not None:
            headers[hdrs.CONTENT_TYPE] = 'application/json'

        return HTTPRequest(
            method=request.method,
            url=f'{self.base_url}/{path}',
            headers=headers,
            params=params,
            body=body,
        )

    async def load(self, request: APIRequest) -> Any:
        """Perform the call described by ``request``.

        Args:
            request: Endpoint descriptor

        Returns:
            Decoded response, or None for endpoints without a response body

        Raises:
            GitHubAuthenticationError: On 401
            GitHubNotFoundError: On 404
            GitHubStatusError: On any other non-2xx status
            GitHubTransportError: On connection failure or timeout
            GitHubDecodeError: If the body does not match ``response_type``
        """
        http_request = self.build_request(request)
        logger.debug(f'{http_request.method} {http_request.url}')

        outcome = await self.transport.send(http_request)

        if isinstance(outcome, TransportError):
            raise GitHubTransportError(
                f'Network error during {http_request.method} {http_request.url}: '
                f'{outcome.cause}',
                cause=outcome.cause,
            )
        if isinstance(outcome, HTTPFailure):
            raise classify_failure(outcome)
        if not isinstance(outcome, Success):
            raise GitHubTransportError(f'Unexpected transport outcome: {outcome!r}')

        if request.response_type is None:
            return None
        return self._decode(request.response_type, outcome.body)

    def _decode(self, response_type: Any, body: bytes) -> Any:
        adapter = self._adapters.get(response_type)
        if adapter is None:
            adapter = self._adapters[response_type] = TypeAdapter(response_type)
        try:
            return adapter.validate_json(body)
        except ValidationError as e:
            raise GitHubDecodeError(
                f'Unexpected response shape: {e.error_count()} validation error(s)',
                response_body=body,
                cause=e,
            ) from e

    async def list_org_repositories(
        self,
        organization: str,
        repo_type: Optional[RepoType] = None,
        sort: Optional[RepoSort] = None,
        ascending: Optional[bool] = None,
        per_page: Optional[int] = None,
        page: Optional[int] = None,
    ) -> List[Repository]:
        return await self.load(
            ListOrgRepositories(
                organization=organization,
                repo_type=repo_type,
                sort=sort,
                ascending=ascending,
                per_page=per_page,
                page=page,
            )
        )

    async def update_repository(
        self, repository: Repository, update: RepositoryUpdate
    ) -> Repository:
        return await self.load(
            UpdateRepository(
                owner=repository.owner.login, repo=repository.name, update=update
            )
        )

    async def get_branch(self, repository: Repository, branch: str) -> Branch:
        return await self.load(
            GetBranch(owner=repository.owner.login, repo=repository.name, branch=branch)
        )

    async def get_branch_protection(
        self, repository: Repository, branch: str
    ) -> BranchProtection:
        return await self.load(
            GetBranchProtection(
                owner=repository.owner.login, repo=repository.name, branch=branch
            )
        )

    async def update_branch_protection(
        self, repository: Repository, branch: str, update: BranchProtectionUpdate
    ) -> None:
        await self.load(
            UpdateBranchProtection(
                owner=repository.owner.login,
                repo=repository.name,
                branch=branch,
                update=update,
            )
        )

    async def delete_branch_protection(self, repository: Repository, branch: str) -> None:
        await self.load(
            DeleteBranchProtection(
                owner=repository.owner.login, repo=repository.name, branch=branch
            )
        )

    async def rename_branch(
        self, repository: Repository, branch: str, new_name: str
    ) -> Branch:
        return await self.load(
            RenameBranch(
                owner=repository.owner.login,
                repo=repository.name,
                branch=branch,
                new_name=new_name,
            )
        )

    async def get_ref(
        self, repository: Repository, name: str, ref_type: RefType = RefType.BRANCH
    ) -> GitRef:
        return await self.load(
            GetRef(
                owner=repository.owner.login,
                repo=repository.name,
                ref_type=ref_type,
                name=name,
            )
        )

    async def create_ref(
        self,
        repository: Repository,
        name: str,
        sha: str,
        ref_type: RefType = RefType.BRANCH,
    ) -> GitRef:
        return await self.load(
            CreateRef(
                owner=repository.owner.login,
                repo=repository.name,
                ref_type=ref_type,
                name=name,
                sha=sha,
            )
        )

    async def close(self) -> None:
        """Close the underlying transport."""
        await self.transport.close()
        logger.info('GitHub client session closed')

    async def __aenter__(self) -> 'GitHubClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


class GitHubClientFactory:
    """Factory for creating GitHub API clients."""

    @staticmethod
    def create_client(config: GitHubConfig) -> GitHubClient:
        """Create GitHub client from configuration.

        Args:
            config: GitHub instance configuration

        Returns:
            Client whose transport authorizes with the configured credentials

        Raises:
            GitHubAuthenticationError: If only one of username/password is set
        """
        if bool(config.username) != bool(config.password):
            raise GitHubAuthenticationError(
                'Both username and password must be provided'
            )

        credentials = None
        if config.username and config.password:
            credentials = Credentials.basic(config.username, config.password)

        transport = AiohttpTransport(
            timeout=config.timeout,
            default_headers={
                hdrs.ACCEPT: config.accept,
                hdrs.USER_AGENT: config.user_agent,
            },
        )
        provider = AuthorizationProvider(
            base=transport,
            credentials=credentials,
            max_refreshes=config.max_credential_refreshes,
        )

        logger.info(f'Initialized GitHub client for {config.url}')
        return GitHubClient(
            config.url, provider, protection_accept=config.protection_accept or None
        )
