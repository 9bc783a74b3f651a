"""GitHub REST API access: transport, authorization and typed client."""

from .auth import AuthorizationProvider, Credentials
from .client import GitHubClient, GitHubClientFactory
from .exceptions import (
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubDecodeError,
    GitHubNotFoundError,
    GitHubStatusError,
    GitHubTransportError,
)
from .lister import RepositoryLister
from .transport import AiohttpTransport, HTTPRequest, Transport

__all__ = [
    'AiohttpTransport',
    'AuthorizationProvider',
    'Credentials',
    'GitHubAPIError',
    'GitHubAuthenticationError',
    'GitHubClient',
    'GitHubClientFactory',
    'GitHubDecodeError',
    'GitHubNotFoundError',
    'GitHubStatusError',
    'GitHubTransportError',
    'HTTPRequest',
    'RepositoryLister',
    'Transport',
]
