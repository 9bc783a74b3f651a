"""Shared fixtures."""

import pytest

from github_branch_migrate.api.auth import AuthorizationProvider, Credentials
from github_branch_migrate.api.client import GitHubClient

from .helpers import API_URL, ScriptedTransport


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()


@pytest.fixture
def client(transport: ScriptedTransport) -> GitHubClient:
    provider = AuthorizationProvider(
        transport, credentials=Credentials.basic('octocat', 'secret')
    )
    return GitHubClient(API_URL, provider)
