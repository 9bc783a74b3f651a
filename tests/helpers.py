"""Scripted transport and payload builders shared by the tests."""

import json
from http import HTTPStatus
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlsplit

from github_branch_migrate.api.transport import (
    HTTPFailure,
    HTTPRequest,
    Success,
    Transport,
    TransportOutcome,
)

API_URL = 'https://api.github.com'


def ok(data=None) -> Success:
    """2xx outcome with a JSON body (empty body for None)."""
    return Success(body=b'' if data is None else json.dumps(data).encode())


def fail(status: int, message: str = '') -> HTTPFailure:
    body = json.dumps({'message': message}).encode() if message else b''
    return HTTPFailure(status=HTTPStatus(status), body=body)


def repo_payload(
    name: str,
    default_branch: str = 'master',
    owner: str = 'acme',
    archived: bool = False,
    private: bool = False,
    fork: bool = False,
    disabled: bool = False,
) -> dict:
    return {
        'id': abs(hash((owner, name))) % 100000,
        'name': name,
        'full_name': f'{owner}/{name}',
        'owner': {'login': owner, 'id': 1, 'type': 'Organization'},
        'default_branch': default_branch,
        'archived': archived,
        'private': private,
        'fork': fork,
        'disabled': disabled,
        'html_url': f'https://github.com/{owner}/{name}',
    }


def branch_payload(name: str, sha: str = 'a' * 40) -> dict:
    return {
        'name': name,
        'commit': {'sha': sha, 'url': f'{API_URL}/commits/{sha}'},
        'protected': False,
    }


def protection_payload() -> dict:
    return {
        'url': f'{API_URL}/repos/acme/A/branches/master/protection',
        'required_status_checks': {
            'strict': False,
            'contexts': ['ci/build', 'ci/test'],
        },
        'enforce_admins': {'enabled': True},
        'required_pull_request_reviews': {
            'dismissal_restrictions': {
                'users': [{'login': 'octocat', 'id': 1}],
                'teams': [{'id': 7, 'name': 'Core Team', 'slug': 'core-team'}],
            },
            'dismiss_stale_reviews': True,
            'require_code_owner_reviews': True,
            'required_approving_review_count': 3,
        },
        'restrictions': {
            'users': [{'login': 'release-bot', 'id': 2}],
            'teams': [],
            'apps': [{'id': 9, 'name': 'Deployer', 'slug': 'deployer'}],
        },
        'required_linear_history': {'enabled': True},
        'allow_force_pushes': {'enabled': True},
        'allow_deletions': {'enabled': False},
    }


class ScriptedTransport(Transport):
    """Answers requests from per-route queues and records every request.

    Each route holds a list of outcomes consumed in order; the last one is
    repeated. Unknown routes answer 404.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[TransportOutcome]] = {}
        self.requests: List[HTTPRequest] = []
        self.closed = False

    def add(self, method: str, path: str, *outcomes: TransportOutcome) -> None:
        self.routes.setdefault((method, path), []).extend(outcomes)

    async def send(self, request: HTTPRequest) -> TransportOutcome:
        self.requests.append(request)
        queue = self.routes.get((request.method, urlsplit(request.url).path))
        if not queue:
            return fail(404, 'Not Found')
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def calls(self, method: Optional[str] = None, path: Optional[str] = None):
        return [
            r
            for r in self.requests
            if (method is None or r.method == method)
            and (path is None or urlsplit(r.url).path == path)
        ]

    def writes(self) -> List[HTTPRequest]:
        return [r for r in self.requests if r.method != 'GET']

    async def close(self) -> None:
        self.closed = True


def body_of(request: HTTPRequest) -> dict:
    return json.loads(request.body)
