"""Credential injection and 401 handling for outgoing requests."""

import inspect
from typing import Awaitable, Callable, Optional, Union

import aiohttp
from aiohttp import hdrs
from loguru import logger

from .transport import HTTPFailure, HTTPRequest, Transport, TransportOutcome


class Credentials:
    """Username/secret pair kept only in its encoded header form."""

    __slots__ = ('header_value',)

    def __init__(self, header_value: str):
        self.header_value = header_value

    @classmethod
    def basic(cls, username: str, password: str) -> 'Credentials':
        """Encode HTTP Basic credentials; the raw password is not kept."""
        return cls(aiohttp.BasicAuth(username, password).encode())

    @classmethod
    def token(cls, token: str) -> 'Credentials':
        return cls(f'token {token}')

    def __repr__(self) -> str:
        return 'Credentials(<redacted>)'


RefreshResult = Optional[Union[Credentials, str]]
RefreshCallback = Callable[
    [HTTPFailure], Union[RefreshResult, Awaitable[RefreshResult]]
]


class AuthorizationProvider(Transport):
    """Transport wrapper that authorizes requests.

    The cached credential is attached to every request that does not already
    carry an ``Authorization`` header. When the server answers 401 and a
    refresh callback is configured, the callback receives the failed response;
    a returned credential replaces the cache and the request is retried with
    it, while ``None`` clears the cache and the 401 is returned as final.

    A retried request always gets the new credential, even if the caller set
    its own ``Authorization`` header on the first attempt. Retries stop after
    ``max_refreshes`` successful refreshes for one request.
    """

    def __init__(
        self,
        base: Transport,
        credentials: Optional[Credentials] = None,
        refresh_callback: Optional[RefreshCallback] = None,
        max_refreshes: int = 1,
    ):
        """Initialize authorization provider.

        Args:
            base: Transport that performs the actual send
            credentials: Initial credentials sent with every request
            refresh_callback: Hook invoked on 401 to obtain new credentials
            max_refreshes: Maximum credential refreshes per request
        """
        if max_refreshes < 0:
            raise ValueError('max_refreshes must not be negative')

        self.base = base
        self._authorization = credentials.header_value if credentials else None
        self.refresh_callback = refresh_callback
        self.max_refreshes = max_refreshes

    @property
    def has_credentials(self) -> bool:
        return self._authorization is not None

    async def send(self, request: HTTPRequest) -> TransportOutcome:
        refreshes = 0

        while True:
            outgoing = request
            if self._authorization is not None and not request.has_header(
                hdrs.AUTHORIZATION
            ):
                outgoing = request.with_header(hdrs.AUTHORIZATION, self._authorization)

            outcome = await self.base.send(outgoing)

            if not (isinstance(outcome, HTTPFailure) and outcome.is_unauthorized):
                return outcome
            if self.refresh_callback is None:
                return outcome
            if refreshes >= self.max_refreshes:
                logger.warning(
                    f'Authorization still rejected after {refreshes} credential refresh(es)'
                )
                return outcome

            new_credentials = await self._refresh(outcome)
            if new_credentials is None:
                logger.debug('Credential refresh declined; clearing cached authorization')
                self._authorization = None
                return outcome

            logger.info('Retrying request with refreshed credentials')
            self._authorization = new_credentials
            request = request.without_header(hdrs.AUTHORIZATION)
            refreshes += 1

    async def _refresh(self, failure: HTTPFailure) -> Optional[str]:
        result = self.refresh_callback(failure)
        if inspect.isawaitable(result):
            result = await result
        if result is None:
            return None
        if isinstance(result, Credentials):
            return result.header_value
        return result

    async def close(self) -> None:
        await self.base.close()
