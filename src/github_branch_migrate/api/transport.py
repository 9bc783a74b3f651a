"""HTTP transport for the GitHub REST API.

A transport performs exactly one network call per ``send`` and reports the
result as a classified outcome instead of raising. Retries, authorization
and decoding are layered on top (see ``auth`` and ``client``).
"""

import asyncio
from dataclasses import dataclass, field, replace
from http import HTTPStatus
from typing import Any, Dict, Optional, Tuple, Union

import aiohttp
from aiohttp import hdrs
from loguru import logger

DEFAULT_TIMEOUT = 60.0
DEFAULT_ACCEPT = 'application/vnd.github.v3+json'
DEFAULT_USER_AGENT = 'github-branch-migrate/0.1.0'


@dataclass(frozen=True)
class HTTPRequest:
    """A fully built request, ready to be sent."""

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    params: Tuple[Tuple[str, str], ...] = ()
    body: Optional[bytes] = None

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        for key, value in self.headers.items():
            if key.lower() == name.lower():
                return value
        return None

    def has_header(self, name: str) -> bool:
        return self.header(name) is not None

    def with_header(self, name: str, value: str) -> 'HTTPRequest':
        headers = {
            k: v for k, v in self.headers.items() if k.lower() != name.lower()
        }
        headers[name] = value
        return replace(self, headers=headers)

    def without_header(self, name: str) -> 'HTTPRequest':
        headers = {
            k: v for k, v in self.headers.items() if k.lower() != name.lower()
        }
        return replace(self, headers=headers)


@dataclass(frozen=True)
class Success:
    """2xx response."""

    body: bytes = b''


@dataclass(frozen=True)
class HTTPFailure:
    """Response with a status outside 200-299."""

    status: HTTPStatus
    body: bytes = b''

    @property
    def is_unauthorized(self) -> bool:
        return self.status == HTTPStatus.UNAUTHORIZED


@dataclass(frozen=True)
class TransportError:
    """The request produced no classifiable HTTP response."""

    cause: BaseException


TransportOutcome = Union[Success, HTTPFailure, TransportError]


class Transport:
    """Interface for anything that can send an ``HTTPRequest``."""

    async def send(self, request: HTTPRequest) -> TransportOutcome:
        raise NotImplementedError

    async def close(self) -> None:
        """Release any resources held by the transport."""


class AiohttpTransport(Transport):
    """Transport backed by a shared ``aiohttp.ClientSession``."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        default_headers: Optional[Dict[str, str]] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        """Initialize the transport.

        Args:
            timeout: Per-request timeout in seconds
            default_headers: Headers added to requests that do not set them
            session: Existing session to use instead of creating one
        """
        self.timeout = timeout
        self.default_headers = default_headers or {
            hdrs.ACCEPT: DEFAULT_ACCEPT,
            hdrs.USER_AGENT: DEFAULT_USER_AGENT,
        }
        self._session = session
        self._owns_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        # Created lazily so the session binds to the running event loop.
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    def _prepare(self, request: HTTPRequest) -> HTTPRequest:
        for name, value in self.default_headers.items():
            if not request.has_header(name):
                request = request.with_header(name, value)
        if request.body is not None and not request.has_header(hdrs.CONTENT_TYPE):
            request = request.with_header(hdrs.CONTENT_TYPE, 'application/json')
        return request

    async def send(self, request: HTTPRequest) -> TransportOutcome:
        """Send one request and classify the result.

        Args:
            request: Request to send

        Returns:
            ``Success``, ``HTTPFailure`` or ``TransportError``
        """
        request = self._prepare(request)
        logger.trace(f'{request.method} {request.url} params={list(request.params)}')

        kwargs: Dict[str, Any] = {
            'headers': request.headers,
            'allow_redirects': False,
        }
        if request.params:
            kwargs['params'] = list(request.params)
        if request.body is not None:
            kwargs['data'] = request.body

        try:
            async with self.session.request(
                request.method, request.url, **kwargs
            ) as response:
                status_code = response.status
                body = await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.debug(f'Transport error during {request.method} {request.url}: {e!r}')
            return TransportError(cause=e)

        if 200 <= status_code < 300:
            return Success(body=body)

        try:
            status = HTTPStatus(status_code)
        except ValueError as e:
            return TransportError(cause=e)

        logger.debug(f'{request.method} {request.url} -> {status_code}')
        return HTTPFailure(status=status, body=body)

    async def close(self) -> None:
        """Close the underlying session if this transport created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            logger.debug('HTTP session closed')
        self._session = None

    async def __aenter__(self) -> 'AiohttpTransport':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
