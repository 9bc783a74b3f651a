"""GitHub API exceptions."""

from typing import Optional


class GitHubAPIError(Exception):
    """Base exception for GitHub API errors."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: bytes = b'',
    ):
        """Initialize GitHub API error.

        Args:
            message: Error message
            status_code: HTTP status code
            response_body: Raw response body from the API
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body

    @property
    def response_text(self) -> str:
        """Response body decoded for display."""
        return self.response_body.decode('utf-8', errors='replace')


class GitHubAuthenticationError(GitHubAPIError):
    """Authentication error (401) with GitHub API."""

    pass


class GitHubNotFoundError(GitHubAPIError):
    """Resource not found error."""

    pass


class GitHubStatusError(GitHubAPIError):
    """Any other non-2xx response."""

    pass


class GitHubTransportError(GitHubAPIError):
    """Connection failure, timeout or unparseable response."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class GitHubDecodeError(GitHubAPIError):
    """Response body did not match the expected shape."""

    def __init__(
        self, message: str, response_body: bytes = b'', cause: Optional[Exception] = None
    ):
        super().__init__(message, response_body=response_body)
        self.cause = cause
