"""Error taxonomy for glp.

Every fatal error carries the process exit code the CLI maps it to.
"""

from typing import ClassVar

MAX_BODY_LENGTH = 200


class GlpError(Exception):
    """Base class for all glp errors."""

    exit_code: ClassVar[int] = 1


class ConfigError(GlpError):
    """Raised when the token or project cannot be resolved."""


class MissingTokenError(ConfigError):
    """Raised when the API token environment variable is absent or empty."""

    exit_code = 3


class MissingProjectError(ConfigError):
    """Raised when neither a project argument nor a marker file is present."""

    exit_code = 4


class InvalidProjectError(ConfigError):
    """Raised when the project argument or marker file content is malformed."""

    exit_code = 5


class NetworkError(GlpError):
    """Raised on transport-level failures (connection refused, timeouts, ...)."""

    exit_code = 6


class ApiError(GlpError):
    """Raised when the GitLab API answers with an unexpected response."""

    exit_code = 8

    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"GitLab API returned {status}: {collapse_body(body)}")


class AuthError(ApiError):
    """Raised when the GitLab API rejects the token (HTTP 401/403)."""

    exit_code = 7


def collapse_body(body: str) -> str:
    """Squash a response body onto a single, bounded line."""
    text = " ".join(body.split())
    if len(text) > MAX_BODY_LENGTH:
        return text[: MAX_BODY_LENGTH - 3] + "..."
    return text or "<empty body>"
