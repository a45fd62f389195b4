from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from .models import ApiError, LoginError, SfResponse


class SalesforceError(RuntimeError):
    """Base class for every error raised by sfclient."""


class RequestFailedError(SalesforceError):
    """Raised when the HTTP transport fails before a response is received."""


class AssertionCreationError(SalesforceError):
    """Raised when the JWT bearer assertion cannot be built or signed."""


class KeyLoadError(SalesforceError):
    """Raised when a PEM key file cannot be read."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"Failed to load key from {path}: {reason}")


class InvalidSettingError(SalesforceError, ValueError):
    """Raised when a configuration value is present but not recognised."""


class MissingCredentialsError(SalesforceError):
    """Raised when the required Salesforce env vars are not present."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__("Missing required environment variables: " + ", ".join(missing))


class _ResponseError(SalesforceError):
    prefix = "Request failed"

    def __init__(self, response: SfResponse[Any]):
        self.response = response
        super().__init__(f"{self.prefix}: received response with {response.status_code} status")

    @property
    def status_code(self) -> int:
        return self.response.status_code


class LoginFailureError(_ResponseError):
    """Token or userinfo request rejected; body is a LoginError when parseable."""

    prefix = "Login request failed"
    response: SfResponse[LoginError]


class SessionFailureError(_ResponseError):
    """Userinfo request with a session token rejected; body is the raw text."""

    prefix = "Session request failed"
    response: SfResponse[str]


class ApiFailureError(_ResponseError):
    """Object endpoint answered with an unexpected status."""

    prefix = "API request failed"
    response: SfResponse[List[ApiError]]

    @property
    def errors(self) -> List[ApiError]:
        return self.response.body or []


class UnexpectedBodyError(SalesforceError):
    """Response body could not be parsed as the expected type.

    The raw text is kept on ``body`` so callers can inspect payloads the
    declared type did not account for.
    """

    def __init__(self, body: str, error: Exception, status_code: Optional[int] = None):
        self.body = body
        self.error = error
        self.status_code = status_code
        super().__init__(f"Failed to parse response body: {error}")
