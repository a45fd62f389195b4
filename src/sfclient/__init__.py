"""Typed client for the Salesforce REST API."""

from importlib.metadata import PackageNotFoundError, version

from .api import SalesforceClient
from .authenticator import (
    Authenticator,
    AuthorizationServer,
    JwtAuthenticator,
    LoginClaims,
    SessionAuthenticator,
)
from .config import SFConfig
from .exceptions import (
    ApiFailureError,
    AssertionCreationError,
    InvalidSettingError,
    KeyLoadError,
    LoginFailureError,
    MissingCredentialsError,
    RequestFailedError,
    SalesforceError,
    SessionFailureError,
    UnexpectedBodyError,
)
from .models import (
    AccessToken,
    ApiError,
    CreateObjectResponse,
    ExternalId,
    LoginError,
    ObjectDescription,
    ObjectDescriptionResponse,
    ObjectDescriptionsResponse,
    QueryRecord,
    QueryRecordAttributes,
    QueryResponse,
    SfResponse,
    UserInfo,
)

try:
    __version__ = version("sfclient")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "unknown"

__all__ = [
    "AccessToken",
    "ApiError",
    "ApiFailureError",
    "AssertionCreationError",
    "Authenticator",
    "AuthorizationServer",
    "CreateObjectResponse",
    "ExternalId",
    "InvalidSettingError",
    "JwtAuthenticator",
    "KeyLoadError",
    "LoginClaims",
    "LoginError",
    "LoginFailureError",
    "MissingCredentialsError",
    "ObjectDescription",
    "ObjectDescriptionResponse",
    "ObjectDescriptionsResponse",
    "QueryRecord",
    "QueryRecordAttributes",
    "QueryResponse",
    "RequestFailedError",
    "SFConfig",
    "SalesforceClient",
    "SalesforceError",
    "SessionAuthenticator",
    "SessionFailureError",
    "SfResponse",
    "UnexpectedBodyError",
    "UserInfo",
    "__version__",
]
