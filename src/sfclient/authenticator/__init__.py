"""Token acquisition: JWT bearer assertions or pre-existing session tokens."""

from .base import Authenticator, AuthorizationServer
from .jwt_bearer import JwtAuthenticator, LoginClaims, create_assertion
from .session import SessionAuthenticator

__all__ = [
    "Authenticator",
    "AuthorizationServer",
    "JwtAuthenticator",
    "LoginClaims",
    "SessionAuthenticator",
    "create_assertion",
]
