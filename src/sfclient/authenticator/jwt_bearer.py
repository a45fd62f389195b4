"""OAuth 2.0 JWT bearer flow for Salesforce.

A connected app trusts the certificate matching our RSA private key. We sign a
short-lived assertion naming the app (``iss``), the login host (``aud``) and
the user (``sub``) and trade it at ``/services/oauth2/token`` for an access
token. No browser, no refresh token.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import jwt
import requests

from ..exceptions import (
    AssertionCreationError,
    KeyLoadError,
    LoginFailureError,
    MissingCredentialsError,
)
from ..models import AccessToken, LoginError, SfResponse, UserInfo
from ..util import bearer, parse_body, send
from .base import AuthorizationServer, normalize_instance

_logger = logging.getLogger(__name__)

GRANT_TYPE = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME = 60  # seconds
ALGORITHM = "RS256"


def unescape_pem(value: str) -> str:
    """Single-line PEMs in .env files carry literal "\\n" sequences."""
    return value.replace("\\n", "\n")


def _require_env(*names: str) -> Dict[str, str]:
    values = {name: os.getenv(name) for name in names}
    missing = [name for name, v in values.items() if not v]
    if missing:
        raise MissingCredentialsError(missing)
    return values  # type: ignore[return-value]


@dataclass(frozen=True)
class LoginClaims:
    """Claim template; ``exp`` is filled in each time an assertion is signed."""

    iss: str
    aud: str
    sub: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "aud", str(self.aud))

    @classmethod
    def from_env(cls, aud: Union[AuthorizationServer, str]) -> LoginClaims:
        env = _require_env("SALESFORCE_CLIENT_ID", "SALESFORCE_USER")
        return cls(env["SALESFORCE_CLIENT_ID"], aud, env["SALESFORCE_USER"])

    def payload(self, now: Optional[float] = None) -> Dict[str, Any]:
        issued = int(now if now is not None else time.time())
        return {
            "iss": self.iss,
            "aud": self.aud,
            "sub": self.sub,
            "exp": issued + ASSERTION_LIFETIME,
        }


def create_assertion(claims: LoginClaims, key: bytes, now: Optional[float] = None) -> str:
    """Sign ``claims`` with the PEM-encoded RSA ``key``."""
    try:
        return jwt.encode(claims.payload(now), key, algorithm=ALGORITHM)
    except (jwt.PyJWTError, ValueError, TypeError) as e:
        raise AssertionCreationError(f"Failed to create authentication assertion: {e}") from e


class JwtAuthenticator:
    """Acquire tokens with a signed JWT assertion."""

    def __init__(
        self,
        instance_domain: str,
        claims: LoginClaims,
        key: bytes,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.instance = normalize_instance(instance_domain)
        self.claims = claims
        self.key = key
        self.session = session or requests.Session()

    @classmethod
    def from_env(
        cls, claims: LoginClaims, session: Optional[requests.Session] = None
    ) -> JwtAuthenticator:
        """Build from ``SALESFORCE_DOMAIN`` and ``SALESFORCE_KEY`` (PEM text)."""
        env = _require_env("SALESFORCE_DOMAIN", "SALESFORCE_KEY")
        key = unescape_pem(env["SALESFORCE_KEY"]).encode()
        return cls(env["SALESFORCE_DOMAIN"], claims, key, session)

    def set_key(self, key: bytes) -> JwtAuthenticator:
        self.key = key
        return self

    def load_rsa_pem(self, path: Union[str, Path]) -> JwtAuthenticator:
        try:
            self.key = Path(path).read_bytes()
        except OSError as e:
            raise KeyLoadError(str(path), e.strerror or str(e)) from e
        _logger.debug("Loaded RSA key from %s", path)
        return self

    @property
    def token_url(self) -> str:
        return f"{self.instance}/services/oauth2/token"

    @property
    def userinfo_url(self) -> str:
        return f"{self.instance}/services/oauth2/userinfo"

    def get_token(self) -> AccessToken:
        form = {
            "grant_type": GRANT_TYPE,
            "assertion": create_assertion(self.claims, self.key),
            "format": "json",
        }
        _logger.info("Requesting access token for %s from %s", self.claims.sub, self.token_url)
        headers, status, text = send(self.session, "POST", self.token_url, data=form)
        if status != 200:
            raise self._login_failure(headers, status, text)
        token = parse_body(text, AccessToken, status)
        _logger.info("Access token issued for instance %s", token.instance_url)
        return token

    def user_info(self) -> UserInfo:
        token = self.get_token()
        headers, status, text = send(
            self.session, "GET", self.userinfo_url, headers=bearer(token.access_token)
        )
        if status != 200:
            raise self._login_failure(headers, status, text)
        return parse_body(text, UserInfo, status)

    @staticmethod
    def _login_failure(headers, status: int, text: str) -> LoginFailureError:
        try:
            body: Optional[LoginError] = LoginError.model_validate_json(text)
        except ValueError:
            body = None
        if body is not None:
            _logger.warning("Login failed (%s): %s %s", status, body.error, body.error_description)
        else:
            _logger.warning("Login failed (%s) with unstructured body", status)
        return LoginFailureError(SfResponse(headers=headers, status_code=status, body=body))
