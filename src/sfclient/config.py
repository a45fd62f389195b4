from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional, Union

import requests

from .authenticator import (
    AuthorizationServer,
    JwtAuthenticator,
    LoginClaims,
    SessionAuthenticator,
)
from .authenticator.jwt_bearer import unescape_pem
from .env_loader import load_env_files
from .exceptions import MissingCredentialsError

_logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "60.0"


# ----------------------------------------------------------------------
# Configuration dataclass
# ----------------------------------------------------------------------
@dataclass
class SFConfig:
    """Connection settings for SalesforceClient."""

    # JWT bearer flow
    client_id: Optional[str] = None
    user: Optional[str] = None
    domain: Optional[str] = None
    key: Optional[str] = None
    key_file: Optional[str] = None
    auth_server: AuthorizationServer = AuthorizationServer.LIVE

    # Session flow: pre-provided token / instance URL
    access_token: Optional[str] = None
    instance_url: Optional[str] = None

    # e.g. "60.0"; a leading "v" is tolerated
    api_version: str = DEFAULT_API_VERSION

    def __post_init__(self) -> None:
        self.api_version = self.api_version.lstrip("vV")

    @classmethod
    def from_env(cls) -> SFConfig:
        """Load configuration from environment variables (and .env, if present)."""
        load_env_files(quiet=True)
        return cls(
            client_id=os.getenv("SALESFORCE_CLIENT_ID"),
            user=os.getenv("SALESFORCE_USER"),
            domain=os.getenv("SALESFORCE_DOMAIN"),
            key=os.getenv("SALESFORCE_KEY"),
            key_file=os.getenv("SALESFORCE_KEY_FILE"),
            auth_server=AuthorizationServer.parse(os.getenv("SALESFORCE_AUTH_SERVER", "live")),
            access_token=os.getenv("SALESFORCE_ACCESS_TOKEN"),
            instance_url=os.getenv("SALESFORCE_INSTANCE_URL"),
            api_version=os.getenv("SALESFORCE_API_VERSION", DEFAULT_API_VERSION),
        )

    @property
    def uses_session(self) -> bool:
        return bool(self.access_token and self.instance_url)


def build_authenticator(
    cfg: SFConfig, session: Optional[requests.Session] = None
) -> Union[SessionAuthenticator, JwtAuthenticator]:
    """Session authenticator when a token is configured, JWT bearer otherwise."""
    if cfg.uses_session:
        _logger.debug("Using existing access token from configuration.")
        return SessionAuthenticator(cfg.access_token, cfg.instance_url, session)  # type: ignore[arg-type]

    missing = [
        k
        for k, v in {
            "SALESFORCE_CLIENT_ID": cfg.client_id,
            "SALESFORCE_USER": cfg.user,
            "SALESFORCE_DOMAIN": cfg.domain,
            "SALESFORCE_KEY": cfg.key or cfg.key_file,
        }.items()
        if not v
    ]
    if missing:
        raise MissingCredentialsError(missing)

    claims = LoginClaims(cfg.client_id, cfg.auth_server, cfg.user)  # type: ignore[arg-type]
    key = unescape_pem(cfg.key or "").encode()
    auth = JwtAuthenticator(cfg.domain, claims, key, session)  # type: ignore[arg-type]
    if not cfg.key and cfg.key_file:
        auth.load_rsa_pem(cfg.key_file)
    _logger.debug("Using JWT bearer flow against %s", cfg.auth_server)
    return auth
