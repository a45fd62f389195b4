from __future__ import annotations

import logging
from typing import Optional

import requests

from ..exceptions import SessionFailureError
from ..models import AccessToken, SfResponse, UserInfo
from ..util import bearer, parse_body, send

_logger = logging.getLogger(__name__)


class SessionAuthenticator:
    """Wrap a token obtained elsewhere (e.g. a logged-in user's session id)."""

    def __init__(
        self,
        access_token: str,
        instance_url: str,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.access_token = access_token
        self.instance_url = instance_url
        self.session = session or requests.Session()

    def get_token(self) -> AccessToken:
        return AccessToken(
            access_token=self.access_token,
            scope="",
            instance_url=self.instance_url,
            id="",
            token_type="",
        )

    def user_info(self) -> UserInfo:
        url = f"{self.instance_url.rstrip('/')}/services/oauth2/userinfo"
        headers, status, text = send(self.session, "GET", url, headers=bearer(self.access_token))
        if status != 200:
            # The userinfo endpoint has no structured error format for sessions.
            _logger.warning("Session userinfo failed (%s)", status)
            raise SessionFailureError(SfResponse(headers=headers, status_code=status, body=text))
        return parse_body(text, UserInfo, status)
