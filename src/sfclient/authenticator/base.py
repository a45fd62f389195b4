from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable

from ..exceptions import InvalidSettingError
from ..models import AccessToken, UserInfo


class AuthorizationServer(str, Enum):
    """Salesforce login hosts; used as the ``aud`` claim of JWT assertions."""

    LIVE = "https://login.salesforce.com"
    TEST = "https://test.salesforce.com"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> AuthorizationServer:
        """Accept ``live``/``test`` (any case) or one of the URLs."""
        key = name.strip().rstrip("/")
        for member in cls:
            if key.upper() == member.name or key == member.value:
                return member
        raise InvalidSettingError(f"Unknown authorization server: {name!r}")


@runtime_checkable
class Authenticator(Protocol):
    """Anything that can hand SalesforceClient an access token."""

    def get_token(self) -> AccessToken: ...

    def user_info(self) -> UserInfo: ...


def normalize_instance(instance_domain: str) -> str:
    """``example.my.salesforce.com`` -> ``https://example.my.salesforce.com``."""
    instance = instance_domain.rstrip("/")
    if instance.startswith("http"):
        return instance
    return f"https://{instance}"
