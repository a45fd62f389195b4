import json
from unittest.mock import MagicMock

import pytest
import requests
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from sfclient import SalesforceClient, SessionAuthenticator

INSTANCE_URL = "https://example.my.salesforce.com"


@pytest.fixture(autouse=True)
def clean_salesforce_env(monkeypatch):
    """Keep a developer's real SALESFORCE_* settings out of the tests."""
    for var in [
        "SALESFORCE_CLIENT_ID",
        "SALESFORCE_USER",
        "SALESFORCE_DOMAIN",
        "SALESFORCE_KEY",
        "SALESFORCE_KEY_FILE",
        "SALESFORCE_AUTH_SERVER",
        "SALESFORCE_API_VERSION",
        "SALESFORCE_ACCESS_TOKEN",
        "SALESFORCE_INSTANCE_URL",
    ]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("sfclient.config.load_env_files", lambda *a, **k: None)


@pytest.fixture(scope="session")
def rsa_keys():
    """(private PEM, public PEM) for a fresh 2048-bit RSA key."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return private_pem, public_pem


@pytest.fixture
def make_response():
    """Build a fake requests.Response with the given status and body."""

    def _make(status_code, body=None, *, text=None, headers=None):
        r = MagicMock()
        r.status_code = status_code
        if text is None:
            text = "" if body is None else json.dumps(body)
        r.text = text
        r.headers = headers or {"Content-Type": "application/json"}
        return r

    return _make


@pytest.fixture
def token_payload():
    return {
        "access_token": "00DFAKE-TOKEN",
        "scope": "api",
        "instance_url": INSTANCE_URL,
        "id": "https://login.salesforce.com/id/00D/005",
        "token_type": "Bearer",
    }


@pytest.fixture
def client():
    """A client connected through a session token; no network involved."""
    auth = SessionAuthenticator("00DFAKE-TOKEN", INSTANCE_URL)
    return SalesforceClient("60.0", auth, session=requests.Session())
