import base64
import json
import time

import pytest

from graph_mailer.models import GraphCredentials


def make_jwt(claims: dict) -> str:
    def segment(data: dict) -> str:
        raw = json.dumps(data).encode()
        return base64.urlsafe_b64encode(raw).decode().rstrip("=")

    return f"{segment({'alg': 'none', 'typ': 'JWT'})}.{segment(claims)}.signature"


class FakeApp:
    """Stands in for msal.PublicClientApplication."""

    def __init__(self, accounts=None, silent_result=None, interactive_result=None):
        self.accounts = accounts or []
        self.silent_result = silent_result
        self.interactive_result = interactive_result or {"access_token": "interactive-token"}
        self.calls = []

    def get_accounts(self):
        self.calls.append("get_accounts")
        return self.accounts

    def acquire_token_silent_with_error(self, scopes, account):
        self.calls.append(("silent", tuple(scopes), account))
        return self.silent_result

    def acquire_token_interactive(self, scopes, port=None):
        self.calls.append(("interactive", tuple(scopes), port))
        return self.interactive_result


class FakeResponse:
    def __init__(self, status_code=202, reason="Accepted", text=""):
        self.status_code = status_code
        self.reason = reason
        self.text = text


class FakeSession:
    def __init__(self, response=None):
        self.response = response or FakeResponse()
        self.requests = []

    def post(self, url, **kwargs):
        self.requests.append((url, kwargs))
        return self.response


class StaticTokenProvider:
    def __init__(self, token="fresh-token"):
        self.token = token

    def get_access_token(self):
        return self.token


@pytest.fixture
def valid_token():
    return make_jwt({"exp": int(time.time()) + 3600, "aud": "https://graph.microsoft.com"})


@pytest.fixture
def expired_token():
    return make_jwt({"exp": int(time.time()) - 60})


@pytest.fixture
def credentials():
    return GraphCredentials(client_id="client-id", tenant_id="tenant-id")
