from pathlib import Path

import pytest
from pydantic import ValidationError

from graph_mailer.config import Settings


def _settings(monkeypatch, **env):
    for key in ["GRAPH_SCOPES", "GRAPH_ACCESS_TOKEN", "GRAPH_TOKEN_CACHE", "GRAPH_REDIRECT_URI"]:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("GRAPH_CLIENT_ID", "client-id")
    monkeypatch.setenv("GRAPH_TENANT_ID", "tenant-id")
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return Settings(_env_file=None)


def test_defaults(monkeypatch):
    settings = _settings(monkeypatch)
    assert settings.graph_redirect_uri == "http://localhost"
    assert settings.graph_interactive_mode == "browser"
    assert settings.graph_token_cache is None
    assert settings.credentials().scopes == ("Mail.Send",)


def test_scopes_are_additive(monkeypatch):
    settings = _settings(monkeypatch, GRAPH_SCOPES="User.Read; Mail.ReadWrite,")
    assert settings.graph_scopes == ["User.Read", "Mail.ReadWrite"]
    assert settings.credentials().scopes == ("Mail.Send", "User.Read", "Mail.ReadWrite")


def test_empty_values_become_none(monkeypatch):
    settings = _settings(monkeypatch, GRAPH_ACCESS_TOKEN="", GRAPH_TOKEN_CACHE=" ")
    assert settings.graph_access_token is None
    assert settings.graph_token_cache is None


def test_credentials_carry_token(monkeypatch):
    settings = _settings(
        monkeypatch, GRAPH_ACCESS_TOKEN="tok", GRAPH_TOKEN_CACHE="data/cache.bin"
    )
    assert settings.credentials().token == "tok"
    assert settings.graph_token_cache == Path("data/cache.bin")


def test_redirect_port_is_kept(monkeypatch):
    settings = _settings(monkeypatch, GRAPH_REDIRECT_URI="http://localhost:8400")
    assert settings.graph_redirect_uri == "http://localhost:8400"


def test_invalid_redirect_port_rejected(monkeypatch):
    with pytest.raises(ValidationError, match="invalid port"):
        _settings(monkeypatch, GRAPH_REDIRECT_URI="http://localhost:abc")
