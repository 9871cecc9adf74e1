"""Configuration management for the Graph mail sender."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Literal, Sequence
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import GraphCredentials

# Load .env early so BaseSettings can pick values up seamlessly.
load_dotenv()


def _split_list(value: str | Sequence[str] | None) -> list[str]:
    """Turn delimiter-separated env strings into cleaned lists."""
    if value is None:
        return []
    if isinstance(value, str):
        items = re.split(r"[;,]", value)
    else:
        items = list(value)
    return [item.strip() for item in items if item.strip()]


class Settings(BaseSettings):
    """App configuration derived from environment variables."""

    graph_client_id: str = Field(..., alias="GRAPH_CLIENT_ID")
    graph_tenant_id: str = Field(..., alias="GRAPH_TENANT_ID")
    graph_client_secret: str | None = Field(None, alias="GRAPH_CLIENT_SECRET")
    graph_redirect_uri: str = Field("http://localhost", alias="GRAPH_REDIRECT_URI")
    graph_scopes_raw: str = Field("", alias="GRAPH_SCOPES")
    graph_access_token: str | None = Field(None, alias="GRAPH_ACCESS_TOKEN")
    graph_interactive_mode: Literal["browser", "device_code", "none"] = Field(
        "browser", alias="GRAPH_INTERACTIVE_MODE"
    )
    graph_token_cache: Path | None = Field(None, alias="GRAPH_TOKEN_CACHE")
    graph_request_timeout: float | None = Field(None, alias="GRAPH_REQUEST_TIMEOUT")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "graph_client_secret",
        "graph_access_token",
        "graph_token_cache",
        "graph_request_timeout",
        mode="before",
    )
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("graph_redirect_uri", mode="before")
    @classmethod
    def _default_redirect_uri(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return "http://localhost"
        try:
            urlparse(value).port
        except ValueError as exc:
            raise ValueError(f"GRAPH_REDIRECT_URI has an invalid port: {value}") from exc
        return value

    @property
    def graph_scopes(self) -> list[str]:
        """Extra delegated scopes; Mail.Send is always added on top."""
        return _split_list(self.graph_scopes_raw)

    def credentials(self) -> GraphCredentials:
        return GraphCredentials(
            client_id=self.graph_client_id,
            tenant_id=self.graph_tenant_id,
            client_secret=self.graph_client_secret,
            redirect_uri=self.graph_redirect_uri,
            scopes=self.graph_scopes,
            token=self.graph_access_token,
        )
