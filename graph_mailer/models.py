"""Typed containers shared across the sender."""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Sequence

from .utils import guess_mime_type

MAIL_SEND_SCOPE = "Mail.Send"
FILE_ATTACHMENT_TYPE = "#microsoft.graph.fileAttachment"


@dataclass(frozen=True)
class GraphCredentials:
    """App registration details used to talk to the identity platform."""

    client_id: str
    tenant_id: str
    client_secret: Optional[str] = None
    redirect_uri: str = "http://localhost"
    scopes: Sequence[str] = ()
    token: Optional[str] = None

    def __post_init__(self) -> None:
        merged = [MAIL_SEND_SCOPE]
        for scope in self.scopes or ():
            if scope and scope not in merged:
                merged.append(scope)
        object.__setattr__(self, "scopes", tuple(merged))

    @property
    def authority(self) -> str:
        return f"https://login.microsoftonline.com/{self.tenant_id}"


@dataclass
class Attachment:
    """A local file prepared for upload as a Graph file attachment."""

    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: str | Path) -> "Attachment":
        """Read the file eagerly; missing or unreadable files raise OSError."""
        path = Path(path)
        return cls(
            name=path.name,
            content=path.read_bytes(),
            content_type=guess_mime_type(path),
        )

    def to_graph(self) -> dict[str, Any]:
        return {
            "@odata.type": FILE_ATTACHMENT_TYPE,
            "name": self.name,
            "contentBytes": base64.b64encode(self.content).decode("ascii"),
            "contentType": self.content_type,
        }


@dataclass
class EmailMessage:
    """Plain-text message with recipients and local attachment paths."""

    to: list[str]
    subject: str
    body: str
    cc: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)
    attachment_paths: list[str | Path] = field(default_factory=list)

    def __post_init__(self) -> None:
        for name in ("to", "cc", "bcc"):
            if isinstance(getattr(self, name), str):
                raise TypeError(f"{name} must be a list of addresses, not a single string.")
        self.to = list(self.to or [])
        if not self.to:
            raise ValueError("At least one recipient is required.")
        self.cc = list(self.cc or [])
        self.bcc = list(self.bcc or [])
        self.attachment_paths = list(self.attachment_paths or [])


class SendStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    INVALID_CREDENTIALS = "invalid_credentials"
    DATA_NOT_FOUND = "data_not_found"


@dataclass
class SendResult:
    """Outcome of a single sendMail call."""

    is_success: bool
    status: SendStatus
    error_message: Optional[str] = None
    token: Optional[str] = None
    token_refreshed: bool = False
