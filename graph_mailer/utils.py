"""Utility helpers shared across modules."""

from __future__ import annotations

import base64
import json
from datetime import UTC, datetime
from pathlib import Path

_MIME_TYPES = {
    ".pdf": "application/pdf",
    ".txt": "text/plain",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".jpg": "image/jpeg",
    ".png": "image/png",
}
DEFAULT_MIME_TYPE = "application/octet-stream"


def guess_mime_type(path: str | Path) -> str:
    """Map a file extension (case-insensitive) to the MIME type Graph expects."""
    return _MIME_TYPES.get(Path(path).suffix.lower(), DEFAULT_MIME_TYPE)


def decode_jwt_claims(token: str) -> dict:
    """Return the unverified claims of a JWT access token."""
    segments = token.split(".")
    if len(segments) != 3:
        raise ValueError("Token is not a JWT (expected three segments).")
    payload = segments[1]
    payload += "=" * (-len(payload) % 4)
    claims = json.loads(base64.urlsafe_b64decode(payload))
    if not isinstance(claims, dict):
        raise ValueError("JWT payload is not a JSON object.")
    return claims


def from_unix_seconds(value: int | float | str) -> datetime:
    """Convert an epoch timestamp into an aware UTC datetime."""
    return datetime.fromtimestamp(int(value), tz=UTC)
