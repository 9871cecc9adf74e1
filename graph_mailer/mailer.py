"""Send plain-text mail through the Graph sendMail endpoint."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Sequence

import requests
from requests import Response

from .config import Settings
from .models import Attachment, EmailMessage, GraphCredentials, SendResult, SendStatus
from .token_provider import INTERACTIVE_FLOWS, TokenProvider

logger = logging.getLogger(__name__)

_STATUS_BY_CODE = {
    401: SendStatus.INVALID_CREDENTIALS,
    403: SendStatus.INVALID_CREDENTIALS,
    404: SendStatus.DATA_NOT_FOUND,
}


def _recipients(addresses: Iterable[str] | None) -> list[dict]:
    return [{"emailAddress": {"address": address}} for address in (addresses or [])]


def build_payload(message: EmailMessage) -> dict[str, Any]:
    """Assemble the sendMail request body, reading every attachment up front."""
    attachments = [Attachment.from_path(path).to_graph() for path in message.attachment_paths]
    return {
        "saveToSentItems": True,
        "message": {
            "subject": message.subject,
            "body": {"contentType": "Text", "content": message.body},
            "toRecipients": _recipients(message.to),
            "ccRecipients": _recipients(message.cc),
            "bccRecipients": _recipients(message.bcc),
            "attachments": attachments,
            "hasAttachments": bool(attachments),
        },
    }


class GraphMailer:
    """Thin wrapper that authenticates with Graph and posts one message per call."""

    SEND_MAIL_URL = "https://graph.microsoft.com/v1.0/me/sendMail"

    def __init__(
        self,
        credentials: GraphCredentials,
        token_provider: TokenProvider | None = None,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.credentials = credentials
        self.token_provider = token_provider or TokenProvider(credentials)
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "GraphMailer":
        credentials = settings.credentials()
        provider = TokenProvider(
            credentials,
            interactive_flow=INTERACTIVE_FLOWS[settings.graph_interactive_mode],
            token_cache_path=settings.graph_token_cache,
        )
        return cls(credentials, token_provider=provider, timeout=settings.graph_request_timeout)

    def send_email(
        self,
        recipients: Sequence[str],
        subject: str,
        body: str,
        cc: Sequence[str] | None = None,
        bcc: Sequence[str] | None = None,
        attachment_paths: Sequence[str | Path] | None = None,
    ) -> SendResult:
        message = EmailMessage(
            to=recipients,
            subject=subject,
            body=body,
            cc=cc,
            bcc=bcc,
            attachment_paths=attachment_paths,
        )
        return self.send(message)

    def send(self, message: EmailMessage) -> SendResult:
        access_token = self.token_provider.get_access_token()
        payload = build_payload(message)
        logger.debug(
            "Sending '%s' to %d recipient(s) with %d attachment(s)",
            message.subject,
            len(message.to) + len(message.cc) + len(message.bcc),
            len(payload["message"]["attachments"]),
        )

        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }
        response = self.session.post(
            self.SEND_MAIL_URL, headers=headers, json=payload, timeout=self.timeout
        )

        if 200 <= response.status_code < 300:
            logger.info("Mail '%s' accepted by Graph (%s)", message.subject, response.status_code)
            return SendResult(
                is_success=True,
                status=SendStatus.SUCCEEDED,
                token=access_token,
                token_refreshed=access_token != self.credentials.token,
            )
        return self._failure(response)

    @staticmethod
    def _failure(response: Response) -> SendResult:
        logger.error("Graph sendMail failed (%s): %s", response.status_code, response.text)
        error_message = (
            f"Error sending email: {response.status_code} - {response.reason}. "
            f"Details: {response.text}"
        )
        return SendResult(
            is_success=False,
            status=_STATUS_BY_CODE.get(response.status_code, SendStatus.FAILED),
            error_message=error_message,
        )
