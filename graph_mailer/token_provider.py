"""Delegated access tokens for Microsoft Graph via MSAL public-client flows."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Callable
from urllib.parse import urlparse

import msal

from .exceptions import TokenAcquisitionError, TokenValidationError
from .models import GraphCredentials
from .utils import decode_jwt_claims, from_unix_seconds

logger = logging.getLogger(__name__)

# Errors from a silent attempt that a user prompt can resolve.
INTERACTION_REQUIRED_ERRORS = frozenset(
    {"interaction_required", "login_required", "consent_required", "invalid_grant"}
)

InteractiveFlow = Callable[[msal.PublicClientApplication, GraphCredentials], dict]


def browser_flow(app: msal.PublicClientApplication, credentials: GraphCredentials) -> dict:
    """Open the system browser and block until the user signs in."""
    port = urlparse(credentials.redirect_uri).port
    logger.info("Opening browser for interactive sign-in")
    return app.acquire_token_interactive(scopes=list(credentials.scopes), port=port)


def device_code_flow(app: msal.PublicClientApplication, credentials: GraphCredentials) -> dict:
    """Headless sign-in: the user enters a code on another device."""
    flow = app.initiate_device_flow(scopes=list(credentials.scopes))
    if "user_code" not in flow:
        raise TokenAcquisitionError(f"Unable to start device code flow: {flow}")
    logger.info(flow.get("message"))
    return app.acquire_token_by_device_flow(flow)


def no_interaction(app: msal.PublicClientApplication, credentials: GraphCredentials) -> dict:
    raise TokenAcquisitionError(
        "Interactive sign-in is required but disabled for this environment."
    )


INTERACTIVE_FLOWS: dict[str, InteractiveFlow] = {
    "browser": browser_flow,
    "device_code": device_code_flow,
    "none": no_interaction,
}


def token_expiry(token: str) -> datetime:
    """Read the `exp` claim of an access token as an aware UTC datetime."""
    try:
        claims = decode_jwt_claims(token)
    except ValueError as exc:
        raise TokenValidationError(f"Unable to read access token: {exc}") from exc
    exp = claims.get("exp")
    if exp is None:
        raise TokenValidationError("Expiration claim not found in token.")
    try:
        return from_unix_seconds(exp)
    except (TypeError, ValueError, OverflowError, OSError) as exc:
        raise TokenValidationError(f"Invalid expiration claim: {exp!r}") from exc


class TokenProvider:
    """Hand out a usable access token, prompting the user only when needed."""

    def __init__(
        self,
        credentials: GraphCredentials,
        interactive_flow: InteractiveFlow = browser_flow,
        token_cache_path: Path | None = None,
        app: msal.PublicClientApplication | None = None,
    ) -> None:
        self.credentials = credentials
        self.interactive_flow = interactive_flow
        self.token_cache_path = token_cache_path
        self._token_cache = None
        self._app = app

    @property
    def app(self) -> msal.PublicClientApplication:
        # Built on first use so a still-valid supplied token never touches the network.
        if self._app is None:
            token_cache = None
            if self.token_cache_path is not None:
                token_cache = msal.SerializableTokenCache()
                if self.token_cache_path.exists():
                    token_cache.deserialize(self.token_cache_path.read_text())
                self._token_cache = token_cache
            self._app = msal.PublicClientApplication(
                client_id=self.credentials.client_id,
                authority=self.credentials.authority,
                token_cache=token_cache,
            )
        return self._app

    def get_access_token(self) -> str:
        supplied = self.credentials.token
        if supplied and token_expiry(supplied) > datetime.now(tz=UTC):
            logger.debug("Using supplied access token")
            return supplied

        scopes = list(self.credentials.scopes)
        accounts = self.app.get_accounts()
        result = None
        if accounts:
            logger.debug("Attempting silent token acquisition for %s", accounts[0].get("username"))
            result = self.app.acquire_token_silent_with_error(scopes, account=accounts[0])

        if result and "access_token" not in result:
            if result.get("error") not in INTERACTION_REQUIRED_ERRORS:
                raise TokenAcquisitionError(
                    f"Unable to obtain Graph token: {result.get('error_description') or result.get('error')}"
                )
            logger.info("Silent token acquisition needs user interaction (%s)", result.get("error"))
            result = None

        if not result:
            result = self.interactive_flow(self.app, self.credentials)

        if not result or "access_token" not in result:
            detail = (result or {}).get("error_description") or (result or {}).get("error")
            raise TokenAcquisitionError(f"Unable to obtain Graph token: {detail}")
        self._persist_token_cache()
        return result["access_token"]

    def _persist_token_cache(self) -> None:
        if not self._token_cache or not self._token_cache.has_state_changed:
            return
        cache_path: Path = self.token_cache_path
        cache_path.parent.mkdir(parents=True, exist_ok=True)
        cache_path.write_text(self._token_cache.serialize())
