"""OAuth credentials and authorized HTTP sessions for gsheetsclient."""

from __future__ import annotations

import logging
import os
from typing import Sequence

from gsheetsclient.errors import AuthError, InvalidArgumentError

from .auth_info import AuthInfo

logger = logging.getLogger(__name__)

DEFAULT_SCOPES: tuple[str, ...] = (
    "https://www.googleapis.com/auth/drive",
    "https://www.googleapis.com/auth/spreadsheets",
)


class OAuthClient:
    """Create OAuth credentials and `AuthorizedSession` objects from AuthInfo."""

    def __init__(self, auth_info: AuthInfo) -> None:
        if auth_info.kind != "oauth":
            raise InvalidArgumentError("OAuthClient requires AuthInfo(kind='oauth')")
        self._auth_info = auth_info

    def get_credentials(self, scopes: Sequence[str], ensure_valid: bool = True):
        """
        Return OAuth credentials for the given scopes.

        A stored token is reused (and refreshed when ensure_valid is True);
        without a usable token the installed-app flow is run and its result
        saved to token_file.

        Returns:
            google.oauth2.credentials.Credentials

        Raises:
            AuthError: on load/refresh/flow failures.
            InvalidArgumentError: if scopes is invalid.
        """
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise InvalidArgumentError("scopes must be a non-empty sequence of strings")

        creds = self._load_token(scopes)
        if creds is not None:
            if not ensure_valid:
                return creds
            if not creds.valid and creds.refresh_token:
                self._refresh(creds)
            if creds.valid:
                return creds

        return self._run_flow(scopes)

    def build_session(self, scopes: Sequence[str] = DEFAULT_SCOPES, ensure_valid: bool = True):
        """
        Build a requests session that attaches (and refreshes) the bearer token.

        Returns:
            google.auth.transport.requests.AuthorizedSession
        """
        try:
            from google.auth.transport.requests import AuthorizedSession
        except ImportError as exc:  # pragma: no cover
            raise AuthError(
                "google-auth[requests] is not available",
                details={"hint": "Install google-auth and requests"},
                cause=exc,
            ) from exc

        creds = self.get_credentials(scopes=scopes, ensure_valid=ensure_valid)
        return AuthorizedSession(creds)

    def _load_token(self, scopes: Sequence[str]):
        try:
            from google.oauth2.credentials import Credentials
        except ImportError as exc:  # pragma: no cover
            raise AuthError(
                "Google auth libraries are not available",
                details={"hint": "Install google-auth and google-auth-oauthlib"},
                cause=exc,
            ) from exc

        token_file = self._auth_info.token_file
        if not os.path.exists(token_file):
            return None

        try:
            return Credentials.from_authorized_user_file(token_file, scopes=list(scopes))
        except Exception as exc:
            raise AuthError(
                "Failed to load token_file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc

    def _refresh(self, creds) -> None:
        from google.auth.transport.requests import Request

        try:
            creds.refresh(Request())
        except Exception as exc:
            raise AuthError(
                "Failed to refresh OAuth credentials",
                details={"token_file": self._auth_info.token_file},
                cause=exc,
            ) from exc
        logger.debug("Refreshed OAuth token from %s", self._auth_info.token_file)
        self._save_credentials(creds)

    def _run_flow(self, scopes: Sequence[str]):
        try:
            from google_auth_oauthlib.flow import InstalledAppFlow
        except ImportError as exc:  # pragma: no cover
            raise AuthError(
                "google-auth-oauthlib is not available",
                details={"hint": "Install google-auth-oauthlib"},
                cause=exc,
            ) from exc

        client_secrets = self._auth_info.client_secrets_file
        logger.info("Starting OAuth authorization flow using %s", client_secrets)
        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                client_secrets,
                scopes=list(scopes),
            )
            creds = flow.run_local_server(port=0)
        except Exception as exc:
            raise AuthError(
                "OAuth authorization flow failed",
                details={
                    "client_secrets_file": client_secrets,
                    "token_file": self._auth_info.token_file,
                },
                cause=exc,
            ) from exc

        self._save_credentials(creds)
        return creds

    def _save_credentials(self, creds) -> None:
        token_file = self._auth_info.token_file
        token_dir = os.path.dirname(token_file)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)

        try:
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except OSError as exc:
            raise AuthError(
                "Failed to save OAuth token file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc
