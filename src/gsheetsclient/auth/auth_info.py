"""OAuth file locations used to authorize Drive/Sheets requests."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

ENV_CLIENT_SECRETS = "GSHEETSCLIENT_CLIENT_SECRETS"
ENV_TOKEN_FILE = "GSHEETSCLIENT_TOKEN_FILE"


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Authentication information.

    Only OAuth is supported:
        kind = "oauth"
        data must include:
            - client_secrets_file
            - token_file (authorized-user JSON, created on first login)
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind != "oauth":
            raise ValueError("AuthInfo.kind must be 'oauth'")

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        for key in ("client_secrets_file", "token_file"):
            value = self.data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

    @classmethod
    def oauth(cls, client_secrets_file: str, token_file: str) -> "AuthInfo":
        return cls(
            kind="oauth",
            data={"client_secrets_file": client_secrets_file, "token_file": token_file},
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AuthInfo":
        """
        Read file locations from GSHEETSCLIENT_CLIENT_SECRETS / GSHEETSCLIENT_TOKEN_FILE.

        Raises:
            ValueError: if either variable is missing or blank.
        """
        env = os.environ if environ is None else environ
        return cls.oauth(
            env.get(ENV_CLIENT_SECRETS, "").strip(),
            env.get(ENV_TOKEN_FILE, "").strip(),
        )

    @property
    def client_secrets_file(self) -> str:
        return str(self.data["client_secrets_file"])

    @property
    def token_file(self) -> str:
        return str(self.data["token_file"])
