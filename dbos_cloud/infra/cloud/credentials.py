"""Cloud credential resolution.

Credentials are written by the login flow to ``.dbos/credentials`` as JSON::

    {"token": "...", "userName": "alice", "organization": "acme"}

The client asks its provider for credentials on every call, so a token
refreshed between two commands is always picked up.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from dbos_cloud.infra.constants import CLOUD


class CloudCredentialsError(Exception):
    """Raised when cloud credentials cannot be resolved."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(message)


class CloudCredentials(BaseModel):
    """Bearer token and organization used to scope control-plane requests."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    token: str = Field(min_length=1, repr=False)
    organization: str = Field(min_length=1)
    user_name: str | None = Field(default=None, alias="userName")

    @property
    def bearer(self) -> str:
        return f"Bearer {self.token}"


class CredentialProvider(Protocol):
    def get_credentials(self) -> CloudCredentials: ...


class FileCredentialProvider:
    """Reads credentials from the JSON file left by ``login``."""

    def __init__(self, credentials_dir: Path | None = None) -> None:
        if credentials_dir is None:
            credentials_dir = Path(
                os.getenv(CLOUD.CREDENTIALS_DIR_ENV_VAR, CLOUD.CREDENTIALS_DIR)
            )
        self.path = credentials_dir / CLOUD.CREDENTIALS_FILE

    def get_credentials(self) -> CloudCredentials:
        if not self.path.exists():
            raise CloudCredentialsError(
                "Not logged in to the cloud control plane",
                details=f"No credentials found at {self.path}. Log in and retry.",
            )

        logger.debug(f"Loading cloud credentials from {self.path}")
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return CloudCredentials.model_validate(raw)
        except (OSError, ValueError) as e:
            # ValidationError is a ValueError subclass; keep its summary short
            summary = (
                f"{e.error_count()} invalid field(s)"
                if isinstance(e, ValidationError)
                else str(e)
            )
            raise CloudCredentialsError(
                f"Unable to read cloud credentials from {self.path}",
                details=summary,
            ) from e


class StaticCredentialProvider:
    """Returns a fixed set of credentials (scripts and tests)."""

    def __init__(self, credentials: CloudCredentials) -> None:
        self._credentials = credentials

    def get_credentials(self) -> CloudCredentials:
        return self._credentials
