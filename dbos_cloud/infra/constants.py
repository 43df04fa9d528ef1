"""Control-plane constants and local file locations.

This module centralizes the magic strings, paths and timing values used by
the database administration client.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class CloudConstants:
    """Constants for talking to the cloud control plane.

    All attributes are class-level and immutable.
    """

    # Control plane
    DEFAULT_DOMAIN: str = "cloud.dbos.dev"
    DOMAIN_ENV_VAR: str = "DBOS_DOMAIN"
    API_VERSION: str = "v1alpha1"

    # Timing (seconds)
    REQUEST_TIMEOUT: float = 30.0
    FIRST_POLL_DELAY: float = 5.0
    POLL_INTERVAL: float = 30.0

    # Instance statuses that end a readiness poll
    READY_STATUSES: tuple[str, ...] = ("available", "backing-up")

    # Local files
    CREDENTIALS_DIR: str = ".dbos"
    CREDENTIALS_DIR_ENV_VAR: str = "DBOS_CREDENTIALS_DIR"
    CREDENTIALS_FILE: str = "credentials"
    CONFIG_FILE: str = "dbos-config.yaml"

    # Password rules
    PASSWORD_MIN_LENGTH: int = 8
    PASSWORD_MAX_LENGTH: int = 128
    PASSWORD_FORBIDDEN_CHARS: tuple[str, ...] = ("/", '"', "@", " ", "'")

    def databases_url(self, host: str, organization: str) -> str:
        """Organization-scoped base URL of the databases API."""
        return f"https://{host}/{self.API_VERSION}/{organization}/databases"

    @property
    def default_config_path(self) -> Path:
        return Path(self.CONFIG_FILE)


CLOUD = CloudConstants()
