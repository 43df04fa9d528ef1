"""CLI context and dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click
import typer

from dbos_cloud.cli.shared.console import CLIConsole, console
from dbos_cloud.infra.cloud import (
    CredentialProvider,
    DatabaseAdminClient,
    ErrorClassifier,
    FileCredentialProvider,
)
from dbos_cloud.infra.constants import CLOUD, CloudConstants


@dataclass(frozen=True)
class CLIContext:
    """Runtime dependencies for CLI commands."""

    console: CLIConsole
    host: str
    credentials: CredentialProvider
    constants: CloudConstants

    def database_client(self, config_path: Path | None = None) -> DatabaseAdminClient:
        """Build a database client wired to this context's collaborators."""
        return DatabaseAdminClient(
            credentials=self.credentials,
            console=self.console,
            classifier=ErrorClassifier(self.console),
            config_path=config_path,
            constants=self.constants,
        )


def build_cli_context(host: str | None = None) -> CLIContext:
    """Build a fresh CLIContext."""
    return CLIContext(
        console=console,
        host=host or CLOUD.DEFAULT_DOMAIN,
        credentials=FileCredentialProvider(),
        constants=CLOUD,
    )


def get_cli_context(ctx: typer.Context | None = None) -> CLIContext:
    """Return the CLIContext from Typer, falling back to a new instance."""
    context = ctx or click.get_current_context(silent=True)
    if context and isinstance(context.obj, CLIContext):
        return context.obj
    return build_cli_context()
