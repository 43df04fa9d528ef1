"""Cloud database management commands.

This module provides the ``db`` command group: provisioning, linking,
inspecting, restoring and destroying cloud-hosted Postgres instances, and
loading an instance's connection settings into ``dbos-config.yaml``.

Every command exits with the code returned by the underlying client
operation (0 on success, 1 on failure).
"""

import asyncio
from collections.abc import Coroutine
from pathlib import Path
from typing import Annotated, Any

import typer

from dbos_cloud.cli.context import get_cli_context
from dbos_cloud.cli.shared.console import with_error_handling
from dbos_cloud.infra.constants import CLOUD

# ---------------------------------------------------------------------------
# Typer App
# ---------------------------------------------------------------------------

db_app = typer.Typer(
    name="db",
    help="Cloud Postgres database management.",
    no_args_is_help=True,
)

PasswordOption = Annotated[
    str,
    typer.Option(
        "--password",
        "-W",
        prompt="Database password",
        hide_input=True,
        confirmation_prompt=True,
        help="Database password (prompted when omitted)",
    ),
]

SyncOption = Annotated[
    bool,
    typer.Option(
        "--sync/--no-sync",
        help="Wait until the instance is available before returning",
    ),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Emit JSON instead of human-readable lines"),
]

YesOption = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Skip the confirmation prompt"),
]


def _run(coro: Coroutine[Any, Any, int]) -> None:
    """Run a client operation and exit with its status code."""
    code = asyncio.run(coro)
    raise typer.Exit(code)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@db_app.command()
@with_error_handling
def provision(
    name: Annotated[str, typer.Argument(help="Database instance name")],
    username: Annotated[
        str,
        typer.Option("--username", "-U", help="Admin username"),
    ],
    password: PasswordOption,
    sync: SyncOption = True,
) -> None:
    """Provision a managed Postgres instance."""
    ctx = get_cli_context()
    client = ctx.database_client()
    _run(client.create_database(ctx.host, name, username, password, sync))


@db_app.command()
@with_error_handling
def link(
    name: Annotated[str, typer.Argument(help="Database instance name")],
    hostname: Annotated[
        str,
        typer.Option("--hostname", "-H", help="Hostname of the existing instance"),
    ],
    password: PasswordOption,
    port: Annotated[
        int,
        typer.Option("--port", "-p", help="Port of the existing instance"),
    ] = 5432,
    enable_timetravel: Annotated[
        bool,
        typer.Option(
            "--enable-timetravel",
            help="Capture provenance so the instance supports time travel queries",
        ),
    ] = False,
) -> None:
    """Link an existing Postgres instance you host yourself."""
    ctx = get_cli_context()
    client = ctx.database_client()
    _run(
        client.link_existing_database(
            ctx.host, name, hostname, port, password, enable_timetravel
        )
    )


@db_app.command()
@with_error_handling
def destroy(
    name: Annotated[str, typer.Argument(help="Database instance name")],
    yes: YesOption = False,
) -> None:
    """Destroy a managed Postgres instance."""
    ctx = get_cli_context()
    if not ctx.console.confirm_action(
        f"Destroy database {name}",
        extra_warning="All data stored in this instance will be lost.",
        force=yes,
    ):
        raise typer.Exit(0)
    _run(ctx.database_client().delete_database(ctx.host, name))


@db_app.command()
@with_error_handling
def unlink(
    name: Annotated[str, typer.Argument(help="Database instance name")],
    yes: YesOption = False,
) -> None:
    """Unlink a Postgres instance you host yourself."""
    ctx = get_cli_context()
    if not ctx.console.confirm_action(
        f"Unlink database {name}",
        details="The instance itself is left untouched.",
        force=yes,
    ):
        raise typer.Exit(0)
    _run(ctx.database_client().unlink_database(ctx.host, name))


@db_app.command()
@with_error_handling
def status(
    name: Annotated[str, typer.Argument(help="Database instance name")],
    json: JsonOption = False,
) -> None:
    """Show the status of a database instance."""
    ctx = get_cli_context()
    _run(ctx.database_client().get_database(ctx.host, name, json))


@db_app.command("list")
@with_error_handling
def list_databases(json: JsonOption = False) -> None:
    """List the database instances of your organization."""
    ctx = get_cli_context()
    _run(ctx.database_client().list_databases(ctx.host, json))


@db_app.command("reset-password")
@with_error_handling
def reset_password(
    name: Annotated[str, typer.Argument(help="Database instance name")],
    password: PasswordOption,
) -> None:
    """Reset the admin password of a managed instance."""
    ctx = get_cli_context()
    _run(ctx.database_client().reset_credentials(ctx.host, name, password))


@db_app.command()
@with_error_handling
def restore(
    name: Annotated[str, typer.Argument(help="Database instance to restore from")],
    restore_time: Annotated[
        str,
        typer.Option(
            "--restore-time",
            "-t",
            help="Point in time to restore to (RFC3339, e.g. 2024-01-31T12:00:00Z)",
        ),
    ],
    target_name: Annotated[
        str,
        typer.Option("--target-name", "-n", help="Name of the new instance"),
    ],
    sync: SyncOption = True,
) -> None:
    """Restore an instance as of a point in time into a new instance."""
    ctx = get_cli_context()
    _run(
        ctx.database_client().restore_database(
            ctx.host, name, target_name, restore_time, sync
        )
    )


@db_app.command()
@with_error_handling
def connect(
    name: Annotated[str, typer.Argument(help="Database instance name")],
    password: Annotated[
        str,
        typer.Option(
            "--password",
            "-W",
            prompt="Database password",
            hide_input=True,
            help="Password to store in the local configuration (prompted when omitted)",
        ),
    ],
    config_file: Annotated[
        Path,
        typer.Option("--config-file", help="Local configuration file to update"),
    ] = CLOUD.default_config_path,
) -> None:
    """Load an instance's connection settings into the local configuration."""
    ctx = get_cli_context()
    client = ctx.database_client(config_path=config_file)
    _run(client.connect_local_config(ctx.host, name, password))
