"""Main CLI application module.

This module provides the main entry point for the dbos-cloud CLI.

Command Groups:
- db: Provision, link, inspect, restore and destroy cloud Postgres instances
"""

import sys
from typing import Annotated

import typer
from loguru import logger

from dbos_cloud.cli.context import build_cli_context
from dbos_cloud.infra.constants import CLOUD

from .commands import db_app

# Create the main CLI application
app = typer.Typer(
    help="☁️  dbos-cloud CLI - Cloud database management",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    host: Annotated[
        str,
        typer.Option(
            "--host",
            envvar=CLOUD.DOMAIN_ENV_VAR,
            help="Control plane domain",
        ),
    ] = CLOUD.DEFAULT_DOMAIN,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log requests and file writes"),
    ] = False,
) -> None:
    """Configure logging and build the shared command context."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")
    ctx.obj = build_cli_context(host)


# Register command groups
app.add_typer(db_app, name="db", help="Cloud Postgres database commands")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
