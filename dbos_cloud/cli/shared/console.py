"""Shared console output for CLI commands.

This module provides the rich console wrapper used by every command group,
including status messages, confirmation dialogs and error formatting.
"""

from collections.abc import Callable

import typer
from rich.console import Console, ConsoleRenderable
from rich.markup import escape
from rich.panel import Panel


class CLIConsole:
    """Rich console wrapper for consistent CLI output."""

    def __init__(self) -> None:
        """Initialize the CLI console.

        Status messages are written to stderr so that command payloads
        (JSON dumps, record listings) are the only thing on stdout.
        """
        self.console = Console(stderr=True)

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        self.console.print(msg)

    def echo(self, line: str) -> None:
        typer.echo(line)

    def info(self, msg: str) -> None:
        self.console.print(f"[cyan]ℹ[/cyan]  {escape(msg)}")

    def ok(self, msg: str) -> None:
        self.console.print(f"[green]✅[/green] {escape(msg)}")

    def error(self, msg: str) -> None:
        self.console.print(f"[red]❌[/red] {escape(msg)}")

    def warn(self, msg: str) -> None:
        self.console.print(f"[yellow]⚠️[/yellow]  {escape(msg)}")

    def confirm_action(
        self,
        action: str,
        details: str | None = None,
        extra_warning: str | None = None,
        force: bool = False,
    ) -> bool:
        """Prompt user to confirm a potentially destructive action.

        Args:
            action: Description of the action (e.g., "Destroy database orders")
            details: Additional details about what will be affected
            extra_warning: Extra warning message (e.g., for data loss)
            force: If True, skip the confirmation prompt

        Returns:
            True if the user confirmed, False otherwise
        """
        if force:
            return True

        warning_lines = [f"[bold red]⚠️  {action}[/bold red]"]

        if details:
            warning_lines.append(f"\n{details}")

        if extra_warning:
            warning_lines.append(f"\n[yellow]{extra_warning}[/yellow]")

        self.console.print(
            Panel(
                "\n".join(warning_lines),
                title="Confirmation Required",
                border_style="red",
            )
        )

        try:
            response = self.console.input(
                "\n[bold]Are you sure you want to proceed?[/bold] \\[y/N]: "
            )
            return response.strip().lower() in ("y", "yes")
        except (KeyboardInterrupt, EOFError):
            self.console.print("\n[dim]Cancelled.[/dim]")
            return False

    def handle_error(
        self, message: str, details: str | None = None, exit_code: int = 1
    ) -> None:
        """Handle an error by printing a message and exiting.

        Args:
            message: Error message to display
            details: Optional additional details
            exit_code: Exit code to use
        """
        self.console.print(f"[red]❌[/red] [bold red]{escape(message)}[/bold red]")
        if details:
            self.console.print(Panel(escape(details), title="Details", border_style="red"))
        raise typer.Exit(exit_code)


def with_error_handling(func: Callable[..., None]) -> Callable[..., None]:
    """Decorator to wrap command functions with standard error handling.

    Missing cloud credentials are reported as a formatted error, and an
    interrupted command (for example a readiness poll stopped with Ctrl-C)
    exits with the conventional code 130.

    Args:
        func: The command function to wrap

    Returns:
        Wrapped function with error handling
    """
    from functools import wraps

    from dbos_cloud.infra.cloud.credentials import CloudCredentialsError

    @wraps(func)
    def wrapper(*args: object, **kwargs: object) -> None:
        try:
            func(*args, **kwargs)
        except CloudCredentialsError as e:
            console.handle_error(e.message, e.details)
        except KeyboardInterrupt:
            console.print("\n[dim]Operation cancelled by user.[/dim]")
            raise typer.Exit(130) from None

    return wrapper


# Shared console instance for consistent output
console = CLIConsole()
