"""Small helpers shared by the CLI and infrastructure layers."""

from .console_like import ConsoleLike, StdoutConsole, coalesce_console

__all__ = ["ConsoleLike", "StdoutConsole", "coalesce_console"]
