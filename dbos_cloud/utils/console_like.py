"""Console protocol used by the cloud client.

The client reports progress through ``info``/``ok``/``warn``/``error`` and
writes its command payload (JSON dumps, record listings) through ``echo`` so
that scripts can capture standard output without any styling.
"""

from __future__ import annotations

import sys
from typing import Protocol

from rich.console import ConsoleRenderable


class ConsoleLike(Protocol):
    def print(self, msg: ConsoleRenderable | str | None = None) -> None: ...

    def echo(self, line: str) -> None: ...

    def info(self, msg: str) -> None: ...

    def warn(self, msg: str) -> None: ...

    def error(self, msg: str) -> None: ...

    def ok(self, msg: str) -> None: ...


class StdoutConsole:
    """Plain console for callers that do not run inside the CLI.

    Payload and progress go to stdout, warnings and errors to stderr.
    """

    def print(self, msg: ConsoleRenderable | str | None = None) -> None:
        print(msg)

    def echo(self, line: str) -> None:
        print(line)

    def info(self, msg: str) -> None:
        print(msg)

    def warn(self, msg: str) -> None:
        print(msg, file=sys.stderr)

    def error(self, msg: str) -> None:
        print(msg, file=sys.stderr)

    def ok(self, msg: str) -> None:
        print(msg)


def coalesce_console(console: ConsoleLike | None) -> ConsoleLike:
    return console if console is not None else StdoutConsole()
