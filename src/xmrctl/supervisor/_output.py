"""Reporter implementations for the supervision system."""

from typing import final

from rich.console import Console
from rich.markup import escape


@final
class ConsoleReporter:
    """Reporter that prints to rich consoles.

    Informational messages go to the standard console; warnings go to the
    error console prefixed with a yellow "Warning:".
    """

    __slots__ = ("_console", "_error_console")

    def __init__(
        self,
        console: Console | None = None,
        error_console: Console | None = None,
    ) -> None:
        self._console = console or Console()
        self._error_console = error_console or Console(stderr=True)

    def info(self, message: str) -> None:
        self._console.print(escape(message))

    def warning(self, message: str) -> None:
        self._error_console.print(f"[yellow]Warning:[/yellow] {escape(message)}")
