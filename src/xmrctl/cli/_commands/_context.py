# pyright: reportUnusedCallResult=false
# ruff: noqa: TC003  # Path needed at runtime for dataclass field
"""CLI context for global state management.

This module provides context management for the collaborators every
command needs: settings, platform facts, the host and the consoles. The
CLIContext is set once at CLI startup and made available to all commands
via contextvars.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console

from xmrctl.config import Settings
from xmrctl.host import Fetcher, HostProtocol, SystemHost
from xmrctl.platform import PlatformFacts

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger


# Context variable for CLIContext
_current_cli_context: contextvars.ContextVar["CLIContext | None"] = (
    contextvars.ContextVar("cli_context", default=None)
)


def _stderr_console() -> Console:
    return Console(stderr=True)


@dataclass(frozen=True, slots=True)
class CLIContext:
    """Global CLI context with settings and collaborators.

    Attributes:
        settings: Loaded xmrctl settings.
        host: Host collaborator for commands and files.
        facts: Platform facts, or None before the platform is probed.
        console: Console for regular output.
        error_console: Console for errors and warnings.
        settings_error: Error message if settings loading failed.
        logger: Structured logger for CLI commands (writes to file only).
        fetcher: HTTP fetcher; created on demand if None.
        home: Home directory for per-user artifacts (defaults to ~).
    """

    settings: Settings = field(repr=False)
    host: HostProtocol = field(default_factory=SystemHost, repr=False)
    facts: PlatformFacts | None = None
    console: Console = field(default_factory=Console, repr=False)
    error_console: Console = field(default_factory=_stderr_console, repr=False)
    settings_error: str | None = None
    logger: FilteringBoundLogger | None = field(default=None, repr=False)
    fetcher: Fetcher | None = field(default=None, repr=False)
    home: Path | None = None

    @classmethod
    def get_current(cls) -> CLIContext:
        """Get current active CLIContext, or create a default if not set.

        Returns:
            The currently active CLIContext, or a default instance if none is set.
        """
        ctx = _current_cli_context.get()
        if ctx is not None:
            return ctx
        return cls(settings=Settings())

    @classmethod
    def set_current(cls, ctx: CLIContext) -> None:
        """Set the current active CLIContext.

        Args:
            ctx: The CLIContext to set as current.
        """
        _current_cli_context.set(ctx)

    @classmethod
    def reset(cls) -> None:
        """Reset to default context.

        This is primarily useful for testing to ensure a clean state between tests.
        """
        _current_cli_context.set(None)
