"""Shared CLI utilities for commands.

This module provides common utilities used across CLI command implementations:
- Standardized exit codes and the mapping from xmrctl errors to them
- Console utilities for error handling
- Factories for the collaborators built from the CLI context
"""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING, Never

from xmrctl.exceptions import (
    BackendUnavailableError,
    ConfigError,
    DownloadError,
    FieldNotFoundError,
    InstallError,
    PatchError,
    SupervisionError,
    UnsupportedPlatformError,
    XmrctlError,
)
from xmrctl.miner import Installer
from xmrctl.platform import detect
from xmrctl.supervisor import ConsoleReporter, MinerInvocation, SupervisionController
from xmrctl.utils import create_null_logger, get_miner_binary_path, get_miner_config_path

if TYPE_CHECKING:
    from rich.console import Console
    from structlog.typing import FilteringBoundLogger

    from xmrctl.platform import PlatformFacts

    from ._context import CLIContext

__all__ = [
    "ExitCode",
    "build_controller",
    "build_installer",
    "exit_code_for",
    "exit_with_error",
    "fail",
    "get_error_console",
    "get_facts",
    "get_logger",
    "get_reporter",
]


class ExitCode(IntEnum):
    """Standard exit codes for xmrctl CLI commands."""

    SUCCESS = 0
    LOAD_ERROR = 1
    USAGE_ERROR = 2
    NOT_FOUND = 3
    IO_ERROR = 4
    INTERNAL_ERROR = 5
    UNSUPPORTED_PLATFORM = 6
    BACKEND_UNAVAILABLE = 7
    DOWNLOAD_ERROR = 8


# Most specific first
_EXIT_CODES: tuple[tuple[type[XmrctlError], ExitCode], ...] = (
    (UnsupportedPlatformError, ExitCode.UNSUPPORTED_PLATFORM),
    (BackendUnavailableError, ExitCode.BACKEND_UNAVAILABLE),
    (SupervisionError, ExitCode.IO_ERROR),
    (FieldNotFoundError, ExitCode.NOT_FOUND),
    (PatchError, ExitCode.IO_ERROR),
    (DownloadError, ExitCode.DOWNLOAD_ERROR),
    (InstallError, ExitCode.IO_ERROR),
    (ConfigError, ExitCode.LOAD_ERROR),
)


def exit_code_for(error: XmrctlError) -> ExitCode:
    """Return the exit code for an xmrctl error."""
    for error_type, code in _EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return ExitCode.INTERNAL_ERROR


def get_error_console() -> Console:
    """Get a Rich console configured for error output to stderr.

    Returns:
        Console instance writing to stderr.
    """
    from rich.console import Console  # noqa: PLC0415

    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.INTERNAL_ERROR,
    *,
    console: Console | None = None,
) -> Never:
    """Print an error message and exit with the specified code.

    Args:
        message: The error message to display.
        code: The exit code to use (defaults to INTERNAL_ERROR).
        console: Optional Rich console for output. If not provided,
            a new stderr console will be created.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    from rich.markup import escape  # noqa: PLC0415

    console.print(f"[red]Error:[/red] {escape(message)}")
    raise SystemExit(code)


def get_logger(ctx: CLIContext) -> FilteringBoundLogger:
    return ctx.logger if ctx.logger is not None else create_null_logger()


def fail(ctx: CLIContext, error: XmrctlError) -> Never:
    """Log an xmrctl error and exit with its exit code."""
    code = exit_code_for(error)
    get_logger(ctx).error(
        "command_failed", error=str(error), error_type=type(error).__name__, exit_code=int(code)
    )
    exit_with_error(str(error), code, console=ctx.error_console)


def get_facts(ctx: CLIContext) -> PlatformFacts:
    """Return the platform facts, probing the platform if not already done."""
    if ctx.facts is not None:
        return ctx.facts
    try:
        return detect()
    except UnsupportedPlatformError as e:
        fail(ctx, e)


def get_reporter(ctx: CLIContext) -> ConsoleReporter:
    return ConsoleReporter(ctx.console, ctx.error_console)


def build_controller(ctx: CLIContext) -> SupervisionController:
    """Create the supervision controller for the current context."""
    facts = get_facts(ctx)
    invocation = MinerInvocation(
        binary=get_miner_binary_path(),
        config_path=get_miner_config_path(facts.os_family),
    )
    return SupervisionController(
        ctx.host,
        facts,
        invocation,
        settings=ctx.settings.supervision,
        reporter=get_reporter(ctx),
        logger=get_logger(ctx),
        home=ctx.home,
    )


def build_installer(ctx: CLIContext) -> Installer:
    """Create the miner installer for the current context."""
    return Installer(
        ctx.host,
        get_facts(ctx),
        ctx.settings,
        fetcher=ctx.fetcher,
        reporter=get_reporter(ctx),
        logger=get_logger(ctx),
    )
