"""xmrctl CLI commands."""
# pyright: reportUnusedCallResult=false

from __future__ import annotations

from typing import TYPE_CHECKING

from ._context import CLIContext
from ._install import install_app, uninstall_app
from ._lifecycle import start_app, status_app, stop_app
from ._miner_config import config_app, core_app, no_donate_app
from ._shared import (
    ExitCode,
    build_controller,
    build_installer,
    exit_code_for,
    exit_with_error,
    fail,
    get_error_console,
    get_facts,
)
from ._system import system_app

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "COMMAND_NAMES",
    "HELP_NAMES",
    "CLIContext",
    "ExitCode",
    "build_controller",
    "build_installer",
    "config_app",
    "core_app",
    "exit_code_for",
    "exit_with_error",
    "fail",
    "get_error_console",
    "get_facts",
    "install_app",
    "no_donate_app",
    "register_commands",
    "start_app",
    "status_app",
    "stop_app",
    "system_app",
    "uninstall_app",
]

_COMMAND_APPS = (
    install_app,
    config_app,
    start_app,
    status_app,
    stop_app,
    core_app,
    no_donate_app,
    uninstall_app,
    system_app,
)

HELP_NAMES: frozenset[str] = frozenset({"help", "h"})

COMMAND_NAMES: frozenset[str] = (
    frozenset(name for command in _COMMAND_APPS for name in command.name) | HELP_NAMES
)


def register_commands(app: App) -> None:
    for command in _COMMAND_APPS:
        app.command(command)

    @app.command(name=("help", "h"))
    def help_command() -> None:  # pyright: ignore[reportUnusedFunction]
        """Show this help message."""
        app.help_print()
