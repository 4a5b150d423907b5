"""start, stop and status commands."""

from cyclopts import App
from rich.markup import escape
from rich.table import Table

from xmrctl.exceptions import XmrctlError
from xmrctl.utils import get_miner_binary_path

from ._context import CLIContext
from ._shared import (
    ExitCode,
    build_controller,
    build_installer,
    exit_with_error,
    fail,
)

start_app = App(name=("start", "st"), help="Start xmrig in the background.")
stop_app = App(name=("stop", "sp"), help="Stop xmrig.")
status_app = App(name=("status", "stat"), help="Show whether xmrig is running.")


@start_app.default
def start() -> None:
    """Start xmrig under the best available backend.

    Prefers the system service manager, then the user service facility,
    then a screen session. Does nothing if xmrig is already running.
    """
    ctx = CLIContext.get_current()
    controller = build_controller(ctx)

    binary = get_miner_binary_path()
    if not ctx.host.exists(binary):
        exit_with_error(
            f"{binary} not found; run `xmrctl install` first",
            ExitCode.NOT_FOUND,
            console=ctx.error_console,
        )

    try:
        installer = build_installer(ctx)
        if installer.ensure_config():
            ctx.console.print(f"Wrote miner config to {installer.config_path}")
        _ = controller.start()
    except XmrctlError as e:
        fail(ctx, e)


@stop_app.default
def stop() -> None:
    """Stop xmrig under whichever backend is running it."""
    ctx = CLIContext.get_current()
    _ = build_controller(ctx).stop()


@status_app.default
def status() -> None:
    """Show which backend is running xmrig and its reported health."""
    ctx = CLIContext.get_current()
    result = build_controller(ctx).status()

    if result.backend is None or result.descriptor is None:
        ctx.console.print("xmrig is [yellow]not running[/yellow]")
        return

    ctx.console.print(f"xmrig is [green]running[/green] under the {result.backend.label}")

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Name", escape(result.descriptor.session_name))
    table.add_row("Definition", escape(str(result.descriptor.definition_path)))
    table.add_row("Log", escape(str(result.descriptor.log_path)))
    for key, value in result.health.items():
        table.add_row(key, escape(value))
    ctx.console.print(table)
