"""install and uninstall commands."""

from cyclopts import App

from xmrctl.exceptions import XmrctlError

from ._context import CLIContext
from ._shared import build_controller, build_installer, fail, get_logger

install_app = App(
    name=("install", "i"),
    help="Install xmrig, its dependencies and a default miner config.",
)

uninstall_app = App(
    name=("uninstall", "u"),
    help="Stop xmrig and remove the binary, config and service files.",
)


@install_app.default
def install() -> None:
    """Install xmrig, its dependencies and a default miner config.

    Dependencies (screen, hwloc) are installed best-effort through the
    OS package manager; a failed download is fatal.
    """
    ctx = CLIContext.get_current()
    installer = build_installer(ctx)
    get_logger(ctx).info("install_started", binary=str(installer.binary_path))
    try:
        _ = installer.install()
    except XmrctlError as e:
        fail(ctx, e)


@uninstall_app.default
def uninstall() -> None:
    """Stop xmrig and remove everything xmrctl installed."""
    ctx = CLIContext.get_current()
    installer = build_installer(ctx)
    removed = installer.uninstall(build_controller(ctx))
    if not removed:
        ctx.console.print("Nothing to remove")
        return
    for path in removed:
        ctx.console.print(f"Removed {path}")
