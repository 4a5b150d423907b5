"""system command: show platform facts and miner state."""

from cyclopts import App
from rich.markup import escape
from rich.table import Table

from xmrctl.exceptions import PatchError
from xmrctl.miner import CORE_BUDGET_FIELD, read_numeric_field
from xmrctl.utils import get_miner_binary_path, get_miner_config_path

from ._context import CLIContext
from ._shared import build_controller, get_facts

system_app = App(
    name=("system", "sys"),
    help="Show platform facts, install state and the active backend.",
)


def _presence(found: bool) -> str:  # noqa: FBT001
    return "[green]present[/green]" if found else "[yellow]missing[/yellow]"


@system_app.default
def system() -> None:
    """Show platform facts, install state and the active backend."""
    ctx = CLIContext.get_current()
    facts = get_facts(ctx)
    controller = build_controller(ctx)
    binary = get_miner_binary_path()
    config_path = get_miner_config_path(facts.os_family)

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("OS", str(facts.os_family))
    table.add_row("Architecture", str(facts.cpu_arch))
    table.add_row("Logical cores", str(facts.logical_cores))
    table.add_row("Physical cores", str(facts.physical_cores))
    table.add_row("Binary", f"{escape(str(binary))} ({_presence(ctx.host.exists(binary))})")
    table.add_row(
        "Config",
        f"{escape(str(config_path))} ({_presence(ctx.host.exists(config_path))})",
    )

    try:
        budget = read_numeric_field(config_path, CORE_BUDGET_FIELD, host=ctx.host)
    except PatchError:
        table.add_row("Core budget", "unknown")
    else:
        table.add_row("Core budget", f"{budget}%")

    available = [d.backend.label for d in controller.drivers if d.is_available()]
    table.add_row("Backends available", ", ".join(available) or "none")

    backend = controller.current_backend()
    table.add_row("Running under", backend.label if backend is not None else "not running")

    ctx.console.print(table)
