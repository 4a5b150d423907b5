"""config, core and no-donate commands for the miner config file."""

from typing import Annotated

from cyclopts import App, Parameter

from xmrctl.exceptions import FieldNotFoundError, XmrctlError
from xmrctl.host import Fetcher
from xmrctl.miner import (
    CORE_BUDGET_FIELD,
    DONATE_LEVEL_FIELD,
    DONATE_OVER_PROXY_FIELD,
    fetch_config,
    patch_numeric_field,
    read_numeric_field,
    render_config,
    set_core_budget,
    write_config,
)
from xmrctl.utils import get_miner_config_path

from ._context import CLIContext
from ._shared import build_controller, fail, get_facts, get_logger, get_reporter

config_app = App(
    name=("config", "c"),
    help="Write the miner config, from settings or a remote template.",
)
core_app = App(
    name=("core", "co"),
    help="Show or set the percentage of CPU threads xmrig may use.",
)
no_donate_app = App(
    name=("no-donate",),
    help="Write the miner config with donations disabled.",
)

RemoteOption = Annotated[
    str | None,
    Parameter(name="--remote", help="URL of a JSON config template to use instead."),
]


def _restart_if_running(ctx: CLIContext) -> None:
    """Restart the miner so it picks up the new config, if it is running."""
    controller = build_controller(ctx)
    if controller.current_backend() is None:
        return
    try:
        _ = controller.restart()
    except XmrctlError as e:
        fail(ctx, e)


def _write_miner_config(ctx: CLIContext, remote: str | None) -> None:
    facts = get_facts(ctx)
    path = get_miner_config_path(facts.os_family)
    if remote is not None:
        if ctx.fetcher is not None:
            text = fetch_config(remote, ctx.fetcher)
        else:
            with Fetcher() as fetcher:
                text = fetch_config(remote, fetcher)
        source = remote
    else:
        text = render_config(ctx.settings.miner, facts)
        source = "settings"
    write_config(ctx.host, path, text)
    get_logger(ctx).info("config_written", path=str(path), source=source)
    ctx.console.print(f"Wrote miner config to {path}")


@config_app.default
def config(*, remote: RemoteOption = None) -> None:
    """Write the miner config.

    Args:
        remote: URL of a JSON config template to use instead of the
            generated one.
    """
    ctx = CLIContext.get_current()
    try:
        _write_miner_config(ctx, remote)
    except XmrctlError as e:
        fail(ctx, e)
    _restart_if_running(ctx)


@no_donate_app.default
def no_donate(*, remote: RemoteOption = None) -> None:
    """Write the miner config with donate-level and donate-over-proxy set to 0.

    Args:
        remote: URL of a JSON config template to use instead of the
            generated one.
    """
    ctx = CLIContext.get_current()
    reporter = get_reporter(ctx)
    path = get_miner_config_path(get_facts(ctx).os_family)
    try:
        _write_miner_config(ctx, remote)
        for field in (DONATE_LEVEL_FIELD, DONATE_OVER_PROXY_FIELD):
            try:
                patch_numeric_field(path, field, 0, host=ctx.host)
            except FieldNotFoundError as e:
                reporter.warning(str(e))
    except XmrctlError as e:
        fail(ctx, e)

    ctx.console.print("Donations disabled")
    _restart_if_running(ctx)


@core_app.default
def core(
    percentage: Annotated[
        int | None,
        Parameter(help="Percentage of CPU threads to use (1-100). Omit to show."),
    ] = None,
) -> None:
    """Show or set xmrig's CPU thread budget.

    Values above 100 are clamped to 100. If the config has no
    max-threads-hint field it is regenerated from settings first.

    Args:
        percentage: Percentage of CPU threads to use.
    """
    ctx = CLIContext.get_current()
    facts = get_facts(ctx)
    path = get_miner_config_path(facts.os_family)

    if percentage is None:
        try:
            current = read_numeric_field(path, CORE_BUDGET_FIELD, host=ctx.host)
        except XmrctlError as e:
            fail(ctx, e)
        ctx.console.print(f"Core budget: {current}% of {facts.logical_cores} threads")
        return

    try:
        try:
            budget = set_core_budget(path, percentage, host=ctx.host)
        except FieldNotFoundError as e:
            get_reporter(ctx).warning(f"{e}; regenerating the miner config")
            get_logger(ctx).warning("core_budget_field_missing", path=str(path))
            write_config(
                ctx.host,
                path,
                render_config(ctx.settings.miner, facts, core_budget=percentage),
            )
            budget = set_core_budget(path, percentage, host=ctx.host)
    except XmrctlError as e:
        fail(ctx, e)

    get_logger(ctx).info("core_budget_set", requested=percentage, written=budget)
    if budget != percentage:
        ctx.console.print(f"Core budget {percentage}% clamped to {budget}%")
    ctx.console.print(f"Core budget set to {budget}% of {facts.logical_cores} threads")
    _restart_if_running(ctx)
