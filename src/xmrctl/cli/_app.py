"""The command-line interface for xmrctl."""
# ruff: noqa: TC003  # Path needed at runtime for the create_app signature

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from xmrctl import __version__
from xmrctl.config import safe_load_settings
from xmrctl.exceptions import UnsupportedPlatformError
from xmrctl.host import Fetcher, HostProtocol, SystemHost
from xmrctl.platform import PlatformFacts, detect
from xmrctl.utils import LogFile, create_cli_logger, get_cli_log_file

from ._commands import (
    COMMAND_NAMES,
    HELP_NAMES,
    CLIContext,
    ExitCode,
    exit_code_for,
    exit_with_error,
    register_commands,
)

APP_HELP = "Install, configure and supervise the XMRig miner."

# Tokens that never need the platform probe
_PROBE_EXEMPT: frozenset[str] = HELP_NAMES | {"--help", "-h", "--version"}


def create_app(  # noqa: PLR0913
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
    host: HostProtocol | None = None,
    facts: PlatformFacts | None = None,
    fetcher: Fetcher | None = None,
    home: Path | None = None,
) -> App:
    """Create the xmrctl CLI application.

    Args:
        console: Console for regular output.
        error_console: Console for errors and warnings.
        exit_on_error: Exit on argument parsing errors.
        host: Host collaborator. Defaults to SystemHost().
        facts: Platform facts. Probed at launch if None.
        fetcher: HTTP fetcher for downloads. Created on demand if None.
        home: Home directory for per-user artifacts (defaults to ~).

    Returns:
        The application; invoke it through ``app.meta``.
    """
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="xmrctl",
        help=APP_HELP,
        help_on_error=True,
        version=__version__,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.meta.default
    def _default(  # pyright: ignore[reportUnusedFunction]
        *tokens: Annotated[str, Parameter(show=False, allow_leading_hyphen=True)],
    ) -> None:
        """Launch xmrctl.

        Args:
            tokens: Command tokens to pass to subcommands.
        """
        verb = tokens[0] if tokens else None
        if verb is not None and not verb.startswith("-") and verb not in COMMAND_NAMES:
            exit_with_error(
                f"Unknown command: {verb}", ExitCode.USAGE_ERROR, console=error_console
            )

        settings, settings_error = safe_load_settings()

        # The platform is probed before anything touches the disk or network
        platform_facts = facts
        if platform_facts is None and verb is not None and verb not in _PROBE_EXEMPT:
            try:
                platform_facts = detect()
            except UnsupportedPlatformError as e:
                exit_with_error(str(e), exit_code_for(e), console=error_console)

        log_sink = LogFile(
            Path(settings.logging.file) if settings.logging.file else get_cli_log_file()
        )
        cli_logger = create_cli_logger(
            level=settings.logging.level.value,
            log_format=settings.logging.format.value,  # type: ignore[arg-type]
            command=verb or "",
            sink=log_sink,
        )
        if settings_error is not None:
            cli_logger.warning("settings_load_failed", error=settings_error)

        ctx = CLIContext(
            settings=settings,
            host=host if host is not None else SystemHost(),
            facts=platform_facts,
            console=console,
            error_console=error_console,
            settings_error=settings_error,
            logger=cli_logger,
            fetcher=fetcher,
            home=home,
        )
        CLIContext.set_current(ctx)

        try:
            app(tokens)
        finally:
            CLIContext.reset()
            log_sink.close()

    register_commands(app)
    return app


def main() -> None:
    """Default entrypoint for the `xmrctl` CLI."""
    app = create_app()
    app.meta()


if __name__ == "__main__":
    main()
