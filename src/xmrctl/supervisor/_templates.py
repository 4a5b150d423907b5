"""Jinja2 rendering of service-definition files."""

from __future__ import annotations

import shlex
from typing import TYPE_CHECKING, cast

from xmrctl.utils import get_templates_dir

from ._models import RESTART_DELAY

if TYPE_CHECKING:
    from jinja2 import Environment

    from ._models import MinerInvocation, ServiceDescriptor

SCREEN_TEMPLATE = "xmrig-loop.sh.j2"
LAUNCHD_TEMPLATE = "launchd.plist.j2"
SYSTEMD_TEMPLATE = "systemd.service.j2"


def create_environment() -> Environment:
    """Create the Jinja2 Environment for the packaged templates.

    Autoescaping is off; the plist template escapes XML explicitly and the
    shell template quotes with the shell_quote filter.
    """
    from jinja2 import Environment, FileSystemLoader, StrictUndefined  # noqa: PLC0415

    env = Environment(
        loader=FileSystemLoader(str(get_templates_dir())),
        autoescape=False,  # noqa: S701
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )
    env.filters["shell_quote"] = shlex.quote
    return env


def render_definition(
    template_name: str,
    descriptor: ServiceDescriptor,
    invocation: MinerInvocation,
    *,
    env: Environment | None = None,
) -> str:
    """Render a service-definition file for a backend.

    Args:
        template_name: Template file name in the templates directory.
        descriptor: The backend's service descriptor.
        invocation: The miner command line to supervise.
        env: Optional Jinja2 Environment; created if not provided.

    Returns:
        Rendered file content.
    """
    environment = env if env is not None else create_environment()
    template = environment.get_template(template_name)
    return cast(
        "str",
        template.render(
            argv=invocation.argv,
            binary_name=invocation.binary_name,
            label=descriptor.session_name,
            log_path=str(descriptor.log_path),
            restart_delay=RESTART_DELAY,
        ),
    )
