"""Miner process supervision.

Keeps xmrig running under exactly one of three native backends and
presents a uniform start/stop/status/restart contract over them.

Key Components:
    - SupervisionController: Idempotent start/stop/status/restart
    - BackendDetector: Derives the active backend from live host evidence
    - ScreenDriver: GNU screen session running a restart loop
    - LaunchAgentDriver: launchd user agent (macOS)
    - SystemdDriver: systemd unit (Linux)
    - ConsoleReporter: Rich output for informational messages

Example:
    >>> from xmrctl.supervisor import MinerInvocation, SupervisionController
    >>> controller = SupervisionController(host, facts, invocation)
    >>> controller.stop()
"""

from ._controller import (
    MULTIPLEXER_PACKAGE,
    START_PREFERENCE,
    SupervisionController,
    build_drivers,
)
from ._descriptors import (
    LAUNCHD_LABEL,
    SCREEN_SESSION_NAME,
    SYSTEMD_UNIT,
    launchd_descriptor,
    screen_descriptor,
    systemd_descriptor,
)
from ._detector import BackendDetector
from ._launchd import LaunchAgentDriver
from ._models import (
    RESTART_DELAY,
    BackendStatus,
    MinerInvocation,
    ServiceDescriptor,
    SupervisionBackend,
)
from ._output import ConsoleReporter
from ._protocol import BackendDriver, Reporter
from ._screen import ScreenDriver
from ._systemd import SYSTEMD_RUNTIME_DIR, SystemdDriver
from ._templates import (
    LAUNCHD_TEMPLATE,
    SCREEN_TEMPLATE,
    SYSTEMD_TEMPLATE,
    create_environment,
    render_definition,
)

__all__ = [
    "LAUNCHD_LABEL",
    "LAUNCHD_TEMPLATE",
    "MULTIPLEXER_PACKAGE",
    "RESTART_DELAY",
    "SCREEN_SESSION_NAME",
    "SCREEN_TEMPLATE",
    "START_PREFERENCE",
    "SYSTEMD_RUNTIME_DIR",
    "SYSTEMD_TEMPLATE",
    "SYSTEMD_UNIT",
    "BackendDetector",
    "BackendDriver",
    "BackendStatus",
    "ConsoleReporter",
    "LaunchAgentDriver",
    "MinerInvocation",
    "Reporter",
    "ScreenDriver",
    "ServiceDescriptor",
    "SupervisionBackend",
    "SupervisionController",
    "SystemdDriver",
    "build_drivers",
    "create_environment",
    "launchd_descriptor",
    "render_definition",
    "screen_descriptor",
    "systemd_descriptor",
]
