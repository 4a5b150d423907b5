"""System-service driver backed by systemd (Linux)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, final

from xmrctl.exceptions import (
    BackendUnavailableError,
    PersistedServiceWriteError,
    SupervisionError,
)

from ._artifacts import write_definition
from ._models import SupervisionBackend
from ._templates import SYSTEMD_TEMPLATE, render_definition

if TYPE_CHECKING:
    from xmrctl.host import HostProtocol
    from xmrctl.platform import PlatformFacts

    from ._models import MinerInvocation, ServiceDescriptor

SYSTEMCTL = "systemctl"

# Present only when systemd is the running init system
SYSTEMD_RUNTIME_DIR = Path("/run/systemd/system")

HEALTH_PROPERTIES: tuple[str, ...] = (
    "ActiveState",
    "SubState",
    "NRestarts",
    "ActiveEnterTimestamp",
)


@final
class SystemdDriver:
    """BackendDriver for a systemd unit in /etc/systemd/system.

    The unit sets Restart=always. Every mutating systemctl call is
    privileged.
    """

    __slots__ = ("_descriptor", "_facts", "_host", "_invocation")

    def __init__(
        self,
        host: HostProtocol,
        facts: PlatformFacts,
        descriptor: ServiceDescriptor,
        invocation: MinerInvocation,
    ) -> None:
        self._host = host
        self._facts = facts
        self._descriptor = descriptor
        self._invocation = invocation

    @property
    def backend(self) -> SupervisionBackend:
        return SupervisionBackend.SYSTEM_SERVICE

    @property
    def descriptor(self) -> ServiceDescriptor:
        return self._descriptor

    @property
    def supports_native_restart(self) -> bool:
        return True

    @property
    def _unit(self) -> str:
        return self._descriptor.session_name

    def is_available(self) -> bool:
        return (
            self._facts.is_linux
            and self._host.which(SYSTEMCTL) is not None
            and self._host.exists(SYSTEMD_RUNTIME_DIR)
        )

    def is_active(self) -> bool:
        if not self._facts.is_linux:
            return False
        return self._host.run([SYSTEMCTL, "is-active", "--quiet", self._unit]).ok

    def materialize(self) -> None:
        content = render_definition(
            SYSTEMD_TEMPLATE, self._descriptor, self._invocation
        )
        write_definition(
            self._host, self._descriptor, content, privileged=True, mode=0o644
        )
        result = self._host.run([SYSTEMCTL, "daemon-reload"], privileged=True)
        if not result.ok:
            msg = f"systemd did not accept {self._unit}: {result.describe()}"
            raise PersistedServiceWriteError(
                msg, path=self._descriptor.definition_path, backend=self.backend.value
            )

    def activate(self) -> None:
        result = self._host.run(
            [SYSTEMCTL, "enable", "--now", self._unit], privileged=True
        )
        if not result.ok:
            msg = f"Could not start {self._unit}: {result.describe()}"
            raise BackendUnavailableError(msg, backend=self.backend.value)

    def deactivate(self) -> None:
        result = self._host.run([SYSTEMCTL, "stop", self._unit], privileged=True)
        if not result.ok:
            msg = f"Could not stop {self._unit}: {result.describe()}"
            raise SupervisionError(msg, backend=self.backend.value)
        # Keep the unit from coming back at boot; failure here is harmless
        _ = self._host.run([SYSTEMCTL, "disable", self._unit], privileged=True)

    def restart(self) -> None:
        result = self._host.run([SYSTEMCTL, "restart", self._unit], privileged=True)
        if not result.ok:
            msg = f"Could not restart {self._unit}: {result.describe()}"
            raise BackendUnavailableError(msg, backend=self.backend.value)

    def health(self) -> dict[str, str]:
        result = self._host.run(
            [SYSTEMCTL, "show", "-p", ",".join(HEALTH_PROPERTIES), self._unit]
        )
        if not result.ok:
            return {}

        health: dict[str, str] = {}
        for line in result.stdout.splitlines():
            key, sep, value = line.partition("=")
            if sep and key in HEALTH_PROPERTIES:
                health[key] = value.strip()
        return health

    def remove(self) -> bool:
        removed = self._host.remove(self._descriptor.definition_path, privileged=True)
        if removed and self.is_available():
            _ = self._host.run([SYSTEMCTL, "daemon-reload"], privileged=True)
        return removed
