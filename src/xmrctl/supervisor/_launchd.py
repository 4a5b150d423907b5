"""User-service driver backed by a launchd user agent (macOS)."""

from __future__ import annotations

from typing import TYPE_CHECKING, final

from xmrctl.exceptions import BackendUnavailableError, SupervisionError

from ._artifacts import write_definition
from ._models import SupervisionBackend
from ._templates import LAUNCHD_TEMPLATE, render_definition

if TYPE_CHECKING:
    from xmrctl.host import HostProtocol
    from xmrctl.platform import PlatformFacts

    from ._models import MinerInvocation, ServiceDescriptor

LAUNCHCTL = "launchctl"


@final
class LaunchAgentDriver:
    """BackendDriver for a launchd agent in ~/Library/LaunchAgents.

    The plist sets KeepAlive, so launchd restarts the miner when it exits.
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
        return SupervisionBackend.USER_SERVICE

    @property
    def descriptor(self) -> ServiceDescriptor:
        return self._descriptor

    @property
    def supports_native_restart(self) -> bool:
        return True

    @property
    def _service_target(self) -> str:
        return f"gui/{self._host.uid()}/{self._descriptor.session_name}"

    def is_available(self) -> bool:
        return self._facts.is_macos and self._host.which(LAUNCHCTL) is not None

    def is_active(self) -> bool:
        if not self._facts.is_macos:
            return False
        return self._host.run([LAUNCHCTL, "list", self._descriptor.session_name]).ok

    def materialize(self) -> None:
        content = render_definition(
            LAUNCHD_TEMPLATE, self._descriptor, self._invocation
        )
        write_definition(self._host, self._descriptor, content, mode=0o644)

    def activate(self) -> None:
        result = self._host.run(
            [LAUNCHCTL, "load", "-w", str(self._descriptor.definition_path)]
        )
        if not result.ok:
            msg = f"Could not load launchd agent: {result.describe()}"
            raise BackendUnavailableError(msg, backend=self.backend.value)

    def deactivate(self) -> None:
        result = self._host.run(
            [LAUNCHCTL, "unload", "-w", str(self._descriptor.definition_path)]
        )
        if not result.ok:
            msg = f"Could not unload launchd agent: {result.describe()}"
            raise SupervisionError(msg, backend=self.backend.value)

    def restart(self) -> None:
        result = self._host.run([LAUNCHCTL, "kickstart", "-k", self._service_target])
        if not result.ok:
            msg = f"Could not restart launchd agent: {result.describe()}"
            raise BackendUnavailableError(msg, backend=self.backend.value)

    def health(self) -> dict[str, str]:
        return {}

    def remove(self) -> bool:
        return self._host.remove(self._descriptor.definition_path)
