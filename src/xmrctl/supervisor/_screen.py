"""Multiplexer driver backed by GNU screen.

The miner runs inside a detached, named screen session. The session runs
a restart-on-exit shell loop, which gives this backend the same
restart-on-crash behavior the native service managers provide.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, final

from xmrctl.exceptions import BackendUnavailableError, SupervisionError

from ._artifacts import write_definition
from ._models import SupervisionBackend
from ._templates import SCREEN_TEMPLATE, render_definition

if TYPE_CHECKING:
    from xmrctl.host import HostProtocol

    from ._models import MinerInvocation, ServiceDescriptor

SCREEN = "screen"


@final
class ScreenDriver:
    """BackendDriver for a named GNU screen session."""

    __slots__ = ("_descriptor", "_host", "_invocation", "_session_pattern")

    def __init__(
        self,
        host: HostProtocol,
        descriptor: ServiceDescriptor,
        invocation: MinerInvocation,
    ) -> None:
        self._host = host
        self._descriptor = descriptor
        self._invocation = invocation
        # `screen -ls` lists sessions as "<pid>.<name>\t(<date>)\t(Detached)"
        self._session_pattern = re.compile(
            rf"^\s*\d+\.{re.escape(descriptor.session_name)}\s", re.MULTILINE
        )

    @property
    def backend(self) -> SupervisionBackend:
        return SupervisionBackend.MULTIPLEXER

    @property
    def descriptor(self) -> ServiceDescriptor:
        return self._descriptor

    @property
    def supports_native_restart(self) -> bool:
        return False

    def is_available(self) -> bool:
        return self._host.which(SCREEN) is not None

    def is_active(self) -> bool:
        # screen -ls exits non-zero even when sessions exist, so parse output
        result = self._host.run([SCREEN, "-ls"])
        if result.command_not_found:
            return False
        return self._session_pattern.search(result.stdout) is not None

    def materialize(self) -> None:
        content = render_definition(SCREEN_TEMPLATE, self._descriptor, self._invocation)
        write_definition(self._host, self._descriptor, content, mode=0o755)

    def activate(self) -> None:
        result = self._host.run(
            [
                SCREEN,
                "-dmS",
                self._descriptor.session_name,
                "/bin/sh",
                str(self._descriptor.definition_path),
            ]
        )
        if not result.ok:
            msg = f"Could not start screen session: {result.describe()}"
            raise BackendUnavailableError(msg, backend=self.backend.value)

    def deactivate(self) -> None:
        result = self._host.run(
            [SCREEN, "-S", self._descriptor.session_name, "-X", "quit"]
        )
        if not result.ok:
            msg = f"Could not quit screen session: {result.describe()}"
            raise SupervisionError(msg, backend=self.backend.value)

    def restart(self) -> None:
        msg = "screen has no native restart; stop and start the session instead"
        raise NotImplementedError(msg)

    def health(self) -> dict[str, str]:
        return {}

    def remove(self) -> bool:
        return self._host.remove(self._descriptor.definition_path)
