"""Protocol definitions for the supervision system.

This module defines the interfaces that decouple the controller from
backend and output implementations:
- BackendDriver: The capability set each backend adapter implements
- Reporter: The informational channel for user-facing messages
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ._models import ServiceDescriptor, SupervisionBackend


@runtime_checkable
class BackendDriver(Protocol):
    """Protocol for a supervision backend adapter.

    Drivers are stateless adapters over a HostProtocol. Every query goes
    to the host, so two calls never disagree because of cached state.
    """

    @property
    def backend(self) -> SupervisionBackend:
        """Return the backend this driver adapts."""
        ...

    @property
    def descriptor(self) -> ServiceDescriptor:
        """Return the fixed artifacts owned by this backend."""
        ...

    @property
    def supports_native_restart(self) -> bool:
        """Return True if restart() is a single native call."""
        ...

    def is_available(self) -> bool:
        """Return True if the backend's native facility is installed."""
        ...

    def is_active(self) -> bool:
        """Return True if the backend shows live evidence of running the miner."""
        ...

    def materialize(self) -> None:
        """Write the backend's service-definition artifact.

        Raises:
            PersistedServiceWriteError: If the artifact cannot be written.
        """
        ...

    def activate(self) -> None:
        """Start the miner under this backend.

        Raises:
            BackendUnavailableError: If the native facility refuses.
        """
        ...

    def deactivate(self) -> None:
        """Stop the miner under this backend.

        Raises:
            SupervisionError: If the native termination call fails.
        """
        ...

    def restart(self) -> None:
        """Restart the miner with a single native call.

        Raises:
            NotImplementedError: If supports_native_restart is False.
            BackendUnavailableError: If the native facility refuses.
        """
        ...

    def health(self) -> dict[str, str]:
        """Return manager-reported health fields (empty if unsupported)."""
        ...

    def remove(self) -> bool:
        """Delete the service-definition artifact.

        Returns:
            True if an artifact was removed.

        Raises:
            OSError: If the artifact exists but cannot be removed.
        """
        ...


@runtime_checkable
class Reporter(Protocol):
    """Protocol for the informational channel.

    Messages sent here are not errors: "already running" and "nothing to
    stop" are reported through info(), recoverable failures through
    warning().
    """

    def info(self, message: str) -> None:
        """Report an informational message."""
        ...

    def warning(self, message: str) -> None:
        """Report a recoverable problem."""
        ...
