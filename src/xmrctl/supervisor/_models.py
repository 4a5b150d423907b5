"""Data models for the supervision system.

This module defines the core data types for backend supervision:
- SupervisionBackend: The three mutually-exclusive backends
- ServiceDescriptor: Fixed artifacts owned by a backend
- MinerInvocation: The fixed command line a backend keeps running
- BackendStatus: Result of a status inquiry
"""

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path  # noqa: TC003 - Used in runtime type annotations

from xmrctl.utils import MINER_BINARY_NAME

# Seconds between restarts, shared by all three backends
RESTART_DELAY: int = 5


class SupervisionBackend(StrEnum):
    """Native facilities capable of keeping the miner running unattended.

    - MULTIPLEXER: a detached GNU screen session running a restart loop
    - USER_SERVICE: a launchd user agent (macOS)
    - SYSTEM_SERVICE: a systemd unit (Linux)
    """

    MULTIPLEXER = "multiplexer"
    USER_SERVICE = "user_service"
    SYSTEM_SERVICE = "system_service"

    @property
    def label(self) -> str:
        """Return a human-readable name for messages."""
        return _BACKEND_LABELS[self]


_BACKEND_LABELS: dict[SupervisionBackend, str] = {
    SupervisionBackend.MULTIPLEXER: "screen session",
    SupervisionBackend.USER_SERVICE: "launchd user agent",
    SupervisionBackend.SYSTEM_SERVICE: "systemd service",
}


@dataclass(frozen=True, slots=True)
class ServiceDescriptor:
    """Well-known artifacts owned by one backend.

    Attributes:
        backend: The backend that owns these artifacts.
        session_name: Session name, launchd label or systemd unit name.
        definition_path: Service-definition file (restart-loop script for
            the multiplexer).
        log_path: File receiving the miner's output.
    """

    backend: SupervisionBackend
    session_name: str
    definition_path: Path
    log_path: Path


@dataclass(frozen=True, slots=True)
class MinerInvocation:
    """The fixed miner command line.

    Attributes:
        binary: Absolute path of the miner binary.
        config_path: Absolute path of the miner's JSON config file.
    """

    binary: Path
    config_path: Path

    @property
    def argv(self) -> tuple[str, ...]:
        return (str(self.binary), f"--config={self.config_path}")

    @property
    def binary_name(self) -> str:
        return self.binary.name or MINER_BINARY_NAME


@dataclass(frozen=True, slots=True)
class BackendStatus:
    """Result of a status inquiry.

    Attributes:
        backend: The backend currently governing the miner, or None.
        descriptor: Artifacts of the active backend, or None.
        health: Manager-reported health fields (systemd only).
    """

    backend: SupervisionBackend | None
    descriptor: ServiceDescriptor | None = None
    health: dict[str, str] = field(default_factory=dict)

    @property
    def running(self) -> bool:
        return self.backend is not None
