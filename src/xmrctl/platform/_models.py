"""Data models for platform facts."""

from dataclasses import dataclass
from enum import StrEnum


class OsFamily(StrEnum):
    """Supported operating system families."""

    MACOS = "macos"
    LINUX = "linux"


class CpuArch(StrEnum):
    """Supported CPU architectures."""

    X86_64 = "x86_64"
    ARM64 = "arm64"


@dataclass(frozen=True, slots=True)
class PlatformFacts:
    """Read-only facts about the host, computed once per invocation.

    Attributes:
        os_family: Operating system family.
        cpu_arch: CPU architecture.
        logical_cores: Number of logical CPUs (hardware threads).
        physical_cores: Number of physical CPU cores.
    """

    os_family: OsFamily
    cpu_arch: CpuArch
    logical_cores: int
    physical_cores: int

    @property
    def is_macos(self) -> bool:
        return self.os_family == OsFamily.MACOS

    @property
    def is_linux(self) -> bool:
        return self.os_family == OsFamily.LINUX
