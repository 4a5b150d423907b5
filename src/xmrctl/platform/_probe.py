"""Platform detection.

Maps the values reported by the interpreter onto the two supported OS
families and CPU architectures, and reads CPU topology through psutil.
"""

import platform

import psutil

from xmrctl.exceptions import UnsupportedPlatformError

from ._models import CpuArch, OsFamily, PlatformFacts

_OS_FAMILIES: dict[str, OsFamily] = {
    "darwin": OsFamily.MACOS,
    "linux": OsFamily.LINUX,
}

_CPU_ARCHES: dict[str, CpuArch] = {
    "x86_64": CpuArch.X86_64,
    "amd64": CpuArch.X86_64,
    "arm64": CpuArch.ARM64,
    "aarch64": CpuArch.ARM64,
}


def _core_counts() -> tuple[int, int]:
    """Return (logical, physical) core counts, never less than one."""
    logical = psutil.cpu_count(logical=True) or 1
    # psutil returns None for physical cores on some virtualized hosts
    physical = psutil.cpu_count(logical=False) or logical
    return logical, physical


def detect() -> PlatformFacts:
    """Detect the host platform.

    Returns:
        The platform facts for this invocation.

    Raises:
        UnsupportedPlatformError: If the OS family or CPU architecture is
            not one of the supported values.
    """
    system = platform.system()
    machine = platform.machine()

    os_family = _OS_FAMILIES.get(system.lower())
    if os_family is None:
        msg = f"Unsupported operating system: {system or 'unknown'}"
        raise UnsupportedPlatformError(msg, system=system, machine=machine)

    cpu_arch = _CPU_ARCHES.get(machine.lower())
    if cpu_arch is None:
        msg = f"Unsupported CPU architecture: {machine or 'unknown'}"
        raise UnsupportedPlatformError(msg, system=system, machine=machine)

    logical, physical = _core_counts()
    return PlatformFacts(
        os_family=os_family,
        cpu_arch=cpu_arch,
        logical_cores=logical,
        physical_cores=physical,
    )
