"""Fixed service descriptors for each backend."""

from pathlib import Path

from ._models import ServiceDescriptor, SupervisionBackend

SCREEN_SESSION_NAME = "xmrig"
LAUNCHD_LABEL = "com.xmrig.miner"
SYSTEMD_UNIT = "xmrig.service"


def screen_descriptor(home: Path | None = None) -> ServiceDescriptor:
    """Descriptor for the screen session and its restart-loop script."""
    base = (home or Path.home()) / ".xmrig"
    return ServiceDescriptor(
        backend=SupervisionBackend.MULTIPLEXER,
        session_name=SCREEN_SESSION_NAME,
        definition_path=base / "xmrig-loop.sh",
        log_path=base / "xmrig.log",
    )


def launchd_descriptor(home: Path | None = None) -> ServiceDescriptor:
    """Descriptor for the launchd user agent."""
    user_home = home or Path.home()
    return ServiceDescriptor(
        backend=SupervisionBackend.USER_SERVICE,
        session_name=LAUNCHD_LABEL,
        definition_path=user_home / "Library" / "LaunchAgents" / f"{LAUNCHD_LABEL}.plist",
        log_path=user_home / "Library" / "Logs" / "xmrig.log",
    )


def systemd_descriptor() -> ServiceDescriptor:
    """Descriptor for the systemd system unit."""
    return ServiceDescriptor(
        backend=SupervisionBackend.SYSTEM_SERVICE,
        session_name=SYSTEMD_UNIT,
        definition_path=Path("/etc/systemd/system") / SYSTEMD_UNIT,
        log_path=Path("/var/log/xmrig.log"),
    )
