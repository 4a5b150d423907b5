"""OS package manager collaborator.

Detects the first available package manager for the platform and
installs packages through it. Homebrew runs unprivileged; the Linux
package managers run through sudo.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, final

from xmrctl.exceptions import PackageInstallError
from xmrctl.platform import OsFamily

if TYPE_CHECKING:
    from ._protocol import HostProtocol


@dataclass(frozen=True, slots=True)
class PackageManagerSpec:
    """Command lines for one package manager.

    Attributes:
        name: Executable name used for detection.
        install: Command prefix to install packages.
        query: Command prefix that exits 0 when a package is installed.
        privileged: Whether install needs elevated privileges.
    """

    name: str
    install: tuple[str, ...]
    query: tuple[str, ...]
    privileged: bool = True


# Detection order per OS family; the first executable found wins
PACKAGE_MANAGERS: dict[OsFamily, tuple[PackageManagerSpec, ...]] = {
    OsFamily.MACOS: (
        PackageManagerSpec(
            name="brew",
            install=("brew", "install"),
            query=("brew", "list", "--versions"),
            privileged=False,
        ),
    ),
    OsFamily.LINUX: (
        PackageManagerSpec(
            name="apt-get",
            install=("apt-get", "install", "-y"),
            query=("dpkg", "-s"),
        ),
        PackageManagerSpec(
            name="dnf",
            install=("dnf", "install", "-y"),
            query=("rpm", "-q"),
        ),
        PackageManagerSpec(
            name="yum",
            install=("yum", "install", "-y"),
            query=("rpm", "-q"),
        ),
        PackageManagerSpec(
            name="pacman",
            install=("pacman", "-S", "--noconfirm"),
            query=("pacman", "-Q"),
        ),
    ),
}


@final
class PackageManager:
    """Install and query OS packages through the detected manager."""

    __slots__ = ("_host", "spec")

    def __init__(self, host: HostProtocol, spec: PackageManagerSpec) -> None:
        self._host = host
        self.spec = spec

    @classmethod
    def detect(
        cls, host: HostProtocol, os_family: OsFamily
    ) -> PackageManager | None:
        """Return the first package manager available on the host.

        Args:
            host: Host used to look up executables.
            os_family: The host's OS family.

        Returns:
            A PackageManager, or None when no known manager is installed.
        """
        for spec in PACKAGE_MANAGERS[os_family]:
            if host.which(spec.name) is not None:
                return cls(host, spec)
        return None

    @property
    def name(self) -> str:
        return self.spec.name

    def is_installed(self, package: str) -> bool:
        """Return True if the package is already installed."""
        return self._host.run([*self.spec.query, package]).ok

    def install(self, package: str) -> None:
        """Install a package, skipping it when already installed.

        Raises:
            PackageInstallError: If the package manager reports failure.
        """
        if self.is_installed(package):
            return

        result = self._host.run(
            [*self.spec.install, package], privileged=self.spec.privileged
        )
        if not result.ok:
            msg = f"Failed to install {package} with {self.name}: {result.describe()}"
            raise PackageInstallError(msg, package=package, manager=self.name)
