"""Installation and removal of the miner.

Installs the dependencies through the OS package manager, downloads the
xmrig release tarball for the platform, copies the binary into place
and generates the config file when none exists.
"""

from __future__ import annotations

import contextlib
import tarfile
import tempfile
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING, final

from xmrctl.exceptions import DownloadError, InstallError, PackageInstallError
from xmrctl.host import Fetcher, PackageManager
from xmrctl.platform import CpuArch, OsFamily
from xmrctl.supervisor import ConsoleReporter
from xmrctl.utils import (
    MINER_BINARY_NAME,
    create_null_logger,
    get_miner_binary_path,
    get_miner_config_path,
)

from ._template import render_config, write_config

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from xmrctl.config import Settings
    from xmrctl.host import HostProtocol
    from xmrctl.platform import PlatformFacts
    from xmrctl.supervisor import Reporter, SupervisionController

# Release asset suffix per platform; Linux arm64 has no prebuilt release
RELEASE_ASSETS: dict[tuple[OsFamily, CpuArch], str] = {
    (OsFamily.LINUX, CpuArch.X86_64): "linux-static-x64",
    (OsFamily.MACOS, CpuArch.X86_64): "macos-x64",
    (OsFamily.MACOS, CpuArch.ARM64): "macos-arm64",
}

# Best-effort dependencies: screen for the multiplexer backend, hwloc for
# xmrig's CPU topology detection
DEPENDENCIES: tuple[str, ...] = ("screen", "hwloc")

BINARY_MODE = 0o755


def resolve_release_url(
    release_url: str,
    version: str,
    facts: PlatformFacts,
) -> str:
    """Fill in the release URL template for the platform.

    Args:
        release_url: URL template with optional {version} and {asset} fields.
        version: xmrig version.
        facts: Platform facts.

    Returns:
        The download URL.

    Raises:
        DownloadError: If the template needs an asset and none is published
            for the platform.
    """
    asset = RELEASE_ASSETS.get((facts.os_family, facts.cpu_arch))
    if asset is None and "{asset}" in release_url:
        msg = (
            f"No prebuilt xmrig release for {facts.os_family} {facts.cpu_arch}; "
            "set miner.release_url to a tarball built for this machine"
        )
        raise DownloadError(msg)
    return release_url.format(version=version, asset=asset or "")


def extract_binary(archive: Path, dest_dir: Path) -> Path:
    """Extract the xmrig executable from a release tarball.

    Returns:
        Path of the extracted executable.

    Raises:
        InstallError: If the archive is unreadable or has no xmrig member.
    """
    try:
        with tarfile.open(archive, "r:*") as tar:
            member = next(
                (
                    m
                    for m in tar.getmembers()
                    if m.isfile() and PurePosixPath(m.name).name == MINER_BINARY_NAME
                ),
                None,
            )
            if member is None:
                msg = f"{archive.name} does not contain an {MINER_BINARY_NAME} executable"
                raise InstallError(msg)
            tar.extract(member, dest_dir, filter="data")
    except (tarfile.TarError, OSError) as e:
        msg = f"Could not extract {archive.name}: {e}"
        raise InstallError(msg) from e
    return dest_dir / member.name


@final
class Installer:
    """Install and uninstall xmrig on the host."""

    __slots__ = (
        "_binary_path",
        "_config_path",
        "_facts",
        "_fetcher",
        "_host",
        "_logger",
        "_reporter",
        "_settings",
    )

    def __init__(
        self,
        host: HostProtocol,
        facts: PlatformFacts,
        settings: Settings,
        *,
        fetcher: Fetcher | None = None,
        reporter: Reporter | None = None,
        logger: FilteringBoundLogger | None = None,
        binary_path: Path | None = None,
        config_path: Path | None = None,
    ) -> None:
        self._host = host
        self._facts = facts
        self._settings = settings
        self._fetcher = fetcher
        self._reporter: Reporter = reporter or ConsoleReporter()
        self._logger = logger or create_null_logger()
        self._binary_path = binary_path or get_miner_binary_path()
        self._config_path = config_path or get_miner_config_path(facts.os_family)

    @property
    def binary_path(self) -> Path:
        return self._binary_path

    @property
    def config_path(self) -> Path:
        return self._config_path

    def install_dependencies(self) -> list[str]:
        """Install DEPENDENCIES through the package manager, best-effort.

        Returns:
            Packages that are installed after the call.
        """
        manager = PackageManager.detect(self._host, self._facts.os_family)
        if manager is None:
            self._reporter.warning(
                "No supported package manager found; install screen and hwloc manually"
            )
            self._logger.warning("package_manager_missing")
            return []

        installed: list[str] = []
        for package in DEPENDENCIES:
            try:
                manager.install(package)
            except PackageInstallError as e:
                self._logger.warning(
                    "dependency_install_failed", package=package, manager=manager.name
                )
                self._reporter.warning(str(e))
            else:
                installed.append(package)
        return installed

    def release_url(self) -> str:
        miner = self._settings.miner
        return resolve_release_url(miner.release_url, miner.version, self._facts)

    def install_binary(self) -> Path:
        """Download the release and copy the xmrig binary into place.

        Raises:
            DownloadError: If the release cannot be downloaded.
            InstallError: If the binary cannot be extracted or copied.
        """
        url = self.release_url()
        self._logger.info("downloading_release", url=url)
        self._reporter.info(f"Downloading {url}")

        with (
            tempfile.TemporaryDirectory(prefix="xmrctl-") as tmp,
            contextlib.ExitStack() as stack,
        ):
            fetcher = self._fetcher or stack.enter_context(Fetcher())
            work_dir = Path(tmp)
            archive = fetcher.fetch(url, work_dir / "xmrig.tar.gz")
            binary = extract_binary(archive, work_dir / "extract")
            try:
                self._host.copy_file(
                    binary, self._binary_path, privileged=True, mode=BINARY_MODE
                )
            except OSError as e:
                msg = f"Could not install {MINER_BINARY_NAME} to {self._binary_path}: {e}"
                raise InstallError(msg) from e

        self._logger.info("binary_installed", path=str(self._binary_path))
        return self._binary_path

    def ensure_config(self) -> bool:
        """Generate the miner config from settings unless one exists.

        Returns:
            True if a new config file was written.
        """
        if self._host.exists(self._config_path):
            return False
        text = render_config(self._settings.miner, self._facts)
        write_config(self._host, self._config_path, text)
        self._logger.info("config_written", path=str(self._config_path))
        return True

    def install(self) -> Path:
        """Install dependencies, the binary and a default config.

        Returns:
            The installed binary path.

        Raises:
            DownloadError: If the release cannot be downloaded.
            InstallError: If the binary cannot be installed.
            WriteFailedError: If the config file cannot be written.
        """
        _ = self.install_dependencies()
        binary = self.install_binary()
        if self.ensure_config():
            self._reporter.info(f"Wrote miner config to {self._config_path}")
        self._reporter.info(
            f"Installed {MINER_BINARY_NAME} {self._settings.miner.version} to {binary}"
        )
        return binary

    def uninstall(self, controller: SupervisionController) -> list[Path]:
        """Stop the miner and remove everything install and start created.

        Each removal is best-effort; failures are reported as warnings.

        Returns:
            Paths that were removed.
        """
        _ = controller.stop()
        removed = controller.remove_artifacts()
        for path in (self._binary_path, self._config_path):
            try:
                if self._host.remove(path, privileged=True):
                    removed.append(path)
            except OSError as e:
                self._logger.warning("remove_failed", path=str(path), error=str(e))
                self._reporter.warning(f"Could not remove {path}: {e}")
        self._logger.info("uninstalled", removed=[str(p) for p in removed])
        return removed
