"""Supervision controller.

The controller exposes start, stop, status and restart as idempotent,
backend-agnostic operations. It never stores which backend is in use:
every call asks the BackendDetector, which probes the host for live
evidence, so a backend changed out of band is never acted on stale.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, final

from xmrctl.config import MultiplexerInstallPolicy, SupervisionConfig
from xmrctl.exceptions import (
    BackendUnavailableError,
    PackageInstallError,
    PersistedServiceWriteError,
    StopVerificationFailedError,
    SupervisionError,
)
from xmrctl.host import PackageManager
from xmrctl.utils import create_null_logger

from ._descriptors import launchd_descriptor, screen_descriptor, systemd_descriptor
from ._detector import BackendDetector
from ._launchd import LaunchAgentDriver
from ._models import BackendStatus, SupervisionBackend
from ._output import ConsoleReporter
from ._screen import ScreenDriver
from ._systemd import SystemdDriver

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from structlog.typing import FilteringBoundLogger

    from xmrctl.host import HostProtocol
    from xmrctl.platform import PlatformFacts

    from ._models import MinerInvocation
    from ._protocol import BackendDriver, Reporter

# Package providing the multiplexer on every supported package manager
MULTIPLEXER_PACKAGE = "screen"

# Backend preference for start(); detection order is the reverse
START_PREFERENCE: tuple[SupervisionBackend, ...] = (
    SupervisionBackend.SYSTEM_SERVICE,
    SupervisionBackend.USER_SERVICE,
    SupervisionBackend.MULTIPLEXER,
)


def build_drivers(
    host: HostProtocol,
    facts: PlatformFacts,
    invocation: MinerInvocation,
    *,
    home: Path | None = None,
) -> tuple[BackendDriver, ...]:
    """Create the drivers for a platform, in detection order.

    The multiplexer exists everywhere; the user service only on macOS and
    the system service only on Linux.
    """
    drivers: list[BackendDriver] = [
        ScreenDriver(host, screen_descriptor(home), invocation)
    ]
    if facts.is_macos:
        drivers.append(
            LaunchAgentDriver(host, facts, launchd_descriptor(home), invocation)
        )
    if facts.is_linux:
        drivers.append(SystemdDriver(host, facts, systemd_descriptor(), invocation))
    return tuple(drivers)


@final
class SupervisionController:
    """Start, stop, inspect and restart the miner under one backend.

    Example:
        >>> controller = SupervisionController(host, facts, invocation)
        >>> controller.start()
        <SupervisionBackend.SYSTEM_SERVICE: 'system_service'>
        >>> controller.status().running
        True
    """

    __slots__ = (
        "_detector",
        "_drivers",
        "_facts",
        "_host",
        "_logger",
        "_reporter",
        "_settings",
    )

    def __init__(
        self,
        host: HostProtocol,
        facts: PlatformFacts,
        invocation: MinerInvocation,
        *,
        settings: SupervisionConfig | None = None,
        reporter: Reporter | None = None,
        logger: FilteringBoundLogger | None = None,
        drivers: Sequence[BackendDriver] | None = None,
        home: Path | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            host: Host collaborator for commands and files.
            facts: Platform facts from the probe.
            invocation: The miner command line to supervise.
            settings: Supervision settings. Defaults to SupervisionConfig().
            reporter: Informational channel. Defaults to a ConsoleReporter.
            logger: Structured logger. Defaults to a logger that drops events.
            drivers: Drivers in detection order. Built for the platform if None.
            home: Home directory for per-user artifacts (defaults to ~).
        """
        self._host = host
        self._facts = facts
        self._settings = settings or SupervisionConfig()
        self._reporter: Reporter = reporter or ConsoleReporter()
        self._logger = logger or create_null_logger()
        if drivers is None:
            drivers = build_drivers(host, facts, invocation, home=home)
        self._drivers: dict[SupervisionBackend, BackendDriver] = {
            driver.backend: driver for driver in drivers
        }
        self._detector = BackendDetector(drivers)

    @property
    def drivers(self) -> tuple[BackendDriver, ...]:
        return self._detector.drivers

    def current_backend(self) -> SupervisionBackend | None:
        """Return the backend currently governing the miner, or None."""
        return self._detector.current_backend()

    def _driver_for(self, backend: SupervisionBackend) -> BackendDriver:
        driver = self._drivers.get(backend)
        if driver is None:
            msg = f"The {backend.label} backend is not supported on {self._facts.os_family}"
            raise BackendUnavailableError(msg, backend=backend.value)
        return driver

    def _candidates(self) -> list[BackendDriver]:
        # Available service managers in preference order, then the multiplexer,
        # which is installed as a last resort when it is missing
        candidates = [
            driver
            for backend in START_PREFERENCE
            if backend is not SupervisionBackend.MULTIPLEXER
            and (driver := self._drivers.get(backend)) is not None
            and driver.is_available()
        ]
        candidates.append(self._driver_for(SupervisionBackend.MULTIPLEXER))
        return candidates

    def _ensure_available(self, driver: BackendDriver) -> None:
        if driver.is_available():
            return

        backend = driver.backend
        if backend is not SupervisionBackend.MULTIPLEXER:
            msg = f"The {backend.label} backend is not available on this host"
            raise BackendUnavailableError(msg, backend=backend.value)

        if self._settings.install_multiplexer is MultiplexerInstallPolicy.NEVER:
            msg = (
                "GNU screen is not installed and supervision.install_multiplexer "
                "is \"never\". Install screen, or set it to \"auto\""
            )
            raise BackendUnavailableError(msg, backend=backend.value)

        manager = PackageManager.detect(self._host, self._facts.os_family)
        if manager is None:
            msg = "GNU screen is not installed and no package manager was found"
            raise BackendUnavailableError(msg, backend=backend.value)

        self._reporter.warning(
            f"Falling back to a screen session; installing GNU screen with {manager.name}"
        )
        self._logger.warning(
            "installing_multiplexer", manager=manager.name, package=MULTIPLEXER_PACKAGE
        )
        try:
            manager.install(MULTIPLEXER_PACKAGE)
        except PackageInstallError as e:
            msg = f"Could not install GNU screen: {e}"
            raise BackendUnavailableError(msg, backend=backend.value, cause=e) from e

        if not driver.is_available():
            msg = f"GNU screen is still not on PATH after installing it with {manager.name}"
            raise BackendUnavailableError(msg, backend=backend.value)

    def _materialize(self, driver: BackendDriver) -> None:
        self._ensure_available(driver)
        self._logger.info(
            "backend_selected",
            backend=driver.backend.value,
            definition=str(driver.descriptor.definition_path),
        )
        driver.materialize()

    def _materialize_first(self, candidates: Sequence[BackendDriver]) -> BackendDriver:
        *fallbacks, last = candidates
        for driver in fallbacks:
            try:
                self._materialize(driver)
            except PersistedServiceWriteError as e:
                self._reporter.warning(f"{e}; falling back to the next backend")
                self._logger.warning(
                    "definition_write_failed", backend=driver.backend.value, error=str(e)
                )
            else:
                return driver
        self._materialize(last)
        return last

    def start(
        self, *, backend: SupervisionBackend | None = None
    ) -> SupervisionBackend:
        """Start the miner unless a backend already governs it.

        A service definition that cannot be written is reported as a
        warning and the next available backend is tried. Only the
        multiplexer, or a pinned backend, fails the call.

        Args:
            backend: Use this backend instead of selecting by availability.

        Returns:
            The backend governing the miner after the call.

        Raises:
            BackendUnavailableError: If the selected backend cannot be used.
            PersistedServiceWriteError: If the last candidate's definition
                cannot be written.
        """
        active = self._detector.active_driver()
        if active is not None:
            self._reporter.info(f"xmrig is already running ({active.backend.label})")
            self._logger.info("start_skipped", backend=active.backend.value)
            return active.backend

        candidates = [self._driver_for(backend)] if backend is not None else self._candidates()
        driver = self._materialize_first(candidates)
        driver.activate()
        self._logger.info("started", backend=driver.backend.value)
        self._reporter.info(
            f"Started xmrig under the {driver.backend.label} "
            f"(log: {driver.descriptor.log_path})"
        )
        return driver.backend

    def _verify_stopped(self, backend: SupervisionBackend) -> None:
        attempts = self._settings.stop_verify_attempts
        for attempt in range(attempts):
            remaining = self.current_backend()
            if remaining is None:
                return
            self._logger.debug(
                "stop_verification_pending", attempt=attempt + 1, backend=remaining.value
            )
            if attempt < attempts - 1:
                self._host.sleep(self._settings.stop_verify_interval)

        msg = f"xmrig still appears to be running after stopping the {backend.label}"
        raise StopVerificationFailedError(msg, backend=backend.value)

    def stop(self) -> SupervisionBackend | None:
        """Stop the miner under whichever backend governs it.

        Stop verification failures are reported as warnings, never raised.

        Returns:
            The backend that was stopped, or None if nothing was running.
        """
        driver = self._detector.active_driver()
        if driver is None:
            self._reporter.info("xmrig is not running; nothing to stop")
            return None

        backend = driver.backend
        self._logger.info("stopping", backend=backend.value)
        try:
            driver.deactivate()
        except SupervisionError as e:
            self._logger.warning("stop_failed", backend=backend.value, error=str(e))
            self._reporter.warning(str(e))

        try:
            self._verify_stopped(backend)
        except StopVerificationFailedError as e:
            self._logger.warning("stop_verification_failed", backend=backend.value)
            self._reporter.warning(str(e))
        else:
            self._logger.info("stopped", backend=backend.value)
            self._reporter.info(f"Stopped xmrig ({backend.label})")
        return backend

    def status(self) -> BackendStatus:
        """Return which backend governs the miner and its reported health."""
        driver = self._detector.active_driver()
        if driver is None:
            return BackendStatus(backend=None)
        return BackendStatus(
            backend=driver.backend,
            descriptor=driver.descriptor,
            health=driver.health(),
        )

    def restart(self) -> SupervisionBackend | None:
        """Restart the miner under its current backend.

        Service managers restart natively. The multiplexer has no restart
        primitive, so it is stopped and started again on the same backend.

        Returns:
            The backend governing the miner, or None if nothing was running.

        Raises:
            BackendUnavailableError: If the backend refuses to restart.
        """
        driver = self._detector.active_driver()
        if driver is None:
            self._reporter.info("xmrig is not running; nothing to restart")
            return None

        backend = driver.backend
        if driver.supports_native_restart:
            self._logger.info("restarting", backend=backend.value, native=True)
            driver.restart()
            self._reporter.info(f"Restarted xmrig ({backend.label})")
            return backend

        self._logger.info("restarting", backend=backend.value, native=False)
        _ = self.stop()
        return self.start(backend=backend)

    def remove_artifacts(self) -> list[Path]:
        """Delete every driver's service-definition file.

        Failures are reported as warnings.

        Returns:
            Paths that were removed.
        """
        removed: list[Path] = []
        for driver in self.drivers:
            path = driver.descriptor.definition_path
            try:
                if driver.remove():
                    removed.append(path)
            except OSError as e:
                self._logger.warning("remove_failed", path=str(path), error=str(e))
                self._reporter.warning(f"Could not remove {path}: {e}")
        return removed
