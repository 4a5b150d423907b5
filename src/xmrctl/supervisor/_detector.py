"""Backend detection by live host evidence."""

from __future__ import annotations

from typing import TYPE_CHECKING, final

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._models import SupervisionBackend
    from ._protocol import BackendDriver


@final
class BackendDetector:
    """Derive which backend currently governs the miner.

    Drivers are probed in the order given; the first one with live
    evidence wins. The multiplexer comes first so a running session is
    never reported as "not running" because of a leftover service file.
    Nothing is cached between calls.
    """

    __slots__ = ("_drivers",)

    def __init__(self, drivers: Sequence[BackendDriver]) -> None:
        self._drivers: tuple[BackendDriver, ...] = tuple(drivers)

    @property
    def drivers(self) -> tuple[BackendDriver, ...]:
        return self._drivers

    def active_driver(self) -> BackendDriver | None:
        """Return the first driver showing live evidence, or None."""
        for driver in self._drivers:
            if driver.is_active():
                return driver
        return None

    def current_backend(self) -> SupervisionBackend | None:
        """Return the backend currently governing the miner, or None."""
        driver = self.active_driver()
        return driver.backend if driver is not None else None
