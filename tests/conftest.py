"""Shared test fixtures for xmrctl tests."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Self

import pytest
from rich.console import Console

from xmrctl.host import CommandResult, FakeHost
from xmrctl.platform import CpuArch, OsFamily, PlatformFacts
from xmrctl.supervisor import SYSTEMD_RUNTIME_DIR, MinerInvocation

HOME = Path("/home/miner")
BINARY = Path("/usr/local/bin/xmrig")
LINUX_CONFIG = Path("/etc/xmrig/config.json")
MACOS_CONFIG = Path("/usr/local/etc/xmrig/config.json")

LINUX_FACTS = PlatformFacts(
    os_family=OsFamily.LINUX,
    cpu_arch=CpuArch.X86_64,
    logical_cores=8,
    physical_cores=4,
)
MACOS_FACTS = PlatformFacts(
    os_family=OsFamily.MACOS,
    cpu_arch=CpuArch.ARM64,
    logical_cores=10,
    physical_cores=10,
)

SAMPLE_CONFIG = """{
  "autosave": true,
  "donate-level": 1,
  "donate-over-proxy": 1,
  "cpu": {
    "enabled": true,
    "max-threads-hint": 30,
    "yield": true
  },
  "pools": [
    {
      "url": "pool.example.com:443"
    }
  ]
}
"""


def _result(argv: tuple[str, ...], code: int = 0, stdout: str = "", stderr: str = "") -> CommandResult:
    return CommandResult(argv=argv, exit_code=code, stdout=stdout, stderr=stderr)


@dataclass
class ServiceSimulator:
    """Simulates screen, launchctl and systemctl on a FakeHost.

    Attributes:
        host: The fake host the handlers are registered on.
        sessions: Running screen session names.
        loaded: Loaded launchd labels.
        active_units: Active systemd units.
        enabled_units: Enabled systemd units.
        stuck: Termination calls succeed but leave the miner running.
        refuse_activation: Activation calls fail.
        restarts: Native restart calls, per service name.
    """

    host: FakeHost
    sessions: set[str] = field(default_factory=set)
    loaded: set[str] = field(default_factory=set)
    active_units: set[str] = field(default_factory=set)
    enabled_units: set[str] = field(default_factory=set)
    stuck: bool = False
    refuse_activation: bool = False
    restarts: dict[str, int] = field(default_factory=dict)

    def install(
        self, *, screen: bool = False, launchctl: bool = False, systemd: bool = False
    ) -> Self:
        if screen:
            self.host.register("screen", self._screen)
        if launchctl:
            self.host.register("launchctl", self._launchctl)
        if systemd:
            self.host.register("systemctl", self._systemctl)
            self.host.directories.add(SYSTEMD_RUNTIME_DIR)
        return self

    def _screen(self, argv: tuple[str, ...]) -> CommandResult:
        match argv[1:]:
            case ("-ls",):
                if not self.sessions:
                    return _result(argv, 1, "No Sockets found in /run/screen/S-miner.\n")
                lines = "".join(f"\t4242.{name}\t(Detached)\n" for name in sorted(self.sessions))
                count = len(self.sessions)
                return _result(
                    argv,
                    1,
                    f"There is a screen on:\n{lines}{count} Socket in /run/screen/S-miner.\n",
                )
            case ("-dmS", name, *_):
                if self.refuse_activation:
                    return _result(argv, 1, stderr="Cannot make directory '/run/screen'")
                self.sessions.add(name)
                return _result(argv)
            case ("-S", name, "-X", "quit"):
                if name not in self.sessions:
                    return _result(argv, 1, "No screen session found.\n")
                if not self.stuck:
                    self.sessions.discard(name)
                return _result(argv)
        return _result(argv, 1, stderr="unexpected screen call")

    def _launchctl(self, argv: tuple[str, ...]) -> CommandResult:
        match argv[1:]:
            case ("list", label):
                if label in self.loaded:
                    return _result(argv, 0, f'{{\n\t"Label" = "{label}";\n}};\n')
                return _result(argv, 113, stderr=f'Could not find service "{label}" in domain')
            case ("load", "-w", plist):
                if self.refuse_activation:
                    return _result(argv, 5, stderr="Load failed: 5: Input/output error")
                path = Path(plist)
                if path not in self.host.files:
                    return _result(argv, 1, stderr=f"{plist}: No such file or directory")
                self.loaded.add(path.stem)
                return _result(argv)
            case ("unload", "-w", plist):
                if not self.stuck:
                    self.loaded.discard(Path(plist).stem)
                return _result(argv)
            case ("kickstart", "-k", target):
                label = target.rsplit("/", 1)[-1]
                if label not in self.loaded:
                    return _result(argv, 113, stderr="Could not find service")
                self.restarts[label] = self.restarts.get(label, 0) + 1
                return _result(argv)
        return _result(argv, 1, stderr="unexpected launchctl call")

    def _systemctl(self, argv: tuple[str, ...]) -> CommandResult:
        match argv[1:]:
            case ("is-active", "--quiet", unit):
                return _result(argv, 0 if unit in self.active_units else 3)
            case ("daemon-reload",):
                return _result(argv)
            case ("enable", "--now", unit):
                if self.refuse_activation:
                    return _result(argv, 1, stderr=f"Failed to enable unit: {unit}")
                if Path("/etc/systemd/system") / unit not in self.host.files:
                    return _result(argv, 1, stderr=f"Unit file {unit} does not exist.")
                self.active_units.add(unit)
                self.enabled_units.add(unit)
                return _result(argv)
            case ("stop", unit):
                if not self.stuck:
                    self.active_units.discard(unit)
                return _result(argv)
            case ("disable", unit):
                self.enabled_units.discard(unit)
                return _result(argv)
            case ("restart", unit):
                self.active_units.add(unit)
                self.restarts[unit] = self.restarts.get(unit, 0) + 1
                return _result(argv)
            case ("show", "-p", _, unit):
                if unit in self.active_units:
                    state = "ActiveState=active\nSubState=running\n"
                else:
                    state = "ActiveState=inactive\nSubState=dead\n"
                restarts = self.restarts.get(unit, 0)
                return _result(
                    argv,
                    0,
                    f"{state}NRestarts={restarts}\n"
                    "ActiveEnterTimestamp=Sat 2026-10-17 10:00:00 UTC\n",
                )
        return _result(argv, 1, stderr="unexpected systemctl call")


@dataclass
class RecordingReporter:
    """Reporter that records messages instead of printing them."""

    infos: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def simulator(host: FakeHost) -> ServiceSimulator:
    return ServiceSimulator(host)


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def linux_invocation() -> MinerInvocation:
    return MinerInvocation(binary=BINARY, config_path=LINUX_CONFIG)


@pytest.fixture
def macos_invocation() -> MinerInvocation:
    return MinerInvocation(binary=BINARY, config_path=MACOS_CONFIG)
