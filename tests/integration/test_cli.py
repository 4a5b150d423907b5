"""Integration tests for the xmrctl command line."""

from collections.abc import Callable
from pathlib import Path
from typing import TypeAlias

import orjson
import pytest
from pytest_mock import MockerFixture
from rich.console import Console

from tests.conftest import BINARY, HOME, LINUX_CONFIG, SAMPLE_CONFIG, ServiceSimulator
from tests.integration.conftest import RELEASE_BINARY, REMOTE_CONFIG, CliResult
from xmrctl import __version__
from xmrctl.cli import ExitCode, create_app
from xmrctl.exceptions import UnsupportedPlatformError
from xmrctl.host import FakeHost

UNIT_PATH = Path("/etc/systemd/system/xmrig.service")
REMOTE_URL = "https://example.com/templates/config.json"

Cli: TypeAlias = Callable[..., CliResult]


@pytest.fixture
def services(simulator: ServiceSimulator) -> ServiceSimulator:
    return simulator.install(screen=True, systemd=True)


@pytest.fixture
def installed(host: FakeHost) -> FakeHost:
    host.files[BINARY] = RELEASE_BINARY.decode()
    return host


class TestDispatch:
    def test_unknown_command(self, xmrctl_cli: Cli, host: FakeHost) -> None:
        result = xmrctl_cli("bogus")

        assert result.exit_code == ExitCode.USAGE_ERROR
        assert "Error: Unknown command: bogus" in result.output
        assert host.calls == []

    @pytest.mark.parametrize("verb", ["help", "h"])
    def test_help_lists_commands(self, xmrctl_cli: Cli, verb: str) -> None:
        result = xmrctl_cli(verb)

        assert result.exit_code == ExitCode.SUCCESS
        for command in ("install", "start", "stop", "status", "core", "no-donate"):
            assert command in result.output

    def test_unsupported_platform_exits_before_any_host_call(
        self,
        console: Console,
        host: FakeHost,
        mocker: MockerFixture,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        log_file = tmp_path / "logs" / "cli.log"
        monkeypatch.setenv("XMRCTL_LOGGING__FILE", str(log_file))
        _ = mocker.patch(
            "xmrctl.cli._app.detect",
            side_effect=UnsupportedPlatformError(
                "Unsupported operating system: FreeBSD", system="FreeBSD"
            ),
        )
        app = create_app(console=console, error_console=console, host=host, home=HOME)

        with pytest.raises(SystemExit) as exc_info:
            app.meta(["status"])

        assert exc_info.value.code == ExitCode.UNSUPPORTED_PLATFORM
        assert "Unsupported operating system: FreeBSD" in capsys.readouterr().out
        assert host.calls == []
        assert not log_file.exists()
        assert not log_file.parent.exists()

    def test_commands_log_to_the_configured_file(
        self,
        xmrctl_cli: Cli,
        installed: FakeHost,
        services: ServiceSimulator,
        monkeypatch: pytest.MonkeyPatch,
        tmp_path: Path,
    ) -> None:
        log_file = tmp_path / "logs" / "cli.log"
        monkeypatch.setenv("XMRCTL_LOGGING__FILE", str(log_file))

        result = xmrctl_cli("start")

        assert result.exit_code == ExitCode.SUCCESS
        entries = [orjson.loads(line) for line in log_file.read_text().splitlines()]
        assert {entry["event"] for entry in entries} >= {"backend_selected", "started"}
        assert all(entry["command"] == "start" for entry in entries)

    def test_help_does_not_probe_platform(
        self,
        console: Console,
        host: FakeHost,
        mocker: MockerFixture,
    ) -> None:
        detect = mocker.patch("xmrctl.cli._app.detect")
        app = create_app(console=console, error_console=console, host=host, home=HOME)

        try:
            app.meta(["help"])
        except SystemExit as e:
            assert e.code in (None, 0)

        detect.assert_not_called()

    def test_package_exposes_version(self) -> None:
        assert __version__ == "0.1.0"


class TestInstall:
    @pytest.mark.parametrize("verb", ["install", "i"])
    def test_installs_binary_and_config(
        self, xmrctl_cli: Cli, host: FakeHost, verb: str
    ) -> None:
        result = xmrctl_cli(verb)

        assert result.exit_code == ExitCode.SUCCESS
        assert host.files[BINARY] == RELEASE_BINARY.decode()
        assert orjson.loads(host.files[LINUX_CONFIG])["cpu"]["max-threads-hint"] == 100
        assert f"Installed xmrig 6.22.2 to {BINARY}" in result.output

    def test_release_download_failure(
        self, xmrctl_cli: Cli, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("XMRCTL_MINER__RELEASE_URL", "https://example.com/nope/{version}")

        result = xmrctl_cli("install")

        assert result.exit_code == ExitCode.DOWNLOAD_ERROR
        assert "Download failed (404)" in result.output

    def test_uninstall_removes_everything(
        self, xmrctl_cli: Cli, host: FakeHost, services: ServiceSimulator
    ) -> None:
        assert xmrctl_cli("install").exit_code == ExitCode.SUCCESS
        assert xmrctl_cli("start").exit_code == ExitCode.SUCCESS

        result = xmrctl_cli("uninstall")

        assert result.exit_code == ExitCode.SUCCESS
        assert f"Removed {UNIT_PATH}" in result.output
        assert f"Removed {BINARY}" in result.output
        assert services.active_units == set()
        assert host.files == {}

    def test_uninstall_with_nothing_installed(self, xmrctl_cli: Cli) -> None:
        result = xmrctl_cli("u")

        assert result.exit_code == ExitCode.SUCCESS
        assert "Nothing to remove" in result.output


class TestLifecycle:
    def test_start_requires_binary(self, xmrctl_cli: Cli, services: ServiceSimulator) -> None:
        result = xmrctl_cli("start")

        assert result.exit_code == ExitCode.NOT_FOUND
        assert "run `xmrctl install` first" in result.output
        assert services.active_units == set()

    def test_start_writes_config_and_starts_service(
        self,
        xmrctl_cli: Cli,
        installed: FakeHost,
        services: ServiceSimulator,
    ) -> None:
        result = xmrctl_cli("start")

        assert result.exit_code == ExitCode.SUCCESS
        assert f"Wrote miner config to {LINUX_CONFIG}" in result.output
        assert "Started xmrig under the systemd service" in result.output
        assert services.active_units == {"xmrig.service"}
        assert UNIT_PATH in installed.files

    def test_second_start_is_a_no_op(
        self, xmrctl_cli: Cli, installed: FakeHost, services: ServiceSimulator
    ) -> None:
        _ = xmrctl_cli("start")

        result = xmrctl_cli("st")

        assert result.exit_code == ExitCode.SUCCESS
        assert "already running (systemd service)" in result.output

    def test_start_falls_back_to_screen(
        self, xmrctl_cli: Cli, installed: FakeHost, simulator: ServiceSimulator
    ) -> None:
        _ = simulator.install(screen=True)
        installed.files[LINUX_CONFIG] = SAMPLE_CONFIG

        result = xmrctl_cli("start")

        assert result.exit_code == ExitCode.SUCCESS
        assert "Started xmrig under the screen session" in result.output
        assert simulator.sessions == {"xmrig"}
        assert installed.files[LINUX_CONFIG] == SAMPLE_CONFIG

    def test_start_falls_back_when_unit_cannot_be_written(
        self, xmrctl_cli: Cli, installed: FakeHost, services: ServiceSimulator
    ) -> None:
        installed.read_only.add(UNIT_PATH.parent)

        result = xmrctl_cli("start")

        assert result.exit_code == ExitCode.SUCCESS
        assert f"Warning: Could not write systemd service definition to {UNIT_PATH}" in result.output
        assert "Started xmrig under the screen session" in result.output
        assert services.sessions == {"xmrig"}
        assert services.active_units == set()

    def test_start_without_any_backend(
        self, xmrctl_cli: Cli, installed: FakeHost, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("XMRCTL_SUPERVISION__INSTALL_MULTIPLEXER", "never")

        result = xmrctl_cli("start")

        assert result.exit_code == ExitCode.BACKEND_UNAVAILABLE
        assert "GNU screen is not installed" in result.output

    def test_status_not_running(self, xmrctl_cli: Cli, services: ServiceSimulator) -> None:
        result = xmrctl_cli("status")

        assert result.exit_code == ExitCode.SUCCESS
        assert "xmrig is not running" in result.output

    def test_status_running(
        self, xmrctl_cli: Cli, installed: FakeHost, services: ServiceSimulator
    ) -> None:
        _ = xmrctl_cli("start")

        result = xmrctl_cli("stat")

        assert result.exit_code == ExitCode.SUCCESS
        assert "xmrig is running under the systemd service" in result.output
        assert "Name xmrig.service" in result.output
        assert "ActiveState active" in result.output

    def test_stop(
        self, xmrctl_cli: Cli, installed: FakeHost, services: ServiceSimulator
    ) -> None:
        _ = xmrctl_cli("start")

        result = xmrctl_cli("stop")

        assert result.exit_code == ExitCode.SUCCESS
        assert "Stopped xmrig (systemd service)" in result.output
        assert services.active_units == set()
        assert xmrctl_cli("status").output == "xmrig is not running"

    def test_stop_when_idle(self, xmrctl_cli: Cli, services: ServiceSimulator) -> None:
        result = xmrctl_cli("sp")

        assert result.exit_code == ExitCode.SUCCESS
        assert "nothing to stop" in result.output


class TestCore:
    def test_show(self, xmrctl_cli: Cli, host: FakeHost) -> None:
        host.files[LINUX_CONFIG] = SAMPLE_CONFIG

        result = xmrctl_cli("core")

        assert result.exit_code == ExitCode.SUCCESS
        assert "Core budget: 30% of 8 threads" in result.output

    def test_show_without_config(self, xmrctl_cli: Cli) -> None:
        result = xmrctl_cli("core")

        assert result.exit_code == ExitCode.NOT_FOUND
        assert "Miner config not found" in result.output

    def test_set_changes_only_the_value(self, xmrctl_cli: Cli, host: FakeHost) -> None:
        host.files[LINUX_CONFIG] = SAMPLE_CONFIG

        result = xmrctl_cli("core", "75")

        assert result.exit_code == ExitCode.SUCCESS
        assert "Core budget set to 75% of 8 threads" in result.output
        assert host.files[LINUX_CONFIG] == SAMPLE_CONFIG.replace(
            '"max-threads-hint": 30,', '"max-threads-hint": 75,'
        )

    def test_set_clamps(self, xmrctl_cli: Cli, host: FakeHost) -> None:
        host.files[LINUX_CONFIG] = SAMPLE_CONFIG

        result = xmrctl_cli("co", "150")

        assert result.exit_code == ExitCode.SUCCESS
        assert "Core budget 150% clamped to 100%" in result.output
        assert '"max-threads-hint": 100,' in host.files[LINUX_CONFIG]

    def test_missing_field_regenerates_config(
        self, xmrctl_cli: Cli, host: FakeHost
    ) -> None:
        host.files[LINUX_CONFIG] = '{\n  "cpu": {"enabled": true}\n}\n'

        result = xmrctl_cli("core", "40")

        assert result.exit_code == ExitCode.SUCCESS
        assert "regenerating the miner config" in result.output
        assert orjson.loads(host.files[LINUX_CONFIG])["cpu"]["max-threads-hint"] == 40

    def test_restarts_running_miner(
        self, xmrctl_cli: Cli, installed: FakeHost, services: ServiceSimulator
    ) -> None:
        _ = xmrctl_cli("start")

        result = xmrctl_cli("core", "50")

        assert result.exit_code == ExitCode.SUCCESS
        assert services.restarts == {"xmrig.service": 1}
        assert "Restarted xmrig (systemd service)" in result.output

    def test_unwritable_config(self, xmrctl_cli: Cli, host: FakeHost) -> None:
        host.files[LINUX_CONFIG] = SAMPLE_CONFIG
        host.read_only.add(LINUX_CONFIG.parent)

        result = xmrctl_cli("core", "60")

        assert result.exit_code == ExitCode.IO_ERROR
        assert host.files[LINUX_CONFIG] == SAMPLE_CONFIG


class TestMinerConfig:
    def test_writes_generated_config(
        self, xmrctl_cli: Cli, host: FakeHost, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("XMRCTL_MINER__WALLET", "4AdUndXHHZ6cfufTMvppY6JwXNouMBzSkbLYfpAV5Usx")

        result = xmrctl_cli("config")

        assert result.exit_code == ExitCode.SUCCESS
        assert f"Wrote miner config to {LINUX_CONFIG}" in result.output
        config = orjson.loads(host.files[LINUX_CONFIG])
        assert config["pools"][0]["user"] == "4AdUndXHHZ6cfufTMvppY6JwXNouMBzSkbLYfpAV5Usx"

    def test_writes_remote_template(self, xmrctl_cli: Cli, host: FakeHost) -> None:
        result = xmrctl_cli("c", "--remote", REMOTE_URL)

        assert result.exit_code == ExitCode.SUCCESS
        assert host.files[LINUX_CONFIG] == REMOTE_CONFIG

    def test_remote_template_not_found(self, xmrctl_cli: Cli, host: FakeHost) -> None:
        result = xmrctl_cli("config", "--remote", "https://example.com/missing.json")

        assert result.exit_code == ExitCode.DOWNLOAD_ERROR
        assert LINUX_CONFIG not in host.files

    def test_no_donate(self, xmrctl_cli: Cli, host: FakeHost) -> None:
        result = xmrctl_cli("no-donate")

        assert result.exit_code == ExitCode.SUCCESS
        assert "Donations disabled" in result.output
        config = orjson.loads(host.files[LINUX_CONFIG])
        assert config["donate-level"] == 0
        assert config["donate-over-proxy"] == 0

    def test_no_donate_with_remote_template(self, xmrctl_cli: Cli, host: FakeHost) -> None:
        result = xmrctl_cli("no-donate", "--remote", REMOTE_URL)

        assert result.exit_code == ExitCode.SUCCESS
        assert host.files[LINUX_CONFIG] == REMOTE_CONFIG.replace(": 5,", ": 0,")


class TestSystem:
    def test_reports_facts_and_state(
        self, xmrctl_cli: Cli, installed: FakeHost, services: ServiceSimulator
    ) -> None:
        installed.files[LINUX_CONFIG] = SAMPLE_CONFIG

        result = xmrctl_cli("system")

        assert result.exit_code == ExitCode.SUCCESS
        assert "OS linux" in result.output
        assert "Architecture x86_64" in result.output
        assert "Logical cores 8" in result.output
        assert f"Binary {BINARY} (present)" in result.output
        assert "Core budget 30%" in result.output
        assert "Backends available screen session, systemd service" in result.output
        assert "Running under not running" in result.output

    def test_missing_install(self, xmrctl_cli: Cli) -> None:
        result = xmrctl_cli("sys")

        assert result.exit_code == ExitCode.SUCCESS
        assert f"Binary {BINARY} (missing)" in result.output
        assert "Core budget unknown" in result.output
        assert "Backends available none" in result.output
