import io
import os
import tarfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import httpx
import pytest
from rich.console import Console

from tests.conftest import HOME, LINUX_FACTS
from xmrctl.cli import create_app
from xmrctl.host import FakeHost, Fetcher

RELEASE_BINARY = b"\x7fELF-xmrig"
REMOTE_CONFIG = """{
  "donate-level": 5,
  "donate-over-proxy": 5,
  "cpu": {"max-threads-hint": 20, "enabled": true}
}
"""


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        if Path(item.path).is_relative_to(Path(__file__).parent):
            item.add_marker(pytest.mark.integration)


@dataclass(frozen=True, slots=True)
class CliResult:
    """Exit code and whitespace-normalized console output of one CLI run."""

    exit_code: int
    output: str


def _exit_code(error: SystemExit) -> int:
    if error.code is None:
        return 0
    return error.code if isinstance(error.code, int) else 1


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point settings and the CLI log file at the test's tmp directory."""
    for key in list(os.environ):
        if key.startswith("XMRCTL_"):
            monkeypatch.delenv(key)
    settings_path = tmp_path / "config.toml"
    monkeypatch.setenv("XMRCTL_CONFIG", str(settings_path))
    monkeypatch.setenv("XMRCTL_LOGGING__FILE", str(tmp_path / "cli.log"))
    return settings_path


def _release_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith(".tar.gz"):
        buffer = io.BytesIO()
        with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
            info = tarfile.TarInfo("xmrig-6.22.2/xmrig")
            info.size = len(RELEASE_BINARY)
            info.mode = 0o755
            tar.addfile(info, io.BytesIO(RELEASE_BINARY))
        return httpx.Response(200, content=buffer.getvalue())
    if request.url.path == "/templates/config.json":
        return httpx.Response(200, text=REMOTE_CONFIG)
    return httpx.Response(404)


@pytest.fixture
def fetcher() -> Fetcher:
    return Fetcher(httpx.Client(transport=httpx.MockTransport(_release_handler)))


@pytest.fixture
def xmrctl_cli(
    console: Console,
    host: FakeHost,
    fetcher: Fetcher,
    capsys: pytest.CaptureFixture[str],
) -> Callable[..., CliResult]:
    """Run the CLI against a fake Linux host.

    Returns a callable that runs one command line and returns its exit
    code (0 if no SystemExit) together with the normalized output.
    """
    app = create_app(
        console=console,
        error_console=console,
        host=host,
        facts=LINUX_FACTS,
        fetcher=fetcher,
        home=HOME,
    )

    def _run(*args: str) -> CliResult:
        _ = capsys.readouterr()
        try:
            app.meta(list(args))
        except SystemExit as e:
            code = _exit_code(e)
        else:
            code = 0
        output = " ".join(capsys.readouterr().out.split())
        return CliResult(exit_code=code, output=output)

    return _run
