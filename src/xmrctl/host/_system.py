"""Host implementation backed by the real operating system.

Commands run through subprocess with captured output. Privileged commands
are prefixed with sudo when the current user is not root; privileged file
operations only go through sudo when the target directory is not writable.
"""

import os
import shutil
import subprocess
import time
from collections.abc import Sequence
from pathlib import Path
from typing import final

from ._models import CommandResult

# Maximum captured output size in bytes
MAX_OUTPUT_BYTES: int = 102400  # 100KB


def truncate_output(output: str, max_bytes: int = MAX_OUTPUT_BYTES) -> str:
    """Truncate output to max bytes, preserving valid UTF-8.

    Args:
        output: The string to truncate.
        max_bytes: Maximum size in bytes.

    Returns:
        Truncated string with indicator if truncated.
    """
    if not output:
        return output

    encoded = output.encode("utf-8")
    if len(encoded) <= max_bytes:
        return output

    truncated = encoded[:max_bytes].decode("utf-8", errors="ignore")
    return truncated + "\n... [output truncated]"


@final
class SystemHost:
    """HostProtocol implementation for the local machine."""

    __slots__ = ("_sudo",)

    def __init__(self, sudo: str = "sudo") -> None:
        """Initialize the host.

        Args:
            sudo: Command used to elevate privileged operations.
        """
        self._sudo = sudo

    def _elevate(self, argv: Sequence[str], *, privileged: bool) -> list[str]:
        if privileged and not self.is_root():
            return [self._sudo, *argv]
        return list(argv)

    def run(
        self,
        argv: Sequence[str],
        *,
        privileged: bool = False,
        input: str | None = None,  # noqa: A002
    ) -> CommandResult:
        cmd = self._elevate(argv, privileged=privileged)
        try:
            result = subprocess.run(  # noqa: S603
                cmd,
                input=input,
                capture_output=True,
                text=True,
                errors="replace",
                check=False,
            )
        except FileNotFoundError as e:
            return CommandResult(
                argv=tuple(argv),
                exit_code=127,
                stderr=str(e),
                command_not_found=True,
            )

        return CommandResult(
            argv=tuple(argv),
            exit_code=result.returncode,
            stdout=truncate_output(result.stdout),
            stderr=truncate_output(result.stderr),
        )

    def _needs_elevation(self, path: Path, *, privileged: bool) -> bool:
        """Return True if a file operation on path must go through sudo."""
        if not privileged or self.is_root():
            return False
        # Elevate only when the nearest existing ancestor is not writable
        target = path.parent
        while not target.exists() and target != target.parent:
            target = target.parent
        return not os.access(target, os.W_OK)

    def _run_elevated(self, argv: Sequence[str], *, input: str | None = None) -> None:  # noqa: A002
        result = self.run(argv, privileged=True, input=input)
        if not result.ok:
            raise PermissionError(result.describe())

    def which(self, name: str) -> str | None:
        return shutil.which(name)

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def write_text(
        self,
        path: Path,
        text: str,
        *,
        privileged: bool = False,
        mode: int | None = None,
    ) -> None:
        if not self._needs_elevation(path, privileged=privileged):
            path.parent.mkdir(parents=True, exist_ok=True)
            _ = path.write_text(text, encoding="utf-8")
            if mode is not None:
                path.chmod(mode)
            return

        self._run_elevated(["mkdir", "-p", str(path.parent)])
        self._run_elevated(["tee", str(path)], input=text)
        if mode is not None:
            self._run_elevated(["chmod", f"{mode:o}", str(path)])

    def rename(self, src: Path, dst: Path, *, privileged: bool = False) -> None:
        if not self._needs_elevation(dst, privileged=privileged):
            _ = src.replace(dst)
            return
        self._run_elevated(["mv", "-f", str(src), str(dst)])

    def copy_file(
        self,
        src: Path,
        dst: Path,
        *,
        privileged: bool = False,
        mode: int | None = None,
    ) -> None:
        if not self._needs_elevation(dst, privileged=privileged):
            dst.parent.mkdir(parents=True, exist_ok=True)
            _ = shutil.copyfile(src, dst)
            if mode is not None:
                dst.chmod(mode)
            return

        self._run_elevated(["mkdir", "-p", str(dst.parent)])
        self._run_elevated(["cp", "-f", str(src), str(dst)])
        if mode is not None:
            self._run_elevated(["chmod", f"{mode:o}", str(dst)])

    def remove(self, path: Path, *, privileged: bool = False) -> bool:
        if not path.exists() and not path.is_symlink():
            return False

        if not self._needs_elevation(path, privileged=privileged):
            path.unlink()
            return True

        self._run_elevated(["rm", "-f", str(path)])
        return True

    def is_root(self) -> bool:
        return os.geteuid() == 0

    def uid(self) -> int:
        # Under sudo, launchd agents belong to the invoking user
        sudo_uid = os.environ.get("SUDO_UID")
        if sudo_uid is not None and sudo_uid.isdigit():
            return int(sudo_uid)
        return os.getuid()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
