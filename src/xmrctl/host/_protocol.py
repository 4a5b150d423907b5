# ruff: noqa: TC003  # Path needed at runtime for Protocol method bodies
"""Host protocol for dependency injection.

Every privileged or side-effecting operation that xmrctl performs goes
through HostProtocol, so the supervision logic can be exercised against
FakeHost in tests without touching the real machine.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ._models import CommandResult


@runtime_checkable
class HostProtocol(Protocol):
    """Protocol for the operating-system facilities xmrctl consumes."""

    def run(
        self,
        argv: Sequence[str],
        *,
        privileged: bool = False,
        input: str | None = None,  # noqa: A002
    ) -> CommandResult:
        """Run a command to completion and capture its output.

        Args:
            argv: Command and arguments.
            privileged: Run with elevated privileges (sudo) when not root.
            input: Optional text piped to the command's stdin.

        Returns:
            The command result. Never raises for non-zero exit codes or
            missing executables.
        """
        ...

    def which(self, name: str) -> str | None:
        """Return the full path of an executable on PATH, or None."""
        ...

    def exists(self, path: Path) -> bool:
        """Return True if the path exists."""
        ...

    def read_text(self, path: Path) -> str:
        """Read a text file.

        Raises:
            OSError: If the file cannot be read.
        """
        ...

    def write_text(
        self,
        path: Path,
        text: str,
        *,
        privileged: bool = False,
        mode: int | None = None,
    ) -> None:
        """Write a text file, creating parent directories as needed.

        Raises:
            OSError: If the file cannot be written.
        """
        ...

    def rename(self, src: Path, dst: Path, *, privileged: bool = False) -> None:
        """Atomically replace dst with src.

        Raises:
            OSError: If the file cannot be moved.
        """
        ...

    def copy_file(
        self,
        src: Path,
        dst: Path,
        *,
        privileged: bool = False,
        mode: int | None = None,
    ) -> None:
        """Copy a local file to dst, creating parent directories as needed.

        Raises:
            OSError: If the file cannot be copied.
        """
        ...

    def remove(self, path: Path, *, privileged: bool = False) -> bool:
        """Remove a file.

        Returns:
            True if a file was removed, False if it did not exist.

        Raises:
            OSError: If the file exists but cannot be removed.
        """
        ...

    def is_root(self) -> bool:
        """Return True if running with an effective UID of 0."""
        ...

    def uid(self) -> int:
        """Return the real user ID of the invoking user."""
        ...

    def sleep(self, seconds: float) -> None:
        """Block for the given number of seconds."""
        ...
