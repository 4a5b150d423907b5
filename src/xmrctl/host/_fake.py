# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Fake host for testing.

This module provides a FakeHost class that implements HostProtocol
entirely in memory, for use in tests without touching the real machine.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TypeAlias

from ._models import CommandResult

CommandHandler: TypeAlias = Callable[[tuple[str, ...]], CommandResult]


@dataclass(frozen=True, slots=True)
class RecordedCall:
    """A command recorded by FakeHost.

    Attributes:
        argv: The command and arguments.
        privileged: Whether elevation was requested.
        input: Text piped to stdin, if any.
    """

    argv: tuple[str, ...]
    privileged: bool = False
    input: str | None = None


@dataclass(slots=True)
class FakeHost:
    """In-memory HostProtocol implementation.

    The fake keeps a virtual file system and dispatches commands to
    handlers registered per executable name:
    - files/modes track written content and permissions
    - executables controls what which() can find
    - handlers produce results for commands; unregistered executables
      that are on the fake PATH succeed with empty output
    - calls records every command, in order
    - read_only makes writes (and removals) under the listed paths fail

    Example:
        >>> host = FakeHost(executables={"screen"})
        >>> host.register("screen", lambda argv: CommandResult(argv, 0))
        >>> host.run(["screen", "-ls"]).ok
        True
    """

    files: dict[Path, str] = field(default_factory=dict)
    modes: dict[Path, int] = field(default_factory=dict)
    executables: set[str] = field(default_factory=set)
    handlers: dict[str, CommandHandler] = field(default_factory=dict)
    calls: list[RecordedCall] = field(default_factory=list)
    read_only: set[Path] = field(default_factory=set)
    directories: set[Path] = field(default_factory=set)
    root: bool = False
    user_id: int = 501
    slept: list[float] = field(default_factory=list)

    def register(self, name: str, handler: CommandHandler) -> None:
        """Register a command handler and put the executable on PATH."""
        self.handlers[name] = handler
        self.executables.add(name)

    def commands(self, name: str) -> list[tuple[str, ...]]:
        """Return the argv of every recorded call to an executable."""
        return [call.argv for call in self.calls if call.argv[0] == name]

    def _is_read_only(self, path: Path) -> bool:
        return any(path == ro or path.is_relative_to(ro) for ro in self.read_only)

    def run(
        self,
        argv: Sequence[str],
        *,
        privileged: bool = False,
        input: str | None = None,  # noqa: A002
    ) -> CommandResult:
        args = tuple(argv)
        self.calls.append(RecordedCall(argv=args, privileged=privileged, input=input))

        name = args[0]
        handler = self.handlers.get(name)
        if handler is not None:
            return handler(args)
        if name in self.executables:
            return CommandResult(argv=args, exit_code=0)
        return CommandResult(
            argv=args,
            exit_code=127,
            stderr=f"{name}: command not found",
            command_not_found=True,
        )

    def which(self, name: str) -> str | None:
        if name in self.executables:
            return f"/usr/bin/{name}"
        return None

    def exists(self, path: Path) -> bool:
        return path in self.files or path in self.directories

    def read_text(self, path: Path) -> str:
        try:
            return self.files[path]
        except KeyError:
            msg = f"No such file or directory: '{path}'"
            raise FileNotFoundError(msg) from None

    def write_text(
        self,
        path: Path,
        text: str,
        *,
        privileged: bool = False,  # noqa: ARG002
        mode: int | None = None,
    ) -> None:
        if self._is_read_only(path):
            msg = f"Permission denied: '{path}'"
            raise PermissionError(msg)
        self.files[path] = text
        if mode is not None:
            self.modes[path] = mode

    def rename(self, src: Path, dst: Path, *, privileged: bool = False) -> None:  # noqa: ARG002
        if src not in self.files:
            msg = f"No such file or directory: '{src}'"
            raise FileNotFoundError(msg)
        if self._is_read_only(dst):
            msg = f"Permission denied: '{dst}'"
            raise PermissionError(msg)
        self.files[dst] = self.files.pop(src)
        if src in self.modes:
            self.modes[dst] = self.modes.pop(src)

    def copy_file(
        self,
        src: Path,
        dst: Path,
        *,
        privileged: bool = False,  # noqa: ARG002
        mode: int | None = None,
    ) -> None:
        # Sources may be virtual or real files (e.g. an extracted download)
        if src in self.files:
            content = self.files[src]
        elif src.is_file():
            content = src.read_bytes().decode("utf-8", errors="replace")
        else:
            msg = f"No such file or directory: '{src}'"
            raise FileNotFoundError(msg)
        if self._is_read_only(dst):
            msg = f"Permission denied: '{dst}'"
            raise PermissionError(msg)
        self.files[dst] = content
        if mode is not None:
            self.modes[dst] = mode

    def remove(self, path: Path, *, privileged: bool = False) -> bool:  # noqa: ARG002
        if path not in self.files:
            return False
        if self._is_read_only(path):
            msg = f"Permission denied: '{path}'"
            raise PermissionError(msg)
        del self.files[path]
        _ = self.modes.pop(path, None)
        return True

    def is_root(self) -> bool:
        return self.root

    def uid(self) -> int:
        return self.user_id

    def sleep(self, seconds: float) -> None:
        self.slept.append(seconds)
