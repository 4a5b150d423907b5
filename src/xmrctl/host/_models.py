"""Data models for host command execution."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result from running a host command.

    Attributes:
        argv: The command and arguments that were run.
        exit_code: Process exit code (127 when the command was not found).
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        command_not_found: Whether the executable could not be found.
    """

    argv: tuple[str, ...]
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    command_not_found: bool = False

    @property
    def ok(self) -> bool:
        """Return True if the command exited with status 0."""
        return self.exit_code == 0

    def describe(self) -> str:
        """Return a one-line description of a failed command for messages."""
        detail = (self.stderr or self.stdout).strip().splitlines()
        reason = detail[-1] if detail else f"exit code {self.exit_code}"
        return f"`{' '.join(self.argv)}` failed: {reason}"
