"""Host collaborators.

Injectable interfaces for everything xmrctl does to the machine:
running commands, writing privileged files, installing packages and
fetching files over HTTP.

Key Components:
    - HostProtocol: Protocol for command execution and file access
    - SystemHost: Real implementation using subprocess and sudo
    - FakeHost: In-memory implementation for tests
    - CommandResult: Result of a host command
    - PackageManager: OS package manager wrapper
    - Fetcher: HTTP download helper
"""

from ._fake import CommandHandler, FakeHost, RecordedCall
from ._fetch import Fetcher
from ._models import CommandResult
from ._packages import PACKAGE_MANAGERS, PackageManager, PackageManagerSpec
from ._protocol import HostProtocol
from ._system import SystemHost, truncate_output

__all__ = [
    "PACKAGE_MANAGERS",
    "CommandHandler",
    "CommandResult",
    "FakeHost",
    "Fetcher",
    "HostProtocol",
    "PackageManager",
    "PackageManagerSpec",
    "RecordedCall",
    "SystemHost",
    "truncate_output",
]
