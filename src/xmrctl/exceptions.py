"""xmrctl exceptions."""

from pathlib import Path


class XmrctlError(Exception):
    """Base exception for xmrctl errors."""


class UnsupportedPlatformError(XmrctlError):
    """Raised when the host OS family or CPU architecture is not supported."""

    def __init__(
        self,
        message: str,
        *,
        system: str | None = None,
        machine: str | None = None,
    ) -> None:
        """Initialize with error message and the reported platform values."""
        super().__init__(message)
        self.system: str | None = system
        self.machine: str | None = machine


# =============================================================================
# Supervision Exceptions
# =============================================================================


class SupervisionError(XmrctlError):
    """Base exception for supervision backend errors."""

    def __init__(
        self,
        message: str,
        *,
        backend: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and backend context.

        Args:
            message: Human-readable error message.
            backend: Name of the supervision backend involved.
            cause: Underlying exception, if any.
        """
        super().__init__(message)
        self.backend: str | None = backend
        self.cause: Exception | None = cause


class BackendUnavailableError(SupervisionError):
    """Raised when the chosen backend's native facility cannot be used."""


class StopVerificationFailedError(SupervisionError):
    """Raised (as a warning) when a backend still shows evidence after stop."""


class PersistedServiceWriteError(SupervisionError):
    """Raised when a service-definition artifact cannot be written.

    Attributes:
        path: The artifact path that could not be written.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        backend: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and artifact path."""
        super().__init__(message, backend=backend, cause=cause)
        self.path: Path = path


# =============================================================================
# Miner Config Exceptions
# =============================================================================


class PatchError(XmrctlError):
    """Base exception for miner config patching errors."""

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        field: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and file context.

        Args:
            message: Human-readable error message.
            path: The configuration file being patched.
            field: The field being substituted.
            cause: Underlying exception, if any.
        """
        super().__init__(message)
        self.path: Path = path
        self.field: str | None = field
        self.cause: Exception | None = cause


class FieldNotFoundError(PatchError):
    """Raised when the field to patch is absent from the config file."""


class WriteFailedError(PatchError):
    """Raised when the patched config file cannot be written."""


# =============================================================================
# Install Exceptions
# =============================================================================


class InstallError(XmrctlError):
    """Base exception for installation errors."""


class DownloadError(InstallError):
    """Raised when a file cannot be fetched over HTTP."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and URL context."""
        super().__init__(message)
        self.url: str | None = url
        self.cause: Exception | None = cause


class PackageInstallError(InstallError):
    """Raised when the OS package manager fails to install a package."""

    def __init__(
        self,
        message: str,
        *,
        package: str,
        manager: str | None = None,
    ) -> None:
        """Initialize with error message and package context."""
        super().__init__(message)
        self.package: str = package
        self.manager: str | None = manager


# =============================================================================
# Settings Exceptions
# =============================================================================


class ConfigError(XmrctlError):
    """Base exception for xmrctl settings errors."""


class ConfigLoadError(ConfigError):
    """Raised when the settings file cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column
