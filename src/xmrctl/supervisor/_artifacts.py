"""Helpers shared by the backend drivers for writing artifacts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from xmrctl.exceptions import PersistedServiceWriteError

if TYPE_CHECKING:
    from xmrctl.host import HostProtocol

    from ._models import ServiceDescriptor


def write_definition(
    host: HostProtocol,
    descriptor: ServiceDescriptor,
    content: str,
    *,
    privileged: bool = False,
    mode: int | None = None,
) -> None:
    """Write a backend's service-definition file.

    Raises:
        PersistedServiceWriteError: If the file cannot be written.
    """
    path = descriptor.definition_path
    try:
        host.write_text(path, content, privileged=privileged, mode=mode)
    except OSError as e:
        msg = f"Could not write {descriptor.backend.label} definition to {path}: {e}"
        raise PersistedServiceWriteError(
            msg, path=path, backend=descriptor.backend.value, cause=e
        ) from e
