"""Value-only patching of numeric fields in the miner config file.

The miner's config.json is owned by xmrig (it rewrites the file when
"autosave" is on), so fields are substituted in the text rather than by
re-serializing the JSON. Everything outside the substituted digits stays
byte-identical.
"""

from __future__ import annotations

import contextlib
import re
from pathlib import Path
from typing import TYPE_CHECKING

from xmrctl.exceptions import FieldNotFoundError, PatchError, WriteFailedError
from xmrctl.host import SystemHost

if TYPE_CHECKING:
    from xmrctl.host import HostProtocol

CORE_BUDGET_FIELD = "max-threads-hint"
MIN_CORE_BUDGET = 1
MAX_CORE_BUDGET = 100

SCRATCH_SUFFIX = ".xmrctl-tmp"


def _field_pattern(field: str) -> re.Pattern[str]:
    return re.compile(rf'("{re.escape(field)}"\s*:\s*)(-?\d+)')


def clamp_core_budget(percentage: int) -> int:
    """Clamp a core budget percentage to [1, 100]."""
    return max(MIN_CORE_BUDGET, min(MAX_CORE_BUDGET, percentage))


def substitute_field(text: str, field: str, value: int) -> str | None:
    """Replace the first integer value of a field in JSON text.

    Returns:
        The new text, or None if the field does not occur.
    """
    pattern = _field_pattern(field)
    if pattern.search(text) is None:
        return None
    return pattern.sub(lambda m: f"{m.group(1)}{value}", text, count=1)


def extract_field(text: str, field: str) -> int | None:
    """Return the first integer value of a field in JSON text, or None."""
    match = _field_pattern(field).search(text)
    return int(match.group(2)) if match is not None else None


def _read(host: HostProtocol, path: Path, field: str) -> str:
    try:
        return host.read_text(path)
    except FileNotFoundError as e:
        msg = f"Miner config not found: {path}"
        raise FieldNotFoundError(msg, path=path, field=field, cause=e) from e
    except OSError as e:
        msg = f"Could not read miner config {path}: {e}"
        raise PatchError(msg, path=path, field=field, cause=e) from e


def read_numeric_field(
    path: Path,
    field: str,
    *,
    host: HostProtocol | None = None,
) -> int:
    """Read the integer value of a field from the miner config file.

    Raises:
        FieldNotFoundError: If the file or the field is missing.
        PatchError: If the file cannot be read.
    """
    text = _read(host or SystemHost(), path, field)
    value = extract_field(text, field)
    if value is None:
        msg = f'Field "{field}" not found in {path}'
        raise FieldNotFoundError(msg, path=path, field=field)
    return value


def patch_numeric_field(
    path: Path,
    field: str,
    value: int,
    *,
    host: HostProtocol | None = None,
    privileged: bool = True,
) -> None:
    """Substitute the integer value of a field in the miner config file.

    The new content goes to a scratch file in the same directory, which is
    read back and checked for the new value before it replaces the
    original. The original is never partially written.

    Args:
        path: The miner config file.
        field: JSON key whose value is replaced.
        value: New integer value.
        host: Host used for file access. Defaults to SystemHost().
        privileged: Elevate when the config directory is not writable.

    Raises:
        FieldNotFoundError: If the file or the field is missing.
        WriteFailedError: If the patched file cannot be written.
    """
    host = host or SystemHost()
    text = _read(host, path, field)
    patched = substitute_field(text, field, value)
    if patched is None:
        msg = f'Field "{field}" not found in {path}'
        raise FieldNotFoundError(msg, path=path, field=field)
    if patched == text:
        return

    scratch = path.with_name(path.name + SCRATCH_SUFFIX)
    try:
        host.write_text(scratch, patched, privileged=privileged)
        if extract_field(host.read_text(scratch), field) != value:
            msg = f'Scratch copy {scratch} does not contain the new "{field}" value'
            raise WriteFailedError(msg, path=path, field=field)
        host.rename(scratch, path, privileged=privileged)
    except OSError as e:
        _discard(host, scratch, privileged=privileged)
        msg = f"Could not write miner config {path}: {e}"
        raise WriteFailedError(msg, path=path, field=field, cause=e) from e
    except WriteFailedError:
        _discard(host, scratch, privileged=privileged)
        raise


def _discard(host: HostProtocol, scratch: Path, *, privileged: bool) -> None:
    # The original is intact; a leftover scratch file is harmless
    with contextlib.suppress(OSError):
        _ = host.remove(scratch, privileged=privileged)


def set_core_budget(
    path: Path,
    percentage: int,
    *,
    host: HostProtocol | None = None,
) -> int:
    """Set the miner's max-threads-hint, clamped to [1, 100].

    Returns:
        The clamped value that was written.

    Raises:
        FieldNotFoundError: If the field is missing; regenerate the config
            from the template and retry.
        WriteFailedError: If the patched file cannot be written.
    """
    budget = clamp_core_budget(percentage)
    patch_numeric_field(path, CORE_BUDGET_FIELD, budget, host=host)
    return budget
