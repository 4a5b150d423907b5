# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""Settings sources: the TOML file and XMRCTL_* environment variables."""

from __future__ import annotations

import contextlib
import copy
import os
import tomllib
from typing import TYPE_CHECKING, Any

import orjson

from xmrctl.exceptions import ConfigLoadError

from ._models import Settings

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

ENV_PREFIX = "XMRCTL_"

# Only variables naming a settings section are settings; XMRCTL_CONFIG,
# XMRCTL_DEBUG and XMRCTL_STRICT_CONFIG are read elsewhere
SECTIONS: frozenset[str] = frozenset(Settings.model_fields)

_BOOLEANS = {"true": True, "false": False}


def read_toml_file(path: Path) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Read the settings file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigLoadError: If the file is not valid TOML.
    """
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Failed to parse settings file {path}: {e}"
        raise ConfigLoadError(msg, path=path, line=e.lineno, column=e.colno) from e


def deep_merge(
    base: Mapping[str, Any],  # pyright: ignore[reportExplicitAny]
    override: Mapping[str, Any],  # pyright: ignore[reportExplicitAny]
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Return `override` layered over `base`; neither input is modified.

    Tables merge key by key. Any other value in `override`, lists
    included, replaces the one in `base` outright.
    """
    merged: dict[str, Any] = copy.deepcopy(dict(base))  # pyright: ignore[reportExplicitAny]
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def parse_env_value(value: str) -> Any:  # pyright: ignore[reportExplicitAny]
    """Convert an environment variable string to a settings value.

    Recognizes booleans (any case), integers, decimals and JSON arrays or
    objects; anything else stays a string. Pool URLs such as
    ``pool.example.com:443`` are not numbers and stay strings.

    Examples:
        >>> parse_env_value("TRUE")
        True
        >>> parse_env_value("75")
        75
        >>> parse_env_value("0.5")
        0.5
    """
    boolean = _BOOLEANS.get(value.lower())
    if boolean is not None:
        return boolean

    with contextlib.suppress(ValueError):
        return int(value)
    if "." in value:
        with contextlib.suppress(ValueError):
            return float(value)

    if value[:1] + value[-1:] in ("[]", "{}"):
        try:
            return orjson.loads(value)
        except orjson.JSONDecodeError:
            return value

    return value


def set_nested_key(
    d: dict[str, Any],  # pyright: ignore[reportExplicitAny]
    key_path: str,
    value: Any,  # pyright: ignore[reportExplicitAny]
) -> None:
    """Set a value at a dotted key path, creating tables on the way.

    Example:
        >>> d = {}
        >>> set_nested_key(d, "miner.pool_url", "pool.example.com:443")
        >>> d
        {'miner': {'pool_url': 'pool.example.com:443'}}
    """
    *tables, leaf = key_path.split(".")
    current = d
    for table in tables:
        if not isinstance(current.get(table), dict):
            current[table] = {}
        current = current[table]
    current[leaf] = value


def parse_env_vars(
    prefix: str = ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Collect settings from XMRCTL_<SECTION>__<KEY> environment variables.

    A double underscore separates nesting levels, so
    ``XMRCTL_MINER__POOL_URL`` sets ``miner.pool_url``. Variables whose
    first level is not a settings section are ignored.

    Args:
        prefix: Environment variable prefix.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        Nested dictionary of parsed values.
    """
    result: dict[str, Any] = {}  # pyright: ignore[reportExplicitAny]

    for name, raw in (environ if environ is not None else os.environ).items():
        if not name.startswith(prefix):
            continue
        key_path = name.removeprefix(prefix).lower().replace("__", ".")
        if key_path.split(".", 1)[0] not in SECTIONS:
            continue
        set_nested_key(result, key_path, parse_env_value(raw))

    return result
