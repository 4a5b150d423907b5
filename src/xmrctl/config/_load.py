"""Settings loading with discovery and error handling."""

import os
import sys
from pathlib import Path

from pydantic import ValidationError

from xmrctl.exceptions import ConfigError, ConfigLoadError
from xmrctl.utils import get_settings_path

from ._defaults import DEFAULT_SETTINGS
from ._loader import deep_merge, parse_env_vars, read_toml_file
from ._models import Settings


def resolve_settings_path(environ: dict[str, str] | None = None) -> Path:
    """Return the settings file path, honoring XMRCTL_CONFIG."""
    env = environ if environ is not None else os.environ
    override = env.get("XMRCTL_CONFIG")
    if override:
        return Path(override).expanduser()
    return get_settings_path()


def load_settings(
    *,
    path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> Settings:
    """Load settings from defaults, the settings file and the environment.

    Sources, lowest to highest precedence: built-in defaults, the TOML
    settings file (when it exists), XMRCTL_* environment variables.

    Args:
        path: Explicit settings file. Defaults to resolve_settings_path().
        environ: Environment mapping (defaults to os.environ).

    Returns:
        The validated settings.

    Raises:
        ConfigLoadError: If the file cannot be parsed or fails validation.
    """
    settings_path = path if path is not None else resolve_settings_path(environ)

    data = DEFAULT_SETTINGS
    if settings_path.is_file():
        data = deep_merge(data, read_toml_file(settings_path))
    data = deep_merge(data, parse_env_vars(environ=environ))

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid settings in {settings_path}: {e}"
        raise ConfigLoadError(msg, path=settings_path) from e


def safe_load_settings(
    *,
    path: Path | None = None,
    environ: dict[str, str] | None = None,
) -> tuple[Settings, str | None]:
    """Load settings, falling back to defaults on error.

    Handles errors based on the XMRCTL_STRICT_CONFIG environment variable:
    - If unset or "0": warn to stderr and return default settings
    - If "1": fail fast with sys.exit(1)

    Returns:
        Tuple of (Settings, error_message). On success, error_message is None.
    """
    env = environ if environ is not None else os.environ
    strict_mode = env.get("XMRCTL_STRICT_CONFIG", "0") == "1"

    try:
        settings = load_settings(path=path, environ=environ)
    except (ConfigError, OSError) as e:
        error_msg = str(e) if isinstance(e, ConfigError) else f"Failed to load settings: {e}"
        if strict_mode:
            print(f"Error: {error_msg}", file=sys.stderr)  # noqa: T201
            sys.exit(1)
        print(f"Warning: {error_msg}", file=sys.stderr)  # noqa: T201
        return Settings(), error_msg
    else:
        return settings, None
