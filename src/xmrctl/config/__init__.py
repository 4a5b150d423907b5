"""xmrctl settings.

This module provides loading, validation, and typed access to xmrctl's
own settings (not the miner's JSON configuration file).

Example:
    >>> from xmrctl.config import load_settings
    >>> settings = load_settings()
    >>> settings.logging.level
    <LogLevel.INFO: 'info'>
"""

from xmrctl.exceptions import ConfigError, ConfigLoadError

from ._defaults import DEFAULT_SETTINGS
from ._load import load_settings, resolve_settings_path, safe_load_settings
from ._loader import (
    deep_merge,
    parse_env_value,
    parse_env_vars,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    LogFormat,
    LoggingConfig,
    LogLevel,
    MinerConfig,
    MultiplexerInstallPolicy,
    Settings,
    SupervisionConfig,
)

__all__ = [
    "DEFAULT_SETTINGS",
    "ConfigError",
    "ConfigLoadError",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "MinerConfig",
    "MultiplexerInstallPolicy",
    "Settings",
    "SupervisionConfig",
    "deep_merge",
    "load_settings",
    "parse_env_value",
    "parse_env_vars",
    "read_toml_file",
    "resolve_settings_path",
    "safe_load_settings",
    "set_nested_key",
]
