"""Well-known file locations.

Miner paths are fixed per platform. xmrctl's own settings and logs live in
the per-user directories reported by platformdirs.
"""

from importlib.resources import files
from pathlib import Path

import platformdirs

from xmrctl.platform import OsFamily

APP_NAME = "xmrctl"
MINER_BINARY_NAME = "xmrig"

_MINER_CONFIG_PATHS: dict[OsFamily, Path] = {
    OsFamily.MACOS: Path("/usr/local/etc/xmrig/config.json"),
    OsFamily.LINUX: Path("/etc/xmrig/config.json"),
}


def get_miner_binary_path() -> Path:
    """Get the install location of the miner binary."""
    return Path("/usr/local/bin") / MINER_BINARY_NAME


def get_miner_config_path(os_family: OsFamily) -> Path:
    """Get the miner configuration file path for an OS family."""
    return _MINER_CONFIG_PATHS[os_family]


def get_settings_path() -> Path:
    """Get the path to the xmrctl settings file.

    Returns ``<user config dir>/xmrctl/config.toml``, regardless of whether
    the file exists.
    """
    return platformdirs.user_config_path(APP_NAME) / "config.toml"


def get_log_dir() -> Path:
    """Get the per-user xmrctl log directory."""
    return platformdirs.user_log_path(APP_NAME)


def get_cli_log_file() -> Path:
    """Get the path to the CLI log file inside the log directory."""
    return get_log_dir() / "cli.log"


def get_package_dir() -> Path:
    """Get the root directory of the installed xmrctl package."""
    return Path(str(files("xmrctl")))


def get_templates_dir() -> Path:
    """Get the path to the package's templates/ directory."""
    return get_package_dir() / "templates"
