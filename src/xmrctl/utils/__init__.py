"""Shared utilities for xmrctl."""

from ._logging import (
    LogFile,
    LogFormatType,
    create_cli_logger,
    create_null_logger,
    resolve_log_level,
)
from ._paths import (
    APP_NAME,
    MINER_BINARY_NAME,
    get_cli_log_file,
    get_log_dir,
    get_miner_binary_path,
    get_miner_config_path,
    get_package_dir,
    get_settings_path,
    get_templates_dir,
)

__all__ = [
    "APP_NAME",
    "MINER_BINARY_NAME",
    "LogFile",
    "LogFormatType",
    "create_cli_logger",
    "create_null_logger",
    "get_cli_log_file",
    "get_log_dir",
    "get_miner_binary_path",
    "get_miner_config_path",
    "get_package_dir",
    "get_settings_path",
    "get_templates_dir",
    "resolve_log_level",
]
