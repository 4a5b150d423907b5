"""Default settings values.

DEFAULT_SETTINGS is a plain dict so it can be deep merged with the
settings file and environment overrides before validation.
"""

from typing import Any

DEFAULT_SETTINGS: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
    "supervision": {
        "install_multiplexer": "auto",
        "stop_verify_attempts": 3,
        "stop_verify_interval": 1.0,
    },
}
