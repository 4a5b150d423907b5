"""Miner binary and configuration management.

Key Components:
    - set_core_budget: Patch max-threads-hint in the miner config
    - patch_numeric_field / read_numeric_field: Value-only field edits
    - render_config: Canonical xmrig config.json
    - Installer: Download, install and uninstall xmrig
"""

from ._installer import (
    BINARY_MODE,
    DEPENDENCIES,
    RELEASE_ASSETS,
    Installer,
    extract_binary,
    resolve_release_url,
)
from ._patcher import (
    CORE_BUDGET_FIELD,
    MAX_CORE_BUDGET,
    MIN_CORE_BUDGET,
    SCRATCH_SUFFIX,
    clamp_core_budget,
    extract_field,
    patch_numeric_field,
    read_numeric_field,
    set_core_budget,
    substitute_field,
)
from ._template import (
    DEFAULT_DONATE_LEVEL,
    DONATE_LEVEL_FIELD,
    DONATE_OVER_PROXY_FIELD,
    build_config,
    fetch_config,
    render_config,
    write_config,
)

__all__ = [
    "BINARY_MODE",
    "CORE_BUDGET_FIELD",
    "DEFAULT_DONATE_LEVEL",
    "DEPENDENCIES",
    "DONATE_LEVEL_FIELD",
    "DONATE_OVER_PROXY_FIELD",
    "MAX_CORE_BUDGET",
    "MIN_CORE_BUDGET",
    "RELEASE_ASSETS",
    "SCRATCH_SUFFIX",
    "Installer",
    "build_config",
    "clamp_core_budget",
    "extract_binary",
    "extract_field",
    "fetch_config",
    "patch_numeric_field",
    "read_numeric_field",
    "render_config",
    "resolve_release_url",
    "set_core_budget",
    "substitute_field",
    "write_config",
]
