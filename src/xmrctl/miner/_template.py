"""Canonical miner configuration.

Generates xmrig's config.json from xmrctl settings, or fetches a remote
template, and writes it to the miner config path.
"""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - Used in runtime type annotations
from typing import TYPE_CHECKING, Any

import orjson

from xmrctl.exceptions import DownloadError, WriteFailedError

from ._patcher import CORE_BUDGET_FIELD, clamp_core_budget

if TYPE_CHECKING:
    from xmrctl.config import MinerConfig
    from xmrctl.host import Fetcher, HostProtocol
    from xmrctl.platform import PlatformFacts

DEFAULT_DONATE_LEVEL = 1
DONATE_LEVEL_FIELD = "donate-level"
DONATE_OVER_PROXY_FIELD = "donate-over-proxy"


def build_config(
    miner: MinerConfig,
    facts: PlatformFacts,
    *,
    core_budget: int | None = None,
    donate_level: int = DEFAULT_DONATE_LEVEL,
) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Build the canonical xmrig configuration as a dictionary.

    Key order matters: max-threads-hint is never the last key of its
    object, so the patcher always sees `"max-threads-hint": N,`.
    """
    budget = clamp_core_budget(core_budget if core_budget is not None else miner.core_budget)
    return {
        "autosave": True,
        "background": False,
        "colors": False,
        DONATE_LEVEL_FIELD: donate_level,
        DONATE_OVER_PROXY_FIELD: donate_level,
        "print-time": 60,
        "cpu": {
            "enabled": True,
            # 1GB pages and MSR tweaks need Linux
            "huge-pages": facts.is_linux,
            "hw-aes": None,
            "priority": None,
            CORE_BUDGET_FIELD: budget,
            "asm": True,
            "yield": True,
        },
        "opencl": False,
        "cuda": False,
        "pools": [
            {
                "url": miner.pool_url,
                "user": miner.wallet,
                "pass": miner.password,
                "keepalive": True,
                "tls": miner.tls,
                "coin": "monero",
            }
        ],
    }


def render_config(
    miner: MinerConfig,
    facts: PlatformFacts,
    *,
    core_budget: int | None = None,
    donate_level: int = DEFAULT_DONATE_LEVEL,
) -> str:
    """Render the canonical xmrig config.json text.

    Args:
        miner: Miner settings (pool, wallet, default core budget).
        facts: Platform facts; huge pages are only enabled on Linux.
        core_budget: max-threads-hint percentage; defaults to the setting.
        donate_level: Donation percentage written to donate-level and
            donate-over-proxy.

    Returns:
        Pretty-printed JSON with a trailing newline.
    """
    config = build_config(miner, facts, core_budget=core_budget, donate_level=donate_level)
    return orjson.dumps(config, option=orjson.OPT_INDENT_2).decode("utf-8") + "\n"


def fetch_config(url: str, fetcher: Fetcher) -> str:
    """Download a remote config template and check that it is a JSON object.

    Returns:
        The downloaded text, unchanged apart from a trailing newline.

    Raises:
        DownloadError: If the download fails or the body is not a JSON object.
    """
    text = fetcher.fetch_text(url)
    try:
        data = orjson.loads(text)
    except orjson.JSONDecodeError as e:
        msg = f"Remote config is not valid JSON: {url}: {e}"
        raise DownloadError(msg, url=url, cause=e) from e

    if not isinstance(data, dict):
        msg = f"Remote config must be a JSON object, got {type(data).__name__}: {url}"
        raise DownloadError(msg, url=url)

    return text if text.endswith("\n") else text + "\n"


def write_config(host: HostProtocol, path: Path, text: str) -> None:
    """Write the miner config file, elevating when its directory is not writable.

    Raises:
        WriteFailedError: If the file cannot be written.
    """
    try:
        host.write_text(path, text, privileged=True, mode=0o644)
    except OSError as e:
        msg = f"Could not write miner config {path}: {e}"
        raise WriteFailedError(msg, path=path, cause=e) from e
