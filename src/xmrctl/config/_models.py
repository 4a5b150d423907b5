"""Settings models for xmrctl.

Pydantic models for each settings section, plus the top-level Settings
container. All models are frozen and ignore unknown keys.
"""

from enum import StrEnum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field


class LogLevel(StrEnum):
    """Log level threshold values."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LogFormat(StrEnum):
    """Log output format values."""

    JSON = "json"
    TEXT = "text"


class MultiplexerInstallPolicy(StrEnum):
    """Whether `start` may install GNU screen when no backend is available.

    - AUTO: install through the package manager (may prompt for sudo)
    - NEVER: fail with BackendUnavailableError instead
    """

    AUTO = "auto"
    NEVER = "never"


class LoggingConfig(BaseModel):
    """Logging configuration section.

    Attributes:
        level: Log level threshold.
        format: Log output format.
        file: Path to log file (empty uses the default CLI log file).
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    level: LogLevel = LogLevel.INFO
    format: LogFormat = LogFormat.JSON
    file: str = ""


class MinerConfig(BaseModel):
    """Miner installation and template settings.

    Attributes:
        version: XMRig release version to install.
        release_url: Download URL template with {version} and {asset} fields.
        pool_url: Mining pool host:port written to the generated config.
        wallet: Wallet address (pool user) written to the generated config.
        password: Pool password (worker name) written to the generated config.
        tls: Whether to connect to the pool over TLS.
        core_budget: Default max-threads-hint percentage for fresh configs.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    version: str = "6.22.2"
    release_url: str = (
        "https://github.com/xmrig/xmrig/releases/download/"
        "v{version}/xmrig-{version}-{asset}.tar.gz"
    )
    pool_url: str = "pool.supportxmr.com:443"
    wallet: str = "YOUR_WALLET_ADDRESS"
    password: str = "x"
    tls: bool = True
    core_budget: int = Field(default=100, ge=1, le=100)


class SupervisionConfig(BaseModel):
    """Supervision controller settings.

    Attributes:
        install_multiplexer: Whether start may install GNU screen as a last resort.
        stop_verify_attempts: How many times stop re-checks for live evidence.
        stop_verify_interval: Seconds to wait between stop verification checks.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    install_multiplexer: MultiplexerInstallPolicy = MultiplexerInstallPolicy.AUTO
    stop_verify_attempts: int = Field(default=3, ge=1)
    stop_verify_interval: float = Field(default=1.0, ge=0.0)


class Settings(BaseModel):
    """Top-level xmrctl settings."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    miner: MinerConfig = Field(default_factory=MinerConfig)
    supervision: SupervisionConfig = Field(default_factory=SupervisionConfig)
