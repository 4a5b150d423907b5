"""Install, configure and supervise the XMRig miner on macOS and Linux."""

__version__ = "0.1.0"
