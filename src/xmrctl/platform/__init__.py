"""Platform probe.

Determines the OS family and CPU topology once at startup. The resulting
PlatformFacts are read-only and consumed by every other component.
"""

from ._models import CpuArch, OsFamily, PlatformFacts
from ._probe import detect

__all__ = [
    "CpuArch",
    "OsFamily",
    "PlatformFacts",
    "detect",
]
