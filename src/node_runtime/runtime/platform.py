"""Mapping of the host platform onto Node's distribution naming."""

import platform
from dataclasses import dataclass
from typing import Dict, Optional

from ..errors import UnsupportedPlatformError

# platform.system() -> label used in Node archive names
OS_LABELS: Dict[str, str] = {
    "Darwin": "darwin",
    "Linux": "linux",
    "Windows": "win",
}

# platform.machine() -> label used in Node archive names
ARCH_LABELS: Dict[str, str] = {
    "x86_64": "x64",
    "AMD64": "x64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "ARM64": "arm64",
}


@dataclass(frozen=True)
class PlatformInfo:
    """OS and architecture labels of a Node distribution."""

    os: str
    arch: str

    def __str__(self) -> str:
        return f"{self.os}-{self.arch}"


def resolve_platform(
    system: Optional[str] = None,
    machine: Optional[str] = None,
) -> PlatformInfo:
    """Resolve Node's labels for an OS / CPU pair.

    Args:
        system: OS identifier as reported by platform.system()
        machine: CPU identifier as reported by platform.machine()

    Returns:
        PlatformInfo, e.g. PlatformInfo(os="linux", arch="x64")

    Raises:
        UnsupportedPlatformError: If either value has no Node distribution
    """
    system = platform.system() if system is None else system
    machine = platform.machine() if machine is None else machine

    if system not in OS_LABELS:
        raise UnsupportedPlatformError("os", system)

    if machine not in ARCH_LABELS:
        raise UnsupportedPlatformError("architecture", machine)

    return PlatformInfo(os=OS_LABELS[system], arch=ARCH_LABELS[machine])
