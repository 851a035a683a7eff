"""Self-provisioning, version-pinned Node.js runtime for host applications."""

from .config import RuntimeConfig, load_config
from .errors import (
    CommandError,
    LaunchError,
    MetadataParseError,
    MissingBinaryError,
    NodeRuntimeError,
    ProvisionError,
    UnsupportedPlatformError,
    VersionParseError,
)
from .runtime import (
    NODE_VERSION,
    FakeNodeRuntime,
    NodeRuntime,
    RealNodeRuntime,
)

__all__ = [
    "NODE_VERSION",
    "CommandError",
    "FakeNodeRuntime",
    "LaunchError",
    "MetadataParseError",
    "MissingBinaryError",
    "NodeRuntime",
    "NodeRuntimeError",
    "ProvisionError",
    "RealNodeRuntime",
    "RuntimeConfig",
    "UnsupportedPlatformError",
    "VersionParseError",
    "load_config",
]
