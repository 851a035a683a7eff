"""Pinned Node runtime: provisioning, npm invocation and upgrade checks."""

from .base import NodeRuntime
from .fake import FakeNodeRuntime
from .installer import NODE_VERSION, InstallationManager
from .invoker import NpmInvoker
from .platform import PlatformInfo, resolve_platform
from .real import RealNodeRuntime
from .types import NpmInfo, NpmOutput, RuntimeInstallation
from .upgrade import should_install_npm_package

__all__ = [
    "NODE_VERSION",
    "FakeNodeRuntime",
    "InstallationManager",
    "NodeRuntime",
    "NpmInfo",
    "NpmInvoker",
    "NpmOutput",
    "PlatformInfo",
    "RealNodeRuntime",
    "RuntimeInstallation",
    "resolve_platform",
    "should_install_npm_package",
]
