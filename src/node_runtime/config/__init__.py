"""Configuration management for node-runtime."""

from .parser import (
    BootstrapConfig,
    NodeConfig,
    RuntimeConfig,
    find_config_file,
    load_config,
)

__all__ = [
    "BootstrapConfig",
    "NodeConfig",
    "RuntimeConfig",
    "find_config_file",
    "load_config",
]
