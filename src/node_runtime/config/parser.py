"""Configuration file parser for node-runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python 3.10

from dotenv import load_dotenv

from ..runtime.installer import DEFAULT_DIST_URL
from ..utils.paths import default_support_dir, expand_path

# Load environment variables from .env file if present
load_dotenv()

CONFIG_FILE_NAME = ".node-runtime.toml"
SUPPORT_DIR_ENV = "NODE_RUNTIME_SUPPORT_DIR"


@dataclass
class NodeConfig:
    """Where and how the Node runtime is provisioned."""

    support_dir: Optional[str] = None  # Falls back to the per-user data dir
    dist_url: str = DEFAULT_DIST_URL
    health_check_timeout: float = 60.0  # Seconds
    download_timeout: float = 300.0  # Seconds, per network operation


@dataclass
class BootstrapConfig:
    """npm-distributed tools installed on startup."""

    auto_install: bool = True
    packages: List[str] = field(default_factory=list)


@dataclass
class RuntimeConfig:
    """Complete node-runtime configuration."""

    node: NodeConfig = field(default_factory=NodeConfig)
    bootstrap: BootstrapConfig = field(default_factory=BootstrapConfig)

    # Project root for resolving paths
    project_root: Path = field(default_factory=Path.cwd)

    def resolve_path(self, path_template: str) -> Path:
        """Resolve template variables in paths.

        Supports:
            ${PROJECT_ROOT} - absolute path to project root
            ~ - the user's home directory
        """
        return expand_path(path_template, self.project_root)

    @property
    def support_dir(self) -> Path:
        """Directory holding the runtime and bootstrapped packages.

        Priority: NODE_RUNTIME_SUPPORT_DIR, then [node].support_dir,
        then the per-user data directory.
        """
        from_env = os.getenv(SUPPORT_DIR_ENV)
        if from_env:
            return self.resolve_path(from_env)
        if self.node.support_dir:
            return self.resolve_path(self.node.support_dir)
        return default_support_dir()

    @property
    def packages_dir(self) -> Path:
        """Directory under which bootstrapped npm packages are installed."""
        return self.support_dir / "packages"


def find_config_file(project_path: Path) -> Optional[Path]:
    """Find .node-runtime.toml in project root.

    Args:
        project_path: Root path of the project

    Returns:
        Path to .node-runtime.toml if found, None otherwise
    """
    config_file = Path(project_path) / CONFIG_FILE_NAME
    if config_file.exists():
        return config_file
    return None


def _seconds(section: dict, key: str, default: float, config_file: Path) -> float:
    value = section.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"invalid {key} in {config_file}: {value!r}") from None


def load_config(project_path: Optional[Path] = None) -> RuntimeConfig:
    """Load configuration from .node-runtime.toml or use defaults.

    Args:
        project_path: Root path of the project (defaults to the cwd)

    Returns:
        RuntimeConfig with loaded or default configuration

    Raises:
        ValueError: If a timeout in the file is not a number
    """
    project_path = Path(project_path) if project_path else Path.cwd()
    config = RuntimeConfig(project_root=project_path)

    config_file = find_config_file(project_path)
    if not config_file:
        return config

    try:
        with open(config_file, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        # If TOML parsing fails, return defaults
        return config

    if "node" in data:
        node_data = data["node"]
        config.node.support_dir = node_data.get("support_dir")
        config.node.dist_url = node_data.get("dist_url", DEFAULT_DIST_URL).rstrip("/")
        config.node.health_check_timeout = _seconds(
            node_data, "health_check_timeout", 60.0, config_file
        )
        config.node.download_timeout = _seconds(
            node_data, "download_timeout", 300.0, config_file
        )

    if "bootstrap" in data:
        bootstrap_data = data["bootstrap"]
        config.bootstrap.auto_install = bootstrap_data.get("auto_install", True)
        config.bootstrap.packages = list(bootstrap_data.get("packages", []))

    return config
