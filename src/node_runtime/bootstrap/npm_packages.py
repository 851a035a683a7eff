"""Installation and upgrade of npm-distributed tools.

Keeps tools such as language servers installed at their latest published
version inside the support directory, using the pinned Node runtime.
"""

import asyncio
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List

from ..errors import NodeRuntimeError
from ..runtime.base import NodeRuntime


class NpmPackageStatus(Enum):
    """Status of an npm-distributed tool."""

    INSTALLED = "installed"
    UP_TO_DATE = "up_to_date"
    MISSING = "missing"
    INSTALLING = "installing"
    FAILED = "failed"


@dataclass
class NpmPackageInfo:
    """Information about an npm-distributed tool."""

    name: str
    package: str  # npm package to install
    entry_point: str  # Script the tool runs, relative to its install dir
    status: NpmPackageStatus = NpmPackageStatus.MISSING

    def install_dir(self, packages_dir: Path) -> Path:
        return Path(packages_dir) / self.name

    def entry_point_path(self, packages_dir: Path) -> Path:
        return self.install_dir(packages_dir) / self.entry_point


# Known npm-distributed tools
NPM_PACKAGES: Dict[str, NpmPackageInfo] = {
    "pyright": NpmPackageInfo(
        name="pyright",
        package="pyright",
        entry_point="node_modules/pyright/langserver.index.js",
    ),
    "typescript-language-server": NpmPackageInfo(
        name="typescript-language-server",
        package="typescript-language-server",
        entry_point="node_modules/typescript-language-server/lib/cli.mjs",
    ),
    "vscode-langservers-extracted": NpmPackageInfo(
        name="vscode-langservers-extracted",
        package="vscode-langservers-extracted",
        entry_point="node_modules/vscode-langservers-extracted/bin/vscode-json-language-server",
    ),
    "yaml-language-server": NpmPackageInfo(
        name="yaml-language-server",
        package="yaml-language-server",
        entry_point="node_modules/yaml-language-server/bin/yaml-language-server",
    ),
    "bash-language-server": NpmPackageInfo(
        name="bash-language-server",
        package="bash-language-server",
        entry_point="node_modules/bash-language-server/out/cli.js",
    ),
}


def get_npm_package(name: str) -> NpmPackageInfo:
    """Get a known npm tool by name.

    Raises:
        ValueError: If the tool is not known
    """
    if name not in NPM_PACKAGES:
        supported = ", ".join(NPM_PACKAGES.keys())
        raise ValueError(
            f"npm package '{name}' not supported. Supported packages: {supported}"
        )
    return NPM_PACKAGES[name]


async def ensure_npm_package(
    runtime: NodeRuntime,
    info: NpmPackageInfo,
    packages_dir: Path,
) -> NpmPackageStatus:
    """Install or upgrade a tool if its local copy is missing or stale.

    Args:
        runtime: Node runtime used for npm
        info: Tool to check
        packages_dir: Directory holding one subdirectory per tool

    Returns:
        UP_TO_DATE if nothing had to be done, INSTALLED after an install

    Raises:
        NodeRuntimeError: If querying the registry or installing failed
    """
    install_dir = info.install_dir(packages_dir)
    latest_version = await runtime.npm_package_latest_version(info.package)

    needs_install = await runtime.should_install_npm_package(
        info.package,
        info.entry_point_path(packages_dir),
        install_dir,
        latest_version,
    )
    if not needs_install:
        info.status = NpmPackageStatus.UP_TO_DATE
        return info.status

    print(f"📦 Installing {info.package}@{latest_version}...", file=sys.stderr)
    info.status = NpmPackageStatus.INSTALLING

    await asyncio.to_thread(install_dir.mkdir, parents=True, exist_ok=True)
    await runtime.npm_install_packages(install_dir, [(info.package, latest_version)])

    print(f"✅ Successfully installed {info.package}", file=sys.stderr)
    info.status = NpmPackageStatus.INSTALLED
    return info.status


async def check_and_install_npm_packages(
    runtime: NodeRuntime,
    names: List[str],
    packages_dir: Path,
    auto_install: bool = True,
) -> Dict[str, NpmPackageStatus]:
    """Check and optionally install or upgrade npm-distributed tools.

    A failure for one tool is reported and does not stop the others.

    Args:
        runtime: Node runtime used for npm
        names: Tool names (keys of NPM_PACKAGES)
        packages_dir: Directory holding one subdirectory per tool
        auto_install: Whether to install missing or outdated tools

    Returns:
        Dict mapping tool name to its status
    """
    if not names:
        return {}

    print("🔍 Checking npm packages...", file=sys.stderr)

    results: Dict[str, NpmPackageStatus] = {}

    for name in names:
        try:
            info = get_npm_package(name)
        except ValueError as e:
            print(f"❌ {e}", file=sys.stderr)
            results[name] = NpmPackageStatus.FAILED
            continue

        if not auto_install:
            installed = await asyncio.to_thread(
                info.entry_point_path(packages_dir).exists
            )
            status = NpmPackageStatus.INSTALLED if installed else NpmPackageStatus.MISSING
            if status == NpmPackageStatus.MISSING:
                print(f"⚠️  {name} is not installed", file=sys.stderr)
            info.status = status
            results[name] = status
            continue

        try:
            results[name] = await ensure_npm_package(runtime, info, packages_dir)
        except NodeRuntimeError as e:
            print(f"❌ Failed to install {name}: {e}", file=sys.stderr)
            info.status = NpmPackageStatus.FAILED
            results[name] = NpmPackageStatus.FAILED
            continue

        if results[name] == NpmPackageStatus.UP_TO_DATE:
            print(f"✅ {name} is up to date", file=sys.stderr)

    if not auto_install and NpmPackageStatus.MISSING in results.values():
        print("\n⚠️  Auto-install is disabled. Enable it with:", file=sys.stderr)
        print("   [bootstrap]\n   auto_install = true", file=sys.stderr)

    print("", file=sys.stderr)  # Blank line for readability
    return results
