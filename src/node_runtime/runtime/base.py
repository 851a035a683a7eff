"""The Node runtime capability shared by the real and fake implementations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Tuple

from .types import NpmOutput
from .upgrade import should_install_npm_package


class NodeRuntime(ABC):
    """Access to a Node interpreter and npm."""

    @abstractmethod
    async def binary_path(self) -> Path:
        """Path to the node executable."""

    @abstractmethod
    async def run_npm_subcommand(
        self,
        directory: Optional[Path],
        subcommand: str,
        args: Sequence[str] = (),
    ) -> NpmOutput:
        """Run an npm subcommand and return its captured output."""

    @abstractmethod
    async def npm_package_latest_version(self, name: str) -> str:
        """Latest published version of an npm package."""

    @abstractmethod
    async def npm_install_packages(
        self,
        directory: Path,
        packages: Sequence[Tuple[str, str]],
    ) -> None:
        """Install exact (name, version) pairs into directory."""

    async def should_install_npm_package(
        self,
        package_name: str,
        local_executable_path: Path,
        local_package_directory: Path,
        latest_version: str,
    ) -> bool:
        """Whether package_name is missing or older than latest_version."""
        return await should_install_npm_package(
            package_name,
            local_executable_path,
            local_package_directory,
            latest_version,
        )
