"""NodeRuntime backed by a downloaded Node distribution."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Sequence, Tuple

from ..errors import MetadataParseError
from .base import NodeRuntime
from .http import HttpClient, HttpxClient
from .installer import InstallationManager
from .invoker import NpmInvoker
from .types import NpmInfo, NpmOutput

if TYPE_CHECKING:
    from ..config import RuntimeConfig

logger = logging.getLogger(__name__)

# Bound npm's own registry retries so a dead network fails fast
FETCH_TIMEOUT_ARGS = (
    "--fetch-retry-mintimeout",
    "2000",
    "--fetch-retry-maxtimeout",
    "5000",
    "--fetch-timeout",
    "5000",
)


class RealNodeRuntime(NodeRuntime):
    """Provisions Node on first use and runs npm through it."""

    def __init__(self, installer: InstallationManager):
        self.installer = installer
        self.invoker = NpmInvoker(installer)

    @classmethod
    def from_config(
        cls,
        config: "RuntimeConfig",
        http: Optional[HttpClient] = None,
    ) -> "RealNodeRuntime":
        """Build a runtime from loaded configuration.

        Args:
            config: Loaded RuntimeConfig
            http: HTTP client (an HttpxClient using the configured download
                timeout if None)
        """
        http = http or HttpxClient(timeout=config.node.download_timeout)
        installer = InstallationManager(
            http,
            config.support_dir,
            dist_url=config.node.dist_url,
            health_check_timeout=config.node.health_check_timeout,
        )
        return cls(installer)

    async def binary_path(self) -> Path:
        installation = await self.installer.ensure_installed()
        return installation.node_binary

    async def run_npm_subcommand(
        self,
        directory: Optional[Path],
        subcommand: str,
        args: Sequence[str] = (),
    ) -> NpmOutput:
        return await self.invoker.run(directory, subcommand, args)

    async def npm_package_latest_version(self, name: str) -> str:
        """Latest published version of an npm package.

        Uses the "latest" dist-tag, falling back to the last listed version.

        Raises:
            MetadataParseError: If the registry reply is malformed or lists
                no versions
            CommandError, LaunchError: If npm info failed
        """
        output = await self.run_npm_subcommand(
            None, "info", [name, "--json", *FETCH_TIMEOUT_ARGS]
        )

        info = NpmInfo.from_json(output.stdout)
        version = info.latest_version()
        if version is None:
            raise MetadataParseError(f"no version found for npm package {name}")

        logger.debug("Latest version of %s is %s", name, version)
        return version

    async def npm_install_packages(
        self,
        directory: Path,
        packages: Sequence[Tuple[str, str]],
    ) -> None:
        arguments = [f"{name}@{version}" for name, version in packages]
        arguments.extend(["--save-exact", *FETCH_TIMEOUT_ARGS])

        await self.run_npm_subcommand(directory, "install", arguments)
