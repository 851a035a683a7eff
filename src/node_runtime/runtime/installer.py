"""Provisioning of the pinned Node runtime.

Downloads the official Node distribution for the host platform into the
support directory on first use and repairs it when it stops working.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
import tarfile
import tempfile
import zlib
from pathlib import Path
from typing import BinaryIO, Optional

from ..errors import ProvisionError
from .archive import extract_tar_gz
from .http import HttpClient
from .platform import PlatformInfo, resolve_platform
from .types import RuntimeInstallation

logger = logging.getLogger(__name__)

NODE_VERSION = "v18.15.0"
DEFAULT_DIST_URL = "https://nodejs.org/dist"


def archive_url(dist_url: str, version: str, platform_info: PlatformInfo) -> str:
    """URL of the Node tarball for a version and platform."""
    file_name = f"node-{version}-{platform_info.os}-{platform_info.arch}.tar.gz"
    return f"{dist_url.rstrip('/')}/{version}/{file_name}"


class InstallationManager:
    """Guarantees a working Node installation exists on disk.

    All provisioning runs under a single lock, so concurrent callers never
    download or unpack at the same time; they wait and then reuse the
    installation the first caller produced.
    """

    def __init__(
        self,
        http: HttpClient,
        support_dir: Path,
        dist_url: str = DEFAULT_DIST_URL,
        health_check_timeout: Optional[float] = 60.0,
        platform_info: Optional[PlatformInfo] = None,
    ):
        """Initialize manager.

        Args:
            http: Client used to fetch the distribution archive
            support_dir: Directory under which node/ is created
            dist_url: Base URL of the Node distribution server
            health_check_timeout: Seconds before a hung health check counts
                as failed (None waits forever)
            platform_info: Platform labels (resolved from the host if None)
        """
        self.http = http
        self.support_dir = Path(support_dir)
        self.dist_url = dist_url
        self.health_check_timeout = health_check_timeout
        self._platform_info = platform_info
        self._installation_lock = asyncio.Lock()

    @property
    def containing_dir(self) -> Path:
        return self.support_dir / "node"

    def installation(self) -> RuntimeInstallation:
        """The expected installation for the pinned version and this host.

        Raises:
            UnsupportedPlatformError: If the host has no Node distribution
        """
        if self._platform_info is None:
            self._platform_info = resolve_platform()
        folder_name = f"node-{NODE_VERSION}-{self._platform_info}"
        return RuntimeInstallation(self.containing_dir / folder_name)

    async def ensure_installed(self) -> RuntimeInstallation:
        """Return a working installation, provisioning it if needed.

        Raises:
            UnsupportedPlatformError: If the host has no Node distribution
            ProvisionError: If the download or extraction failed
        """
        async with self._installation_lock:
            logger.info("Node runtime install_if_needed")

            installation = self.installation()

            if not await self._health_check(installation):
                await self._provision(installation)

            # Outside the provisioning branch so existing installations get them too
            await asyncio.to_thread(self._prepare_sandbox, installation)

            return installation

    async def _health_check(self, installation: RuntimeInstallation) -> bool:
        """Check that `node npm --version` exits successfully."""
        try:
            process = await asyncio.create_subprocess_exec(
                str(installation.node_binary),
                str(installation.npm_file),
                "--version",
                *installation.sandbox_args(),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
                env={},
            )
        except OSError as e:
            logger.debug("Node health check could not start: %s", e)
            return False

        try:
            returncode = await asyncio.wait_for(
                process.wait(), timeout=self.health_check_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Node health check timed out after %ss", self.health_check_timeout
            )
            process.kill()
            await process.wait()
            return False

        if returncode != 0:
            logger.debug("Node health check exited with status %s", returncode)
        return returncode == 0

    async def _provision(self, installation: RuntimeInstallation) -> None:
        """Wipe the node/ directory and unpack a fresh distribution into it."""
        containing_dir = self.containing_dir

        await asyncio.to_thread(shutil.rmtree, containing_dir, True)
        try:
            await asyncio.to_thread(containing_dir.mkdir, parents=True)
        except OSError as e:
            raise ProvisionError(f"error creating node containing dir: {e}") from e

        url = archive_url(self.dist_url, NODE_VERSION, self._platform_info)
        logger.info("Downloading Node %s from %s", NODE_VERSION, url)

        with tempfile.TemporaryFile() as archive_file:
            try:
                await self._download(url, archive_file)
            except Exception as e:
                raise ProvisionError(
                    f"error downloading Node binary tarball: {e}"
                ) from e

            archive_file.seek(0)
            try:
                await asyncio.to_thread(extract_tar_gz, archive_file, containing_dir)
            except (tarfile.TarError, OSError, EOFError, zlib.error) as e:
                raise ProvisionError(f"error extracting Node binary tarball: {e}") from e

        logger.info("Installed Node %s into %s", NODE_VERSION, installation.path)

    async def _download(self, url: str, destination: BinaryIO) -> None:
        async for chunk in self.http.get(url, follow_redirects=True):
            await asyncio.to_thread(destination.write, chunk)

    @staticmethod
    def _prepare_sandbox(installation: RuntimeInstallation) -> None:
        """Create the private cache dir and write the npmrc files empty."""
        try:
            installation.cache_dir.mkdir(exist_ok=True)
        except OSError as e:
            logger.debug("Could not create npm cache dir: %s", e)

        for npmrc in (installation.user_npmrc, installation.global_npmrc):
            try:
                npmrc.write_bytes(b"")
            except OSError as e:
                logger.debug("Could not write %s: %s", npmrc, e)
