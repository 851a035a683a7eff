"""Pytest configuration and shared fixtures."""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from node_runtime.runtime import InstallationManager, RuntimeInstallation
from tests.fixtures.node_dist import (
    LINUX_X64,
    CountingHttpClient,
    build_node_tarball,
    install_fake_node,
)


@pytest.fixture
def support_dir() -> Generator[Path, None, None]:
    """Create an empty support directory."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def node_tarball() -> bytes:
    """A Node-shaped .tar.gz whose node binary always succeeds."""
    return build_node_tarball(LINUX_X64)


@pytest.fixture
def http_client(node_tarball: bytes) -> CountingHttpClient:
    """HTTP client serving the fake Node tarball and counting requests."""
    return CountingHttpClient(node_tarball)


@pytest.fixture
def installer(http_client: CountingHttpClient, support_dir: Path) -> InstallationManager:
    """InstallationManager pinned to linux-x64 with a fake HTTP client."""
    return InstallationManager(
        http_client,
        support_dir,
        dist_url="https://dist.example.com",
        health_check_timeout=10,
        platform_info=LINUX_X64,
    )


@pytest.fixture
def installed(installer: InstallationManager) -> RuntimeInstallation:
    """A working installation already on disk, created without the installer."""
    installation = installer.installation()
    install_fake_node(installation.path, exit_status=0)
    return installation
