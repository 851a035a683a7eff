"""Unit tests for the real and fake Node runtimes."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from node_runtime.config import RuntimeConfig
from node_runtime.errors import CommandError, MetadataParseError
from node_runtime.runtime import (
    FakeNodeRuntime,
    NpmInfo,
    NpmOutput,
    RealNodeRuntime,
    RuntimeInstallation,
)
from node_runtime.runtime.http import HttpxClient

FETCH_FLAGS = [
    "--fetch-retry-mintimeout",
    "2000",
    "--fetch-retry-maxtimeout",
    "5000",
    "--fetch-timeout",
    "5000",
]


@pytest.fixture
def runtime() -> RealNodeRuntime:
    return RealNodeRuntime(MagicMock())


def npm_output(payload) -> NpmOutput:
    return NpmOutput(returncode=0, stdout=json.dumps(payload).encode())


class TestNpmInfo:
    """Test registry metadata parsing."""

    def test_latest_tag(self):
        info = NpmInfo.from_json('{"dist-tags": {"latest": "3.0.0"}, "versions": ["1.0.0", "3.0.0"]}')
        assert info.latest_version() == "3.0.0"

    def test_fallback_to_last_version(self):
        info = NpmInfo.from_json('{"dist-tags": {}, "versions": ["1.0.0", "2.0.0"]}')
        assert info.latest_version() == "2.0.0"

    def test_missing_dist_tags(self):
        info = NpmInfo.from_json('{"versions": ["0.1.0"]}')
        assert info.latest_version() == "0.1.0"

    def test_single_version_string(self):
        """npm prints a bare string when only one version exists."""
        info = NpmInfo.from_json('{"dist-tags": {}, "versions": "0.0.1"}')
        assert info.versions == ["0.0.1"]

    def test_no_versions(self):
        info = NpmInfo.from_json('{"dist-tags": {}, "versions": []}')
        assert info.latest_version() is None

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            "[]",
            '{"dist-tags": {}}',
            '{"versions": [1, 2]}',
            '{"dist-tags": [], "versions": []}',
            '{"dist-tags": {"latest": 3}, "versions": []}',
        ],
    )
    def test_malformed_payload(self, payload):
        with pytest.raises(MetadataParseError):
            NpmInfo.from_json(payload)


@pytest.mark.asyncio
class TestLatestVersion:
    """Test npm_package_latest_version."""

    async def test_uses_latest_tag(self, runtime):
        payload = {"dist-tags": {"latest": "3.0.0"}, "versions": ["1.0.0", "3.0.0"]}

        with patch.object(runtime, "run_npm_subcommand", AsyncMock(return_value=npm_output(payload))) as mock_run:
            version = await runtime.npm_package_latest_version("pyright")

        assert version == "3.0.0"
        mock_run.assert_awaited_once_with(None, "info", ["pyright", "--json", *FETCH_FLAGS])

    async def test_falls_back_to_last_version(self, runtime):
        payload = {"dist-tags": {}, "versions": ["1.0.0", "2.0.0"]}

        with patch.object(runtime, "run_npm_subcommand", AsyncMock(return_value=npm_output(payload))):
            assert await runtime.npm_package_latest_version("pyright") == "2.0.0"

    async def test_no_version_found(self, runtime):
        payload = {"dist-tags": {}, "versions": []}

        with patch.object(runtime, "run_npm_subcommand", AsyncMock(return_value=npm_output(payload))):
            with pytest.raises(MetadataParseError, match="no version found for npm package pyright"):
                await runtime.npm_package_latest_version("pyright")

    async def test_malformed_stdout(self, runtime):
        output = NpmOutput(returncode=0, stdout=b"npm WARN something\n")

        with patch.object(runtime, "run_npm_subcommand", AsyncMock(return_value=output)):
            with pytest.raises(MetadataParseError):
                await runtime.npm_package_latest_version("pyright")

    async def test_command_error_propagates(self, runtime):
        error = CommandError("info", 1, "", "E404")

        with patch.object(runtime, "run_npm_subcommand", AsyncMock(side_effect=error)):
            with pytest.raises(CommandError):
                await runtime.npm_package_latest_version("missing-package")


@pytest.mark.asyncio
class TestInstallPackages:
    """Test npm_install_packages."""

    async def test_install_arguments(self, runtime, tmp_path):
        with patch.object(runtime, "run_npm_subcommand", AsyncMock(return_value=NpmOutput(0))) as mock_run:
            result = await runtime.npm_install_packages(tmp_path, [("left-pad", "1.3.0")])

        assert result is None
        mock_run.assert_awaited_once_with(
            tmp_path, "install", ["left-pad@1.3.0", "--save-exact", *FETCH_FLAGS]
        )

    async def test_multiple_packages(self, runtime, tmp_path):
        with patch.object(runtime, "run_npm_subcommand", AsyncMock(return_value=NpmOutput(0))) as mock_run:
            await runtime.npm_install_packages(
                tmp_path, [("typescript", "5.2.2"), ("@scope/tool", "1.0.0")]
            )

        args = mock_run.call_args.args[2]
        assert args[:3] == ["typescript@5.2.2", "@scope/tool@1.0.0", "--save-exact"]

    async def test_failure_propagates(self, runtime, tmp_path):
        error = CommandError("install", 1, "", "ERESOLVE")

        with patch.object(runtime, "run_npm_subcommand", AsyncMock(side_effect=error)):
            with pytest.raises(CommandError, match="ERESOLVE"):
                await runtime.npm_install_packages(tmp_path, [("left-pad", "1.3.0")])


@pytest.mark.asyncio
class TestRealRuntime:
    """Test RealNodeRuntime wiring."""

    async def test_binary_path(self, tmp_path):
        installation = RuntimeInstallation(tmp_path / "node")
        installer = MagicMock()
        installer.ensure_installed = AsyncMock(return_value=installation)

        runtime = RealNodeRuntime(installer)

        assert await runtime.binary_path() == tmp_path / "node" / "bin" / "node"

    async def test_run_delegates_to_invoker(self, runtime):
        with patch.object(runtime.invoker, "run", AsyncMock(return_value=NpmOutput(0))) as mock_run:
            await runtime.run_npm_subcommand(Path("/work"), "ls", ["--depth=0"])

        mock_run.assert_awaited_once_with(Path("/work"), "ls", ["--depth=0"])


class TestFromConfig:
    """Test building a runtime from configuration."""

    def test_from_config(self, tmp_path):
        config = RuntimeConfig(project_root=tmp_path)
        config.node.support_dir = str(tmp_path / "support")
        config.node.dist_url = "https://mirror.example.com/node"
        config.node.health_check_timeout = 5
        config.node.download_timeout = 42

        with patch.dict("os.environ", {}, clear=True):
            runtime = RealNodeRuntime.from_config(config)

        assert runtime.installer.support_dir == tmp_path / "support"
        assert runtime.installer.dist_url == "https://mirror.example.com/node"
        assert runtime.installer.health_check_timeout == 5
        assert isinstance(runtime.installer.http, HttpxClient)
        assert runtime.installer.http.timeout == 42


@pytest.mark.asyncio
class TestFakeRuntime:
    """The fake runtime should fail loudly on every operation."""

    async def test_binary_path(self):
        with pytest.raises(AssertionError, match="node binary path"):
            await FakeNodeRuntime().binary_path()

    async def test_run_npm_subcommand(self):
        with pytest.raises(AssertionError, match="Should not run npm subcommand 'install'"):
            await FakeNodeRuntime().run_npm_subcommand(None, "install", ["left-pad"])

    async def test_latest_version(self):
        with pytest.raises(AssertionError, match="'pyright'"):
            await FakeNodeRuntime().npm_package_latest_version("pyright")

    async def test_install_packages(self, tmp_path):
        with pytest.raises(AssertionError, match="left-pad"):
            await FakeNodeRuntime().npm_install_packages(tmp_path, [("left-pad", "1.3.0")])

    async def test_should_install_still_works(self, tmp_path):
        """The upgrade check is pure and needs no Node."""
        result = await FakeNodeRuntime().should_install_npm_package(
            "pyright", tmp_path / "missing.js", tmp_path, "1.0.0"
        )
        assert result is True
