"""Data types for the Node runtime."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Union

from ..errors import MetadataParseError


@dataclass(frozen=True)
class RuntimeInstallation:
    """An unpacked Node distribution on disk.

    Attributes:
        path: Installation directory, e.g. <support>/node/node-v18.15.0-linux-x64
    """

    path: Path

    @property
    def bin_dir(self) -> Path:
        return self.path / "bin"

    @property
    def node_binary(self) -> Path:
        return self.bin_dir / "node"

    @property
    def npm_file(self) -> Path:
        return self.bin_dir / "npm"

    @property
    def cache_dir(self) -> Path:
        return self.path / "cache"

    @property
    def user_npmrc(self) -> Path:
        return self.path / "blank_user_npmrc"

    @property
    def global_npmrc(self) -> Path:
        return self.path / "blank_global_npmrc"

    def sandbox_args(self) -> List[str]:
        """npm flags that keep it away from the user's own cache and config."""
        return [
            "--cache",
            str(self.cache_dir),
            "--userconfig",
            str(self.user_npmrc),
            "--globalconfig",
            str(self.global_npmrc),
        ]


@dataclass
class NpmOutput:
    """Captured result of an npm invocation."""

    returncode: Optional[int]
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace")


@dataclass
class NpmInfo:
    """Subset of `npm info --json` output.

    Attributes:
        latest: The "latest" distribution tag, if published
        versions: Every published version, oldest first
    """

    latest: Optional[str] = None
    versions: List[str] = field(default_factory=list)

    @classmethod
    def from_json(cls, payload: Union[str, bytes]) -> "NpmInfo":
        """Parse registry metadata.

        Raises:
            MetadataParseError: If the payload is not the expected shape
        """
        try:
            data: Any = json.loads(payload)
        except (ValueError, UnicodeDecodeError) as e:
            raise MetadataParseError(f"invalid npm info payload: {e}") from e

        if not isinstance(data, dict):
            raise MetadataParseError("npm info payload is not a JSON object")

        if "versions" not in data:
            raise MetadataParseError("npm info payload has no versions field")

        versions = data["versions"]
        # npm prints a bare string when only one version was ever published
        if isinstance(versions, str):
            versions = [versions]
        if not isinstance(versions, list) or not all(
            isinstance(v, str) for v in versions
        ):
            raise MetadataParseError("npm info versions is not a list of strings")

        dist_tags = data.get("dist-tags")
        if dist_tags is None:
            dist_tags = {}
        if not isinstance(dist_tags, dict):
            raise MetadataParseError("npm info dist-tags is not an object")

        latest = dist_tags.get("latest")
        if latest is not None and not isinstance(latest, str):
            raise MetadataParseError("npm info dist-tags.latest is not a string")

        return cls(latest=latest, versions=list(versions))

    def latest_version(self) -> Optional[str]:
        """The "latest" tag, falling back to the last published version."""
        if self.latest:
            return self.latest
        if self.versions:
            return self.versions[-1]
        return None
