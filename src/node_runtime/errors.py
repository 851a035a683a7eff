"""Error types raised by the Node runtime core."""

from __future__ import annotations

from typing import Optional


class NodeRuntimeError(Exception):
    """Base class for every error raised by node_runtime."""


class UnsupportedPlatformError(NodeRuntimeError):
    """Raised when the host OS or CPU architecture has no Node distribution."""

    def __init__(self, kind: str, value: str):
        self.kind = kind
        self.value = value
        super().__init__(f"Running on unsupported {kind}: {value}")


class ProvisionError(NodeRuntimeError):
    """Raised when the runtime could not be downloaded or unpacked."""


class MissingBinaryError(NodeRuntimeError):
    """Raised when node or npm is absent from a provisioned installation."""


class LaunchError(NodeRuntimeError):
    """Raised when an npm subcommand could not be launched."""


class CommandError(NodeRuntimeError):
    """Raised when npm ran but exited with a non-zero status."""

    def __init__(
        self,
        subcommand: str,
        returncode: Optional[int],
        stdout: str,
        stderr: str,
    ):
        self.subcommand = subcommand
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(self._format_error_message())

    def _format_error_message(self) -> str:
        return (
            f"failed to execute npm {self.subcommand} subcommand "
            f"(exit status {self.returncode}):\n"
            f"stdout: {self.stdout!r}\n"
            f"stderr: {self.stderr!r}"
        )


class MetadataParseError(NodeRuntimeError):
    """Raised when a registry or manifest payload cannot be interpreted."""


class VersionParseError(NodeRuntimeError):
    """Raised when a version string is not valid semver."""
