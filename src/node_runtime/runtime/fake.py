"""NodeRuntime for tests that must never touch Node."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn, Optional, Sequence, Tuple

from .base import NodeRuntime


class FakeNodeRuntime(NodeRuntime):
    """Fails loudly on every operation.

    Hand it to code under test that should not reach the Node runtime; an
    unexpected call raises AssertionError naming what was attempted.
    """

    async def binary_path(self) -> NoReturn:
        raise AssertionError("Should not query the node binary path")

    async def run_npm_subcommand(
        self,
        directory: Optional[Path],
        subcommand: str,
        args: Sequence[str] = (),
    ) -> NoReturn:
        raise AssertionError(
            f"Should not run npm subcommand '{subcommand}' with args {list(args)!r}"
        )

    async def npm_package_latest_version(self, name: str) -> NoReturn:
        raise AssertionError(f"Should not query npm package '{name}' for latest version")

    async def npm_install_packages(
        self,
        directory: Path,
        packages: Sequence[Tuple[str, str]],
    ) -> NoReturn:
        raise AssertionError(f"Should not install packages {list(packages)!r}")
