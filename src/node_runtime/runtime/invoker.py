"""Running npm subcommands through the provisioned runtime."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..errors import (
    CommandError,
    LaunchError,
    MissingBinaryError,
)
from .installer import InstallationManager
from .types import NpmOutput, RuntimeInstallation

logger = logging.getLogger(__name__)

LAUNCH_ATTEMPTS = 2


class NpmInvoker:
    """Runs npm in a sandbox: no inherited environment, private cache and config."""

    def __init__(self, installer: InstallationManager, attempts: int = LAUNCH_ATTEMPTS):
        self.installer = installer
        self.attempts = attempts

    async def run(
        self,
        directory: Optional[Path],
        subcommand: str,
        args: Sequence[str] = (),
    ) -> NpmOutput:
        """Run `npm <subcommand> <args>`.

        Each attempt re-checks the installation. Any failure before npm
        exits is retried; a non-zero exit status is not.

        Args:
            directory: Working directory and --prefix for npm, if any
            subcommand: npm subcommand, e.g. "install"
            args: Extra arguments appended after the sandbox flags

        Returns:
            Captured output of the successful run

        Raises:
            CommandError: If npm exited with a non-zero status
            LaunchError: If every attempt failed before npm could finish
        """
        last_error: Optional[Exception] = None

        for attempt in range(1, self.attempts + 1):
            try:
                output = await self._attempt(directory, subcommand, args)
            except Exception as e:
                logger.warning(
                    "npm %s attempt %d/%d failed: %s",
                    subcommand,
                    attempt,
                    self.attempts,
                    e,
                )
                last_error = e
                continue

            if output.returncode != 0:
                raise CommandError(
                    subcommand,
                    output.returncode,
                    output.stdout_text,
                    output.stderr_text,
                )
            return output

        raise LaunchError(
            f"failed to launch npm {subcommand} subcommand: {last_error}"
        ) from last_error

    async def _attempt(
        self,
        directory: Optional[Path],
        subcommand: str,
        args: Sequence[str],
    ) -> NpmOutput:
        installation = await self.installer.ensure_installed()

        if not await asyncio.to_thread(installation.node_binary.exists):
            raise MissingBinaryError("missing node binary file")

        if not await asyncio.to_thread(installation.npm_file.exists):
            raise MissingBinaryError("missing npm file")

        command = self.build_command(installation, directory, subcommand, args)
        logger.debug("Running %s", " ".join(command))

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self.build_env(installation),
                cwd=str(directory) if directory is not None else None,
            )
            stdout, stderr = await process.communicate()
        except OSError as e:
            raise LaunchError(str(e)) from e

        return NpmOutput(returncode=process.returncode, stdout=stdout, stderr=stderr)

    @staticmethod
    def build_env(installation: RuntimeInstallation) -> Dict[str, str]:
        """Environment containing only PATH, with the runtime's bin dir first."""
        env_path = str(installation.bin_dir)
        existing_path = os.environ.get("PATH")
        if existing_path:
            env_path = f"{env_path}{os.pathsep}{existing_path}"
        return {"PATH": env_path}

    @staticmethod
    def build_command(
        installation: RuntimeInstallation,
        directory: Optional[Path],
        subcommand: str,
        args: Sequence[str],
    ) -> List[str]:
        """Full argv for an npm invocation."""
        command = [
            str(installation.node_binary),
            str(installation.npm_file),
            subcommand,
            *installation.sandbox_args(),
            *args,
        ]
        if directory is not None:
            command.extend(["--prefix", str(directory)])
        return command
