"""Deciding whether a locally installed npm package needs (re)installing."""

from __future__ import annotations

import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Any

import semver

from ..errors import VersionParseError

logger = logging.getLogger(__name__)

_RANGE_PREFIX = re.compile(r"^[^0-9]+")


def parse_version(version: str) -> semver.Version:
    """Parse a strict semver string.

    Raises:
        VersionParseError: If version is not valid semver
    """
    try:
        return semver.Version.parse(version)
    except (ValueError, TypeError) as e:
        raise VersionParseError(f"invalid version {version!r}: {e}") from e


def strip_range_prefix(version: str) -> str:
    """Drop leading non-digit characters, e.g. "^1.2.3" -> "1.2.3"."""
    return _RANGE_PREFIX.sub("", version)


async def should_install_npm_package(
    package_name: str,
    local_executable_path: Path,
    local_package_directory: Path,
    latest_version: str,
) -> bool:
    """Decide whether package_name should be (re)installed.

    Any missing or unreadable data counts as a reason to install: a needless
    reinstall is preferred over running a stale package.

    Args:
        package_name: npm package name
        local_executable_path: File the package is expected to provide
        local_package_directory: Directory holding the package.json that
            records the installed version
        latest_version: Latest published version

    Returns:
        True if the package is missing, unreadable or older than latest_version
    """
    if not await asyncio.to_thread(Path(local_executable_path).exists):
        logger.debug("%s: %s is missing", package_name, local_executable_path)
        return True

    package_json_path = Path(local_package_directory) / "package.json"
    try:
        contents = await asyncio.to_thread(package_json_path.read_text, "utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("%s: cannot read %s: %s", package_name, package_json_path, e)
        return True

    try:
        package_json: Any = json.loads(contents)
    except ValueError as e:
        logger.debug("%s: invalid %s: %s", package_name, package_json_path, e)
        return True

    dependencies = (
        package_json.get("dependencies") if isinstance(package_json, dict) else None
    )
    installed_version = (
        dependencies.get(package_name) if isinstance(dependencies, dict) else None
    )
    if not isinstance(installed_version, str):
        logger.debug("%s: no installed version recorded", package_name)
        return True

    try:
        latest = parse_version(latest_version)
    except VersionParseError as e:
        logger.debug("%s: %s", package_name, e)
        return True

    try:
        installed = parse_version(strip_range_prefix(installed_version))
    except VersionParseError as e:
        logger.debug("%s: %s", package_name, e)
        return True

    return installed < latest
