"""Bootstrap utilities for npm-distributed tools."""

from .npm_packages import (
    NPM_PACKAGES,
    NpmPackageInfo,
    NpmPackageStatus,
    check_and_install_npm_packages,
    ensure_npm_package,
    get_npm_package,
)

__all__ = [
    "NPM_PACKAGES",
    "NpmPackageInfo",
    "NpmPackageStatus",
    "check_and_install_npm_packages",
    "ensure_npm_package",
    "get_npm_package",
]
