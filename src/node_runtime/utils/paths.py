"""Locations of the per-user support directory."""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Optional, Union

APP_DIR_NAME = "node-runtime"


def default_support_dir(system: Optional[str] = None) -> Path:
    """Return the per-user directory where downloaded runtimes live.

    - macOS: ~/Library/Application Support/node-runtime
    - Windows: %LOCALAPPDATA%/node-runtime
    - Others: $XDG_DATA_HOME/node-runtime or ~/.local/share/node-runtime

    Args:
        system: Value of platform.system() to compute the path for
            (defaults to the running system)

    Returns:
        Absolute path (not guaranteed to exist)
    """
    system = system or platform.system()
    home = Path.home()

    if system == "Darwin":
        return home / "Library" / "Application Support" / APP_DIR_NAME

    if system == "Windows":
        local_app_data = os.getenv("LOCALAPPDATA")
        base = Path(local_app_data) if local_app_data else home / "AppData" / "Local"
        return base / APP_DIR_NAME

    xdg_data_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_data_home) if xdg_data_home else home / ".local" / "share"
    return base / APP_DIR_NAME


def expand_path(path: Union[str, Path], project_root: Union[str, Path]) -> Path:
    """Expand ${PROJECT_ROOT} and ~ in a configured path.

    Relative results are resolved against project_root.

    Examples:
        >>> expand_path("${PROJECT_ROOT}/.support", "/project")
        Path("/project/.support")

        >>> expand_path("cache", "/project")
        Path("/project/cache")
    """
    project_root_obj = Path(project_root).resolve()
    expanded = str(path).replace("${PROJECT_ROOT}", str(project_root_obj))
    path_obj = Path(expanded).expanduser()

    if path_obj.is_absolute():
        return path_obj

    return project_root_obj / path_obj
