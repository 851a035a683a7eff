"""Utility modules (paths)."""

from .paths import (
    default_support_dir,
    expand_path,
)

__all__ = [
    "default_support_dir",
    "expand_path",
]
