"""Utility functions used throughout the application."""

from pathlib import Path, PurePosixPath
from typing import Optional


def format_bytes(num_bytes: Optional[int]) -> str:
    """Convert bytes to human readable format."""
    if num_bytes is None:
        return "Unknown size"

    units = ["B", "KB", "MB", "GB", "TB"]
    size = float(num_bytes)
    for unit in units:
        if size < 1024 or unit == units[-1]:
            if unit == "B":
                return f"{int(size)} {unit}"
            return f"{size:.2f} {unit}"
        size /= 1024
    return f"{int(num_bytes)} B"


def to_relative_posix(base: Path, target: Path) -> str:
    """Path of target relative to base, with forward slashes ("." for base itself)."""
    return target.relative_to(base).as_posix()


def download_name(relative: str, resolved: Path) -> str:
    """Name a download after the path the client asked for, not a symlink target."""
    name = PurePosixPath(relative).name
    if not name or name in {".", ".."}:
        return resolved.name
    return name
