"""Shared utilities for the file streaming service."""

from __future__ import annotations

import logging
import os

from .common.constants import DEFAULT_BUFFER_SIZE


class FileServiceError(Exception):
    """Base exception for file service errors."""

    status = 500


class ConfigError(FileServiceError):
    """Raised when configuration is invalid or missing."""


class InvalidPathError(FileServiceError):
    """Raised when a path escapes the data root or cannot be resolved."""

    status = 400


class NotFoundError(FileServiceError):
    """Raised when a requested file or directory does not exist."""

    status = 404


class NotADirectoryPathError(FileServiceError):
    """Raised when a listing targets something that is not a directory."""

    status = 400


class InternalIOError(FileServiceError):
    """Raised when the filesystem fails for reasons unrelated to validation."""

    status = 500


def get_io_buffer_size() -> int:
    """
    Read the IO buffer size from the environment.

    Returns:
        Buffer size in bytes.
    """
    value = os.getenv("IO_BUFFER_SIZE", "").strip()
    if not value:
        return DEFAULT_BUFFER_SIZE
    try:
        parsed = int(value)
    except ValueError:
        return DEFAULT_BUFFER_SIZE
    if parsed <= 0:
        return DEFAULT_BUFFER_SIZE
    return parsed


def parse_log_level(name: str) -> int:
    """
    Convert a level name such as ``"debug"`` to a logging level.

    Args:
        name: Level name, case-insensitive.

    Returns:
        Numeric logging level.
    """
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ConfigError(f"Unknown log level: {name}")
    return level
