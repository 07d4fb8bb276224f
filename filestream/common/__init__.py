"""Common utilities and shared functionality."""

from .constants import ARCHIVE_NAME, DEFAULT_BUFFER_SIZE, DEFAULT_DATA_ROOT
from .types import ArchiveResult, FileEntry, ListingResult
from .utils import download_name, format_bytes, to_relative_posix

__all__ = [
    "ARCHIVE_NAME",
    "DEFAULT_BUFFER_SIZE",
    "DEFAULT_DATA_ROOT",
    "download_name",
    "ArchiveResult",
    "FileEntry",
    "ListingResult",
    "format_bytes",
    "to_relative_posix",
]
