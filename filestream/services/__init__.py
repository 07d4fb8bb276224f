"""Application services layer."""

from .archive_stream import ArchiveStreamer
from .file_system import FileSystemService

__all__ = ["ArchiveStreamer", "FileSystemService"]
