"""Type definitions and data models."""

import os
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List


@dataclass
class FileEntry:
    """Metadata for one filesystem object under the data root."""
    name: str
    size: int
    path: str
    last_modified: datetime
    is_directory: bool

    @classmethod
    def from_stat(cls, name: str, path: str, stat_result: os.stat_result, is_directory: bool) -> "FileEntry":
        """Build an entry from an ``os.stat_result``."""
        return cls(
            name=name,
            size=stat_result.st_size,
            path=path,
            last_modified=datetime.fromtimestamp(stat_result.st_mtime, tz=timezone.utc),
            is_directory=is_directory,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape served by the API."""
        return {
            "name": self.name,
            "size": self.size,
            "path": self.path,
            "lastModified": self.last_modified.isoformat(),
            "isDirectory": self.is_directory,
        }


@dataclass
class ListingResult:
    """Entries produced by a directory listing, plus the ones that were skipped."""
    current_path: str
    entries: List[FileEntry] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON shape served by the API."""
        return {
            "currentPath": self.current_path,
            "files": [entry.to_dict() for entry in self.entries],
        }


@dataclass
class ArchiveResult:
    """Outcome of streaming a multi-file archive."""
    included: List[str] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)
    bytes_written: int = 0

    def skip(self, path: str, reason: object) -> None:
        self.skipped[path] = str(reason)
