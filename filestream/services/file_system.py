"""Directory-scoped path resolution and listing."""

import logging
import os
import stat
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from ..common.types import FileEntry, ListingResult
from ..common.utils import to_relative_posix
from ..utils import (
    InternalIOError,
    InvalidPathError,
    NotADirectoryPathError,
    NotFoundError,
)

logger = logging.getLogger(__name__)


def _is_within_directory(base: Path, target: Path) -> bool:
    try:
        target.relative_to(base)
        return True
    except ValueError:
        return False


class FileSystemService:
    """Read-only view of the files under a data root."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()

    def resolve(self, relative: str = "") -> Path:
        """
        Resolve a client-supplied path against the data root.

        Symlinks and ``..`` segments are resolved before the containment
        check, which compares whole path segments.

        Args:
            relative: Path relative to the data root; empty means the root.

        Returns:
            Canonical absolute path inside the data root.
        """
        candidate = relative or ""
        if "\x00" in candidate or Path(candidate).is_absolute():
            raise InvalidPathError(f"Invalid path: {relative}")
        try:
            target = (self.root / candidate).resolve()
        except (OSError, RuntimeError) as exc:
            raise InvalidPathError(f"Invalid path: {relative}") from exc
        if not _is_within_directory(self.root, target):
            logger.warning("Rejected path outside data root: %r", relative)
            raise InvalidPathError(f"Invalid path: {relative}")
        return target

    def resolve_all(self, relative_paths: Iterable[str]) -> List[Tuple[str, Path]]:
        """
        Validate every path before any of them is used.

        Returns:
            ``(relative, resolved)`` pairs in the given order.
        """
        resolved = []
        for relative in relative_paths:
            try:
                resolved.append((relative, self.resolve(relative)))
            except InvalidPathError as exc:
                raise InvalidPathError(f"Invalid file path: {relative}") from exc
        return resolved

    def resolve_file(self, relative: str) -> Path:
        """
        Resolve a path that must name an existing regular file.

        Args:
            relative: Path relative to the data root.

        Returns:
            Canonical absolute path of the file.
        """
        target = self.resolve(relative)
        try:
            file_stat = target.stat()
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise NotFoundError(f"File not found: {relative}") from exc
        except OSError as exc:
            raise InternalIOError(f"Failed to get file info: {exc}") from exc
        if not stat.S_ISREG(file_stat.st_mode):
            raise InvalidPathError(f"Not a regular file: {relative}")
        return target

    def list_directory(self, relative: str = "", recursive: bool = False) -> ListingResult:
        """
        List a directory under the data root.

        Args:
            relative: Directory relative to the data root.
            recursive: Walk the whole subtree instead of immediate children.

        Returns:
            ListingResult with entries sorted by name (depth-first when recursive).
        """
        target = self.resolve(relative)
        try:
            dir_stat = target.stat()
        except (FileNotFoundError, NotADirectoryError) as exc:
            raise NotFoundError("Directory not found") from exc
        except OSError as exc:
            raise InternalIOError(f"Failed to access directory: {exc}") from exc
        if not stat.S_ISDIR(dir_stat.st_mode):
            raise NotADirectoryPathError("Path is not a directory")

        result = ListingResult(current_path=relative or ".")
        try:
            self._collect(target, result, recursive)
        except OSError as exc:
            raise InternalIOError(f"Failed to list directory contents: {exc}") from exc

        if result.skipped:
            logger.warning(
                "Skipped %d unreadable entries while listing %s",
                len(result.skipped),
                result.current_path,
            )
        return result

    def _collect(self, directory: Path, result: ListingResult, recursive: bool) -> None:
        with os.scandir(directory) as iterator:
            children = sorted(iterator, key=lambda item: item.name)

        for child in children:
            child_path = directory / child.name
            relative = to_relative_posix(self.root, child_path)
            try:
                child_stat = child.stat()
                is_link = child.is_symlink()
                resolved = child_path.resolve()
            except (OSError, RuntimeError) as exc:
                logger.debug("Cannot read metadata for %s: %s", relative, exc)
                result.skipped.append(relative)
                continue
            if not _is_within_directory(self.root, resolved):
                result.skipped.append(relative)
                continue

            is_directory = stat.S_ISDIR(child_stat.st_mode)
            result.entries.append(
                FileEntry.from_stat(child.name, relative, child_stat, is_directory)
            )

            # Symlinked directories are listed but not descended into
            if recursive and is_directory and not is_link:
                try:
                    self._collect(child_path, result, recursive)
                except OSError as exc:
                    # The directory itself stays listed; only its contents are missing
                    logger.warning("Cannot read directory %s: %s", relative, exc)
