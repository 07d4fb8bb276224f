"""Incremental ZIP archive streaming."""

from __future__ import annotations

import asyncio
import logging
import stat
import zipfile
from pathlib import Path
from typing import Any, Awaitable, Callable, Sequence, Tuple

import aiofiles

from ..common.constants import DEFAULT_BUFFER_SIZE
from ..common.types import ArchiveResult
from ..common.utils import download_name, format_bytes

logger = logging.getLogger(__name__)

AsyncWriter = Callable[[bytes], Awaitable[Any]]


class _ArchiveSink:
    """Write-only buffer handed to ``zipfile``.

    It has no ``tell``/``seek`` so ``zipfile`` writes data descriptors
    instead of seeking back to patch headers.
    """

    def __init__(self) -> None:
        self._buffer = bytearray()

    def write(self, data: bytes) -> int:
        self._buffer += data
        return len(data)

    def flush(self) -> None:
        pass

    def take(self) -> bytes:
        data = bytes(self._buffer)
        self._buffer.clear()
        return data


class ArchiveStreamer:
    """Writes stored (uncompressed) ZIP archives to an async writer."""

    def __init__(self, buffer_size: int = DEFAULT_BUFFER_SIZE):
        if buffer_size <= 0:
            raise ValueError("Buffer size must be greater than 0.")
        self.buffer_size = buffer_size

    async def stream(
        self, targets: Sequence[Tuple[str, Path]], write: AsyncWriter
    ) -> ArchiveResult:
        """
        Stream an archive of the given files.

        Files that cannot be read are left out and recorded in the
        result; errors raised by ``write`` propagate.

        Args:
            targets: ``(relative, resolved)`` pairs, already validated.
            write: Coroutine function receiving archive bytes.

        Returns:
            ArchiveResult listing included and skipped files.
        """
        result = ArchiveResult()
        sink = _ArchiveSink()

        async def drain() -> None:
            data = sink.take()
            if data:
                result.bytes_written += len(data)
                await write(data)

        with zipfile.ZipFile(sink, mode="w", compression=zipfile.ZIP_STORED) as archive:
            for relative, path in targets:
                try:
                    info = await asyncio.to_thread(
                        zipfile.ZipInfo.from_file,
                        path,
                        arcname=download_name(relative, path),
                        strict_timestamps=False,
                    )
                except OSError as exc:
                    result.skip(relative, exc)
                    continue
                if not stat.S_ISREG(info.external_attr >> 16):
                    result.skip(relative, "not a regular file")
                    continue

                try:
                    source = await aiofiles.open(path, "rb")
                except OSError as exc:
                    result.skip(relative, exc)
                    continue

                info.compress_type = zipfile.ZIP_STORED
                previous = archive.NameToInfo.get(info.filename)
                read_error = None
                try:
                    with archive.open(info, mode="w") as entry:
                        while True:
                            try:
                                chunk = await source.read(self.buffer_size)
                            except OSError as exc:
                                read_error = exc
                                break
                            if not chunk:
                                break
                            entry.write(chunk)
                            await drain()
                finally:
                    await source.close()

                if read_error is not None:
                    # Header and partial data are already on the wire; keep
                    # the entry out of the central directory.
                    archive.filelist.remove(info)
                    if previous is not None:
                        archive.NameToInfo[info.filename] = previous
                    elif archive.NameToInfo.get(info.filename) is info:
                        del archive.NameToInfo[info.filename]
                    result.skip(relative, read_error)
                else:
                    result.included.append(relative)
                await drain()

        await drain()

        for relative, reason in result.skipped.items():
            logger.warning("Omitted %s from archive: %s", relative, reason)
        logger.info(
            "Streamed archive with %d of %d files (%s)",
            len(result.included),
            len(targets),
            format_bytes(result.bytes_written),
        )
        return result
