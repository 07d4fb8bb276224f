"""aiohttp routes for listing and downloading files."""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path
from typing import List, Optional, Tuple
from urllib.parse import quote

from aiohttp import hdrs, web

from .common.constants import ARCHIVE_NAME, INDEX_FILE
from .common.utils import download_name
from .config import Config
from .services import ArchiveStreamer, FileSystemService
from .utils import FileServiceError, InvalidPathError

logger = logging.getLogger(__name__)

FILES_KEY = web.AppKey("files", FileSystemService)
FRONTEND_KEY = web.AppKey("frontend", FileSystemService)
STREAMER_KEY = web.AppKey("streamer", ArchiveStreamer)

TRUE_VALUES = {"1", "true", "yes", "on"}


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


def _attachment(filename: str) -> str:
    quoted = quote(filename)
    return f"attachment; filename=\"{quoted}\"; filename*=UTF-8''{quoted}"


async def health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "timestamp": int(time.time())})


async def list_files(request: web.Request) -> web.Response:
    files = request.app[FILES_KEY]
    path = request.query.get("path", "")
    recursive = request.query.get("recursive", "").strip().lower() in TRUE_VALUES
    try:
        listing = await asyncio.to_thread(files.list_directory, path, recursive)
    except InvalidPathError:
        return _error("Invalid directory path", 400)
    except FileServiceError as exc:
        return _error(str(exc), exc.status)
    return web.json_response(listing.to_dict())


async def download(request: web.Request) -> web.StreamResponse:
    files = request.app[FILES_KEY]
    paths = request.query.getall("files", [])
    if not paths:
        return _error("No files specified for download", 400)

    try:
        targets = await asyncio.to_thread(files.resolve_all, paths)
    except FileServiceError as exc:
        return _error(str(exc), exc.status)

    if len(targets) == 1:
        return await _download_single(request, files, targets[0][0])
    return await _download_archive(request, targets)


async def _download_single(
    request: web.Request, files: FileSystemService, relative: str
) -> web.StreamResponse:
    try:
        path = await asyncio.to_thread(files.resolve_file, relative)
    except FileServiceError as exc:
        return _error(str(exc), exc.status)

    headers = {
        "Content-Description": "File Transfer",
        "Content-Transfer-Encoding": "binary",
        hdrs.CONTENT_DISPOSITION: _attachment(download_name(relative, path)),
        hdrs.CONTENT_TYPE: "application/octet-stream",
    }
    # FileResponse fills in Content-Length and Accept-Ranges and answers Range requests
    return web.FileResponse(path, headers=headers)


async def _download_archive(
    request: web.Request, targets: List[Tuple[str, Path]]
) -> web.StreamResponse:
    streamer = request.app[STREAMER_KEY]
    response = web.StreamResponse(
        status=200,
        headers={
            hdrs.CONTENT_TYPE: "application/zip",
            hdrs.CONTENT_DISPOSITION: _attachment(ARCHIVE_NAME),
        },
    )
    response.enable_chunked_encoding()
    await response.prepare(request)

    try:
        await streamer.stream(targets, response.write)
    except ConnectionResetError:
        logger.info("Client disconnected during archive download")
        raise
    await response.write_eof()
    return response


def _find_static(frontend: FileSystemService, tail: str) -> Optional[Path]:
    try:
        path = frontend.resolve(tail)
    except InvalidPathError:
        return None
    if path.is_dir():
        path = path / INDEX_FILE
    return path if path.is_file() else None


async def static_fallback(request: web.Request) -> web.StreamResponse:
    frontend = request.app[FRONTEND_KEY]
    tail = request.match_info.get("tail", "")
    path = await asyncio.to_thread(_find_static, frontend, tail)
    if path is None:
        return web.Response(text=f"{tail or INDEX_FILE} not found", status=404)
    return web.FileResponse(path)


def create_app(config: Config) -> web.Application:
    if not config.data_root.is_dir():
        logger.warning("Data root %s does not exist", config.data_root)

    app = web.Application()
    app[FILES_KEY] = FileSystemService(config.data_root)
    app[FRONTEND_KEY] = FileSystemService(config.frontend_dir)
    app[STREAMER_KEY] = ArchiveStreamer(config.buffer_size)

    app.router.add_get("/api/health", health)
    app.router.add_get("/api/files", list_files)
    app.router.add_get("/api/download", download)
    app.router.add_get("/{tail:.*}", static_fallback)
    return app
