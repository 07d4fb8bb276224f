"""HTTP tests for the listing and download routes."""

from __future__ import annotations

import io
import logging
import os
import tempfile
import unittest
import zipfile
from pathlib import Path

from aiohttp import web
from aiohttp.test_utils import AioHTTPTestCase

from filestream.api import create_app
from filestream.config import Config


class TestFileApi(AioHTTPTestCase):
    async def asyncSetUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        base = Path(self.temp_dir.name)
        self.root = base / "data"
        (self.root / "docs").mkdir(parents=True)
        (self.root / "alpha.txt").write_bytes(b"alpha contents")
        (self.root / "beta.bin").write_bytes(bytes(range(200)))
        (self.root / "docs" / "readme.md").write_text("# readme", encoding="utf-8")
        (base / "secret.txt").write_text("outside", encoding="utf-8")
        (base / "data2").mkdir()
        (base / "data2" / "sibling.txt").write_text("sibling", encoding="utf-8")
        self.frontend = base / "frontend"
        self.frontend.mkdir()
        (self.frontend / "index.html").write_text("<html>ok</html>", encoding="utf-8")
        (self.frontend / "app.js").write_text("console.log(1);", encoding="utf-8")
        await super().asyncSetUp()

    async def asyncTearDown(self) -> None:
        await super().asyncTearDown()
        self.temp_dir.cleanup()

    async def get_application(self) -> web.Application:
        config = Config(
            data_root=self.root,
            frontend_dir=self.frontend,
            host="127.0.0.1",
            port=8080,
            buffer_size=64,
            log_level=logging.INFO,
        )
        return create_app(config)

    async def test_health(self) -> None:
        async with self.client.get("/api/health") as resp:
            self.assertEqual(resp.status, 200)
            data = await resp.json()
        self.assertEqual(data["status"], "ok")
        self.assertIsInstance(data["timestamp"], int)

    async def test_list_root(self) -> None:
        async with self.client.get("/api/files") as resp:
            self.assertEqual(resp.status, 200)
            data = await resp.json()
        self.assertEqual(data["currentPath"], ".")
        files = {entry["name"]: entry for entry in data["files"]}
        self.assertEqual(set(files), {"alpha.txt", "beta.bin", "docs"})
        self.assertEqual(files["alpha.txt"]["size"], len(b"alpha contents"))
        self.assertEqual(files["beta.bin"]["size"], 200)
        self.assertTrue(files["docs"]["isDirectory"])
        self.assertFalse(files["alpha.txt"]["isDirectory"])

    async def test_list_subdirectory(self) -> None:
        async with self.client.get("/api/files", params={"path": "docs"}) as resp:
            self.assertEqual(resp.status, 200)
            data = await resp.json()
        self.assertEqual(data["currentPath"], "docs")
        self.assertEqual([entry["path"] for entry in data["files"]], ["docs/readme.md"])

    async def test_list_recursive(self) -> None:
        params = {"recursive": "true"}
        async with self.client.get("/api/files", params=params) as resp:
            data = await resp.json()
        self.assertIn("docs/readme.md", [entry["path"] for entry in data["files"]])

    async def test_list_errors(self) -> None:
        cases = [
            ("missing", 404),
            ("alpha.txt", 400),
            ("../", 400),
            ("../data2", 400),
        ]
        for path, status in cases:
            with self.subTest(path=path):
                async with self.client.get("/api/files", params={"path": path}) as resp:
                    self.assertEqual(resp.status, status)
                    data = await resp.json()
                self.assertIn("error", data)

    async def test_download_requires_files(self) -> None:
        async with self.client.get("/api/download") as resp:
            self.assertEqual(resp.status, 400)
            data = await resp.json()
        self.assertEqual(data["error"], "No files specified for download")

    async def test_download_rejects_traversal(self) -> None:
        for path in ["../secret.txt", "../data2/sibling.txt"]:
            with self.subTest(path=path):
                params = [("files", "alpha.txt"), ("files", path)]
                async with self.client.get("/api/download", params=params) as resp:
                    self.assertEqual(resp.status, 400)
                    data = await resp.json()
                self.assertEqual(data["error"], f"Invalid file path: {path}")

    async def test_download_single_file(self) -> None:
        async with self.client.get("/api/download", params={"files": "beta.bin"}) as resp:
            self.assertEqual(resp.status, 200)
            body = await resp.read()
            self.assertEqual(resp.headers["Content-Length"], "200")
            self.assertEqual(resp.headers["Content-Type"], "application/octet-stream")
            self.assertEqual(resp.headers["Accept-Ranges"], "bytes")
            self.assertIn("attachment", resp.headers["Content-Disposition"])
            self.assertIn("beta.bin", resp.headers["Content-Disposition"])
        self.assertEqual(body, bytes(range(200)))

    @unittest.skipIf(os.name == "nt", "symlinks need privileges on Windows")
    async def test_download_single_file_named_after_request(self) -> None:
        (self.root / "shortcut.bin").symlink_to(self.root / "beta.bin")
        async with self.client.get("/api/download", params={"files": "shortcut.bin"}) as resp:
            self.assertEqual(resp.status, 200)
            disposition = resp.headers["Content-Disposition"]
            body = await resp.read()
        self.assertIn("shortcut.bin", disposition)
        self.assertNotIn("beta.bin", disposition)
        self.assertEqual(body, bytes(range(200)))

    async def test_download_single_file_range(self) -> None:
        headers = {"Range": "bytes=10-19"}
        params = {"files": "beta.bin"}
        async with self.client.get("/api/download", params=params, headers=headers) as resp:
            self.assertEqual(resp.status, 206)
            body = await resp.read()
        self.assertEqual(body, bytes(range(10, 20)))

    async def test_download_single_missing_or_directory(self) -> None:
        async with self.client.get("/api/download", params={"files": "nope.txt"}) as resp:
            self.assertEqual(resp.status, 404)
        async with self.client.get("/api/download", params={"files": "docs"}) as resp:
            self.assertEqual(resp.status, 400)

    async def test_download_multiple_files_as_zip(self) -> None:
        params = [("files", "beta.bin"), ("files", "alpha.txt")]
        async with self.client.get("/api/download", params=params) as resp:
            self.assertEqual(resp.status, 200)
            self.assertEqual(resp.headers["Content-Type"], "application/zip")
            self.assertIn("download.zip", resp.headers["Content-Disposition"])
            self.assertEqual(resp.headers.get("Transfer-Encoding"), "chunked")
            body = await resp.read()

        with zipfile.ZipFile(io.BytesIO(body)) as archive:
            self.assertEqual(archive.namelist(), ["beta.bin", "alpha.txt"])
            self.assertEqual(archive.read("beta.bin"), bytes(range(200)))
            self.assertEqual(archive.read("alpha.txt"), b"alpha contents")

    async def test_download_multiple_skips_missing(self) -> None:
        params = [("files", "alpha.txt"), ("files", "missing.txt"), ("files", "docs/readme.md")]
        async with self.client.get("/api/download", params=params) as resp:
            self.assertEqual(resp.status, 200)
            body = await resp.read()

        with zipfile.ZipFile(io.BytesIO(body)) as archive:
            self.assertEqual(archive.namelist(), ["alpha.txt", "readme.md"])

    async def test_static_fallback(self) -> None:
        async with self.client.get("/") as resp:
            self.assertEqual(resp.status, 200)
            self.assertEqual(await resp.text(), "<html>ok</html>")
        async with self.client.get("/app.js") as resp:
            self.assertEqual(resp.status, 200)
        async with self.client.get("/missing.css") as resp:
            self.assertEqual(resp.status, 404)
