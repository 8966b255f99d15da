import asyncio

import pytest
from aiohttp import web, test_utils

from src.core.download_manager import DownloadManager
from src.core.errors import SideEffectError, UnresolvableMediaError

PAYLOAD = b"\x89PNG fake image bytes" * 5000


class TokenStore:
    """Minimal config store holding a storage access token."""

    def __init__(self, token=None):
        self.token = token

    def get_config(self, key, default=None):
        if key == "storage_access_token" and self.token:
            return self.token
        return default


async def _with_server(routes, body):
    app = web.Application()
    for path, handler in routes.items():
        app.router.add_get(path, handler)
    server = test_utils.TestServer(app)
    await server.start_server()
    try:
        return await body(server)
    finally:
        await server.close()


def test_copies_local_file(tmp_path):
    source = tmp_path / "src" / "beach.jpg"
    source.parent.mkdir()
    source.write_bytes(b"local bytes")
    out = tmp_path / "out"
    progress = []

    async def run():
        async with DownloadManager(download_dir=out) as manager:
            return await manager.save(str(source), "beach.jpg", progress_callback=lambda d, t: progress.append((d, t)))

    saved = asyncio.run(run())
    assert saved == out / "beach.jpg"
    assert saved.read_bytes() == b"local bytes"
    assert progress == [(11, 11)]


def test_existing_file_is_not_overwritten(tmp_path):
    source = tmp_path / "beach.jpg"
    source.write_bytes(b"new")
    out = tmp_path / "out"
    out.mkdir()
    (out / "beach.jpg").write_bytes(b"old")

    async def run():
        async with DownloadManager(download_dir=out) as manager:
            return await manager.save(str(source), "beach.jpg")

    saved = asyncio.run(run())
    assert saved.name == "beach (1).jpg"
    assert (out / "beach.jpg").read_bytes() == b"old"


def test_missing_locator_raises(tmp_path):
    async def run():
        async with DownloadManager(download_dir=tmp_path) as manager:
            await manager.save(None, "memory-1")

    with pytest.raises(UnresolvableMediaError):
        asyncio.run(run())


def test_missing_local_file_raises(tmp_path):
    async def run():
        async with DownloadManager(download_dir=tmp_path / "out") as manager:
            await manager.save(str(tmp_path / "gone.jpg"), "gone.jpg")

    with pytest.raises(SideEffectError):
        asyncio.run(run())


def test_downloads_remote_file(tmp_path):
    seen_headers = {}

    async def handler(request):
        seen_headers.update(request.headers)
        return web.Response(body=PAYLOAD)

    async def body(server):
        url = str(server.make_url("/media/photo.png"))
        async with DownloadManager(db_manager=TokenStore("abc123"), download_dir=tmp_path) as manager:
            return await manager.save(url, "photo.png")

    saved = asyncio.run(_with_server({"/media/photo.png": handler}, body))
    assert saved.read_bytes() == PAYLOAD
    assert not (tmp_path / "photo.png.part").exists()
    assert seen_headers["Authorization"] == "Bearer abc123"
    assert seen_headers["Referer"].startswith("http://")


def test_remote_without_token_sends_no_authorization(tmp_path):
    seen_headers = {}

    async def handler(request):
        seen_headers.update(request.headers)
        return web.Response(body=b"ok")

    async def body(server):
        url = str(server.make_url("/clip.mp4"))
        async with DownloadManager(download_dir=tmp_path) as manager:
            return await manager.save(url, "clip.mp4")

    asyncio.run(_with_server({"/clip.mp4": handler}, body))
    assert "Authorization" not in seen_headers


def test_http_error_raises_and_cleans_up(tmp_path):
    async def handler(request):
        return web.Response(status=404)

    async def body(server):
        url = str(server.make_url("/missing.jpg"))
        async with DownloadManager(download_dir=tmp_path) as manager:
            await manager.save(url, "missing.jpg")

    with pytest.raises(SideEffectError):
        asyncio.run(_with_server({"/missing.jpg": handler}, body))
    assert list(tmp_path.iterdir()) == []
