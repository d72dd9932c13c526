"""Shared fixtures: a small local site served by aiohttp."""

import asyncio
import logging
import socket

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from page_mirror.utils.counter import MemoryNameCounter
from page_mirror.utils.paths import FileNamer


PNG_ONE = b"\x89PNG\r\n\x1a\none"
PNG_THREE = b"\x89PNG\r\n\x1a\nthree"
SLOW_PREFIX = b"slow "

GALLERY_HTML = """<!DOCTYPE html>
<html>
<head><title>Gallery</title></head>
<body>
<img src="img/one.png" width="10" height="20" alt="first">
<img src="/missing/two.png" alt="second">
<img src="http://{host}/img/three.png" alt="third image with a long description">
</body>
</html>
"""

REPORT_HTML = """<html><head><meta charset="utf-8"></head>
<body><p>Отчёт</p><img src="../img/one.png" alt="chart"></body></html>
"""

IMAGES = {
    "one.png": PNG_ONE,
    "three.png": PNG_THREE,
}


def make_site() -> web.Application:
    async def gallery(request):
        html = GALLERY_HTML.format(host=request.host)
        return web.Response(text=html, content_type="text/html")

    async def report(request):
        return web.Response(text=REPORT_HTML, content_type="text/html", charset="utf-8")

    async def image(request):
        name = request.match_info["name"]
        if name not in IMAGES:
            raise web.HTTPNotFound()
        return web.Response(body=IMAGES[name], content_type="image/png")

    async def slow_image(request):
        # answers late with different bytes than /img/<name>
        await asyncio.sleep(0.3)
        return web.Response(body=SLOW_PREFIX + request.match_info["name"].encode(), content_type="image/png")

    async def plain(request):
        return web.Response(text="not html", content_type="text/plain")

    app = web.Application()
    app.router.add_get("/", gallery)
    app.router.add_get("/docs/report.html", report)
    app.router.add_get("/docs/", report)
    app.router.add_get("/img/{name}", image)
    app.router.add_get("/slow/{name}", slow_image)
    app.router.add_get("/notes.txt", plain)
    return app


@pytest_asyncio.fixture
async def site():
    """Serve the test site on 127.0.0.1."""
    server = TestServer(make_site())
    await server.start_server()
    yield server
    await server.close()


@pytest.fixture
def site_url(site):
    """Build an absolute URL on the test site."""
    def build(path: str = "/") -> str:
        return str(site.make_url(path))
    return build


@pytest.fixture
def storage_root(tmp_path):
    return tmp_path / "wget_downloads"


@pytest.fixture
def namer(storage_root):
    return FileNamer(storage_root, MemoryNameCounter())


@pytest.fixture
def unused_port():
    """A local port nothing is listening on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("page_mirror")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
