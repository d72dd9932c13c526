"""End-to-end tests for the page mirror."""

import pytest
from bs4 import BeautifulSoup

from page_mirror.mirror import MirrorState, PageMirror
from page_mirror.utils.counter import MemoryNameCounter
from page_mirror.utils.errors import ErrorKind

from .conftest import PNG_ONE, PNG_THREE


def saved_sources(path):
    with open(path, encoding="utf-8") as f:
        document = BeautifulSoup(f.read(), "lxml")
    return [img["src"] for img in document.find_all("img")]


@pytest.mark.asyncio
async def test_single_image_page(site_url, storage_root):
    result = await PageMirror(storage_root=storage_root).mirror(site_url("/docs/report.html"))

    assert result.ok
    assert result.state is MirrorState.DONE
    host_folder = storage_root / "127.0.0.1"
    assert result.page_path == host_folder / "report.html"
    assert result.target.page_name == "report.html"
    assert result.target.image_folder == host_folder / "img"
    assert (host_folder / "img" / "one.png").read_bytes() == PNG_ONE
    assert saved_sources(host_folder / "report.html") == ["img/one.png"]

    with open(host_folder / "report.html", encoding="utf-8") as f:
        assert "Отчёт" in f.read()


@pytest.mark.asyncio
async def test_failed_image_keeps_original_source(site_url, storage_root):
    mirror = PageMirror(storage_root=storage_root, counter=MemoryNameCounter())

    result = await mirror.mirror(site_url("/"))

    assert result.ok
    assert result.images_found == 3
    assert result.images_saved == 2
    [failure] = result.failures
    assert failure.kind is ErrorKind.IMAGE_FETCH_FAILURE
    assert failure.target == site_url("/missing/two.png")

    assert result.page_path.name == "1.html"
    assert saved_sources(result.page_path) == [
        "img/one.png",
        "/missing/two.png",
        "img/three.png",
    ]
    assert (result.target.image_folder / "three.png").read_bytes() == PNG_THREE


@pytest.mark.asyncio
async def test_fallback_names_are_consecutive(site_url, storage_root):
    mirror = PageMirror(storage_root=storage_root)

    first = await mirror.mirror(site_url("/docs/"))
    second = await mirror.mirror(site_url("/docs/"))

    assert first.page_path.name == "1.html"
    assert second.page_path.name == "2.html"
    assert (storage_root / "last_site_ID").read_text(encoding="utf-8").strip() == "3"


@pytest.mark.asyncio
async def test_rerun_reuses_folders(site_url, storage_root):
    mirror = PageMirror(storage_root=storage_root)

    await mirror.mirror(site_url("/docs/report.html"))
    result = await mirror.mirror(site_url("/docs/report.html"))

    assert result.ok
    assert result.page_path.name == "report.html"


@pytest.mark.asyncio
async def test_invalid_url_writes_nothing(storage_root):
    result = await PageMirror(storage_root=storage_root).mirror("ftp://example.com/")

    assert result.state is MirrorState.FAILED
    assert result.failed_stage is MirrorState.VALIDATING
    assert result.error.kind is ErrorKind.MALFORMED_URL
    assert not storage_root.exists()


@pytest.mark.asyncio
async def test_missing_url(storage_root):
    result = await PageMirror(storage_root=storage_root).mirror(None)

    assert result.failed_stage is MirrorState.VALIDATING
    assert result.error.kind is ErrorKind.INVALID_INPUT


@pytest.mark.asyncio
async def test_fetch_failure_is_fatal(site_url, storage_root):
    result = await PageMirror(storage_root=storage_root).mirror(site_url("/gone.html"))

    assert result.state is MirrorState.FAILED
    assert result.failed_stage is MirrorState.FETCHING
    assert result.error.kind is ErrorKind.GENERIC_IO_FAILURE
    assert not storage_root.exists()


@pytest.mark.asyncio
async def test_folder_failure_is_fatal(site_url, tmp_path):
    blocker = tmp_path / "root"
    blocker.write_text("", encoding="utf-8")

    result = await PageMirror(storage_root=blocker).mirror(site_url("/docs/report.html"))

    assert result.failed_stage is MirrorState.PREPARING_FOLDERS
    assert result.error.kind is ErrorKind.GENERIC_IO_FAILURE


@pytest.mark.asyncio
async def test_write_failure_is_fatal(site_url, storage_root):
    # a directory with the page's name makes the final write fail
    (storage_root / "127.0.0.1" / "report.html").mkdir(parents=True)

    result = await PageMirror(storage_root=storage_root).mirror(site_url("/docs/report.html"))

    assert result.failed_stage is MirrorState.WRITING_OUTPUT
    assert result.error.kind is ErrorKind.GENERIC_IO_FAILURE
    assert result.error.target.endswith("report.html")
    assert (storage_root / "127.0.0.1" / "img" / "one.png").exists()


@pytest.mark.asyncio
async def test_plain_text_page_is_saved(site_url, storage_root):
    result = await PageMirror(storage_root=storage_root).mirror(site_url("/notes.txt"))

    assert result.ok
    assert result.page_path == storage_root / "127.0.0.1" / "notes.txt"
    assert "not html" in result.page_path.read_text(encoding="utf-8")
