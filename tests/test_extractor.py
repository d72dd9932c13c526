"""Tests for image extraction and rewriting."""

from bs4 import BeautifulSoup

from page_mirror.mirror.extractor import ImageExtractor, trim
from page_mirror.mirror.rewrite import ImageRewriter


PAGE = """<html><body>
<img src="a.png" width="1" height="2" alt="A">
<img alt="no source">
<p><img src="/b/c.jpg"></p>
<img src="https://cdn.example.org/d.gif">
</body></html>"""


def parse(html):
    return BeautifulSoup(html, "lxml")


def test_images_in_document_order():
    images = ImageExtractor().extract(parse(PAGE), "http://example.com/dir/page.html")

    assert [image.absolute_url for image in images] == [
        "http://example.com/dir/a.png",
        "http://example.com/b/c.jpg",
        "https://cdn.example.org/d.gif",
    ]
    assert images[0].width == "1"
    assert images[0].height == "2"
    assert images[0].alt == "A"


def test_base_href_is_honored():
    html = '<html><head><base href="http://static.example.com/s/"></head><body><img src="x.png"></body></html>'
    images = ImageExtractor().extract(parse(html), "http://example.com/")
    assert images[0].absolute_url == "http://static.example.com/s/x.png"


def test_listing_is_logged(caplog):
    html = '<img src="x.png" width="5" height="6" alt="a very long alternative text">'
    with caplog.at_level("INFO", logger="page_mirror"):
        ImageExtractor().extract(parse(html), "http://example.com/")
    assert "<http://example.com/x.png> 5x6 (a very long alterna.)" in caplog.text


def test_trim():
    assert trim("short") == "short"
    assert trim("x" * 20) == "x" * 20
    assert trim("x" * 21) == "x" * 19 + "."
    assert len(trim("y" * 50)) == 20


def test_rewriter_skips_failed_images():
    document = parse(PAGE)
    images = ImageExtractor().extract(document, "http://example.com/")
    local_refs = {
        "http://example.com/a.png": "img/a.png",
        "http://example.com/b/c.jpg": None,
    }

    assert ImageRewriter().apply(images, local_refs) == 1

    sources = [img.get("src") for img in document.find_all("img", src=True)]
    assert sources == ["img/a.png", "/b/c.jpg", "https://cdn.example.org/d.gif"]
