"""
Image extractor for parsed pages.

Uses BeautifulSoup to find every image element with a source, in
document order.
"""

from dataclasses import dataclass
from typing import List
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from ..utils.constants import ALT_TEXT_WIDTH
from ..utils.log import get_logger


@dataclass
class ImageReference:
    """An image element and the URL its source resolves to."""

    element: Tag
    source_url: str
    absolute_url: str
    width: str = ""
    height: str = ""
    alt: str = ""


def trim(text: str, width: int = ALT_TEXT_WIDTH) -> str:
    """
    Shorten text to a width, marking the cut with a trailing ".".

    Args:
        text: Text to shorten
        width: Maximum length of the result

    Returns:
        Text unchanged if it fits, else its first width-1 chars and "."
    """
    if len(text) > width:
        return text[:width - 1] + "."
    return text


def base_url_of(document: BeautifulSoup, page_url: str) -> str:
    """Get the URL relative references resolve against, honoring <base href>."""
    base = document.find('base', href=True)
    if base is not None:
        href = base.get('href', '').strip()
        if href:
            return urljoin(page_url, href)
    return page_url


class ImageExtractor:
    """
    Enumerates the images of a page.
    """

    def __init__(self):
        self.logger = get_logger("extractor")

    def extract(self, document: BeautifulSoup, page_url: str) -> List[ImageReference]:
        """
        List every <img src> of a document in document order.

        Args:
            document: Parsed page
            page_url: URL the page was fetched from

        Returns:
            One ImageReference per image element
        """
        base_url = base_url_of(document, page_url)
        images = []

        for img in document.find_all('img', src=True):
            src = img.get('src', '').strip()
            reference = ImageReference(
                element=img,
                source_url=src,
                absolute_url=urljoin(base_url, src) if src else '',
                width=img.get('width', ''),
                height=img.get('height', ''),
                alt=img.get('alt', ''),
            )
            self.logger.info(
                f" * img: <{reference.absolute_url}> "
                f"{reference.width}x{reference.height} ({trim(reference.alt)})"
            )
            images.append(reference)

        self.logger.debug(f"Found {len(images)} images on {page_url}")
        return images
