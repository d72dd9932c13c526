"""
Image downloader for mirrored pages.

Uses aiohttp for parallel asynchronous downloads. A failed image is
reported and skipped; it never stops the other downloads.
"""

import asyncio
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union
from urllib.parse import urlparse

import aiohttp
from aiohttp import ClientTimeout

from .fetcher import classify_error
from ..utils.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    IMAGE_FOLDER,
)
from ..utils.errors import ErrorKind, MirrorError
from ..utils.log import get_logger, report_failure
from ..utils.paths import ALLOWED_SCHEMES, FileNamer, last_segment, sanitize


class ImageDownloader:
    """
    Downloads page images into the image folder.

    Handles parallel downloads with a concurrency limit and per-image
    error isolation.
    """

    def __init__(
        self,
        image_folder: Union[str, Path],
        file_namer: FileNamer,
        timeout: int = DEFAULT_TIMEOUT,
        concurrency: int = DEFAULT_CONCURRENCY,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        """
        Initialize the image downloader.

        Args:
            image_folder: Folder the images are written to
            file_namer: Namer deriving local image file names
            timeout: Request timeout in seconds
            concurrency: Maximum concurrent downloads
            user_agent: User agent string for requests
        """
        self.image_folder = Path(image_folder)
        self.file_namer = file_namer
        self.timeout = ClientTimeout(total=timeout)
        self.concurrency = concurrency
        self.user_agent = user_agent
        self.logger = get_logger("downloader")

        # Track downloaded images
        self._downloaded: Dict[str, str] = {}  # URL -> local reference
        self._failures: List[MirrorError] = []

        # Semaphore for concurrency control
        self._semaphore = asyncio.Semaphore(concurrency)

    @property
    def downloaded_images(self) -> Dict[str, str]:
        """Get mapping of URL to local reference for downloaded images."""
        return self._downloaded.copy()

    @property
    def failures(self) -> List[MirrorError]:
        """Get the failures reported so far."""
        return list(self._failures)

    def _fail(self, url: str, cause: str) -> None:
        error = MirrorError(ErrorKind.IMAGE_FETCH_FAILURE, url, cause)
        report_failure(self.logger, error)
        self._failures.append(error)

    async def download_all(self, urls: Iterable[str]) -> Dict[str, Optional[str]]:
        """
        Download several images in parallel.

        Each distinct URL is fetched once. URLs that map to the same local
        file name are fetched one after another in document order, so the
        last of them ends up on disk.

        Args:
            urls: Absolute image URLs, in document order

        Returns:
            Dictionary mapping each URL to its local reference, or None
            where the download failed
        """
        unique = list(dict.fromkeys(urls))
        if not unique:
            return {}

        self.logger.info(f"Downloading {len(unique)} images...")

        # Local file name -> URLs sharing it, in document order
        groups: Dict[str, List[str]] = {}
        for url in unique:
            groups.setdefault(sanitize(last_segment(url)), []).append(url)

        mapping: Dict[str, Optional[str]] = {}

        async def download_group(session: aiohttp.ClientSession, group: List[str]) -> None:
            for url in group:
                try:
                    mapping[url] = await self.download(session, url)
                except Exception as e:
                    self._fail(url, f"unexpected error: {e!r}")
                    mapping[url] = None

        async with aiohttp.ClientSession(
            timeout=self.timeout,
            headers={"User-Agent": self.user_agent}
        ) as session:
            await asyncio.gather(*(download_group(session, group) for group in groups.values()))

        self.logger.info(
            f"Downloaded {len(self._downloaded)} images, "
            f"{len(self._failures)} failed"
        )

        return {url: mapping.get(url) for url in unique}

    async def download(
        self,
        session: aiohttp.ClientSession,
        url: str
    ) -> Optional[str]:
        """
        Download a single image.

        Args:
            session: aiohttp session
            url: Absolute image URL

        Returns:
            Reference "img/<name>" to use in the page, None on failure
        """
        if url in self._downloaded:
            return self._downloaded[url]

        if urlparse(url).scheme.lower() not in ALLOWED_SCHEMES:
            self._fail(url, "not a valid http or https URL")
            return None

        name = self.file_namer.image_file_name(url)
        if not name or not name.strip('.'):
            self._fail(url, "no usable file name in URL")
            return None

        local_path = self.image_folder / name

        async with self._semaphore:
            try:
                async with session.get(url, allow_redirects=True) as response:
                    response.raise_for_status()
                    content = await response.read()
            except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
                error = classify_error(e, url)
                self._fail(url, f"{error.kind.value}: {error.cause}")
                return None

            try:
                with open(local_path, 'wb') as f:
                    f.write(content)
            except OSError as e:
                self._fail(url, f"cannot write {local_path}: {e}")
                return None

        reference = f"{IMAGE_FOLDER}/{name}"
        self._downloaded[url] = reference
        self.logger.debug(f"Downloaded: {url} -> {local_path}")

        return reference
