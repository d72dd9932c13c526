"""
Main page mirror module.

Orchestrates one mirror operation: fetching the page, preparing folders,
downloading images, rewriting image references and saving the page.
"""

import time
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from .downloader import ImageDownloader
from .extractor import ImageExtractor
from .fetcher import PageFetcher
from .rewrite import ImageRewriter
from ..utils.constants import (
    DEFAULT_CONCURRENCY,
    DEFAULT_STORAGE_ROOT,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    IMAGE_FOLDER,
)
from ..utils.counter import NameCounter
from ..utils.errors import ErrorKind, MirrorError
from ..utils.log import get_logger, report_failure
from ..utils.paths import FileNamer, MirrorRequest


class MirrorState(Enum):
    """Stages of a mirror operation."""

    VALIDATING = "validating"
    FETCHING = "fetching"
    PREPARING_FOLDERS = "preparing_folders"
    EXTRACTING_IMAGES = "extracting_images"
    DOWNLOADING_IMAGES = "downloading_images"
    REWRITING_MARKUP = "rewriting_markup"
    WRITING_OUTPUT = "writing_output"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class MirrorTarget:
    """Where a mirrored page and its images are stored."""

    host_folder: Path
    image_folder: Path
    page_name: Optional[str] = None


@dataclass
class MirrorResult:
    """Results of a mirror operation."""

    state: MirrorState = MirrorState.VALIDATING
    request: Optional[MirrorRequest] = None
    target: Optional[MirrorTarget] = None
    page_path: Optional[Path] = None
    images_found: int = 0
    images_saved: int = 0
    failures: List[MirrorError] = field(default_factory=list)
    error: Optional[MirrorError] = None
    failed_stage: Optional[MirrorState] = None
    duration_seconds: float = 0.0

    @property
    def ok(self) -> bool:
        return self.state is MirrorState.DONE


class PageMirror:
    """
    Mirrors a single page and its images to disk.

    Coordinates the fetcher, extractor, downloader and rewriter.
    """

    def __init__(
        self,
        storage_root: Union[str, Path] = DEFAULT_STORAGE_ROOT,
        timeout: int = DEFAULT_TIMEOUT,
        concurrency: int = DEFAULT_CONCURRENCY,
        user_agent: str = DEFAULT_USER_AGENT,
        counter=None,
        fetcher: Optional[PageFetcher] = None
    ):
        """
        Initialize the page mirror.

        Args:
            storage_root: Root folder of all mirrored sites
            timeout: Request timeout in seconds
            concurrency: Maximum concurrent image downloads
            user_agent: User agent string for requests
            counter: Fallback name counter (default: file-backed in storage_root)
            fetcher: Page fetcher (default: PageFetcher)
        """
        self.storage_root = Path(storage_root)
        self.timeout = timeout
        self.concurrency = concurrency
        self.user_agent = user_agent

        self.counter = counter if counter is not None else NameCounter(self.storage_root)
        self.file_namer = FileNamer(self.storage_root, self.counter)
        self.fetcher = fetcher or PageFetcher(timeout=timeout, user_agent=user_agent)
        self.extractor = ImageExtractor()
        self.rewriter = ImageRewriter()

        self.logger = get_logger("mirror")

    def _enter(self, result: MirrorResult, state: MirrorState) -> None:
        self.logger.debug(f"{result.state.value} -> {state.value}")
        result.state = state

    def _fail(self, result: MirrorResult, error: MirrorError) -> MirrorResult:
        """Move the operation to the failed state."""
        report_failure(self.logger, error)
        result.error = error
        result.failed_stage = result.state
        result.state = MirrorState.FAILED
        return result

    async def mirror(self, raw_url: Optional[str]) -> MirrorResult:
        """
        Run one mirror operation.

        Args:
            raw_url: URL or bare host name of the page

        Returns:
            MirrorResult describing what was saved or why it failed
        """
        start_time = time.time()
        result = MirrorResult()
        try:
            await self._run(raw_url, result)
        finally:
            result.duration_seconds = time.time() - start_time
        return result

    async def _run(self, raw_url: Optional[str], result: MirrorResult) -> MirrorResult:
        # Validating
        try:
            request = MirrorRequest.from_raw(raw_url)
        except MirrorError as e:
            return self._fail(result, e)
        result.request = request
        self.logger.debug(f"{request.url} is valid url address")

        # Fetching
        self._enter(result, MirrorState.FETCHING)
        outcome = await self.fetcher.fetch(request.url)
        if not outcome.ok:
            return self._fail(result, outcome.error)
        document = outcome.document
        page_url = outcome.final_url or request.url

        # Preparing folders
        self._enter(result, MirrorState.PREPARING_FOLDERS)
        try:
            host_folder = self.file_namer.host_folder(request.url)
            image_folder = host_folder / IMAGE_FOLDER
            image_folder.mkdir(exist_ok=True)
        except OSError as e:
            return self._fail(result, MirrorError(
                ErrorKind.GENERIC_IO_FAILURE, str(self.storage_root), f"cannot create folders: {e}"
            ))
        target = MirrorTarget(host_folder=host_folder, image_folder=image_folder)
        result.target = target

        # Extracting images
        self._enter(result, MirrorState.EXTRACTING_IMAGES)
        images = self.extractor.extract(document, page_url)
        result.images_found = len(images)

        # Downloading images
        self._enter(result, MirrorState.DOWNLOADING_IMAGES)
        downloader = ImageDownloader(
            image_folder=image_folder,
            file_namer=self.file_namer,
            timeout=self.timeout,
            concurrency=self.concurrency,
            user_agent=self.user_agent
        )
        local_refs = await downloader.download_all(image.absolute_url for image in images)
        result.failures.extend(downloader.failures)

        # Rewriting markup
        self._enter(result, MirrorState.REWRITING_MARKUP)
        result.images_saved = self.rewriter.apply(images, local_refs)

        # Writing output
        self._enter(result, MirrorState.WRITING_OUTPUT)
        page_name = self.file_namer.file_name_for(request.url)
        page_path = host_folder / page_name
        self.logger.debug(f"...saving html response from {request.url} to {page_path.absolute()}")
        try:
            with open(page_path, 'w', encoding='utf-8') as f:
                f.write(str(document))
        except OSError as e:
            return self._fail(result, MirrorError(
                ErrorKind.GENERIC_IO_FAILURE, str(page_path), f"cannot write page: {e}"
            ))

        result.target = replace(target, page_name=page_name)
        result.page_path = page_path
        self._enter(result, MirrorState.DONE)
        self.logger.info(f"{page_name} is saved to folder {host_folder}")

        return result
