"""
Mirror module for saving a page with its images.

Contains components for fetching, extracting, downloading, and rewriting.
"""

from .mirror import PageMirror, MirrorResult, MirrorState, MirrorTarget
from .fetcher import PageFetcher, FetchOutcome
from .extractor import ImageExtractor, ImageReference
from .downloader import ImageDownloader
from .rewrite import ImageRewriter

__all__ = [
    "PageMirror",
    "MirrorResult",
    "MirrorState",
    "MirrorTarget",
    "PageFetcher",
    "FetchOutcome",
    "ImageExtractor",
    "ImageReference",
    "ImageDownloader",
    "ImageRewriter",
]
