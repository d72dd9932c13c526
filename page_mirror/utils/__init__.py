"""
Utility modules for the page mirror.

Contains logging, error kinds, URL and path handling, the fallback name
counter, and constants.
"""

from .log import setup_logger, get_logger, report_failure
from .errors import ErrorKind, MirrorError, InvalidInputError, MalformedUrlError
from .paths import normalize_url, is_valid_url, sanitize, FileNamer, MirrorRequest
from .counter import NameCounter, MemoryNameCounter
from .constants import (
    DEFAULT_USER_AGENT,
    DEFAULT_TIMEOUT,
    DEFAULT_CONCURRENCY,
    DEFAULT_STORAGE_ROOT,
    COUNTER_FILE_NAME,
    IMAGE_FOLDER,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "report_failure",
    "ErrorKind",
    "MirrorError",
    "InvalidInputError",
    "MalformedUrlError",
    "normalize_url",
    "is_valid_url",
    "sanitize",
    "FileNamer",
    "MirrorRequest",
    "NameCounter",
    "MemoryNameCounter",
    "DEFAULT_USER_AGENT",
    "DEFAULT_TIMEOUT",
    "DEFAULT_CONCURRENCY",
    "DEFAULT_STORAGE_ROOT",
    "COUNTER_FILE_NAME",
    "IMAGE_FOLDER",
]
