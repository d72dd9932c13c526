"""
Error kinds and exceptions for the page mirror.

Every reported failure maps to exactly one ErrorKind.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Kinds of failure a mirror operation can report."""

    INVALID_INPUT = "invalid_input"
    MALFORMED_URL = "malformed_url"
    UNRESOLVED_HOST = "unresolved_host"
    CONNECTION_FAILURE = "connection_failure"
    PROTOCOL_STREAM_FAILURE = "protocol_stream_failure"
    GENERIC_IO_FAILURE = "generic_io_failure"
    IMAGE_FETCH_FAILURE = "image_fetch_failure"
    COUNTER_CORRUPTION = "counter_corruption"

    @property
    def fatal(self) -> bool:
        """Whether this kind ends the mirror operation."""
        return self not in (ErrorKind.IMAGE_FETCH_FAILURE, ErrorKind.COUNTER_CORRUPTION)


class MirrorError(Exception):
    """
    A reported failure.
    
    Carries the failure kind, the offending URL or file path and a
    human-readable cause.
    """

    def __init__(
        self,
        kind: ErrorKind,
        target: Optional[str],
        cause: str,
        hint: Optional[str] = None
    ):
        self.kind = kind
        self.target = target
        self.cause = cause
        self.hint = hint
        super().__init__(f"{kind.value}: {target}: {cause}")


class InvalidInputError(MirrorError):
    """No URL was given."""

    def __init__(self, cause: str = "no URL given"):
        super().__init__(ErrorKind.INVALID_INPUT, None, cause)


class MalformedUrlError(MirrorError):
    """The URL failed scheme or syntax validation."""

    def __init__(self, url: str, cause: str = "not a valid http or https URL"):
        super().__init__(ErrorKind.MALFORMED_URL, url, cause)
