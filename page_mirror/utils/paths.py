"""
Path and URL utilities for the page mirror.

Provides URL validation and normalization, file name sanitizing, and the
folder and file naming policy for mirrored pages and images.
"""

import ipaddress
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union
from urllib.parse import urlparse

from .constants import FORBIDDEN_FILENAME_CHARS
from .errors import InvalidInputError, MalformedUrlError
from .log import get_logger


ALLOWED_SCHEMES = ('http', 'https')

# Leading "scheme://" marker
SCHEME_PATTERN = re.compile(r'^[A-Za-z][A-Za-z0-9+.\-]*://')

# One label of a domain name
DOMAIN_LABEL_PATTERN = re.compile(r'^(?!-)[A-Za-z0-9\-]{1,63}(?<!-)$')

# Top level domain: letters only, or a punycode label
TLD_PATTERN = re.compile(r'^([A-Za-z]{2,63}|xn--[A-Za-z0-9\-]{1,59})$')

FORBIDDEN_PATTERN = re.compile('[' + re.escape(FORBIDDEN_FILENAME_CHARS) + ']')

logger = get_logger("paths")


def _is_valid_host(host: str) -> bool:
    """Check a host name, IPv4 address or bracketed IPv6 literal."""
    if host.startswith('[') and host.endswith(']'):
        try:
            ipaddress.IPv6Address(host[1:-1])
            return True
        except ValueError:
            return False

    if re.match(r'^[0-9.]+$', host):
        try:
            ipaddress.IPv4Address(host)
            return True
        except ValueError:
            return False

    labels = host.rstrip('.').split('.')
    if len(labels) < 2:
        return False
    if not all(DOMAIN_LABEL_PATTERN.match(label) for label in labels):
        return False
    return bool(TLD_PATTERN.match(labels[-1]))


def is_valid_url(url: str) -> bool:
    """
    Check that a URL is an absolute http or https URL.

    Args:
        url: URL to check

    Returns:
        True if the URL is valid, False otherwise
    """
    if not url or re.search(r'\s', url):
        return False

    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        return False

    netloc = parsed.netloc
    if not netloc or '@' in netloc:
        return False

    # Split off the port, keeping IPv6 brackets intact
    host, port = netloc, None
    if netloc.startswith('['):
        end = netloc.find(']')
        if end < 0:
            return False
        host, rest = netloc[:end + 1], netloc[end + 1:]
        if rest:
            if not rest.startswith(':'):
                return False
            port = rest[1:]
    elif ':' in netloc:
        host, port = netloc.rsplit(':', 1)

    if port is not None:
        if not port.isdigit() or not 0 < int(port) < 65536:
            return False

    return _is_valid_host(host)


def normalize_url(raw: Optional[str]) -> str:
    """
    Validate and normalize user input into a fetchable absolute URL.

    Input without a scheme is treated as a bare host and gets "http://".

    Args:
        raw: URL or bare hostname as typed by the user

    Returns:
        Normalized URL string

    Raises:
        InvalidInputError: If the input is missing or blank
        MalformedUrlError: If the result is not a valid http/https URL
    """
    if raw is None or not raw.strip():
        raise InvalidInputError()

    url = raw.strip()
    if not SCHEME_PATTERN.match(url):
        url = 'http://' + url

    if not is_valid_url(url):
        raise MalformedUrlError(url)

    return url


@dataclass(frozen=True)
class MirrorRequest:
    """A validated request to mirror one page."""

    url: str

    @classmethod
    def from_raw(cls, raw: Optional[str]) -> "MirrorRequest":
        """Build a request from raw user input."""
        return cls(url=normalize_url(raw))


def sanitize(name: str) -> str:
    """
    Remove filesystem-forbidden characters from a candidate name.

    Args:
        name: Candidate file name

    Returns:
        The name without any of / \\ : * ? < > |
    """
    return FORBIDDEN_PATTERN.sub('', name)


def last_segment(path: str) -> str:
    """Return the part of a path after its last separator."""
    path = path.replace('\\', '/')
    return path.rsplit('/', 1)[-1]


class FileNamer:
    """
    Derives folder and file names for a mirror operation.

    Pages without a usable file name get a numeric fallback name drawn
    from the name counter.
    """

    def __init__(self, storage_root: Union[str, Path], counter):
        """
        Initialize the file namer.

        Args:
            storage_root: Root folder of all mirrored sites
            counter: Name counter with a next_id() method
        """
        self.storage_root = Path(storage_root)
        self.counter = counter

    def host_folder(self, url: str) -> Path:
        """
        Get the folder for a site, creating it and the storage root.

        Args:
            url: Absolute page URL

        Returns:
            Path of the host folder
        """
        host = urlparse(url).hostname or ''
        if ':' in host:
            # IPv6 literal, ":" is not allowed in folder names
            host = '[' + host.replace(':', '_') + ']'
        host = sanitize(host)
        folder = self.storage_root / host
        folder.mkdir(parents=True, exist_ok=True)
        return folder

    def file_name_for(
        self,
        url: str,
        counter_fn: Optional[Callable[[], int]] = None
    ) -> str:
        """
        Get the file name a page is saved under.

        Args:
            url: Absolute page URL
            counter_fn: Source of fallback numbers (default: the counter)

        Returns:
            Last path segment if it has an extension, else "<n>.html"
        """
        path = urlparse(url).path
        if path and not path.endswith(('/', '\\')):
            name = sanitize(last_segment(path))
            if '.' in name and name.strip('.'):
                return name

        if counter_fn is None:
            counter_fn = self.counter.next_id
        return f"{counter_fn()}.html"

    def image_file_name(self, absolute_url: str) -> str:
        """
        Get the local file name for an image.

        Args:
            absolute_url: Absolute image URL

        Returns:
            Sanitized text after the last "/"
        """
        name = last_segment(absolute_url)
        cleaned = sanitize(name)
        if cleaned != name:
            logger.debug(f"file {name} was renamed to {cleaned}")
        return cleaned
