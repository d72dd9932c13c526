"""
Page fetcher using aiohttp and BeautifulSoup.

Downloads a page and parses it into a mutable document. Failures are
returned as a tagged outcome rather than raised.
"""

import asyncio
import re
import socket
from dataclasses import dataclass
from typing import Optional

import aiohttp
from aiohttp import ClientTimeout
from bs4 import BeautifulSoup

from ..utils.constants import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from ..utils.errors import ErrorKind, MirrorError
from ..utils.log import get_logger


# Content types the fetcher will parse as a page: any text type or XML
PARSEABLE_CONTENT_TYPE = re.compile(r"^(text/[\w.+-]+|application/[\w.+-]*\+?xml)$")


def is_parseable(content_type: str) -> bool:
    """Check whether a response of this content type can be parsed as a page."""
    return bool(PARSEABLE_CONTENT_TYPE.match(content_type.lower()))


OFFLINE_HINT = "Probably you are not connected to the Internet, please connect and try again"
FIREWALL_HINT = "Probably your firewall is blocking the operation"


def classify_error(error: Exception, url: str) -> MirrorError:
    """
    Map a transport exception to a reported failure.

    Args:
        error: Exception raised while talking to the server
        url: URL that was being fetched

    Returns:
        MirrorError with the matching kind
    """
    if isinstance(error, aiohttp.InvalidURL):
        return MirrorError(ErrorKind.MALFORMED_URL, url, "no legal protocol or the URL could not be parsed")

    if isinstance(error, asyncio.TimeoutError):
        return MirrorError(ErrorKind.GENERIC_IO_FAILURE, url, "request timed out")

    if isinstance(error, aiohttp.ClientConnectorError):
        if (isinstance(error, aiohttp.ClientConnectorDNSError)
                or isinstance(error.os_error, socket.gaierror)):
            return MirrorError(
                ErrorKind.UNRESOLVED_HOST, url, f"cannot resolve host: {error}", OFFLINE_HINT
            )

    if isinstance(error, (aiohttp.ServerDisconnectedError, aiohttp.ClientPayloadError)):
        return MirrorError(
            ErrorKind.PROTOCOL_STREAM_FAILURE, url, f"stream ended unexpectedly: {error}", FIREWALL_HINT
        )

    if isinstance(error, aiohttp.ClientConnectionError):
        return MirrorError(ErrorKind.CONNECTION_FAILURE, url, f"cannot connect: {error}")

    if isinstance(error, aiohttp.ClientResponseError):
        return MirrorError(ErrorKind.GENERIC_IO_FAILURE, url, f"HTTP {error.status} {error.message}")

    return MirrorError(ErrorKind.GENERIC_IO_FAILURE, url, str(error) or type(error).__name__)


@dataclass
class FetchOutcome:
    """Result of fetching a page: a document or a failure."""

    url: str
    document: Optional[BeautifulSoup] = None
    final_url: Optional[str] = None
    error: Optional[MirrorError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.document is not None


class PageFetcher:
    """
    Fetches one page over HTTP and parses it.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT
    ):
        """
        Initialize the page fetcher.

        Args:
            timeout: Request timeout in seconds
            user_agent: User agent string for requests
        """
        self.timeout = ClientTimeout(total=timeout)
        self.user_agent = user_agent
        self.logger = get_logger("fetcher")

    async def fetch(self, url: str) -> FetchOutcome:
        """
        Download and parse a page.

        Args:
            url: Absolute URL of the page

        Returns:
            FetchOutcome with the parsed document, or with the failure
        """
        self.logger.debug(f"Downloading html response from {url}")

        try:
            async with aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent}
            ) as session:
                async with session.get(url, allow_redirects=True) as response:
                    response.raise_for_status()

                    # aiohttp reports octet-stream when the header is absent
                    content_type = response.content_type
                    if ('Content-Type' in response.headers
                            and not is_parseable(content_type)):
                        return FetchOutcome(url=url, error=MirrorError(
                            ErrorKind.GENERIC_IO_FAILURE, url, f"unsupported content type {content_type}"
                        ))

                    content = await response.read()
                    charset = response.charset
                    final_url = str(response.url)

        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            return FetchOutcome(url=url, error=classify_error(e, url))

        document = BeautifulSoup(content, 'lxml', from_encoding=charset)
        self.logger.debug(f"html is downloaded from {final_url}")

        return FetchOutcome(url=url, document=document, final_url=final_url)
