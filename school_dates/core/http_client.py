"""
Async HTTP client for fetching term-date pages.

Built on httpx with:
- Configurable timeout and redirect following
- Identifying User-Agent per school
- Status checking that raises FetchError on non-2xx responses

No retries are made; callers decide whether to retry a failed refresh.
"""

from dataclasses import dataclass, field
from typing import Optional

import httpx
import structlog

from .errors import FetchError

logger = structlog.get_logger(__name__)


DEFAULT_TIMEOUT = 30.0
USER_AGENT = "school-dates/{version} ({slug})"


@dataclass
class FetchResult:
    """Status, headers and decoded body of a fetched page."""
    status_code: int
    text: str
    headers: dict = field(default_factory=dict)
    url: str = ""

    @property
    def etag(self) -> Optional[str]:
        return self.headers.get("etag")

    @property
    def last_modified(self) -> Optional[str]:
        return self.headers.get("last-modified")


class HttpClient:
    """
    Async HTTP client for source pages.

    Usage:
        async with HttpClient(user_agent="school-dates/0.1.0 (example)") as client:
            result = await client.fetch("https://example.com/term-dates")
            html = result.text
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            timeout: Request timeout in seconds
            user_agent: User-Agent header value
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context."""
        headers = {"Accept-Language": "en-GB,en;q=0.9"}
        if self.user_agent:
            headers["User-Agent"] = self.user_agent
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            headers=headers,
            transport=self.transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def fetch(self, url: str, **kwargs) -> FetchResult:
        """
        GET a page.

        Args:
            url: URL to fetch
            **kwargs: Additional httpx arguments

        Returns:
            FetchResult with lower-cased header names

        Raises:
            FetchError: On a non-2xx status
            httpx.HTTPError: On transport failures and timeouts
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")

        logger.debug("http_get", url=url)
        response = await self._client.get(url, **kwargs)
        logger.info("fetch_status", url=url, status=response.status_code)

        if not response.is_success:
            raise FetchError(response.status_code, url=url)

        return FetchResult(
            status_code=response.status_code,
            text=response.text,
            headers={key.lower(): value for key, value in response.headers.items()},
            url=str(response.url),
        )


async def fetch(url: str, **kwargs) -> FetchResult:
    """
    Fetch a page (convenience function).

    Args:
        url: URL to fetch
        **kwargs: Additional arguments for HttpClient

    Returns:
        FetchResult
    """
    async with HttpClient(**kwargs) as client:
        return await client.fetch(url)
