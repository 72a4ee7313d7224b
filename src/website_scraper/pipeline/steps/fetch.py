"""FetchStep - HTTP fetching pipeline step."""

import asyncio
import logging
from typing import Optional

import aiohttp

from ...errors import FetchFailed
from ...http.protocols import HttpClient
from ...models.events import EventType, ScrapeEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)

# Content types that can be converted
ALLOWED_CONTENT_TYPES = frozenset(
    {
        "text/html",
        "application/xhtml+xml",
    }
)


def is_html_content_type(content_type: Optional[str]) -> bool:
    """Check a Content-Type header value; a missing header counts as HTML."""
    if not content_type:
        return True
    base_type = content_type.lower().split(";")[0].strip()
    return base_type in ALLOWED_CONTENT_TYPES


class FetchStep:
    """
    Pipeline step that fetches page content via HTTP.

    Populates:
        ctx.html: Raw HTML content as bytes
        ctx.status_code: HTTP status code
        ctx.content_type: Content-Type header value
        ctx.bytes_downloaded: Size of downloaded content

    Sets ctx.should_skip if the content type is not HTML.

    Raises FetchFailed for:
        - Non-2xx responses (status set)
        - Network errors and oversized responses (status None)
    """

    name = "fetch"

    def __init__(self, http_client: HttpClient, validate_content_type: bool = True) -> None:
        """
        Initialize the fetch step.

        Args:
            http_client: HTTP client implementing HttpClient protocol
            validate_content_type: If True, skip non-HTML content types
        """
        self._client = http_client
        self._validate_content_type = validate_content_type

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute the fetch step.

        Args:
            ctx: Page context with URL to fetch
            emit: Optional callback to emit events

        Returns:
            PageContext with html, status_code, content_type populated
        """
        url = ctx.url

        if emit:
            emit(ScrapeEvent(type=EventType.FETCH_STARTED, url=url, message=f"Fetching {url}"))

        try:
            response = await self._client.get(url)
        except (aiohttp.ClientError, asyncio.TimeoutError, ConnectionError, ValueError) as e:
            logger.error(f"Fetch error for {url}: {e}")
            raise FetchFailed(url, reason=str(e) or type(e).__name__) from e

        ctx.status_code = response.status_code
        ctx.content_type = response.content_type
        ctx.bytes_downloaded = len(response.content)

        if not 200 <= response.status_code < 300:
            logger.error(f"Fetch error for {url}: HTTP {response.status_code}")
            raise FetchFailed(url, status=response.status_code)

        if self._validate_content_type and not is_html_content_type(response.content_type):
            ctx.should_skip = True
            ctx.skip_reason = f"Not HTML: {response.content_type}"
            logger.debug(f"Skipping {url}: content type {response.content_type}")

            if emit:
                emit(
                    ScrapeEvent(
                        type=EventType.FETCH_SKIPPED,
                        url=url,
                        content_type=response.content_type,
                        message=ctx.skip_reason,
                    )
                )
            return ctx

        ctx.html = response.content
        logger.debug(f"Fetched {url}: {len(response.content)} bytes")

        if emit:
            emit(
                ScrapeEvent(
                    type=EventType.FETCH_COMPLETED,
                    url=url,
                    status_code=response.status_code,
                    bytes_downloaded=len(response.content),
                    content_type=response.content_type,
                    message=f"Fetched {len(response.content)} bytes",
                )
            )

        return ctx
