"""Async HTTP client with retry logic."""

from __future__ import annotations

import asyncio
import logging
import random
from types import TracebackType

import aiohttp
from charset_normalizer import from_bytes as detect_encoding

from ..models.config import NetworkConfig
from .protocols import HttpResponse

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; website-scraper/1.0)"


class AsyncHttpClient:
    """
    Async HTTP client with retry logic.

    Features:
    - Exponential backoff retry for transient failures
    - Content size limits to prevent memory exhaustion
    - Encoding detection for decoding page bodies
    - Timeout controls

    Example:
        async with AsyncHttpClient(max_retries=1) as client:
            response = await client.get("https://example.com")
            html = client.decode_content(response)
    """

    # Status codes that warrant a retry
    RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})

    # Exceptions that warrant a retry
    RETRYABLE_EXCEPTIONS = (
        aiohttp.ClientError,
        asyncio.TimeoutError,
        ConnectionError,
    )

    CHUNK_SIZE = 8192

    def __init__(
        self,
        max_retries: int = 3,
        retry_base_delay: float = 1.0,
        max_content_size: int = 50 * 1024 * 1024,
        user_agent: str | None = None,
        proxy: str | None = None,
        default_timeout: float = 30.0,
    ) -> None:
        """
        Initialize the HTTP client.

        Args:
            max_retries: Maximum retry attempts for failed requests
            retry_base_delay: Base delay for exponential backoff (seconds)
            max_content_size: Maximum response size in bytes
            user_agent: Custom User-Agent string
            proxy: Proxy URL (http:// or https://)
            default_timeout: Default request timeout in seconds
        """
        self._max_retries = max_retries
        self._retry_base_delay = retry_base_delay
        self._max_content_size = max_content_size
        self._proxy = proxy
        self._default_timeout = default_timeout
        self._user_agent = user_agent or DEFAULT_USER_AGENT
        self._session: aiohttp.ClientSession | None = None

    @classmethod
    def from_config(cls, config: NetworkConfig) -> AsyncHttpClient:
        """Build a client from network settings."""
        return cls(
            max_retries=config.max_retries,
            max_content_size=config.max_content_size,
            user_agent=config.user_agent,
            proxy=config.proxy,
            default_timeout=config.timeout,
        )

    async def __aenter__(self) -> AsyncHttpClient:
        """Enter async context and create session."""
        self._session = aiohttp.ClientSession(headers={"User-Agent": self._user_agent})
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and close session."""
        if self._session:
            await self._session.close()
            self._session = None

    def _calculate_retry_delay(self, attempt: int) -> float:
        """
        Calculate delay for exponential backoff with jitter.

        Args:
            attempt: Current attempt number (0-indexed)

        Returns:
            Delay in seconds
        """
        delay: float = self._retry_base_delay * (2**attempt)
        return delay + random.uniform(0, 1)

    def _decode_content(self, content: bytes, content_type: str) -> str:
        """
        Decode content, trying in order:
        1. Content-Type header charset
        2. charset-normalizer detection
        3. UTF-8 with replacement
        """
        encoding = charset_from_content_type(content_type)
        if encoding:
            try:
                return content.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                logger.debug(f"Failed to decode with declared encoding: {encoding}")

        best_match = detect_encoding(content).best()
        if best_match is not None:
            logger.debug(f"Detected encoding: {best_match.encoding}")
            return str(best_match)

        return content.decode("utf-8", errors="replace")

    async def _read_limited(self, response: aiohttp.ClientResponse) -> bytes:
        content_length = response.headers.get("Content-Length")
        if content_length and content_length.isdigit() and int(content_length) > self._max_content_size:
            raise ValueError(f"Content too large: {content_length} bytes")

        content = b""
        async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
            content += chunk
            if len(content) > self._max_content_size:
                raise ValueError(f"Content size limit exceeded: >{self._max_content_size} bytes")
        return content

    async def get(
        self,
        url: str,
        *,
        timeout: float | None = None,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        """
        Perform an HTTP GET request with retry logic.

        Retryable statuses that persist past the last attempt are returned
        as-is; callers decide what a non-2xx response means.

        Args:
            url: The URL to fetch
            timeout: Request timeout in seconds (uses default if None)
            headers: Optional additional headers

        Returns:
            HttpResponse with status, content, and headers

        Raises:
            aiohttp.ClientError: On network errors after retries exhausted
            ValueError: On content size exceeded
        """
        if self._session is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        client_timeout = aiohttp.ClientTimeout(total=timeout or self._default_timeout)

        for attempt in range(self._max_retries + 1):
            try:
                async with self._session.get(
                    url,
                    timeout=client_timeout,
                    headers=headers,
                    proxy=self._proxy,
                    allow_redirects=True,
                ) as response:
                    if response.status in self.RETRYABLE_STATUS_CODES and attempt < self._max_retries:
                        delay = self._calculate_retry_delay(attempt)
                        logger.warning(
                            f"Got {response.status} for {url}, retrying in {delay:.1f}s "
                            f"(attempt {attempt + 1}/{self._max_retries + 1})"
                        )
                        await asyncio.sleep(delay)
                        continue

                    content = await self._read_limited(response)
                    return HttpResponse(
                        status_code=response.status,
                        content=content,
                        content_type=response.headers.get("Content-Type", ""),
                        headers=dict(response.headers),
                        url=str(response.url),
                    )

            except self.RETRYABLE_EXCEPTIONS as e:
                if attempt >= self._max_retries:
                    logger.error(f"HTTP fetch error for {url} after {self._max_retries + 1} attempts: {e}")
                    raise
                delay = self._calculate_retry_delay(attempt)
                logger.warning(
                    f"Error fetching {url}: {e}, retrying in {delay:.1f}s "
                    f"(attempt {attempt + 1}/{self._max_retries + 1})"
                )
                await asyncio.sleep(delay)

        raise RuntimeError(f"Unexpected error fetching {url}")

    def decode_content(self, response: HttpResponse) -> str:
        """Decode response content to string."""
        return self._decode_content(response.content, response.content_type)


def charset_from_content_type(content_type: str) -> str | None:
    """Extract the charset parameter from a Content-Type header value."""
    for part in (content_type or "").split(";"):
        part = part.strip()
        if part.lower().startswith("charset="):
            return part.split("=", 1)[1].strip().strip("\"'") or None
    return None
