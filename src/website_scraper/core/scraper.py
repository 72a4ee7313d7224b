"""Scraper: fetch a page and convert it to Markdown."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from types import TracebackType
from typing import Callable

from ..conversion.converter import HtmlToMarkdown
from ..http import AsyncHttpClient
from ..http.protocols import HttpClient
from ..models.config import ScraperConfig
from ..models.events import ScrapeEvent
from ..pipeline import ConvertStep, FetchStep, PageContext, SaveStep, ScrapePipeline

logger = logging.getLogger(__name__)


class Scraper:
    """
    Primary async API: scrape web pages into Markdown.

    Owns the HTTP client and the fetch -> convert -> save pipeline for
    the lifetime of the context.

    Example:
        async with Scraper(ScraperConfig()) as scraper:
            ctx = await scraper.scrape("https://example.com", Path("page.md"))
            if ctx.error:
                print(f"Error: {ctx.error}")
    """

    def __init__(
        self,
        config: ScraperConfig | None = None,
        on_event: Callable[[ScrapeEvent], None] | None = None,
        http_client: HttpClient | None = None,
    ):
        """
        Initialize the Scraper.

        Args:
            config: Configuration (uses defaults if None)
            on_event: Optional callback receiving every pipeline event
            http_client: Client to use instead of an AsyncHttpClient built from config
        """
        self.config = config or ScraperConfig()
        self._on_event = on_event
        self._external_client = http_client
        self._http_client: AsyncHttpClient | None = None
        self._pipeline: ScrapePipeline | None = None

    async def __aenter__(self) -> Scraper:
        """Enter async context and initialize components."""
        client: HttpClient
        if self._external_client is not None:
            client = self._external_client
        else:
            self._http_client = AsyncHttpClient.from_config(self.config.network)
            await self._http_client.__aenter__()
            client = self._http_client

        self._pipeline = ScrapePipeline(
            steps=[
                FetchStep(client),
                ConvertStep(HtmlToMarkdown(self.config.conversion)),
                SaveStep(),
            ]
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit async context and clean up resources."""
        if self._http_client:
            await self._http_client.__aexit__(exc_type, exc_val, exc_tb)
            self._http_client = None
        self._pipeline = None

    async def scrape(self, url: str, output_path: Path | None = None) -> PageContext:
        """
        Scrape one page.

        Args:
            url: Page to fetch
            output_path: Where to write the Markdown (None = keep in memory)

        Returns:
            PageContext with markdown set, or error / skip_reason explaining why not
        """
        if self._pipeline is None:
            raise RuntimeError("Scraper not initialized. Use 'async with' context manager.")

        ctx = await self._pipeline.execute(url, output_path, emit=self._on_event)
        if ctx.error:
            logger.debug(f"Scrape of {url} failed: {ctx.error}")
        return ctx


async def scrape_to_markdown(url: str, config: ScraperConfig | None = None) -> str:
    """
    Fetch a page and return its main content as Markdown.

    Raises:
        FetchFailed: Page could not be retrieved, or was not HTML
        ExtractionFailed: Page had no readable content
        ParseFailed: HTML could not be parsed
    """
    async with Scraper(config) as scraper:
        ctx = await scraper.scrape(url)
    return ctx.markdown_or_raise()


def scrape_blocking(url: str, config: ScraperConfig | None = None) -> str:
    """
    Blocking version of scrape_to_markdown for sync code.

    WARNING: Do not call from within a running event loop. Use the
    async API instead.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(scrape_to_markdown(url, config))
    raise RuntimeError("scrape_blocking() called from async context. Use scrape_to_markdown() instead.")
