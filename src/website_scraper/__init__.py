"""
website_scraper: turn web pages into clean Markdown.

Example:
    from website_scraper import convert, scrape_blocking

    markdown = convert(html, "https://example.com/post")
    markdown = scrape_blocking("https://example.com/post")
"""

__version__ = "1.0.0"

from .conversion import HtmlToMarkdown, convert, html_to_markdown
from .core import Scraper, scrape_blocking, scrape_to_markdown
from .errors import ConversionError, ExtractionFailed, FetchFailed, ParseFailed
from .models import (
    ConversionConfig,
    EventType,
    ExtractionConfig,
    MarkdownConfig,
    NetworkConfig,
    ScrapeEvent,
    ScraperConfig,
)

__all__ = [
    "__version__",
    # Conversion
    "HtmlToMarkdown",
    "convert",
    "html_to_markdown",
    # Scraping
    "Scraper",
    "scrape_blocking",
    "scrape_to_markdown",
    # Errors
    "ConversionError",
    "ExtractionFailed",
    "FetchFailed",
    "ParseFailed",
    # Config and events
    "ConversionConfig",
    "ExtractionConfig",
    "MarkdownConfig",
    "NetworkConfig",
    "ScraperConfig",
    "EventType",
    "ScrapeEvent",
]
