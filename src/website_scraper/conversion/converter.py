"""HTML to Markdown conversion: the full parse-to-normalize flow."""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import ParseFailed
from ..models.config import ConversionConfig
from .classifier import classify_code_blocks
from .dom import Element, parse
from .extractor import MainContentExtractor
from .markdown import MarkdownSerializer
from .normalizer import normalize
from .protocols import ContentExtractor
from .sanitizer import sanitize

logger = logging.getLogger(__name__)


class HtmlToMarkdown:
    """
    Converts raw HTML to clean Markdown.

    Runs parse -> sanitize -> extract -> serialize -> classify -> normalize.
    Instances hold only immutable configuration and can be shared.

    Example:
        converter = HtmlToMarkdown()
        markdown = converter.convert(html_bytes, "https://docs.example.com/page")
    """

    def __init__(
        self,
        config: Optional[ConversionConfig] = None,
        extractor: Optional[ContentExtractor] = None,
    ):
        """
        Initialize the converter.

        Args:
            config: Conversion settings (uses defaults if None)
            extractor: Main-content extractor (MainContentExtractor if None)
        """
        self._config = config or ConversionConfig()
        self._extractor = extractor or MainContentExtractor(self._config.extraction)
        self._serializer = MarkdownSerializer(self._config.markdown)

    @property
    def config(self) -> ConversionConfig:
        return self._config

    def select_content(self, tree: Element) -> Element:
        """Sanitize the tree and pick the subtree to serialize."""
        tree = sanitize(tree, self._config.strip_tags)
        if not self._config.extract_main_content:
            return tree
        return self._extractor.extract(tree)

    def convert(self, html: str | bytes, base_url: str = "") -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: Raw HTML text or bytes
            base_url: Source URL for resolving relative links

        Returns:
            Markdown string

        Raises:
            ParseFailed: If the HTML cannot be parsed or is nested too deeply to convert
            ExtractionFailed: If main-content extraction is enabled and finds nothing readable
        """
        tree = parse(html, base_url)
        try:
            content = self.select_content(tree)
            markdown = self._serializer.serialize(content)
        except RecursionError as e:
            raise ParseFailed("Document is nested too deeply to convert") from e

        if self._config.classify_code:
            markdown = classify_code_blocks(markdown, fence=self._config.markdown.fence)
        markdown = normalize(markdown)

        logger.debug(f"Converted {base_url or 'document'} to {len(markdown)} characters of Markdown")
        return markdown


def convert(
    raw_html: str | bytes,
    base_url: str = "",
    config: Optional[ConversionConfig] = None,
) -> str:
    """
    Convert a web page to Markdown, keeping only its main content.

    Args:
        raw_html: Raw HTML text or bytes
        base_url: URL the page came from (relative links resolve against it)
        config: Conversion settings (uses defaults if None)

    Returns:
        Markdown string

    Raises:
        ConversionError: ParseFailed or ExtractionFailed
    """
    return HtmlToMarkdown(config).convert(raw_html, base_url)


def html_to_markdown(html: str | bytes, base_url: str = "") -> str:
    """Convert a whole HTML document to Markdown, without content extraction."""
    return convert(html, base_url, ConversionConfig(extract_main_content=False))
