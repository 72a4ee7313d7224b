"""Protocol definitions for content conversion."""

from typing import Protocol, Union

from .dom import Element


class ContentExtractor(Protocol):
    """
    Protocol for selecting the main content of a document tree.

    Implementations pick the article/documentation subtree and drop
    navigation, headers, footers, ads, etc.
    """

    def extract(self, tree: Element) -> Element:
        """
        Extract main content from a sanitized tree.

        Args:
            tree: Document tree (scripts, styles and comments removed)

        Returns:
            The single root element of the main content

        Raises:
            ExtractionFailed: If nothing readable was found
        """
        ...


class MarkdownConverter(Protocol):
    """
    Protocol for converting raw HTML to Markdown.
    """

    def convert(self, html: Union[str, bytes], base_url: str = "") -> str:
        """
        Convert HTML to Markdown.

        Args:
            html: Raw HTML text or bytes
            base_url: Source URL (for resolving relative links)

        Returns:
            Markdown string
        """
        ...
