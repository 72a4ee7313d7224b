"""Pipeline step for HTML to Markdown conversion."""

import logging
from typing import Optional, Union

from ...conversion.converter import HtmlToMarkdown
from ...conversion.protocols import MarkdownConverter
from ...errors import ConversionError
from ...http.client import charset_from_content_type
from ...models.events import EventType, ScrapeEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


def _decode(html: bytes, content_type: Optional[str]) -> Union[str, bytes]:
    """Decode with the header charset; otherwise leave sniffing to the parser."""
    charset = charset_from_content_type(content_type or "")
    if charset:
        try:
            return html.decode(charset)
        except (UnicodeDecodeError, LookupError):
            logger.debug(f"Ignoring unusable charset {charset!r}")
    return html


class ConvertStep:
    """
    Pipeline step that converts HTML to Markdown.

    Reads ctx.html, writes ctx.markdown. A ConversionError (nothing
    readable, unparsable HTML) is recorded on the context and emitted
    as CONVERSION_FAILED; the same input always fails the same way.

    Example:
        step = ConvertStep(HtmlToMarkdown(config.conversion))
        ctx = await step.execute(ctx, emit=callback)
    """

    name = "convert"

    def __init__(self, converter: Optional[MarkdownConverter] = None):
        """
        Initialize the convert step.

        Args:
            converter: Markdown converter (uses default if None)
        """
        self._converter = converter or HtmlToMarkdown()

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Convert HTML content to Markdown.

        Args:
            ctx: Page context with HTML content
            emit: Optional event emitter

        Returns:
            Updated context with markdown content (or error set)
        """
        if ctx.should_skip or ctx.error:
            return ctx

        if ctx.html is None:
            ctx.error = "No HTML content to convert"
            if emit:
                emit(ScrapeEvent(type=EventType.CONVERSION_FAILED, url=ctx.url, error=ctx.error))
            return ctx

        try:
            markdown = self._converter.convert(_decode(ctx.html, ctx.content_type), ctx.url)
        except ConversionError as e:
            logger.warning(f"Conversion failed for {ctx.url}: {e}")
            ctx.error = f"Conversion failed: {e}"
            ctx.exception = e
            if emit:
                emit(
                    ScrapeEvent(
                        type=EventType.CONVERSION_FAILED,
                        url=ctx.url,
                        error=str(e),
                        message=ctx.error,
                    )
                )
            return ctx

        ctx.markdown = markdown
        logger.debug(f"Converted {ctx.url} to {len(markdown)} characters of Markdown")

        if emit:
            emit(
                ScrapeEvent(
                    type=EventType.PAGE_CONVERTED,
                    url=ctx.url,
                    message=f"Converted to {len(markdown)} characters of Markdown",
                )
            )

        return ctx
