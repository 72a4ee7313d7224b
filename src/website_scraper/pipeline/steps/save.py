"""SaveStep - File saving pipeline step."""

import asyncio
import logging
from typing import Optional

from ...models.events import EventType, ScrapeEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class SaveStep:
    """
    Pipeline step that writes ctx.markdown to ctx.output_path.

    Creates parent directories as needed. Does nothing when the context
    has no output path (the caller keeps the Markdown in memory).
    """

    name = "save"

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        if ctx.output_path is None or ctx.should_skip or ctx.error:
            return ctx
        if ctx.markdown is None:
            ctx.should_skip = True
            ctx.skip_reason = "No content to save"
            logger.warning(f"Skipping save for {ctx.url}: no content")
            return ctx

        output_path = ctx.output_path
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(output_path.write_text, ctx.markdown, encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to save {ctx.url} to {output_path}: {e}")
            raise

        logger.info(f"Saved: {output_path}")

        if emit:
            emit(
                ScrapeEvent(
                    type=EventType.PAGE_SAVED,
                    url=ctx.url,
                    output_path=output_path,
                    message=f"Saved to {output_path}",
                )
            )

        return ctx
