"""Base classes for the scrape pipeline."""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol, runtime_checkable

from ..errors import ConversionError, FetchFailed
from ..models.events import EventType, ScrapeEvent

# Type alias for event emitter function
EventEmitter = Callable[[ScrapeEvent], None]


@dataclass
class PageContext:
    """
    Context object passed through pipeline steps.

    Contains all state for scraping a single page, accumulated
    as it moves through the pipeline.

    Attributes:
        url: The URL being scraped
        output_path: Target path for the Markdown (None = keep in memory)
        html: Raw HTML content (bytes to avoid encoding issues)
        markdown: Converted Markdown content
        should_skip: If True, remaining steps will be skipped
        skip_reason: Human-readable reason for skipping
        error: Error message if a step failed
        exception: The conversion error behind `error`, when there is one
    """

    url: str
    output_path: Optional[Path] = None

    # Content (accumulated through pipeline)
    html: Optional[bytes] = None
    markdown: Optional[str] = None

    # Status
    should_skip: bool = False
    skip_reason: Optional[str] = None
    error: Optional[str] = None
    exception: Optional[ConversionError] = None

    # Additional data from fetch
    status_code: Optional[int] = None
    content_type: Optional[str] = None
    bytes_downloaded: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None and not self.should_skip and self.markdown is not None

    def markdown_or_raise(self) -> str:
        """
        Return the converted Markdown, or raise why there is none.

        Raises:
            ConversionError: The captured error (FetchFailed, ExtractionFailed, ...)
            FetchFailed: The page was skipped (e.g. not HTML)
        """
        if self.exception is not None:
            raise self.exception
        if self.error:
            raise ConversionError(self.error)
        if self.markdown is None:
            raise FetchFailed(self.url, status=self.status_code, reason=self.skip_reason)
        return self.markdown


@runtime_checkable
class ScrapeStep(Protocol):
    """
    Protocol for pipeline steps.

    Error Handling Contract:
    - For expected skips (non-HTML content): set ctx.should_skip = True
      and ctx.skip_reason = "reason"
    - For failures: raise an exception (preferably a ConversionError)
    - The pipeline will catch exceptions and set ctx.error
    """

    name: str

    async def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute this pipeline step.

        Args:
            ctx: The page context with accumulated state
            emit: Optional callback to emit events

        Returns:
            The (possibly modified) page context
        """
        ...


@dataclass
class ScrapePipeline:
    """
    Pipeline for scraping a single page through multiple steps.

    Steps are executed in order. If a step sets ctx.should_skip = True,
    remaining steps are skipped. If a step raises an exception, the
    error is captured in ctx.error and processing stops.

    Example:
        pipeline = ScrapePipeline(steps=[
            FetchStep(http_client),
            ConvertStep(converter),
            SaveStep(),
        ])

        ctx = await pipeline.execute(url, output_path, emit=log_event)
        if ctx.error:
            logger.error(f"Failed: {ctx.error}")
    """

    steps: list[ScrapeStep]

    async def execute(
        self,
        url: str,
        output_path: Optional[Path] = None,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute the pipeline for a URL.

        Args:
            url: The URL to process
            output_path: Where to save the output (None = don't save)
            emit: Optional callback for emitting events

        Returns:
            PageContext with final state (check error/should_skip for status)
        """
        ctx = PageContext(url=url, output_path=output_path)

        for step in self.steps:
            if ctx.should_skip or ctx.error:
                break

            try:
                ctx = await step.execute(ctx, emit)
            except Exception as e:
                ctx.error = f"{step.name}: {e}"
                ctx.should_skip = True
                if isinstance(e, ConversionError):
                    ctx.exception = e

                if emit:
                    emit(
                        ScrapeEvent(
                            type=EventType.FETCH_FAILED,
                            url=url,
                            error=ctx.error,
                            status_code=getattr(e, "status", None),
                        )
                    )
                break

        return ctx

    def add_step(self, step: ScrapeStep) -> "ScrapePipeline":
        """Add a step to the pipeline (fluent API)."""
        self.steps.append(step)
        return self
