"""Event types emitted while scraping a page."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Optional


class EventType(str, Enum):
    """Types of events emitted by scrape pipeline steps."""

    # Fetch phase
    FETCH_STARTED = "fetch_started"
    FETCH_COMPLETED = "fetch_completed"
    FETCH_FAILED = "fetch_failed"
    FETCH_SKIPPED = "fetch_skipped"

    # Processing phase
    PAGE_CONVERTED = "page_converted"
    CONVERSION_FAILED = "conversion_failed"
    PAGE_SAVED = "page_saved"


@dataclass
class ScrapeEvent:
    """
    Event emitted during a scrape.

    Example:
        def on_event(event: ScrapeEvent) -> None:
            if event.is_error:
                print(f"Error: {event.url} - {event.error}")

        async with Scraper(config, on_event=on_event) as scraper:
            await scraper.scrape("https://example.com")
    """

    type: EventType

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # Common fields
    url: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    # Typed payload fields for specific events
    bytes_downloaded: Optional[int] = None
    status_code: Optional[int] = None
    output_path: Optional[Path] = None
    content_type: Optional[str] = None

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type in (EventType.FETCH_FAILED, EventType.CONVERSION_FAILED)
