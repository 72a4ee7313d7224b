"""Configuration and event models."""

from .config import (
    ConversionConfig,
    ExtractionConfig,
    MarkdownConfig,
    NetworkConfig,
    ScraperConfig,
)
from .events import EventType, ScrapeEvent

__all__ = [
    # Config
    "ConversionConfig",
    "ExtractionConfig",
    "MarkdownConfig",
    "NetworkConfig",
    "ScraperConfig",
    # Events
    "EventType",
    "ScrapeEvent",
]
