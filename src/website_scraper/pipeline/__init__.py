"""Scrape pipeline: fetch, convert, save."""

from .base import EventEmitter, PageContext, ScrapePipeline, ScrapeStep
from .steps import ConvertStep, FetchStep, SaveStep

__all__ = [
    "EventEmitter",
    "PageContext",
    "ScrapePipeline",
    "ScrapeStep",
    "ConvertStep",
    "FetchStep",
    "SaveStep",
]
