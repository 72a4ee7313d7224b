"""Error types raised by website_scraper."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for every error a conversion or scrape can surface."""


class FetchFailed(ConversionError):
    """
    The page could not be retrieved.

    Attributes:
        url: The URL that was requested
        status: HTTP status code, or None for network-level failures
    """

    def __init__(self, url: str, status: int | None = None, reason: str | None = None) -> None:
        self.url = url
        self.status = status
        self.reason = reason
        if status is not None:
            message = f"Failed to fetch {url}: HTTP {status}"
        else:
            message = f"Failed to fetch {url}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class ParseFailed(ConversionError):
    """The HTML could not be turned into a document tree."""


class ExtractionFailed(ConversionError):
    """
    No part of the document scored as readable content.

    Terminal for the document: the same input always scores the same,
    so callers should not retry.
    """

    def __init__(self, message: str, best_score: float | None = None) -> None:
        self.best_score = best_score
        super().__init__(message)
