"""Core scraping API."""

from .scraper import Scraper, scrape_blocking, scrape_to_markdown

__all__ = ["Scraper", "scrape_blocking", "scrape_to_markdown"]
