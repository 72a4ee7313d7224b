"""Command-line interface for website_scraper."""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape

from . import __version__
from .conversion import convert
from .core import Scraper
from .errors import ConversionError
from .logging_config import setup_logging
from .models.config import ScraperConfig
from .models.events import EventType, ScrapeEvent


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI."""
    parser = argparse.ArgumentParser(
        prog="scrape",
        description="Convert a web page (or a local HTML file) to Markdown",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print the main content of a page as Markdown
  scrape https://example.com/post

  # Save it to a file
  scrape https://example.com/post post.md

  # Convert a local file, keeping the whole document
  scrape --html-file page.html page.md --no-extract

  # Resolve relative links in a local file
  scrape --html-file page.html --base-url https://example.com/docs/
        """,
    )

    parser.add_argument(
        "url",
        nargs="?",
        help="URL to scrape (with --html-file: the output file)",
    )
    parser.add_argument(
        "output_file",
        nargs="?",
        type=Path,
        help="Write Markdown here instead of stdout",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Input
    parser.add_argument(
        "--html-file",
        type=Path,
        default=None,
        help="Convert a local HTML file instead of fetching a URL",
    )
    parser.add_argument(
        "--base-url",
        default="",
        help="Base URL for resolving relative links in --html-file input",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML configuration file",
    )

    # Conversion
    parser.add_argument(
        "--no-extract",
        action="store_true",
        help="Convert the whole document instead of only the main content",
    )
    parser.add_argument(
        "--no-classify",
        action="store_true",
        help="Don't tag code blocks with a guessed language",
    )

    # Network
    parser.add_argument(
        "--user-agent",
        default=None,
        help="Custom User-Agent header",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=None,
        help="Maximum retry attempts for failed requests",
    )

    # Verbosity
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    verbosity.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only print errors",
    )

    return parser


def build_config(args: argparse.Namespace) -> ScraperConfig:
    """Load the YAML config (if any) and apply command-line overrides."""
    config = ScraperConfig.from_yaml_file(args.config) if args.config else ScraperConfig()

    conversion_updates: dict = {}
    if args.no_extract:
        conversion_updates["extract_main_content"] = False
    if args.no_classify:
        conversion_updates["classify_code"] = False

    network_updates: dict = {}
    if args.user_agent:
        network_updates["user_agent"] = args.user_agent
    if args.max_retries is not None:
        network_updates["max_retries"] = args.max_retries

    root_updates: dict = {}
    if args.verbose:
        root_updates["log_level"] = "DEBUG"
    elif args.quiet:
        root_updates["log_level"] = "ERROR"

    data = config.model_dump()
    data["conversion"].update(conversion_updates)
    data["network"].update(network_updates)
    data.update(root_updates)
    return ScraperConfig.model_validate(data)


def _resolve_io(args: argparse.Namespace) -> tuple[Optional[str], Optional[Path]]:
    """Return (url, output_file) with the --html-file positional shift applied."""
    if args.html_file is None:
        return args.url, args.output_file
    if args.url and args.output_file:
        raise ValueError("--html-file takes at most one positional argument (the output file)")
    return None, Path(args.url) if args.url else args.output_file


def _write_output(markdown: str, output_file: Optional[Path]) -> None:
    if output_file is None:
        sys.stdout.write(markdown + "\n")
        return
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(markdown, encoding="utf-8")


def run_html_file(
    html_file: Path,
    output_file: Optional[Path],
    base_url: str,
    config: ScraperConfig,
    console: Console,
    quiet: bool,
) -> int:
    """Convert a local HTML file."""
    html = html_file.read_bytes()
    markdown = convert(html, base_url, config.conversion)
    _write_output(markdown, output_file)
    if output_file and not quiet:
        console.print(f"[green]Saved:[/green] {output_file}")
    return 0


def run_scraper(
    url: str,
    output_file: Optional[Path],
    config: ScraperConfig,
    console: Console,
    quiet: bool,
) -> int:
    """Fetch and convert a URL."""

    def on_event(event: ScrapeEvent) -> None:
        if quiet:
            return
        if event.type == EventType.FETCH_STARTED:
            console.print(f"[cyan]Fetching[/cyan] {event.url}")
        elif event.type == EventType.FETCH_SKIPPED:
            console.print(f"[yellow]Skipped:[/yellow] {event.url} - {escape(event.message or '')}")
        elif event.type == EventType.PAGE_SAVED:
            console.print(f"[green]Saved:[/green] {event.output_path}")

    async def run() -> str:
        async with Scraper(config, on_event=on_event) as scraper:
            ctx = await scraper.scrape(url, output_file)
        return ctx.markdown_or_raise()

    markdown = asyncio.run(run())
    if output_file is None:
        _write_output(markdown, None)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    console = Console(stderr=True)

    try:
        url, output_file = _resolve_io(args)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 1

    if url is None and args.html_file is None:
        console.print("[red]Error:[/red] Please provide a URL or --html-file")
        return 1

    try:
        config = build_config(args)
    except Exception as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        return 1

    setup_logging(
        level=config.log_level,
        log_file=str(config.log_file) if config.log_file else None,
        force=True,
    )

    try:
        if url is None:
            return run_html_file(args.html_file, output_file, args.base_url, config, console, args.quiet)
        return run_scraper(url, output_file, config, console, args.quiet)
    except (ConversionError, OSError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        if args.verbose:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
