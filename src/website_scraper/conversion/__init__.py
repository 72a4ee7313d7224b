"""Content conversion for website_scraper (HTML tree to Markdown)."""

from .classifier import classify_code_blocks
from .converter import HtmlToMarkdown, convert, html_to_markdown
from .dom import Comment, DocumentNode, Element, Text, parse
from .extractor import Candidate, MainContentExtractor
from .markdown import Fragment, MarkdownSerializer, serialize
from .normalizer import normalize
from .protocols import ContentExtractor, MarkdownConverter
from .rules import DEFAULT_RULES, build_rule_table
from .sanitizer import sanitize

__all__ = [
    # Protocols
    "ContentExtractor",
    "MarkdownConverter",
    # Document tree
    "Comment",
    "DocumentNode",
    "Element",
    "Text",
    "parse",
    # Pipeline stages
    "sanitize",
    "Candidate",
    "MainContentExtractor",
    "DEFAULT_RULES",
    "build_rule_table",
    "Fragment",
    "MarkdownSerializer",
    "serialize",
    "classify_code_blocks",
    "normalize",
    # Entry points
    "HtmlToMarkdown",
    "convert",
    "html_to_markdown",
]
