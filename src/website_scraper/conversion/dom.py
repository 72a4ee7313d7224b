"""Owned document tree and the BeautifulSoup adapter that builds it."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field, replace
from typing import Union
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag
from bs4 import Comment as SoupComment

from ..errors import ParseFailed

logger = logging.getLogger(__name__)

DOCUMENT_TAG = "[document]"

# Attributes that carry URLs and get resolved against the base URL
_URL_ATTRIBUTES = ("href", "src")

# Prefixes left untouched by link resolution
_UNRESOLVED_PREFIXES = ("#", "http://", "https://", "//", "data:", "mailto:", "tel:", "javascript:")


@dataclass(frozen=True)
class Text:
    """A run of character data."""

    content: str


@dataclass(frozen=True)
class Comment:
    """An HTML comment. Never rendered."""

    content: str = ""


@dataclass(frozen=True)
class Element:
    """
    An element node owning its children.

    Attributes:
        tag: Lower-cased tag name ("[document]" for the root)
        attrs: Attributes in source order; multi-valued ones joined by spaces
        children: Child nodes in document order
    """

    tag: str
    attrs: Mapping[str, str] = field(default_factory=dict)
    children: tuple[DocumentNode, ...] = ()

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attrs.get(name, default)

    @property
    def classes(self) -> list[str]:
        return (self.attrs.get("class") or "").split()

    def element_children(self) -> Iterator[Element]:
        for child in self.children:
            if isinstance(child, Element):
                yield child

    def iter_elements(self) -> Iterator[Element]:
        """Yield this element and every descendant element in document order."""
        stack: list[Element] = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(list(element.element_children())))

    def text_content(self) -> str:
        """Concatenated text of every descendant text node, verbatim."""
        parts: list[str] = []
        stack: list[DocumentNode] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, Text):
                parts.append(node.content)
            elif isinstance(node, Element):
                stack.extend(reversed(node.children))
        return "".join(parts)

    def with_children(self, children: tuple[DocumentNode, ...]) -> Element:
        return replace(self, children=children)


DocumentNode = Union[Element, Text, Comment]


def detect_encoding(html: bytes) -> str:
    """Detect character encoding from a <meta charset> near the top of the document."""
    head = html[:2048].decode("latin-1", errors="ignore")
    charset_match = re.search(r'charset=["\']?([^"\'\s>;]+)', head, re.IGNORECASE)
    if charset_match:
        return charset_match.group(1).strip()
    return "utf-8"


def decode_html(html: bytes) -> str:
    """Decode raw HTML bytes using the declared charset, falling back to UTF-8."""
    encoding = detect_encoding(html)
    try:
        return html.decode(encoding, errors="replace")
    except LookupError:
        logger.debug(f"Unknown charset {encoding!r}, decoding as UTF-8")
        return html.decode("utf-8", errors="replace")


def _resolve(value: str, base_url: str) -> str:
    value = value.strip()
    if not base_url or not value or value.lower().startswith(_UNRESOLVED_PREFIXES):
        return value
    return urljoin(base_url, value)


def _convert_attrs(tag: Tag, base_url: str) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for name, value in tag.attrs.items():
        if isinstance(value, (list, tuple)):
            value = " ".join(value)
        value = str(value)
        if name in _URL_ATTRIBUTES:
            value = _resolve(value, base_url)
        attrs[name.lower()] = value
    return attrs


def _convert(tag: Tag, base_url: str) -> Element:
    children: list[DocumentNode] = []
    for child in tag.children:
        if isinstance(child, Tag):
            children.append(_convert(child, base_url))
        elif isinstance(child, SoupComment):
            children.append(Comment(str(child)))
        elif isinstance(child, (Doctype, Declaration, ProcessingInstruction)):
            continue
        elif isinstance(child, NavigableString):
            children.append(Text(str(child)))

    name = DOCUMENT_TAG if isinstance(tag, BeautifulSoup) else (tag.name or "").lower()
    return Element(tag=name, attrs=_convert_attrs(tag, base_url), children=tuple(children))


def parse(html: str | bytes, base_url: str = "") -> Element:
    """
    Parse HTML into an owned document tree.

    Relative href/src attributes are resolved against base_url while the
    tree is built; fragment-only links are kept as they are.

    Args:
        html: Raw HTML (bytes are decoded using the sniffed charset)
        base_url: URL the document was fetched from ("" leaves links relative)

    Returns:
        Root element tagged "[document]"

    Raises:
        ParseFailed: If the markup cannot be turned into a tree
    """
    if isinstance(html, bytes):
        html = decode_html(html)

    try:
        soup = BeautifulSoup(html, "html.parser")
        return _convert(soup, base_url)
    except RecursionError as e:
        raise ParseFailed("Document is nested too deeply to parse") from e
    except Exception as e:
        raise ParseFailed(f"Could not parse HTML: {e}") from e
