"""Serialization of a document subtree to Markdown."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Optional

from ..models.config import MarkdownConfig
from .dom import Comment, DocumentNode, Element, Text
from .rules import (
    AtxHeading,
    Blockquote,
    FencedCode,
    GenericBlock,
    GenericInline,
    HorizontalRule,
    Image,
    InlineCode,
    LineBreak,
    Link,
    ListBlock,
    ListItem,
    Rule,
    TableCell,
    UnderlineHeading,
    Wrap,
    build_rule_table,
    rule_for,
)

# HTML collapsible whitespace (non-breaking space is not included)
_WHITESPACE_RE = re.compile(r"[ \t\n\r\f]+")
_MULTI_SPACE_RE = re.compile(r" {2,}(?!\n)")
_LINE_START_SPACE_RE = re.compile(r"\n +")
_LANGUAGE_CLASS_RE = re.compile(r"^(?:language|lang)-(\S+)$")

# Nested list content is indented by this much per level
LIST_INDENT = "    "

# Elements nested deeper than this are rendered with their text flattened
MAX_NESTING_DEPTH = 64


@dataclass(frozen=True)
class Fragment:
    """
    A piece of serialized Markdown.

    Inline fragments concatenate into the surrounding text run; block
    fragments are separated from their neighbours by a blank line.
    """

    text: str
    block: bool = False


def join_fragments(fragments: Sequence[Fragment], separator: str = "\n\n") -> str:
    """
    Compose fragments into text.

    Consecutive inline fragments form one run, trimmed at its edges;
    runs and blocks are joined with separator.
    """
    parts: list[str] = []
    run: list[str] = []

    def flush() -> None:
        text = _MULTI_SPACE_RE.sub(" ", "".join(run)).strip()
        run.clear()
        if text:
            parts.append(_LINE_START_SPACE_RE.sub("\n", text))

    for fragment in fragments:
        if fragment.block:
            flush()
            if fragment.text:
                parts.append(fragment.text)
        else:
            run.append(fragment.text)
    flush()

    return separator.join(parts)


def _collapse(text: str) -> str:
    return " ".join(text.split())


def _wrap_text(inner: str, prefix: str, suffix: str) -> str:
    """Wrap inner in delimiters, keeping edge whitespace outside them."""
    core = inner.strip()
    if not core:
        return " " if inner else ""
    leading = " " if inner[0].isspace() else ""
    trailing = " " if inner[-1].isspace() else ""
    return f"{leading}{prefix}{core}{suffix}{trailing}"


def _language_hint(element: Element) -> str:
    for cls in element.classes:
        match = _LANGUAGE_CLASS_RE.match(cls)
        if match:
            return match.group(1)
    return ""


def _title_suffix(element: Element) -> str:
    title = element.get("title")
    if not title:
        return ""
    return ' "{}"'.format(_collapse(title).replace('"', '\\"'))


class MarkdownSerializer:
    """
    Converts a document subtree to Markdown using a tag rule table.

    Holds no state besides its configuration and rule table, so the same
    subtree always serializes to the same text.

    Example:
        serializer = MarkdownSerializer()
        markdown = serializer.serialize(parse("<p>Hello <em>world</em></p>"))
        # 'Hello _world_'
    """

    def __init__(self, config: Optional[MarkdownConfig] = None):
        """
        Initialize the serializer.

        Args:
            config: Markdown flavour (uses defaults if None)
        """
        self._config = config or MarkdownConfig()
        self._rules = build_rule_table(self._config)
        self._handlers: dict[type, Callable[..., list[Fragment]]] = {
            UnderlineHeading: self._underline_heading,
            AtxHeading: self._atx_heading,
            Wrap: self._wrap,
            Link: self._link,
            Image: self._image,
            InlineCode: self._inline_code,
            FencedCode: self._fenced_code,
            ListBlock: self._list_block,
            ListItem: self._list_item,
            TableCell: self._generic_block,
            Blockquote: self._blockquote,
            HorizontalRule: self._horizontal_rule,
            LineBreak: self._line_break,
            GenericBlock: self._generic_block,
            GenericInline: self._generic_inline,
        }

    def serialize(self, node: DocumentNode) -> str:
        """
        Serialize a node and its descendants.

        Args:
            node: Root of the subtree to convert

        Returns:
            Markdown text, without leading or trailing blank lines
        """
        if isinstance(node, Element):
            node = limit_depth(node, MAX_NESTING_DEPTH)
        return join_fragments(self.render(node))

    def render(self, node: DocumentNode) -> list[Fragment]:
        """Render a node to fragments."""
        if isinstance(node, Text):
            return [Fragment(_WHITESPACE_RE.sub(" ", node.content))] if node.content else []
        if isinstance(node, Comment):
            return []
        rule = rule_for(node.tag, self._rules)
        return self._handlers[type(rule)](rule, node)

    def _render_children(self, element: Element) -> list[Fragment]:
        fragments: list[Fragment] = []
        for child in element.children:
            fragments.extend(self.render(child))
        return fragments

    def _inline(self, element: Element) -> str:
        """Children flattened to one string, edge whitespace preserved."""
        fragments = self._render_children(element)
        if any(fragment.block for fragment in fragments):
            return join_fragments(fragments)
        return _MULTI_SPACE_RE.sub(" ", "".join(fragment.text for fragment in fragments))

    # Headings

    def _underline_heading(self, rule: UnderlineHeading, element: Element) -> list[Fragment]:
        text = _collapse(self._inline(element))
        if not text:
            return []
        return [Fragment(f"{text}\n{rule.underline * len(text)}", block=True)]

    def _atx_heading(self, rule: AtxHeading, element: Element) -> list[Fragment]:
        text = _collapse(self._inline(element))
        if not text:
            return []
        return [Fragment(f"{'#' * rule.level} {text}", block=True)]

    # Inline

    def _wrap(self, rule: Wrap, element: Element) -> list[Fragment]:
        text = _wrap_text(self._inline(element), rule.prefix, rule.suffix)
        return [Fragment(text)] if text else []

    def _link(self, rule: Link, element: Element) -> list[Fragment]:
        href = element.get("href")
        if not href:
            return self._render_children(element)

        inner = self._inline(element)
        text = _collapse(inner)
        if not text:
            return [Fragment(" ")] if inner else []

        leading = " " if inner[0].isspace() else ""
        trailing = " " if inner[-1].isspace() else ""
        return [Fragment(f"{leading}[{text}]({href}{_title_suffix(element)}){trailing}")]

    def _image(self, rule: Image, element: Element) -> list[Fragment]:
        src = element.get("src")
        if not src:
            return []
        alt = _collapse(element.get("alt") or "")
        return [Fragment(f"![{alt}]({src}{_title_suffix(element)})")]

    def _inline_code(self, rule: InlineCode, element: Element) -> list[Fragment]:
        code = _WHITESPACE_RE.sub(" ", element.text_content())
        if not code.strip():
            return []
        if "`" in code:
            return [Fragment(f"`` {code} ``")]
        return [Fragment(f"`{code}`")]

    def _line_break(self, rule: LineBreak, element: Element) -> list[Fragment]:
        return [Fragment("  \n")]

    def _generic_inline(self, rule: GenericInline, element: Element) -> list[Fragment]:
        return self._render_children(element)

    # Blocks

    def _fenced_code(self, rule: FencedCode, element: Element) -> list[Fragment]:
        significant = [
            child for child in element.children if not (isinstance(child, Text) and not child.content.strip())
        ]
        if len(significant) == 1 and isinstance(significant[0], Element) and significant[0].tag == "code":
            source = significant[0]
            code = source.text_content()
        else:
            source = element
            code = element.text_content()
            # A newline right after <pre> is not part of the content
            if code.startswith("\n"):
                code = code[1:]

        if code.endswith("\n"):
            code = code[:-1]

        language = _language_hint(source) or _language_hint(element)
        return [Fragment(f"{rule.fence}{language}\n{code}\n{rule.fence}", block=True)]

    def _list_block(self, rule: ListBlock, element: Element) -> list[Fragment]:
        items: list[str] = []
        for child in element.children:
            if isinstance(child, Element) and child.tag == "li":
                items.extend(fragment.text for fragment in self.render(child) if fragment.text)
            elif isinstance(child, Element):
                # Lists nested directly in a list (invalid but common) go one level deeper
                nested = join_fragments(self.render(child), separator="\n")
                if nested:
                    items.append(_indent(nested, LIST_INDENT, first_line=True))
            elif isinstance(child, Text) and child.content.strip():
                items.append(_collapse(child.content))

        if not items:
            return []
        return [Fragment("\n".join(items), block=True)]

    def _list_item(self, rule: ListItem, element: Element) -> list[Fragment]:
        content = join_fragments(self._render_children(element), separator="\n")
        if not content:
            return [Fragment(rule.bullet.rstrip(), block=True)]
        indent = " " * len(rule.bullet)
        return [Fragment(rule.bullet + _indent(content, indent, first_line=False), block=True)]

    def _blockquote(self, rule: Blockquote, element: Element) -> list[Fragment]:
        content = join_fragments(self._render_children(element))
        if not content:
            return []
        quoted = "\n".join(f"> {line}" if line else ">" for line in content.split("\n"))
        return [Fragment(quoted, block=True)]

    def _horizontal_rule(self, rule: HorizontalRule, element: Element) -> list[Fragment]:
        return [Fragment(rule.text, block=True)]

    def _generic_block(self, rule: Rule, element: Element) -> list[Fragment]:
        content = join_fragments(self._render_children(element))
        return [Fragment(content, block=True)] if content else []


def _indent(text: str, indent: str, first_line: bool) -> str:
    """Indent every non-empty line of text (optionally skipping the first)."""
    lines = text.split("\n")
    indented = [indent + line if line else line for line in lines]
    if not first_line:
        indented[0] = lines[0]
    return "\n".join(indented)


def limit_depth(element: Element, depth: int) -> Element:
    """
    Copy a subtree, replacing the children of elements below ``depth`` with their text.

    The cut-off element keeps its own rule, so ``<b>`` at the limit still renders
    as emphasis around the flattened text of everything beneath it.
    """
    if depth <= 0:
        return element.with_children((Text(element.text_content()),))
    children = tuple(
        limit_depth(child, depth - 1) if isinstance(child, Element) else child for child in element.children
    )
    return element.with_children(children)


def serialize(element: DocumentNode, config: Optional[MarkdownConfig] = None) -> str:
    """Serialize a subtree to Markdown with the given (or default) flavour."""
    return MarkdownSerializer(config).serialize(element)
